from django.apps import AppConfig


class WeighmentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "weighments"
