# core/models/settings_models.py
from django.db import models


class AppSetting(models.Model):
    """
    Key/value application configuration.
    Values are stored as text (JSON for structured settings such as
    ``serial_number_config``) so a damaged value can be detected and repaired.
    """
    SERIAL_NUMBER_CONFIG = "serial_number_config"

    key = models.CharField(max_length=100, primary_key=True)
    value = models.TextField()
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.key
