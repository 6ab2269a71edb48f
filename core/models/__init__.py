from .settings_models import AppSetting

__all__ = ["AppSetting"]
