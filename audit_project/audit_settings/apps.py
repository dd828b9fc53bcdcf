from django.apps import AppConfig


class AuditSettingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "audit_settings"
    verbose_name = "Audit email settings"
