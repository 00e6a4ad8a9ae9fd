from django.apps import AppConfig


class EbarimtConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ebarimt"
    verbose_name = "eBarimt"
