from django.apps import AppConfig


class CurrencyConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.currency"
    label = "currency"
    verbose_name = "Currency"
