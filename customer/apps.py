from django.apps import AppConfig


class CustomerConfig(AppConfig):
    """Storefront customer accounts and their order statistics."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "customer"
    verbose_name = "Customers"
