from django.apps import AppConfig


class CartConfig(AppConfig):
    """Shopping cart lines keyed by user id."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "cart"
    verbose_name = "Cart"
