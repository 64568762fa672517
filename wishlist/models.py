"""Wishlist models: products a user saved for later."""

from decimal import Decimal

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


def _guest_user_id() -> str:
    return getattr(settings, "GUEST_USER_ID", "guest")


class WishlistItem(TimeStampedModel):
    user_id = models.CharField(max_length=64, default=_guest_user_id, db_index=True)
    product_id = models.BigIntegerField()
    product_name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    image = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["user_id", "product_id"], name="unique_product_per_wishlist"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"WishlistItem#{self.id} user={self.user_id} product={self.product_id}"
