"""Cart app models.

A cart is simply the set of `CartItem` rows sharing a `user_id`. Lines keep
a snapshot of the product's name, price and image taken when the line was
added; the product row itself is looked up by id and never locked.
"""

import hashlib
import json
from decimal import Decimal

from django.conf import settings
from django.db import models

# Largest quantity an integer column holds on every supported database
MAX_QUANTITY = 2147483647


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


def options_key_for(selected_options) -> str:
    """Stable digest of a selected-options mapping.

    Two option maps with the same content produce the same key regardless of
    key order, so they merge into one cart line.
    """

    canonical = json.dumps(selected_options or {}, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _guest_user_id() -> str:
    return getattr(settings, "GUEST_USER_ID", "guest")


def _empty_attachments() -> dict:
    return {"images": [], "text": ""}


class CartItem(TimeStampedModel):
    """A product line in a user's cart."""

    user_id = models.CharField(max_length=64, default=_guest_user_id, db_index=True)
    product_id = models.BigIntegerField()
    product_name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    quantity = models.PositiveIntegerField(default=1)
    image = models.CharField(max_length=255, blank=True)
    selected_options = models.JSONField(default=dict, blank=True)
    # Display-only; never folded into totals
    options_pricing = models.JSONField(default=dict, blank=True)
    attachments = models.JSONField(default=_empty_attachments, blank=True)
    options_key = models.CharField(max_length=64, editable=False)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "product_id", "options_key"], name="unique_product_options_per_cart"
            ),
            models.CheckConstraint(name="cart_item_quantity_positive", condition=models.Q(quantity__gte=1)),
            models.CheckConstraint(name="cart_item_price_non_negative", condition=models.Q(price__gte=0)),
        ]
        indexes = [
            models.Index(fields=["user_id", "created_at"]),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartItem#{self.id} user={self.user_id} product={self.product_id} qty={self.quantity}"

    def save(self, *args, **kwargs):
        self.options_key = options_key_for(self.selected_options)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "selected_options" in update_fields:
            kwargs["update_fields"] = {*update_fields, "options_key"}
        super().save(*args, **kwargs)

    @property
    def line_total(self) -> Decimal:
        return (self.price or Decimal("0.00")) * Decimal(int(self.quantity))
