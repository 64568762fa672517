"""Coupon model.

Codes are matched case-insensitively by storing them upper-cased. The
`used_count <= usage_limit` rule is enforced by the database as well as by
the conditional update in `coupons.services.redeem_coupon`.
"""

from decimal import Decimal

from django.db import models

from common.choices import DiscountType


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


def normalize_code(code) -> str:
    return str(code or "").strip().upper()


class Coupon(TimeStampedModel):
    TYPE_PERCENTAGE = DiscountType.PERCENTAGE
    TYPE_FIXED = DiscountType.FIXED

    name = models.CharField(max_length=120, blank=True)
    code = models.CharField(max_length=40, unique=True)
    description = models.TextField(blank=True)
    discount_type = models.CharField(max_length=16, choices=DiscountType.choices, default=DiscountType.PERCENTAGE)
    discount_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    # Cap on the computed discount; only meaningful for percentage coupons
    max_discount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    minimum_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    used_count = models.PositiveIntegerField(default=0)
    expiry_date = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(name="coupon_discount_value_non_negative", condition=models.Q(discount_value__gte=0)),
            models.CheckConstraint(
                name="coupon_usage_limit_positive",
                condition=models.Q(usage_limit__isnull=True) | models.Q(usage_limit__gte=1),
            ),
            models.CheckConstraint(
                name="coupon_used_within_limit",
                condition=models.Q(usage_limit__isnull=True) | models.Q(used_count__lte=models.F("usage_limit")),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.code

    def save(self, *args, **kwargs):
        self.code = normalize_code(self.code)
        super().save(*args, **kwargs)
