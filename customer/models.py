"""Customer domain models.

A storefront customer account. Passwords are stored hashed through Django's
password hashers; the raw value never touches the database.
"""

from decimal import Decimal

from django.contrib.auth.hashers import check_password, make_password
from django.db import models

from common.choices import ActiveInactive, CustomerRole


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Customer(TimeStampedModel):
    """Registered shopper with running order statistics."""

    STATUS_ACTIVE = ActiveInactive.ACTIVE
    STATUS_INACTIVE = ActiveInactive.INACTIVE
    ROLE_CUSTOMER = CustomerRole.CUSTOMER
    ROLE_ADMIN = CustomerRole.ADMIN

    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128)
    name = models.CharField(max_length=120)
    phone = models.CharField(max_length=32, blank=True)
    city = models.CharField(max_length=80, blank=True)
    total_orders = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    last_order_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=16, choices=ActiveInactive.choices, default=ActiveInactive.ACTIVE, db_index=True)
    role = models.CharField(max_length=16, choices=CustomerRole.choices, default=CustomerRole.CUSTOMER)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} <{self.email}>"

    def save(self, *args, **kwargs):
        self.email = (self.email or "").strip().lower()
        super().save(*args, **kwargs)

    def set_password(self, raw_password: str) -> None:
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password)

    @property
    def is_active(self) -> bool:
        return self.status == ActiveInactive.ACTIVE
