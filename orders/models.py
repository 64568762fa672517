"""Orders app models.

An order owns independent snapshots of its line items; later catalog or
cart changes never reach them. Money columns are denormalized and kept
consistent by `Order.compute_total()`, which runs on every save.
"""

from decimal import ROUND_HALF_UP, Decimal

from django.db import models
from django.utils import timezone

from common.choices import OrderStatus, PaymentMethod, PaymentStatus

CENT = Decimal("0.01")


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Order(TimeStampedModel):
    """Placed order with customer contact, delivery details and totals."""

    STATUS_PENDING = OrderStatus.PENDING
    STATUS_CONFIRMED = OrderStatus.CONFIRMED
    STATUS_PREPARING = OrderStatus.PREPARING
    STATUS_SHIPPED = OrderStatus.SHIPPED
    STATUS_DELIVERED = OrderStatus.DELIVERED
    STATUS_CANCELLED = OrderStatus.CANCELLED
    STATUS_CHOICES = OrderStatus.choices
    TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

    number = models.CharField(max_length=32, unique=True, null=True, blank=True, db_index=True)
    user_id = models.CharField(max_length=64, blank=True, db_index=True)

    customer_name = models.CharField(max_length=120)
    customer_email = models.EmailField(db_index=True)
    customer_phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=80)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    delivery_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    coupon_code = models.CharField(max_length=40, blank=True)
    coupon_discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices, default=PaymentMethod.COD)
    payment_status = models.CharField(max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    payment_id = models.CharField(max_length=128, blank=True)
    notes = models.TextField(blank=True)

    order_date = models.DateTimeField(default=timezone.now)
    expected_delivery = models.DateField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["status", "created_at"]),
        ]
        constraints = [
            models.CheckConstraint(name="order_delivery_fee_non_negative", condition=models.Q(delivery_fee__gte=0)),
            models.CheckConstraint(name="order_total_non_negative", condition=models.Q(total__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Order#{self.id} {self.number} status={self.status}"

    def compute_total(self) -> Decimal:
        """subtotal + delivery_fee - discount - coupon_discount, floored at zero."""

        total = (
            Decimal(self.subtotal or 0)
            + Decimal(self.delivery_fee or 0)
            - Decimal(self.discount or 0)
            - Decimal(self.coupon_discount or 0)
        )
        return max(total, Decimal("0.00")).quantize(CENT, rounding=ROUND_HALF_UP)

    def save(self, *args, **kwargs):
        self.total = self.compute_total()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = {*update_fields, "total"}
        super().save(*args, **kwargs)

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES


class OrderItem(TimeStampedModel):
    """Snapshot of a purchased line; `total_price` is always price x quantity."""

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    position = models.PositiveIntegerField(default=0)
    product_id = models.BigIntegerField()
    product_name = models.CharField(max_length=200)
    product_image = models.CharField(max_length=255, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    quantity = models.PositiveIntegerField(default=1)
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    selected_options = models.JSONField(default=dict, blank=True)
    options_pricing = models.JSONField(default=dict, blank=True)
    attachments = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["order", "position", "id"]
        constraints = [
            models.CheckConstraint(name="orderitem_price_non_negative", condition=models.Q(price__gte=0)),
            models.CheckConstraint(name="orderitem_quantity_positive", condition=models.Q(quantity__gte=1)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"OrderItem#{self.id} order={self.order_id} product={self.product_id} qty={self.quantity}"

    def save(self, *args, **kwargs):
        self.total_price = (Decimal(self.price or 0) * int(self.quantity)).quantize(CENT, rounding=ROUND_HALF_UP)
        super().save(*args, **kwargs)


class IdempotencyKey(TimeStampedModel):
    """Stored response of a request sent with an `Idempotency-Key` header."""

    key = models.CharField(max_length=128)
    scope = models.CharField(max_length=128)
    path = models.CharField(max_length=255)
    method = models.CharField(max_length=16)
    request_hash = models.CharField(max_length=64, null=True, blank=True)
    response_code = models.IntegerField(null=True, blank=True)
    response_json = models.JSONField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["key", "scope", "path", "method"], name="uniq_idem_scope_path_method"),
        ]
