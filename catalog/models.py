"""Catalog app models.

Defines the storefront's catalog entities: categories, products and the
customer reviews attached to products. Cart and order code only ever read
from these tables.
"""

from decimal import Decimal

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Category(TimeStampedModel):
    """Product categorization shown in the storefront navigation."""

    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=140, unique=True)
    description = models.TextField(max_length=500, blank=True)
    image = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    display_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["display_order", "name"]

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class Product(TimeStampedModel):
    """Core product entity.

    `dynamic_options` describes the choices a shopper can make (size, color,
    engraving...). The storefront stores them as-is; cart lines carry the
    chosen values in `selected_options`.
    """

    name = models.CharField(max_length=200)
    description = models.TextField(max_length=2000, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    original_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    stock = models.PositiveIntegerField(default=0)
    category = models.ForeignKey(
        Category, related_name="products", null=True, blank=True, on_delete=models.SET_NULL
    )
    main_image = models.CharField(max_length=255, blank=True)
    detailed_images = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=list, blank=True)
    dynamic_options = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    featured = models.BooleanField(default=False, db_index=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(name="product_price_non_negative", condition=models.Q(price__gte=0)),
        ]
        indexes = [
            models.Index(fields=["category", "is_active"]),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.name

    def save(self, *args, **kwargs):
        # An original price only makes sense when it is above the selling price
        if self.original_price is not None and self.original_price <= self.price:
            self.original_price = None
        super().save(*args, **kwargs)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def discount_percentage(self) -> int:
        if self.original_price and self.original_price > self.price:
            return int(((self.original_price - self.price) / self.original_price * 100).quantize(Decimal("1")))
        return 0


class Review(TimeStampedModel):
    """Free-text review left by a customer on a product."""

    product = models.ForeignKey(Product, related_name="reviews", on_delete=models.CASCADE)
    customer_id = models.CharField(max_length=64)
    customer_name = models.CharField(max_length=120)
    comment = models.TextField()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["product", "created_at"]),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Review#{self.id} product={self.product_id} by {self.customer_name}"
