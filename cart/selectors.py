"""Cart read helpers."""

from decimal import Decimal

from django.db.models import DecimalField, ExpressionWrapper, F, Sum

from catalog.selectors import product_snapshot, products_by_id

from .models import CartItem
from .services import cart_owner


def list_cart(user_id) -> list[CartItem]:
    """Return the user's lines, newest first.

    Each line gets a `product` attribute holding the live product snapshot,
    or None when the product has since been removed from the catalog.
    """

    items = list(CartItem.objects.filter(user_id=cart_owner(user_id)).order_by("-created_at", "-id"))
    products = products_by_id(item.product_id for item in items)
    for item in items:
        item.product = product_snapshot(products.get(item.product_id))
    return items


def cart_totals(user_id) -> dict:
    """Line count, unit count and money totals over the snapshotted prices."""

    agg = CartItem.objects.filter(user_id=cart_owner(user_id)).aggregate(
        units=Sum("quantity"),
        line_subtotal=Sum(
            ExpressionWrapper(F("price") * F("quantity"), output_field=DecimalField(max_digits=14, decimal_places=2))
        ),
    )
    subtotal = (agg["line_subtotal"] or Decimal("0.00")).quantize(Decimal("0.01"))
    return {
        "item_count": CartItem.objects.filter(user_id=cart_owner(user_id)).count(),
        "quantity": agg["units"] or 0,
        "subtotal": subtotal,
        "total": subtotal,
    }
