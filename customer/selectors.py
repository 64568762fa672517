"""Read-side helpers for customer listings and statistics."""

from typing import Optional

from django.db.models import CharField, Count, IntegerField, OuterRef, Q, QuerySet, Subquery, Sum, Value
from django.db.models.functions import Cast, Coalesce

from cart.models import CartItem
from wishlist.models import WishlistItem

from .models import Customer


def _count_for_user(model) -> Subquery:
    # Cart and wishlist rows key customers by the string form of their id
    rows = (
        model.objects.filter(user_id=Cast(OuterRef("pk"), output_field=CharField()))
        .order_by()
        .values("user_id")
        .annotate(n=Count("id"))
        .values("n")
    )
    return Coalesce(Subquery(rows, output_field=IntegerField()), Value(0))


def list_customers(*, search: Optional[str] = None, status: Optional[str] = None) -> QuerySet[Customer]:
    """Customers newest first, annotated with `cart_count` and `wishlist_count`."""

    qs = Customer.objects.annotate(
        cart_count=_count_for_user(CartItem),
        wishlist_count=_count_for_user(WishlistItem),
    )
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(email__icontains=search) | Q(phone__icontains=search))
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-created_at", "-id")


def get_customer(customer_id) -> Optional[Customer]:
    try:
        return Customer.objects.get(id=int(customer_id))
    except (Customer.DoesNotExist, TypeError, ValueError):
        return None


def customer_stats() -> dict:
    agg = Customer.objects.aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(status=Customer.STATUS_ACTIVE)),
        inactive=Count("id", filter=Q(status=Customer.STATUS_INACTIVE)),
        with_orders=Count("id", filter=Q(total_orders__gt=0)),
        total_spent=Sum("total_spent"),
    )
    agg["total_spent"] = agg["total_spent"] or 0
    return agg
