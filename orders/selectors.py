"""Read-side helpers for orders."""

from decimal import Decimal
from typing import Optional

from django.db.models import Count, Q, QuerySet, Sum

from common.choices import OrderStatus, PaymentStatus

from .models import Order


def get_order(order_id) -> Optional[Order]:
    try:
        return Order.objects.prefetch_related("items").get(pk=int(order_id))
    except (Order.DoesNotExist, TypeError, ValueError):
        return None


def list_orders(
    *,
    status: Optional[str] = None,
    email: Optional[str] = None,
    number: Optional[str] = None,
    user_id: Optional[str] = None,
) -> QuerySet[Order]:
    qs = Order.objects.prefetch_related("items").order_by("-id")
    if status:
        qs = qs.filter(status=status)
    if email:
        qs = qs.filter(customer_email__iexact=email.strip())
    if number:
        qs = qs.filter(number=number.strip())
    if user_id:
        qs = qs.filter(user_id=user_id)
    return qs


def order_stats() -> dict:
    """Order counts per status plus revenue.

    Revenue sums totals of every order that was not cancelled; `paid_revenue`
    counts only orders whose payment went through.
    """

    by_status = {status: 0 for status in OrderStatus.values}
    for row in Order.objects.values("status").annotate(n=Count("id")):
        by_status[row["status"]] = row["n"]

    agg = Order.objects.aggregate(
        total_orders=Count("id"),
        revenue=Sum("total", filter=~Q(status=OrderStatus.CANCELLED)),
        paid_revenue=Sum("total", filter=Q(payment_status=PaymentStatus.PAID) & ~Q(status=OrderStatus.CANCELLED)),
    )
    return {
        "total_orders": agg["total_orders"],
        "by_status": by_status,
        "revenue": agg["revenue"] or Decimal("0.00"),
        "paid_revenue": agg["paid_revenue"] or Decimal("0.00"),
    }
