from typing import Optional

from django.db.models import QuerySet

from .models import Coupon, normalize_code


def find_coupon(code) -> Optional[Coupon]:
    """Look a coupon up by code, ignoring case and surrounding whitespace."""

    code = normalize_code(code)
    if not code:
        return None
    return Coupon.objects.filter(code=code).first()


def list_coupons(*, active: Optional[bool] = None) -> QuerySet[Coupon]:
    qs = Coupon.objects.all()
    if active is not None:
        qs = qs.filter(is_active=active)
    return qs.order_by("-created_at", "-id")
