"""Coupon evaluation.

Pure functions: they read a coupon and an order amount and decide whether
the coupon applies and for how much. Nothing here touches the database or
changes `used_count`; redemption is a separate step in `coupons.services`.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

from common.choices import DiscountType
from common.exceptions import CouponRejected

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class CouponEvaluation:
    valid: bool
    discount: Decimal = ZERO
    reason: str = ""


def to_money(value) -> Decimal:
    """Coerce a number to a Decimal rounded half-up to cents."""

    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def rejection_reason(coupon, order_amount: Decimal, *, now=None) -> str:
    """Return why the coupon cannot apply, or an empty string when it can.

    Checks run in a fixed order and the first failure wins.
    """

    now = now or timezone.now()
    if not coupon.is_active:
        return "coupon inactive"
    if coupon.expiry_date is not None and now > coupon.expiry_date:
        return "coupon expired"
    if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
        return "usage limit exhausted"
    if coupon.minimum_amount is not None and order_amount < coupon.minimum_amount:
        return f"order below minimum of {to_money(coupon.minimum_amount)}"
    return ""


def compute_discount(coupon, order_amount: Decimal) -> Decimal:
    value = Decimal(coupon.discount_value or 0)
    if coupon.discount_type == DiscountType.PERCENTAGE:
        discount = order_amount * value / Decimal(100)
        if coupon.max_discount is not None and discount > coupon.max_discount:
            discount = Decimal(coupon.max_discount)
    else:
        discount = value
    # Never discount more than the order is worth
    discount = min(discount, order_amount)
    return max(to_money(discount), ZERO)


def evaluate_coupon(coupon, order_amount, *, now=None) -> CouponEvaluation:
    amount = order_amount if isinstance(order_amount, Decimal) else Decimal(str(order_amount or 0))
    reason = rejection_reason(coupon, amount, now=now)
    if reason:
        return CouponEvaluation(valid=False, reason=reason)
    return CouponEvaluation(valid=True, discount=compute_discount(coupon, amount))


def require_valid(coupon, order_amount, *, now=None) -> CouponEvaluation:
    """Evaluate and raise CouponRejected instead of returning an invalid result."""

    evaluation = evaluate_coupon(coupon, order_amount, now=now)
    if not evaluation.valid:
        raise CouponRejected(evaluation.reason)
    return evaluation
