"""Coupon services: standalone validation and redemption."""

import logging

from django.db.models import F, Q
from django.utils import timezone

from common.exceptions import NotFoundError

from .evaluator import CouponEvaluation, require_valid, to_money
from .models import Coupon
from .selectors import find_coupon

logger = logging.getLogger("storefront.coupons")


def validate_coupon_code(*, code, order_amount) -> tuple[Coupon, CouponEvaluation]:
    """Check a code against an order amount without redeeming it.

    Raises NotFoundError for unknown codes and CouponRejected when the coupon
    exists but does not apply.
    """

    coupon = find_coupon(code)
    if coupon is None:
        raise NotFoundError("Coupon not found.")
    evaluation = require_valid(coupon, to_money(order_amount))
    logger.info(
        "coupon.validated",
        extra={"event": "coupon.validated", "coupon_id": coupon.id, "discount": str(evaluation.discount)},
    )
    return coupon, evaluation


def redeem_coupon(*, coupon_id: int) -> bool:
    """Count one use of the coupon if it still has uses left.

    The increment is a single conditional UPDATE, so two orders racing for
    the last use cannot both win. Returns False when the limit was reached.
    """

    updated = (
        Coupon.objects.filter(pk=coupon_id)
        .filter(Q(usage_limit__isnull=True) | Q(used_count__lt=F("usage_limit")))
        .update(used_count=F("used_count") + 1, updated_at=timezone.now())
    )
    if updated:
        logger.info("coupon.redeemed", extra={"event": "coupon.redeemed", "coupon_id": coupon_id})
    else:
        logger.warning("coupon.redeem_refused", extra={"event": "coupon.redeem_refused", "coupon_id": coupon_id})
    return bool(updated)
