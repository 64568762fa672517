from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from common.exceptions import CouponRejected
from coupons.evaluator import evaluate_coupon, require_valid, to_money
from coupons.models import Coupon


def make_coupon(**kwargs):
    defaults = {
        "code": "SAVE20",
        "discount_type": Coupon.TYPE_PERCENTAGE,
        "discount_value": Decimal("20"),
        "is_active": True,
        "used_count": 0,
    }
    defaults.update(kwargs)
    return Coupon(**defaults)


def test_percentage_discount_on_order_amount():
    result = evaluate_coupon(make_coupon(), Decimal("291.00"))

    assert result.valid is True
    assert result.discount == Decimal("58.20")
    assert result.reason == ""


def test_percentage_discount_is_capped_by_max_discount():
    coupon = make_coupon(max_discount=Decimal("50.00"))
    assert evaluate_coupon(coupon, Decimal("291.00")).discount == Decimal("50.00")


def test_percentage_discount_rounds_half_up_to_cents():
    coupon = make_coupon(discount_value=Decimal("12.5"))
    # 12.5% of 10.05 = 1.25625
    assert evaluate_coupon(coupon, Decimal("10.05")).discount == Decimal("1.26")


def test_fixed_discount_never_exceeds_order_amount():
    coupon = make_coupon(discount_type=Coupon.TYPE_FIXED, discount_value=Decimal("500"))

    assert evaluate_coupon(coupon, Decimal("120.00")).discount == Decimal("120.00")
    assert evaluate_coupon(coupon, 0).discount == Decimal("0.00")


@pytest.mark.parametrize("amount", ["0", "0.01", "99.99", "291.00", "100000"])
@pytest.mark.parametrize("discount_type,value", [("percentage", "100"), ("percentage", "35"), ("fixed", "40")])
def test_discount_stays_within_zero_and_amount(amount, discount_type, value):
    coupon = make_coupon(discount_type=discount_type, discount_value=Decimal(value))
    result = evaluate_coupon(coupon, Decimal(amount))

    assert result.valid
    assert Decimal("0.00") <= result.discount <= Decimal(amount)
    assert result.discount == result.discount.quantize(Decimal("0.01"))


def test_exhausted_usage_limit():
    result = evaluate_coupon(make_coupon(usage_limit=1, used_count=1), Decimal("291.00"))

    assert result.valid is False
    assert result.discount == Decimal("0.00")
    assert result.reason == "usage limit exhausted"


def test_minimum_amount_message_names_the_minimum():
    result = evaluate_coupon(make_coupon(minimum_amount=Decimal("300")), Decimal("291.00"))

    assert result.valid is False
    assert result.reason == "order below minimum of 300.00"
    assert evaluate_coupon(make_coupon(minimum_amount=Decimal("291")), Decimal("291.00")).valid is True


def test_expired_and_inactive():
    now = timezone.now()
    expired = make_coupon(expiry_date=now - timedelta(seconds=1))
    assert evaluate_coupon(expired, Decimal("10"), now=now).reason == "coupon expired"
    assert evaluate_coupon(make_coupon(expiry_date=now + timedelta(days=1)), Decimal("10"), now=now).valid

    # Inactive is reported before any other problem
    inactive = make_coupon(is_active=False, expiry_date=now - timedelta(days=1), usage_limit=1, used_count=1)
    assert evaluate_coupon(inactive, Decimal("10"), now=now).reason == "coupon inactive"


def test_require_valid_raises_with_reason():
    with pytest.raises(CouponRejected) as exc:
        require_valid(make_coupon(is_active=False), Decimal("10"))
    assert exc.value.reason == "coupon inactive"


def test_to_money():
    assert to_money(None) == Decimal("0.00")
    assert to_money(2.675) == Decimal("2.68")
    assert to_money("10") == Decimal("10.00")
