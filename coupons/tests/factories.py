from decimal import Decimal

import factory
from factory.django import DjangoModelFactory

from coupons.models import Coupon


class CouponFactory(DjangoModelFactory):
    class Meta:
        model = Coupon

    code = factory.Sequence(lambda n: f"CODE{n}")
    name = factory.Faker("word")
    discount_type = Coupon.TYPE_PERCENTAGE
    discount_value = Decimal("10.00")
    is_active = True
