from decimal import Decimal

import pytest
from django.db import IntegrityError

from catalog.tests.factories import ProductFactory


@pytest.mark.django_db
def test_product_price_cannot_be_negative():
    with pytest.raises(IntegrityError):
        ProductFactory(price=Decimal("-1.00"))
