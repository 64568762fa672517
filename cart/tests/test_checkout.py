from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from cart.models import CartItem
from catalog.tests.factories import ProductFactory
from coupons.models import Coupon
from orders.models import IdempotencyKey, Order

CHECKOUT_URL = "/api/v1/users/7/cart/checkout/"

PAYLOAD = {
    "customer": {"name": "Sara", "email": "sara@example.com", "phone": "0100"},
    "delivery": {"address": "12 Nile St", "city": "Cairo"},
    "delivery_fee": "25.00",
}


def _fill_cart(client):
    mug = ProductFactory(name="Photo Mug", price=Decimal("85.50"))
    frame = ProductFactory(name="Oak Frame", price=Decimal("120.00"))
    client.post("/api/v1/users/7/cart/", {"product_id": mug.id, "quantity": 2}, format="json")
    client.post("/api/v1/users/7/cart/", {"product_id": frame.id, "quantity": 1}, format="json")
    return mug, frame


@pytest.mark.django_db
def test_checkout_creates_order_and_clears_cart():
    client = APIClient()
    mug, frame = _fill_cart(client)

    resp = client.post(CHECKOUT_URL, PAYLOAD, format="json")

    assert resp.status_code == 201
    assert resp.data["user_id"] == "7"
    assert resp.data["status"] == "pending"
    assert resp.data["subtotal"] == "291.00"
    assert resp.data["total"] == "316.00"
    # Items keep the order they were added in
    assert [i["product_id"] for i in resp.data["items"]] == [mug.id, frame.id]
    assert not CartItem.objects.filter(user_id="7").exists()


@pytest.mark.django_db
def test_checkout_empty_cart_is_rejected():
    resp = APIClient().post(CHECKOUT_URL, PAYLOAD, format="json")

    assert resp.status_code == 400
    assert resp.data["detail"] == "Cart is empty."
    assert Order.objects.count() == 0


@pytest.mark.django_db
def test_checkout_missing_delivery_keeps_cart():
    client = APIClient()
    _fill_cart(client)

    resp = client.post(CHECKOUT_URL, {**PAYLOAD, "delivery": {"address": "", "city": ""}}, format="json")

    assert resp.status_code == 400
    assert "delivery.address" in resp.data["errors"]
    assert CartItem.objects.filter(user_id="7").count() == 2
    assert Order.objects.count() == 0


@pytest.mark.django_db
def test_idempotent_checkout_redeems_coupon_once():
    Coupon.objects.create(code="SAVE20", discount_type=Coupon.TYPE_FIXED, discount_value=Decimal("20"))
    client = APIClient()
    _fill_cart(client)
    payload = {**PAYLOAD, "coupon_code": "save20"}

    first = client.post(CHECKOUT_URL, payload, format="json", HTTP_IDEMPOTENCY_KEY="checkout-1")
    second = client.post(CHECKOUT_URL, payload, format="json", HTTP_IDEMPOTENCY_KEY="checkout-1")

    assert first.status_code == 201
    assert second.status_code == 201
    assert second.data["id"] == first.data["id"]
    assert first.data["coupon_code"] == "SAVE20"
    assert first.data["total"] == "296.00"
    assert Order.objects.count() == 1
    assert Coupon.objects.get(code="SAVE20").used_count == 1
    assert IdempotencyKey.objects.get(key="checkout-1").scope == "user:7"


@pytest.mark.django_db
def test_idempotency_key_reused_with_other_payload_conflicts():
    client = APIClient()
    _fill_cart(client)

    assert client.post(CHECKOUT_URL, PAYLOAD, format="json", HTTP_IDEMPOTENCY_KEY="k").status_code == 201
    resp = client.post(
        CHECKOUT_URL, {**PAYLOAD, "notes": "ring twice"}, format="json", HTTP_IDEMPOTENCY_KEY="k"
    )

    assert resp.status_code == 409
    assert Order.objects.count() == 1
