from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from cart.models import CartItem
from catalog.tests.factories import ProductFactory


def cart_url(user_id="7", suffix=""):
    return f"/api/v1/users/{user_id}/cart/{suffix}"


@pytest.mark.django_db
def test_get_empty_cart():
    resp = APIClient().get(cart_url())

    assert resp.status_code == 200
    assert resp.data["items"] == []
    assert resp.data["item_count"] == 0
    assert resp.data["subtotal"] == "0.00"


@pytest.mark.django_db
def test_add_merge_and_read_cart():
    product = ProductFactory(price=Decimal("85.50"))
    client = APIClient()

    first = client.post(
        cart_url(), {"product_id": product.id, "quantity": 1, "selected_options": {"color": "red"}}, format="json"
    )
    second = client.post(
        cart_url(), {"product_id": product.id, "quantity": 2, "selected_options": {"color": "red"}}, format="json"
    )
    assert first.status_code == 201
    assert second.status_code == 201
    assert second.data["id"] == first.data["id"]
    assert second.data["quantity"] == 3

    resp = client.get(cart_url())
    assert resp.status_code == 200
    assert resp.data["item_count"] == 1
    assert resp.data["quantity"] == 3
    assert resp.data["subtotal"] == "256.50"
    line = resp.data["items"][0]
    assert line["product"]["id"] == product.id
    assert line["line_total"] == "256.50"


@pytest.mark.django_db
def test_add_rejects_bad_quantity_and_unknown_product():
    product = ProductFactory()
    client = APIClient()

    assert client.post(cart_url(), {"product_id": product.id, "quantity": 0}, format="json").status_code == 400
    assert client.post(cart_url(), {"product_id": 999999}, format="json").status_code == 404
    assert CartItem.objects.count() == 0


@pytest.mark.django_db
def test_guest_cart_is_addressed_by_guest_id():
    product = ProductFactory()
    client = APIClient()

    resp = client.post(cart_url("guest"), {"product_id": product.id}, format="json")

    assert resp.status_code == 201
    assert resp.data["user_id"] == "guest"
    assert client.get(cart_url("guest")).data["item_count"] == 1
    assert client.get(cart_url("7")).data["item_count"] == 0


@pytest.mark.django_db
def test_update_and_delete_item():
    product = ProductFactory()
    client = APIClient()
    item_id = client.post(cart_url(), {"product_id": product.id}, format="json").data["id"]

    resp = client.patch(cart_url(suffix=f"items/{item_id}/"), {"quantity": 4}, format="json")
    assert resp.status_code == 200
    assert resp.data["quantity"] == 4

    assert client.patch(cart_url(suffix="items/999999/"), {"quantity": 1}, format="json").status_code == 404
    # Another user's cart cannot touch the line
    assert client.delete(cart_url("8", f"items/{item_id}/")).status_code == 404

    assert client.delete(cart_url(suffix=f"items/{item_id}/")).status_code == 204
    assert client.delete(cart_url(suffix=f"items/{item_id}/")).status_code == 404


@pytest.mark.django_db
def test_update_options_and_remove_product():
    product = ProductFactory()
    client = APIClient()
    client.post(cart_url(), {"product_id": product.id}, format="json")

    resp = client.put(
        cart_url(suffix="options/"),
        {"product_id": product.id, "selected_options": {"size": "L"}, "attachments": {"text": "Hi"}},
        format="json",
    )
    assert resp.status_code == 200
    assert resp.data["selected_options"] == {"size": "L"}
    assert resp.data["attachments"]["text"] == "Hi"

    assert client.delete(cart_url(suffix=f"products/{product.id}/")).status_code == 204
    assert client.delete(cart_url(suffix=f"products/{product.id}/")).status_code == 404


@pytest.mark.django_db
def test_clear_cart_endpoint():
    client = APIClient()
    for product in (ProductFactory(), ProductFactory()):
        client.post(cart_url(), {"product_id": product.id}, format="json")

    resp = client.post(cart_url(suffix="clear/"))
    assert resp.status_code == 200
    assert resp.data == {"status": "cleared", "removed": 2}

    again = client.post(cart_url(suffix="clear/"))
    assert again.status_code == 200
    assert again.data["removed"] == 0


@pytest.mark.django_db
def test_add_rejects_quantity_beyond_column_range():
    product = ProductFactory()

    resp = APIClient().post(cart_url(), {"product_id": product.id, "quantity": 10**20}, format="json")

    assert resp.status_code == 400
    assert "quantity" in resp.data
    assert CartItem.objects.count() == 0
