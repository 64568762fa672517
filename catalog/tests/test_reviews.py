import pytest
from rest_framework.test import APIClient

from catalog.models import Review
from catalog.services import add_review
from catalog.tests.factories import ProductFactory, ReviewFactory
from common.exceptions import NotFoundError, ValidationError


@pytest.mark.django_db
def test_add_review_rejects_blank_fields():
    product = ProductFactory()
    with pytest.raises(ValidationError) as exc:
        add_review(product_id=product.id, customer_id="7", customer_name="  ", comment="")
    assert set(exc.value.errors) == {"customer_name", "comment"}
    assert Review.objects.count() == 0


@pytest.mark.django_db
def test_add_review_unknown_product():
    with pytest.raises(NotFoundError):
        add_review(product_id=424242, customer_id="7", customer_name="Sara", comment="Nice")


@pytest.mark.django_db
def test_product_reviews_endpoint_add_and_list_newest_first():
    product = ProductFactory()
    client = APIClient()

    first = client.post(
        f"/api/v1/catalog/products/{product.id}/reviews/",
        {"customer_id": "7", "customer_name": "Sara", "comment": "Great quality"},
        format="json",
    )
    second = client.post(
        f"/api/v1/catalog/products/{product.id}/reviews/",
        {"customer_id": "8", "customer_name": "Omar", "comment": "Fast delivery"},
        format="json",
    )
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.data["product_id"] == product.id

    resp = client.get(f"/api/v1/catalog/products/{product.id}/reviews/")
    assert resp.status_code == 200
    assert [r["id"] for r in resp.data] == [second.data["id"], first.data["id"]]


@pytest.mark.django_db
def test_product_reviews_unknown_product_is_404():
    client = APIClient()
    assert client.get("/api/v1/catalog/products/999999/reviews/").status_code == 404
    resp = client.post(
        "/api/v1/catalog/products/999999/reviews/",
        {"customer_id": "7", "customer_name": "Sara", "comment": "Hello"},
        format="json",
    )
    assert resp.status_code == 404


@pytest.mark.django_db
def test_review_list_and_delete():
    review = ReviewFactory()
    ReviewFactory()
    client = APIClient()

    resp = client.get("/api/v1/reviews/")
    assert resp.status_code == 200
    assert resp.data["count"] == 2

    assert client.delete(f"/api/v1/reviews/{review.id}/").status_code == 204
    assert client.delete(f"/api/v1/reviews/{review.id}/").status_code == 404
    assert Review.objects.count() == 1
