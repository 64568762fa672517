from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from catalog.tests.factories import CategoryFactory, ProductFactory


@pytest.mark.django_db
def test_categories_list_only_active_in_display_order():
    CategoryFactory(name="Frames", slug="frames", display_order=2)
    CategoryFactory(name="Mugs", slug="mugs", display_order=1)
    CategoryFactory(name="Hidden", slug="hidden", is_active=False)

    resp = APIClient().get("/api/v1/catalog/categories/")

    assert resp.status_code == 200
    slugs = [c["slug"] for c in resp.data["results"]]
    assert slugs == ["mugs", "frames"]


@pytest.mark.django_db
def test_category_retrieve_by_slug():
    CategoryFactory(name="Mugs", slug="mugs")

    resp = APIClient().get("/api/v1/catalog/categories/mugs/")

    assert resp.status_code == 200
    assert resp.data["name"] == "Mugs"


@pytest.mark.django_db
def test_products_list_filters_by_category_and_featured():
    mugs = CategoryFactory(slug="mugs")
    frames = CategoryFactory(slug="frames")
    mug = ProductFactory(name="Photo Mug", category=mugs, featured=True)
    ProductFactory(name="Oak Frame", category=frames)
    ProductFactory(name="Hidden Mug", category=mugs, is_active=False)

    client = APIClient()
    resp = client.get("/api/v1/catalog/products/?category=mugs")
    assert resp.status_code == 200
    assert [p["id"] for p in resp.data["results"]] == [mug.id]
    assert resp.data["results"][0]["category"]["slug"] == "mugs"

    resp_featured = client.get("/api/v1/catalog/products/?featured=true")
    assert [p["id"] for p in resp_featured.data["results"]] == [mug.id]


@pytest.mark.django_db
def test_products_search_and_ordering():
    ProductFactory(name="Photo Mug", description="ceramic", price=Decimal("85.50"))
    ProductFactory(name="Oak Frame", description="wooden", price=Decimal("120.00"))
    ProductFactory(name="Gift Box", description="ceramic mug inside", price=Decimal("250.00"))

    client = APIClient()
    resp = client.get("/api/v1/catalog/products/?search=ceramic")
    assert {p["name"] for p in resp.data["results"]} == {"Photo Mug", "Gift Box"}

    resp_order = client.get("/api/v1/catalog/products/?ordering=-price")
    prices = [Decimal(p["price"]) for p in resp_order.data["results"]]
    assert prices == sorted(prices, reverse=True)


@pytest.mark.django_db
def test_product_detail_exposes_discount_and_stock_flags():
    product = ProductFactory(price=Decimal("80.00"), original_price=Decimal("100.00"), stock=0)

    resp = APIClient().get(f"/api/v1/catalog/products/{product.id}/")

    assert resp.status_code == 200
    assert resp.data["discount_percentage"] == 20
    assert resp.data["in_stock"] is False


@pytest.mark.django_db
def test_product_detail_missing_returns_404():
    resp = APIClient().get("/api/v1/catalog/products/999999/")
    assert resp.status_code == 404


@pytest.mark.django_db
def test_original_price_not_above_price_is_dropped():
    product = ProductFactory(price=Decimal("100.00"), original_price=Decimal("90.00"))
    product.refresh_from_db()
    assert product.original_price is None
    assert product.discount_percentage == 0
