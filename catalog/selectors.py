"""Selectors for the catalog domain.

Expose read-only query helpers to keep views thin and allow reuse across
APIs and services. The cart, wishlist and order apps use `get_product` and
`product_snapshot` as their product lookup.
"""

from typing import Iterable, Optional

from django.db.models import Q, QuerySet

from .models import Category, Product, Review


def list_categories(ordering: Optional[Iterable[str]] = None) -> QuerySet[Category]:
    """Return active categories ordered by the provided fields.

    Defaults to sorting by ``display_order`` then ``name``.
    """

    ordering = list(ordering or ("display_order", "name"))
    return Category.objects.filter(is_active=True).order_by(*ordering)


def list_products(
    *,
    category_id: Optional[int] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
) -> QuerySet[Product]:
    """Return active products with common filters applied."""

    qs = Product.objects.filter(is_active=True).select_related("category")
    if category_id:
        qs = qs.filter(category_id=category_id)
    if featured is not None:
        qs = qs.filter(featured=featured)
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search))
    return qs.order_by("name")


def get_product(product_id, *, active_only: bool = False) -> Optional[Product]:
    """Return a product by id, or None when it does not exist.

    With `active_only`, products hidden from the catalog also count as missing.
    """

    qs = Product.objects.filter(is_active=True) if active_only else Product.objects.all()
    try:
        return qs.get(id=int(product_id))
    except (Product.DoesNotExist, TypeError, ValueError):
        return None


def product_snapshot(product: Optional[Product]) -> Optional[dict]:
    """Return the live product fields shown next to cart and wishlist lines."""

    if product is None:
        return None
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "original_price": product.original_price,
        "main_image": product.main_image,
        "detailed_images": product.detailed_images or [],
        "stock": product.stock,
        "dynamic_options": product.dynamic_options or [],
        "specifications": product.specifications or [],
    }


def products_by_id(product_ids: Iterable[int]) -> dict:
    """Fetch several products at once, keyed by id."""

    return {p.id: p for p in Product.objects.filter(id__in=set(product_ids))}


def list_reviews(*, product_id: Optional[int] = None) -> QuerySet[Review]:
    qs = Review.objects.select_related("product")
    if product_id is not None:
        qs = qs.filter(product_id=product_id)
    return qs.order_by("-created_at", "-id")
