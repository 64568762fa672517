"""Catalog services: review mutations."""

import logging

from common.exceptions import NotFoundError, ValidationError

from .models import Review
from .selectors import get_product

logger = logging.getLogger("storefront.catalog")


def add_review(*, product_id: int, customer_id, customer_name: str, comment: str) -> Review:
    """Attach a review to an existing product.

    All three author fields are required; blank values are rejected.
    """

    errors = {}
    if not str(customer_id or "").strip():
        errors["customer_id"] = "This field is required."
    if not (customer_name or "").strip():
        errors["customer_name"] = "This field is required."
    if not (comment or "").strip():
        errors["comment"] = "This field is required."
    if errors:
        raise ValidationError("All fields are required.", errors=errors)

    product = get_product(product_id)
    if product is None:
        raise NotFoundError("Product not found.")

    review = Review.objects.create(
        product=product,
        customer_id=str(customer_id).strip(),
        customer_name=customer_name.strip(),
        comment=comment.strip(),
    )
    logger.info(
        "review.added",
        extra={"event": "review.added", "review_id": review.id, "product_id": product.id},
    )
    return review


def delete_review(*, review_id: int) -> None:
    deleted, _ = Review.objects.filter(id=review_id).delete()
    if not deleted:
        raise NotFoundError("Review not found.")
