"""Wishlist mutations."""

import logging

from django.db import IntegrityError, transaction

from cart.services import cart_owner
from catalog.selectors import get_product
from common.exceptions import ConflictError, NotFoundError

from .models import WishlistItem

logger = logging.getLogger("storefront.wishlist")


def add_to_wishlist(*, user_id, product_id) -> WishlistItem:
    """Save a product to the user's wishlist.

    Raises ConflictError when the product is already there.
    """

    owner = cart_owner(user_id)
    product = get_product(product_id, active_only=True)
    if product is None:
        raise NotFoundError("Product not found.")
    try:
        with transaction.atomic():
            item = WishlistItem.objects.create(
                user_id=owner,
                product_id=product.id,
                product_name=product.name,
                price=product.price,
                image=product.main_image,
            )
    except IntegrityError:
        raise ConflictError("Product already in wishlist.")
    logger.info(
        "wishlist.item_added",
        extra={"event": "wishlist.item_added", "user_id": owner, "product_id": product.id},
    )
    return item


def remove_from_wishlist(*, user_id, product_id) -> None:
    owner = cart_owner(user_id)
    try:
        deleted, _ = WishlistItem.objects.filter(user_id=owner, product_id=int(product_id)).delete()
    except (TypeError, ValueError):
        deleted = 0
    if not deleted:
        raise NotFoundError("Product not in wishlist.")
    logger.info(
        "wishlist.item_removed",
        extra={"event": "wishlist.item_removed", "user_id": owner, "product_id": product_id},
    )


def clear_wishlist(*, user_id) -> int:
    deleted, _ = WishlistItem.objects.filter(user_id=cart_owner(user_id)).delete()
    return deleted
