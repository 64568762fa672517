from cart.services import cart_owner
from catalog.selectors import product_snapshot, products_by_id

from .models import WishlistItem


def list_wishlist(user_id) -> list[WishlistItem]:
    """Wishlist lines newest first, each with a live `product` snapshot (None if gone)."""

    items = list(WishlistItem.objects.filter(user_id=cart_owner(user_id)).order_by("-created_at", "-id"))
    products = products_by_id(item.product_id for item in items)
    for item in items:
        item.product = product_snapshot(products.get(item.product_id))
    return items


def is_in_wishlist(user_id, product_id) -> bool:
    try:
        product_id = int(product_id)
    except (TypeError, ValueError):
        return False
    return WishlistItem.objects.filter(user_id=cart_owner(user_id), product_id=product_id).exists()
