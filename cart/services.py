"""Cart services: mutations on a user's cart lines.

Lines are keyed by (user_id, product_id, options_key). Adding the same
product with the same options twice merges into one line by incrementing
its quantity in the database, so concurrent adds never lose an update.
"""

import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from catalog.selectors import get_product
from common.exceptions import ConflictError, NotFoundError, ValidationError

from .models import MAX_QUANTITY, CartItem, options_key_for

logger = logging.getLogger("storefront.cart")


def cart_owner(user_id) -> str:
    """Normalize a cart owner id; blank ids fall back to the guest cart."""

    value = str(user_id or "").strip()
    return value or getattr(settings, "GUEST_USER_ID", "guest")


def _require_quantity(quantity) -> int:
    if isinstance(quantity, bool):
        raise ValidationError("Quantity must be at least 1.", errors={"quantity": "Must be a positive integer."})
    try:
        value = int(quantity)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be at least 1.", errors={"quantity": "Must be a positive integer."})
    if value < 1:
        raise ValidationError("Quantity must be at least 1.", errors={"quantity": "Must be a positive integer."})
    if value > MAX_QUANTITY:
        raise ValidationError(
            f"Quantity must be at most {MAX_QUANTITY}.", errors={"quantity": f"Must be at most {MAX_QUANTITY}."}
        )
    return value


def _normalize_attachments(attachments) -> dict:
    attachments = attachments or {}
    return {
        "images": list(attachments.get("images") or []),
        "text": str(attachments.get("text") or ""),
    }


def _has_attachments(attachments) -> bool:
    return bool(attachments and (attachments.get("images") or attachments.get("text")))


def _get_item(*, user_id: str, item_id) -> CartItem:
    try:
        return CartItem.objects.select_for_update().get(id=item_id, user_id=user_id)
    except (CartItem.DoesNotExist, TypeError, ValueError):
        raise NotFoundError("Cart item not found.")


def add_item(
    *,
    user_id,
    product_id,
    quantity=1,
    selected_options=None,
    options_pricing=None,
    attachments=None,
) -> CartItem:
    """Add a product to the user's cart, merging with a matching line.

    The product is resolved through the catalog and its name, price and main
    image are snapshotted onto the line. When a line with the same options
    already exists its quantity grows by `quantity`; attachments are
    replaced only when the new ones carry text or images.
    """

    owner = cart_owner(user_id)
    quantity = _require_quantity(quantity)
    product = get_product(product_id, active_only=True)
    if product is None:
        raise NotFoundError("Product not found.")

    options = selected_options or {}
    key = options_key_for(options)
    max_tries = max(1, int(getattr(settings, "CART_ADD_MAX_RETRIES", 3)))

    for attempt in range(1, max_tries + 1):
        with transaction.atomic():
            item = _merge_into_existing(
                owner=owner, product_id=product.id, key=key, quantity=quantity, attachments=attachments
            )
            if item is not None:
                return item
            try:
                # Savepoint: a lost insert race must not abort the enclosing transaction
                with transaction.atomic():
                    item = CartItem.objects.create(
                        user_id=owner,
                        product_id=product.id,
                        product_name=product.name,
                        price=product.price,
                        quantity=quantity,
                        image=product.main_image,
                        selected_options=options,
                        options_pricing=options_pricing or {},
                        attachments=_normalize_attachments(attachments),
                    )
            except IntegrityError:
                logger.warning(
                    "cart.add_retry",
                    extra={"event": "cart.add_retry", "user_id": owner, "product_id": product.id, "attempt": attempt},
                )
                continue
        logger.info(
            "cart.item_added",
            extra={
                "event": "cart.item_added",
                "user_id": owner,
                "item_id": item.id,
                "product_id": product.id,
                "quantity": quantity,
            },
        )
        return item

    raise ConflictError("Could not add the item to the cart, please retry.")


def _merge_into_existing(*, owner: str, product_id: int, key: str, quantity: int, attachments) -> CartItem | None:
    existing = (
        CartItem.objects.select_for_update().filter(user_id=owner, product_id=product_id, options_key=key).first()
    )
    if existing is None:
        return None
    if existing.quantity + quantity > MAX_QUANTITY:
        raise ValidationError(
            f"Quantity must be at most {MAX_QUANTITY}.", errors={"quantity": f"Must be at most {MAX_QUANTITY}."}
        )

    changes = {"quantity": F("quantity") + quantity, "updated_at": timezone.now()}
    if _has_attachments(attachments):
        changes["attachments"] = _normalize_attachments(attachments)
    CartItem.objects.filter(pk=existing.pk).update(**changes)
    existing.refresh_from_db()
    logger.info(
        "cart.item_merged",
        extra={
            "event": "cart.item_merged",
            "user_id": owner,
            "item_id": existing.id,
            "product_id": product_id,
            "quantity": existing.quantity,
        },
    )
    return existing


@transaction.atomic
def update_item(
    *,
    user_id,
    item_id,
    quantity=None,
    selected_options=None,
    options_pricing=None,
    attachments=None,
) -> CartItem:
    """Update quantity, options or attachments of one of the user's lines."""

    owner = cart_owner(user_id)
    item = _get_item(user_id=owner, item_id=item_id)

    fields = ["updated_at"]
    if quantity is not None:
        item.quantity = _require_quantity(quantity)
        fields.append("quantity")
    if selected_options is not None:
        item.selected_options = selected_options
        fields.append("selected_options")
    if options_pricing is not None:
        item.options_pricing = options_pricing
        fields.append("options_pricing")
    if attachments is not None:
        item.attachments = _normalize_attachments(attachments)
        fields.append("attachments")

    _save_line(item, fields)
    logger.info(
        "cart.item_updated",
        extra={"event": "cart.item_updated", "user_id": owner, "item_id": item.id, "quantity": item.quantity},
    )
    return item


@transaction.atomic
def update_item_options(*, user_id, product_id, selected_options=None, attachments=None) -> CartItem:
    """Replace options and attachments on the user's latest line for a product."""

    owner = cart_owner(user_id)
    item = (
        CartItem.objects.select_for_update()
        .filter(user_id=owner, product_id=product_id)
        .order_by("-created_at", "-id")
        .first()
    )
    if item is None:
        raise NotFoundError("Cart item not found.")

    fields = ["updated_at"]
    if selected_options is not None:
        item.selected_options = selected_options
        fields.append("selected_options")
    if attachments is not None:
        item.attachments = _normalize_attachments(attachments)
        fields.append("attachments")

    _save_line(item, fields)
    logger.info(
        "cart.item_options_updated",
        extra={"event": "cart.item_options_updated", "user_id": owner, "item_id": item.id},
    )
    return item


def _save_line(item: CartItem, fields: list[str]) -> None:
    try:
        with transaction.atomic():
            item.save(update_fields=fields)
    except IntegrityError:
        raise ValidationError(
            "This product with the same options is already in the cart.",
            errors={"selected_options": "Duplicate options for this product."},
        )


@transaction.atomic
def remove_item(*, user_id, item_id) -> None:
    owner = cart_owner(user_id)
    item = _get_item(user_id=owner, item_id=item_id)
    item.delete()
    logger.info("cart.item_removed", extra={"event": "cart.item_removed", "user_id": owner, "item_id": item_id})


@transaction.atomic
def remove_by_product(*, user_id, product_id) -> int:
    """Remove every line of `product_id` from the cart, whatever its options."""

    owner = cart_owner(user_id)
    try:
        deleted, _ = CartItem.objects.filter(user_id=owner, product_id=int(product_id)).delete()
    except (TypeError, ValueError):
        deleted = 0
    if not deleted:
        raise NotFoundError("Product not in cart.")
    logger.info(
        "cart.product_removed",
        extra={"event": "cart.product_removed", "user_id": owner, "product_id": product_id, "removed": deleted},
    )
    return deleted


def clear_cart(*, user_id) -> int:
    """Delete all lines for the user. Clearing an empty cart is a no-op."""

    owner = cart_owner(user_id)
    deleted, _ = CartItem.objects.filter(user_id=owner).delete()
    logger.info("cart.cleared", extra={"event": "cart.cleared", "user_id": owner, "removed": deleted})
    return deleted
