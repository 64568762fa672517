"""Order services: building orders, lifecycle transitions and idempotency.

`create_order` is the single write path for new orders. Every money field
is derived here from the line items; caller-supplied totals are ignored.
"""

import hashlib
import json
import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable, Optional, Tuple

from django.db import IntegrityError, transaction
from django.utils import timezone

from cart.models import MAX_QUANTITY
from cart.selectors import list_cart
from cart.services import cart_owner, clear_cart
from common.choices import OrderStatus, PaymentMethod, PaymentStatus
from common.exceptions import InvalidTransition, NotFoundError, ValidationError
from coupons.evaluator import evaluate_coupon
from coupons.selectors import find_coupon
from coupons.services import redeem_coupon
from customer.services import record_order

from .emails import send_order_placed_email
from .models import IdempotencyKey, Order, OrderItem

logger = logging.getLogger("storefront.orders")

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
IDEMPOTENCY_TTL = timedelta(hours=24)
# Money columns are max_digits=12, decimal_places=2
MAX_AMOUNT = Decimal("9999999999.99")
MAX_PRODUCT_ID = 9223372036854775807


def _money(value, field: str, errors: dict, *, allow_negative: bool = False) -> Decimal:
    if value is None or value == "":
        return ZERO
    try:
        amount = Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        errors[field] = "Must be a number."
        return ZERO
    if not amount.is_finite():
        errors[field] = "Must be a number."
        return ZERO
    if amount < 0 and not allow_negative:
        errors[field] = "Must be zero or greater."
        return ZERO
    if abs(amount) > MAX_AMOUNT:
        errors[field] = f"Must be at most {MAX_AMOUNT}."
        return ZERO
    return amount


def _positive_int(value) -> int:
    """Whole number >= 1, or 0 when the value is anything else."""

    if isinstance(value, bool):
        return 0
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return 0
    if not number.is_finite() or number != number.to_integral_value() or number < 1:
        return 0
    return int(number)


def _text(mapping, key: str) -> str:
    return str((mapping or {}).get(key) or "").strip()


def _clean_items(items, errors: dict) -> list[dict]:
    if not isinstance(items, (list, tuple)) or not items:
        errors["items"] = "At least one item is required."
        return []

    lines = []
    for index, raw in enumerate(items):
        prefix = f"items[{index}]"
        if not isinstance(raw, dict):
            errors[prefix] = "Must be an object."
            continue

        product_id = raw.get("product_id")
        try:
            product_id = int(product_id)
        except (TypeError, ValueError):
            errors[f"{prefix}.product_id"] = "This field is required."
        else:
            if not 0 < product_id <= MAX_PRODUCT_ID:
                errors[f"{prefix}.product_id"] = "Must be a valid product id."

        name = _text(raw, "product_name")
        if not name:
            errors[f"{prefix}.product_name"] = "This field is required."

        quantity = _positive_int(raw.get("quantity"))
        if quantity < 1:
            errors[f"{prefix}.quantity"] = "Must be at least 1."
        elif quantity > MAX_QUANTITY:
            errors[f"{prefix}.quantity"] = f"Must be at most {MAX_QUANTITY}."
            quantity = 0

        if raw.get("price") is None:
            errors[f"{prefix}.price"] = "This field is required."
        price = _money(raw.get("price"), f"{prefix}.price", errors)
        if price * quantity > MAX_AMOUNT:
            errors[f"{prefix}.quantity"] = "Line total is too large."

        lines.append(
            {
                "position": index,
                "product_id": product_id,
                "product_name": name,
                "product_image": _text(raw, "product_image") or _text(raw, "image"),
                "price": price,
                "quantity": quantity,
                "selected_options": raw.get("selected_options") or {},
                "options_pricing": raw.get("options_pricing") or {},
                "attachments": raw.get("attachments") or {},
            }
        )
    return lines


def _apply_coupon(coupon_code: str, subtotal: Decimal):
    """Resolve and evaluate a coupon for the order.

    Returns (coupon, discount); a coupon that is unknown or does not apply
    yields (None, 0) and is logged, never raised.
    """

    if not coupon_code:
        return None, ZERO
    coupon = find_coupon(coupon_code)
    if coupon is None:
        logger.info(
            "order.coupon_ignored",
            extra={"event": "order.coupon_ignored", "coupon_code": coupon_code, "reason": "coupon not found"},
        )
        return None, ZERO
    evaluation = evaluate_coupon(coupon, subtotal)
    if not evaluation.valid:
        logger.info(
            "order.coupon_ignored",
            extra={"event": "order.coupon_ignored", "coupon_code": coupon.code, "reason": evaluation.reason},
        )
        return None, ZERO
    return coupon, evaluation.discount


def create_order(
    *,
    customer: dict,
    delivery: dict,
    items,
    coupon_code: str = "",
    payment_method: str = PaymentMethod.COD,
    payment_status: str = PaymentStatus.PENDING,
    payment_id: str = "",
    delivery_fee=0,
    discount=0,
    notes: str = "",
    user_id: str = "",
    clear_cart_for: Optional[str] = None,
    expected_delivery=None,
) -> Order:
    """Validate the request, price it and persist a pending order.

    Raises ValidationError with per-field messages when the input is
    incomplete. A coupon that cannot be applied is dropped rather than
    failing the order. When `clear_cart_for` is set, that user's cart is
    emptied in the same transaction.
    """

    errors: dict = {}
    name = _text(customer, "name")
    email = _text(customer, "email").lower()
    if not name:
        errors["customer.name"] = "This field is required."
    if not email:
        errors["customer.email"] = "This field is required."
    address = _text(delivery, "address")
    city = _text(delivery, "city")
    if not address:
        errors["delivery.address"] = "This field is required."
    if not city:
        errors["delivery.city"] = "This field is required."
    if payment_method not in PaymentMethod.values:
        errors["payment_method"] = f"Must be one of: {', '.join(PaymentMethod.values)}."
    if payment_status not in PaymentStatus.values:
        errors["payment_status"] = f"Must be one of: {', '.join(PaymentStatus.values)}."
    fee = _money(delivery_fee, "delivery_fee", errors)
    manual_discount = _money(discount, "discount", errors)
    lines = _clean_items(items, errors)
    if errors:
        raise ValidationError("Invalid order.", errors=errors)

    subtotal = sum(
        ((line["price"] * line["quantity"]).quantize(CENT, rounding=ROUND_HALF_UP) for line in lines), ZERO
    )
    if subtotal + fee > MAX_AMOUNT:
        raise ValidationError("Invalid order.", errors={"items": f"Order total must be at most {MAX_AMOUNT}."})
    coupon, coupon_discount = _apply_coupon(str(coupon_code or "").strip(), subtotal)

    with transaction.atomic():
        order = Order.objects.create(
            user_id=str(user_id or ""),
            customer_name=name,
            customer_email=email,
            customer_phone=_text(customer, "phone"),
            address=address,
            city=city,
            subtotal=subtotal,
            delivery_fee=fee,
            discount=manual_discount,
            coupon_code=coupon.code if coupon else "",
            coupon_discount=coupon_discount,
            payment_method=payment_method,
            payment_status=payment_status,
            payment_id=payment_id or "",
            notes=notes or _text(delivery, "notes"),
            expected_delivery=expected_delivery,
        )
        for line in lines:
            OrderItem.objects.create(order=order, **line)

        order.number = f"ORD-{int(order.id):06d}"
        order.save(update_fields=["number"])

        # Redeem only once the order row exists; a lost race strips the coupon
        if coupon is not None and not redeem_coupon(coupon_id=coupon.id):
            logger.warning(
                "order.coupon_stripped",
                extra={"event": "order.coupon_stripped", "order_id": order.id, "coupon_code": coupon.code},
            )
            order.coupon_code = ""
            order.coupon_discount = ZERO
            order.save(update_fields=["coupon_code", "coupon_discount", "updated_at"])

        if clear_cart_for:
            clear_cart(user_id=clear_cart_for)

        record_order(email=email, amount=order.total, placed_at=order.order_date)
        transaction.on_commit(lambda: send_order_placed_email(order))

    logger.info(
        "order_created",
        extra={
            "event": "order_created",
            "order_id": order.id,
            "number": order.number,
            "user_id": order.user_id,
            "subtotal": str(order.subtotal),
            "total": str(order.total),
            "coupon_code": order.coupon_code,
        },
    )
    return order


def checkout_cart(*, user_id, customer: dict, delivery: dict, **order_fields) -> Order:
    """Turn the user's cart into an order and empty the cart."""

    owner = cart_owner(user_id)
    cart_lines = list_cart(owner)
    if not cart_lines:
        raise ValidationError("Cart is empty.", errors={"items": "Cart is empty."})

    items = [
        {
            "product_id": line.product_id,
            "product_name": line.product_name,
            "product_image": line.image,
            "price": line.price,
            "quantity": line.quantity,
            "selected_options": line.selected_options,
            "options_pricing": line.options_pricing,
            "attachments": line.attachments,
        }
        for line in reversed(cart_lines)
    ]
    return create_order(
        customer=customer,
        delivery=delivery,
        items=items,
        user_id=owner,
        clear_cart_for=owner,
        **order_fields,
    )


# Lifecycle

_FORWARD = {
    "confirm": ({OrderStatus.PENDING}, OrderStatus.CONFIRMED),
    "prepare": ({OrderStatus.CONFIRMED}, OrderStatus.PREPARING),
    "ship": ({OrderStatus.CONFIRMED, OrderStatus.PREPARING}, OrderStatus.SHIPPED),
    "deliver": ({OrderStatus.SHIPPED}, OrderStatus.DELIVERED),
    "cancel": (
        {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.SHIPPED},
        OrderStatus.CANCELLED,
    ),
}


def _lock(order: Order) -> Order:
    try:
        return Order.objects.select_for_update().get(pk=order.pk)
    except Order.DoesNotExist:
        raise NotFoundError("Order not found.")


def _log_status_change(order: Order, previous: str, action: str) -> None:
    logger.info(
        "order_status_changed",
        extra={
            "event": "order_status_changed",
            "order_id": order.id,
            "action": action,
            "status_from": previous,
            "status_to": order.status,
        },
    )


def _set_status(order: Order, status: str) -> list[str]:
    previous = order.status
    order.status = status
    fields = ["status", "updated_at"]
    if status == OrderStatus.DELIVERED:
        if previous == OrderStatus.DELIVERED and order.delivered_at is not None:
            return fields
        order.delivered_at = timezone.now()
        fields.append("delivered_at")
    elif order.delivered_at is not None:
        order.delivered_at = None
        fields.append("delivered_at")
    return fields


@transaction.atomic
def _advance(order: Order, action: str) -> Order:
    allowed_from, target = _FORWARD[action]
    order = _lock(order)
    if order.status not in allowed_from:
        raise InvalidTransition(
            f"Cannot {action} an order that is {order.status}.",
            errors={"status": f"{order.status} -> {target} is not allowed."},
        )
    previous = order.status
    order.save(update_fields=_set_status(order, target))
    _log_status_change(order, previous, action)
    return order


def confirm_order(order: Order) -> Order:
    return _advance(order, "confirm")


def prepare_order(order: Order) -> Order:
    return _advance(order, "prepare")


def ship_order(order: Order) -> Order:
    return _advance(order, "ship")


def deliver_order(order: Order) -> Order:
    """Mark a shipped order delivered and stamp `delivered_at`."""

    return _advance(order, "deliver")


def cancel_order(order: Order) -> Order:
    """Cancel any order that is not yet delivered or cancelled."""

    return _advance(order, "cancel")


@transaction.atomic
def set_order_status(order: Order, status: str) -> Order:
    """Administrative override: move an order to any status.

    Only the value itself is validated; the forward graph is not enforced.
    """

    if status not in OrderStatus.values:
        raise ValidationError(
            "Invalid status.", errors={"status": f"Must be one of: {', '.join(OrderStatus.values)}."}
        )
    order = _lock(order)
    previous = order.status
    order.save(update_fields=_set_status(order, status))
    _log_status_change(order, previous, "set_status")
    return order


@transaction.atomic
def set_payment_status(order: Order, payment_status: str, payment_id: Optional[str] = None) -> Order:
    if payment_status not in PaymentStatus.values:
        raise ValidationError(
            "Invalid payment status.",
            errors={"payment_status": f"Must be one of: {', '.join(PaymentStatus.values)}."},
        )
    order = _lock(order)
    previous = order.payment_status
    order.payment_status = payment_status
    fields = ["payment_status", "updated_at"]
    if payment_id is not None:
        order.payment_id = payment_id
        fields.append("payment_id")
    order.save(update_fields=fields)
    logger.info(
        "order_payment_changed",
        extra={
            "event": "order_payment_changed",
            "order_id": order.id,
            "payment_from": previous,
            "payment_to": payment_status,
        },
    )
    return order


def delete_order(*, order_id) -> None:
    """Hard-delete an order and its items."""

    try:
        deleted, _ = Order.objects.filter(pk=int(order_id)).delete()
    except (TypeError, ValueError):
        deleted = 0
    if not deleted:
        raise NotFoundError("Order not found.")
    logger.info("order.deleted", extra={"event": "order.deleted", "order_id": order_id})


# Idempotency


def _json_safe(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def with_idempotency(
    *,
    key: str,
    scope: str,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run `handler` once per (key, scope, path, method) and replay its response.

    - A repeated key with a different `request_hash` returns 409.
    - A repeated key whose first request has not finished returns 409.
    - Server errors are not stored, so the client may retry with the same key.
    """

    method = str(method).upper()
    path = str(path)
    scope = str(scope or "anon")

    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=timezone.now() + IDEMPOTENCY_TTL,
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            logger.info(
                "idempotency.replayed",
                extra={"event": "idempotency.replayed", "key": key, "scope": scope, "path": path},
            )
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress"}, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        raise

    if code >= 500:
        IdempotencyKey.objects.filter(id=idem.id).delete()
    else:
        IdempotencyKey.objects.filter(id=idem.id).update(response_json=_json_safe(body), response_code=code)
    return body, code


def compute_request_hash(data) -> Optional[str]:
    """SHA-256 of the body serialized as sorted-key JSON, or None for empty bodies."""

    if not data:
        return None
    payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
