"""Customer account services.

Registration, authentication and password changes, plus the order
statistics bookkeeping called by the orders app once an order is placed.
"""

import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from cart.services import clear_cart
from common.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from wishlist.services import clear_wishlist

from .emails import send_welcome_email
from .models import Customer

logger = logging.getLogger("storefront.customers")

MIN_PASSWORD_LENGTH = 6


def _normalize_email(email) -> str:
    return str(email or "").strip().lower()


@transaction.atomic
def register_customer(*, email: str, password: str, name: str, phone: str = "", city: str = "") -> Customer:
    """Create a customer account and queue the welcome email."""

    email = _normalize_email(email)
    name = (name or "").strip()
    errors = {}
    if not email:
        errors["email"] = "This field is required."
    if not name:
        errors["name"] = "This field is required."
    if not password:
        errors["password"] = "This field is required."
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    if errors:
        raise ValidationError("Invalid registration details.", errors=errors)

    if Customer.objects.filter(email=email).exists():
        raise ConflictError("An account with this email already exists.")

    customer = Customer(email=email, name=name, phone=(phone or "").strip(), city=(city or "").strip())
    customer.set_password(password)
    try:
        # Savepoint so a duplicate insert does not poison the outer transaction
        with transaction.atomic():
            customer.save()
    except IntegrityError:
        raise ConflictError("An account with this email already exists.")

    transaction.on_commit(lambda: send_welcome_email(customer))
    logger.info("customer.registered", extra={"event": "customer.registered", "customer_id": customer.id})
    return customer


def authenticate_customer(*, email: str, password: str) -> Customer:
    """Return the active customer matching the credentials.

    Unknown emails and wrong passwords raise the same error so the response
    does not reveal which accounts exist.
    """

    customer = Customer.objects.filter(email=_normalize_email(email)).first()
    if customer is None or not customer.check_password(password or ""):
        logger.info("customer.login_failed", extra={"event": "customer.login_failed"})
        raise AuthenticationError()
    if not customer.is_active:
        raise AuthenticationError("Account is inactive.")
    logger.info("customer.logged_in", extra={"event": "customer.logged_in", "customer_id": customer.id})
    return customer


def change_password(*, email: str, current_password: str, new_password: str) -> Customer:
    customer = authenticate_customer(email=email, password=current_password)
    if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "Invalid password.",
            errors={"new_password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters."},
        )
    customer.set_password(new_password)
    customer.save(update_fields=["password", "updated_at"])
    logger.info("customer.password_changed", extra={"event": "customer.password_changed", "customer_id": customer.id})
    return customer


@transaction.atomic
def delete_customer(*, customer_id: int) -> None:
    """Delete a customer together with their cart and wishlist lines."""

    customer = Customer.objects.filter(id=customer_id).first()
    if customer is None:
        raise NotFoundError("Customer not found.")

    user_id = str(customer.id)
    removed_cart = clear_cart(user_id=user_id)
    removed_wishlist = clear_wishlist(user_id=user_id)
    customer.delete()
    logger.info(
        "customer.deleted",
        extra={
            "event": "customer.deleted",
            "customer_id": customer_id,
            "cart_items_removed": removed_cart,
            "wishlist_items_removed": removed_wishlist,
        },
    )


def record_order(*, email: str, amount: Decimal, placed_at=None) -> int:
    """Bump order statistics for the customer registered under `email`.

    Returns the number of customers updated (0 for guest checkouts).
    """

    updated = Customer.objects.filter(email=_normalize_email(email)).update(
        total_orders=F("total_orders") + 1,
        total_spent=F("total_spent") + amount,
        last_order_date=placed_at or timezone.now(),
    )
    return updated
