"""Email notifications for customer accounts."""

import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger("storefront.customers")


def send_welcome_email(customer) -> None:
    """Greet a newly registered customer.

    Delivery failures are logged and never propagate to the caller.
    """

    if not customer.email:
        return

    frontend = getattr(settings, "FRONTEND_URL", "")
    body = (
        f"Hi {customer.name},\n\n"
        "Welcome! Your account is ready and you can start shopping right away.\n"
    )
    if frontend:
        body += f"\nVisit us: {frontend.rstrip('/')}\n"

    sent = send_mail(
        "Welcome to the store",
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [customer.email],
        fail_silently=True,
    )
    if not sent:
        logger.warning(
            "customer.welcome_email_failed",
            extra={"event": "customer.welcome_email_failed", "customer_id": customer.id},
        )
