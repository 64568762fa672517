"""Email utilities for the orders app.

Uses Django's email backend, with links composed from FRONTEND_URL.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger("storefront.orders")


def send_order_placed_email(order) -> None:
    """Send the order confirmation to the customer.

    Delivery is best effort: failures are logged and never reach the caller.
    """

    if not order.customer_email:
        return

    frontend = getattr(settings, "FRONTEND_URL", "")
    lines = [f"Hi {order.customer_name},", "", f"Thank you for your order {order.number}.", ""]
    for item in order.items.all():
        lines.append(f"- {item.product_name} x{item.quantity}: {item.total_price}")
    lines.append("")
    lines.append(f"Subtotal: {order.subtotal}")
    if order.delivery_fee:
        lines.append(f"Delivery: {order.delivery_fee}")
    if order.discount:
        lines.append(f"Discount: -{order.discount}")
    if order.coupon_code:
        lines.append(f"Coupon {order.coupon_code}: -{order.coupon_discount}")
    lines.append(f"Total: {order.total}")
    if frontend:
        lines.extend(["", f"Track your order: {frontend.rstrip('/')}/orders/{order.id}"])

    sent = send_mail(
        f"Order {order.number} received",
        "\n".join(lines) + "\n",
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [order.customer_email],
        fail_silently=True,
    )
    if not sent:
        logger.warning(
            "order.email_failed",
            extra={"event": "order.email_failed", "order_id": order.id},
        )
