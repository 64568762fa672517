"""Health endpoint reporting database reachability and entity counts."""

import logging

from django.db import DatabaseError
from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers, status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from cart.models import CartItem
from catalog.models import Category, Product
from coupons.models import Coupon
from customer.models import Customer
from orders.models import Order
from wishlist.models import WishlistItem

logger = logging.getLogger("storefront")


@extend_schema(
    tags=["Health Endpoint"],
    summary="Health check",
    responses={
        200: inline_serializer(
            name="HealthResponse",
            fields={"status": serializers.CharField(), "counts": serializers.DictField(child=serializers.IntegerField())},
        )
    },
)
@api_view(["GET"])
def health(request):
    try:
        counts = {
            "categories": Category.objects.count(),
            "products": Product.objects.count(),
            "orders": Order.objects.count(),
            "customers": Customer.objects.count(),
            "coupons": Coupon.objects.count(),
            "cart_items": CartItem.objects.count(),
            "wishlist_items": WishlistItem.objects.count(),
        }
    except DatabaseError:
        logger.exception("health.database_unavailable", extra={"event": "health.database_unavailable"})
        return Response({"status": "error", "detail": "Database unavailable."}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({"status": "ok", "counts": counts})
