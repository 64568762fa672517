"""DRF views for cart operations.

Carts are addressed by the `user_id` path segment; the literal guest id
addresses the shared guest cart.
"""

from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from common.exceptions import ConflictError, NotFoundError, ValidationError
from orders.serializers import CheckoutSerializer, OrderSerializer
from orders.services import checkout_cart
from orders.views import IDEMPOTENCY_HEADER, run_idempotent

from .selectors import cart_totals, list_cart
from .serializers import AddItemSerializer, CartItemSerializer, UpdateItemSerializer, UpdateOptionsSerializer
from .services import (
    add_item,
    cart_owner,
    clear_cart,
    remove_by_product,
    remove_item,
    update_item,
    update_item_options,
)

DETAIL = inline_serializer(name="CartDetailMessage", fields={"detail": rf_serializers.CharField()})


def _error_response(exc):
    if isinstance(exc, NotFoundError):
        return Response({"detail": exc.detail}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, ConflictError):
        return Response({"detail": exc.detail}, status=status.HTTP_409_CONFLICT)
    return Response(exc.as_response(), status=status.HTTP_400_BAD_REQUEST)


def _cart_payload(user_id) -> dict:
    totals = cart_totals(user_id)
    return {
        "user_id": cart_owner(user_id),
        "items": CartItemSerializer(list_cart(user_id), many=True).data,
        "item_count": totals["item_count"],
        "quantity": totals["quantity"],
        "subtotal": str(totals["subtotal"]),
        "total": str(totals["total"]),
    }


class CartView(APIView):
    """Read the cart or add a product to it."""

    def get_throttles(self):
        self.throttle_scope = "cart_write" if self.request.method == "POST" else "cart"
        return super().get_throttles()

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the cart lines newest first with live product details and totals.",
        examples=[
            OpenApiExample(
                "Cart",
                value={
                    "user_id": "guest",
                    "items": [
                        {
                            "id": 10,
                            "product_id": 5,
                            "product_name": "Mug",
                            "price": "85.50",
                            "quantity": 2,
                            "line_total": "171.00",
                            "selected_options": {"color": "red"},
                        }
                    ],
                    "item_count": 1,
                    "quantity": 2,
                    "subtotal": "171.00",
                    "total": "171.00",
                },
                response_only=True,
            )
        ],
    )
    def get(self, request, user_id: str):
        return Response(_cart_payload(user_id))

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description=(
            "Adds a product. A line with the same product and options already in the cart "
            "has its quantity increased instead."
        ),
        request=AddItemSerializer,
        responses={201: CartItemSerializer, 400: DETAIL, 404: DETAIL, 409: DETAIL},
        examples=[
            OpenApiExample(
                "Add",
                value={"product_id": 5, "quantity": 1, "selected_options": {"color": "red"}},
                request_only=True,
            )
        ],
    )
    def post(self, request, user_id: str):
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            item = add_item(user_id=user_id, **serializer.validated_data)
        except (ValidationError, NotFoundError, ConflictError) as exc:
            return _error_response(exc)
        return Response(CartItemSerializer(item).data, status=status.HTTP_201_CREATED)


class CartItemView(APIView):
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item",
        request=UpdateItemSerializer,
        responses={200: CartItemSerializer, 400: DETAIL, 404: DETAIL},
        examples=[OpenApiExample("Quantity", value={"quantity": 3}, request_only=True)],
    )
    def patch(self, request, user_id: str, item_id: int):
        serializer = UpdateItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            item = update_item(user_id=user_id, item_id=item_id, **serializer.validated_data)
        except (ValidationError, NotFoundError) as exc:
            return _error_response(exc)
        return Response(CartItemSerializer(item).data)

    @extend_schema(tags=["Cart Endpoints"], summary="Delete cart item", responses={204: None, 404: DETAIL})
    def delete(self, request, user_id: str, item_id: int):
        try:
            remove_item(user_id=user_id, item_id=item_id)
        except NotFoundError as exc:
            return _error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartProductView(APIView):
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Remove product from cart",
        description="Removes every line of the product, whatever options were chosen.",
        responses={204: None, 404: DETAIL},
    )
    def delete(self, request, user_id: str, product_id: int):
        try:
            remove_by_product(user_id=user_id, product_id=product_id)
        except NotFoundError as exc:
            return _error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartOptionsView(APIView):
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update options of a cart product",
        request=UpdateOptionsSerializer,
        responses={200: CartItemSerializer, 400: DETAIL, 404: DETAIL},
        examples=[
            OpenApiExample(
                "Options",
                value={"product_id": 5, "selected_options": {"size": "L"}, "attachments": {"text": "Happy birthday"}},
                request_only=True,
            )
        ],
    )
    def put(self, request, user_id: str):
        serializer = UpdateOptionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            item = update_item_options(user_id=user_id, **serializer.validated_data)
        except (ValidationError, NotFoundError) as exc:
            return _error_response(exc)
        return Response(CartItemSerializer(item).data)


class CartClearView(APIView):
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        description="Deletes every line. Clearing an empty cart succeeds.",
        request=None,
        responses={
            200: inline_serializer(
                name="CartCleared",
                fields={"status": rf_serializers.CharField(), "removed": rf_serializers.IntegerField()},
            )
        },
        examples=[OpenApiExample("Cleared", value={"status": "cleared", "removed": 2}, response_only=True)],
    )
    def post(self, request, user_id: str):
        removed = clear_cart(user_id=user_id)
        return Response({"status": "cleared", "removed": removed})


class CartCheckoutView(APIView):
    """Turn the cart into an order."""

    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Checkout cart",
        description=(
            "Creates a pending order from the cart lines and empties the cart. "
            "Repeating the request with the same Idempotency-Key returns the first order."
        ),
        parameters=[IDEMPOTENCY_HEADER],
        request=CheckoutSerializer,
        responses={201: OrderSerializer, 400: DETAIL},
    )
    def post(self, request, user_id: str):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        def _checkout_handler():
            try:
                order = checkout_cart(user_id=user_id, **data)
            except ValidationError as exc:
                return exc.as_response(), 400
            return OrderSerializer(order).data, 201

        return run_idempotent(request, scope=f"user:{cart_owner(user_id)}", handler=_checkout_handler)
