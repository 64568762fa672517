"""Orders API endpoints.

Mutations that create orders or move them along the lifecycle accept an
optional `Idempotency-Key` header; repeating a request with the same key
replays the stored response instead of running it again.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from common.exceptions import NotFoundError, ValidationError

from . import selectors, services
from .serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    PaymentStatusSerializer,
)

IDEMPOTENCY_HEADER = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Makes the request idempotent within scope+path+method",
    type=str,
)

NOT_FOUND = {"detail": "Order not found."}


def run_idempotent(request, *, scope: str, handler):
    """Run a `(body, code)` handler, through the idempotency store when a key is sent."""

    idem_key = request.headers.get("Idempotency-Key")
    if idem_key:
        body, code = services.with_idempotency(
            key=idem_key,
            scope=scope,
            path=str(request.path),
            method=str(request.method),
            request_hash=services.compute_request_hash(getattr(request, "data", None)),
            handler=handler,
        )
        return Response(body, status=code)
    body, code = handler()
    return Response(body, status=code)


class OrderListCreateView(generics.ListAPIView):
    """List orders with filters, or place a new order from explicit items."""

    serializer_class = OrderSerializer
    filter_backends = []

    def get_permissions(self):
        # Placing an order is public, listing is staff only
        if self.request.method == "POST":
            return [permissions.AllowAny()]
        return [permissions.IsAdminUser()]

    def get_throttles(self):
        self.throttle_scope = "orders_write" if self.request.method == "POST" else "orders"
        return super().get_throttles()

    def get_queryset(self):
        params = self.request.query_params
        return selectors.list_orders(
            status=params.get("status"),
            email=params.get("email"),
            number=params.get("number"),
            user_id=params.get("user_id"),
        )

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        description="Newest first. Filter by `status`, customer `email`, order `number` or cart owner `user_id`.",
        parameters=[
            OpenApiParameter(name="status", description="Order status filter", required=False, type=str),
            OpenApiParameter(name="email", description="Customer email (case-insensitive)", required=False, type=str),
            OpenApiParameter(name="number", description="Order number exact match", required=False, type=str),
            OpenApiParameter(name="user_id", description="Cart owner id", required=False, type=str),
            OpenApiParameter(name="page", description="Page number", required=False, type=int),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Orders"],
        summary="Create order",
        description=(
            "Creates a pending order. Item totals, subtotal and total are computed server-side; "
            "an unusable coupon is dropped without failing the order."
        ),
        parameters=[IDEMPOTENCY_HEADER],
        request=OrderCreateSerializer,
        responses={201: OrderSerializer},
        examples=[
            OpenApiExample(
                "Create",
                value={
                    "customer": {"name": "Sara", "email": "sara@example.com", "phone": "0100"},
                    "delivery": {"address": "12 Nile St", "city": "Cairo"},
                    "items": [
                        {"product_id": 1, "product_name": "Mug", "price": "85.50", "quantity": 2},
                        {"product_id": 2, "product_name": "Frame", "price": "120.00", "quantity": 1},
                    ],
                    "delivery_fee": "25.00",
                    "coupon_code": "SAVE20",
                },
                request_only=True,
            )
        ],
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        def _handler():
            try:
                order = services.create_order(**data)
            except ValidationError as exc:
                return exc.as_response(), 400
            return OrderSerializer(order).data, 201

        scope = f"user:{data['user_id']}" if data.get("user_id") else "anon"
        return run_idempotent(request, scope=scope, handler=_handler)


class OrderDetailView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "orders"

    @extend_schema(tags=["Orders"], summary="Get order", responses={200: OrderSerializer})
    def get(self, request, order_id: int):
        order = selectors.get_order(order_id)
        if order is None:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    @extend_schema(tags=["Orders"], summary="Delete order", responses={204: None})
    def delete(self, request, order_id: int):
        try:
            services.delete_order(order_id=order_id)
        except NotFoundError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderStatusView(APIView):
    """Administrative status override; any status may be set."""

    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Set order status",
        request=OrderStatusSerializer,
        responses={200: OrderSerializer},
        examples=[OpenApiExample("Ship", value={"status": "shipped"}, request_only=True)],
    )
    def put(self, request, order_id: int):
        order = selectors.get_order(order_id)
        if order is None:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = services.set_order_status(order, serializer.validated_data["status"])
        except ValidationError as exc:
            return Response(exc.as_response(), status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(selectors.get_order(order.id)).data)


class OrderTransitionView(APIView):
    """Named lifecycle step: confirm, prepare, ship, deliver or cancel."""

    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "orders_write"
    step = None

    STEPS = {
        "confirm": services.confirm_order,
        "prepare": services.prepare_order,
        "ship": services.ship_order,
        "deliver": services.deliver_order,
        "cancel": services.cancel_order,
    }

    @extend_schema(
        tags=["Orders"],
        summary="Advance order status",
        description=(
            "Applies a named lifecycle step. 400 when the order's current status does not allow it; "
            "delivered and cancelled orders are final."
        ),
        parameters=[IDEMPOTENCY_HEADER],
        request=None,
        responses={200: OrderSerializer},
    )
    def post(self, request, order_id: int):
        order = selectors.get_order(order_id)
        if order is None:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        operation = self.STEPS[self.step]

        def _handler():
            try:
                updated = operation(order)
            except ValidationError as exc:
                return exc.as_response(), 400
            return OrderSerializer(selectors.get_order(updated.id)).data, 200

        return run_idempotent(request, scope=f"order:{order.id}", handler=_handler)


class OrderPaymentView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Update payment status",
        request=PaymentStatusSerializer,
        responses={200: OrderSerializer},
        examples=[OpenApiExample("Paid", value={"payment_status": "paid", "payment_id": "tx_123"}, request_only=True)],
    )
    def put(self, request, order_id: int):
        order = selectors.get_order(order_id)
        if order is None:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = services.set_payment_status(
                order,
                serializer.validated_data["payment_status"],
                serializer.validated_data.get("payment_id"),
            )
        except ValidationError as exc:
            return Response(exc.as_response(), status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(selectors.get_order(order.id)).data)


class OrderStatsView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "orders"

    @extend_schema(tags=["Orders"], summary="Order statistics", responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        stats = selectors.order_stats()
        stats["revenue"] = str(stats["revenue"])
        stats["paid_revenue"] = str(stats["paid_revenue"])
        return Response(stats)
