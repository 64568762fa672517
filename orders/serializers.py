"""DRF serializers for orders.

Output serializers expose the persisted, denormalized totals. Input
serializers only check payload shape; pricing and field rules live in
`orders.services.create_order`.
"""

from rest_framework import serializers

from common.choices import OrderStatus, PaymentMethod, PaymentStatus

from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            "id",
            "position",
            "product_id",
            "product_name",
            "product_image",
            "price",
            "quantity",
            "total_price",
            "selected_options",
            "options_pricing",
            "attachments",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "user_id",
            "customer_name",
            "customer_email",
            "customer_phone",
            "address",
            "city",
            "items",
            "subtotal",
            "delivery_fee",
            "discount",
            "coupon_code",
            "coupon_discount",
            "total",
            "status",
            "payment_method",
            "payment_status",
            "payment_id",
            "notes",
            "order_date",
            "expected_delivery",
            "delivered_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CustomerInputSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, required=False, default="")
    email = serializers.CharField(allow_blank=True, required=False, default="")
    phone = serializers.CharField(allow_blank=True, required=False, default="")


class DeliveryInputSerializer(serializers.Serializer):
    address = serializers.CharField(allow_blank=True, required=False, default="")
    city = serializers.CharField(allow_blank=True, required=False, default="")
    notes = serializers.CharField(allow_blank=True, required=False, default="")


class CheckoutSerializer(serializers.Serializer):
    """Common checkout payload used by cart checkout and direct order creation."""

    customer = CustomerInputSerializer()
    delivery = DeliveryInputSerializer()
    coupon_code = serializers.CharField(allow_blank=True, required=False, default="")
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False, default=PaymentMethod.COD)
    payment_status = serializers.ChoiceField(
        choices=PaymentStatus.choices, required=False, default=PaymentStatus.PENDING
    )
    payment_id = serializers.CharField(allow_blank=True, required=False, default="")
    delivery_fee = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    notes = serializers.CharField(allow_blank=True, required=False, default="")
    expected_delivery = serializers.DateField(required=False, allow_null=True, default=None)


class OrderCreateSerializer(CheckoutSerializer):
    # Item rules (quantity >= 1, price >= 0) are enforced by the service with per-item messages
    items = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    user_id = serializers.CharField(allow_blank=True, required=False, default="")


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices)
    payment_id = serializers.CharField(allow_blank=True, required=False)
