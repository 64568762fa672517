"""Serializers for cart reads and mutation payloads."""

from rest_framework import serializers

from catalog.serializers import ProductSnapshotSerializer

from .models import MAX_QUANTITY, CartItem


class AttachmentsSerializer(serializers.Serializer):
    images = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    text = serializers.CharField(required=False, allow_blank=True, default="")


class CartItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    product = serializers.SerializerMethodField()

    class Meta:
        model = CartItem
        fields = [
            "id",
            "user_id",
            "product_id",
            "product_name",
            "price",
            "quantity",
            "line_total",
            "image",
            "selected_options",
            "options_pricing",
            "attachments",
            "product",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_product(self, obj):
        snapshot = getattr(obj, "product", None)
        if snapshot is None:
            return None
        return ProductSnapshotSerializer(snapshot).data


class AddItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY, default=1)
    selected_options = serializers.DictField(required=False, default=dict)
    options_pricing = serializers.DictField(required=False, default=dict)
    attachments = AttachmentsSerializer(required=False)


class UpdateItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY, required=False)
    selected_options = serializers.DictField(required=False)
    options_pricing = serializers.DictField(required=False)
    attachments = AttachmentsSerializer(required=False)


class UpdateOptionsSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    selected_options = serializers.DictField(required=False)
    attachments = AttachmentsSerializer(required=False)
