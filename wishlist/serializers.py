from rest_framework import serializers

from catalog.serializers import ProductSnapshotSerializer

from .models import WishlistItem


class WishlistItemSerializer(serializers.ModelSerializer):
    product = serializers.SerializerMethodField()

    class Meta:
        model = WishlistItem
        fields = ["id", "user_id", "product_id", "product_name", "price", "image", "product", "created_at"]
        read_only_fields = fields

    def get_product(self, obj):
        snapshot = getattr(obj, "product", None)
        if snapshot is None:
            return None
        return ProductSnapshotSerializer(snapshot).data


class AddToWishlistSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
