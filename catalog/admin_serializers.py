"""Staff serializers for catalog write endpoints."""

from rest_framework import serializers

from .models import Category, Product


class CategoryAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "image", "is_active", "display_order"]


class ProductAdminSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all(), required=False, allow_null=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "original_price",
            "stock",
            "category",
            "main_image",
            "detailed_images",
            "specifications",
            "dynamic_options",
            "tags",
            "is_active",
            "featured",
        ]

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value
