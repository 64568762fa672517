"""Serializers for the catalog app."""

from rest_framework import serializers

from .models import Category, Product, Review


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "image", "is_active", "display_order"]


class ProductListSerializer(serializers.ModelSerializer):
    category = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "original_price",
            "main_image",
            "stock",
            "featured",
            "category",
        ]

    def get_category(self, obj):
        if obj.category is None:
            return None
        return {"id": obj.category_id, "name": obj.category.name, "slug": obj.category.slug}


class ProductDetailSerializer(serializers.ModelSerializer):
    category = CategorySerializer(read_only=True)
    discount_percentage = serializers.IntegerField(read_only=True)
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "original_price",
            "discount_percentage",
            "stock",
            "in_stock",
            "category",
            "main_image",
            "detailed_images",
            "specifications",
            "dynamic_options",
            "tags",
            "featured",
        ]


class ReviewSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Review
        fields = ["id", "product_id", "customer_id", "customer_name", "comment", "created_at"]
        read_only_fields = ["id", "product_id", "created_at"]


class ReviewCreateSerializer(serializers.Serializer):
    customer_id = serializers.CharField(max_length=64)
    customer_name = serializers.CharField(max_length=120)
    comment = serializers.CharField()


class ProductSnapshotSerializer(serializers.Serializer):
    """Live product fields rendered next to cart and wishlist lines."""

    id = serializers.IntegerField()
    name = serializers.CharField()
    description = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    original_price = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    main_image = serializers.CharField()
    detailed_images = serializers.ListField()
    stock = serializers.IntegerField()
    dynamic_options = serializers.JSONField()
    specifications = serializers.JSONField()
