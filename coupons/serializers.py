from rest_framework import serializers

from common.choices import DiscountType

from .models import Coupon, normalize_code


class CouponSerializer(serializers.ModelSerializer):
    code = serializers.CharField(max_length=40)

    class Meta:
        model = Coupon
        fields = [
            "id",
            "name",
            "code",
            "description",
            "discount_type",
            "discount_value",
            "max_discount",
            "minimum_amount",
            "usage_limit",
            "used_count",
            "expiry_date",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "used_count", "created_at", "updated_at"]

    def validate_code(self, value):
        code = normalize_code(value)
        if not code:
            raise serializers.ValidationError("This field may not be blank.")
        qs = Coupon.objects.filter(code=code)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A coupon with this code already exists.")
        return code

    def validate_discount_value(self, value):
        if value < 0:
            raise serializers.ValidationError("Discount value cannot be negative.")
        return value

    def validate(self, attrs):
        discount_type = attrs.get("discount_type", getattr(self.instance, "discount_type", DiscountType.PERCENTAGE))
        value = attrs.get("discount_value", getattr(self.instance, "discount_value", None))
        if discount_type == DiscountType.PERCENTAGE and value is not None and value > 100:
            raise serializers.ValidationError({"discount_value": "Percentage discounts cannot exceed 100."})
        usage_limit = attrs.get("usage_limit", getattr(self.instance, "usage_limit", None))
        if usage_limit is not None and self.instance is not None and usage_limit < self.instance.used_count:
            raise serializers.ValidationError({"usage_limit": "Usage limit cannot be below the current use count."})
        return attrs


class CouponValidateSerializer(serializers.Serializer):
    code = serializers.CharField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class CouponValidationResultSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    discount = serializers.DecimalField(max_digits=12, decimal_places=2)
    reason = serializers.CharField(allow_blank=True)
    coupon = CouponSerializer(allow_null=True)
