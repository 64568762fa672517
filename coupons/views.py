"""Coupon administration and validation endpoints."""

from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import permissions, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from common.exceptions import CouponRejected, NotFoundError

from .selectors import list_coupons
from .serializers import CouponSerializer, CouponValidateSerializer, CouponValidationResultSerializer
from .services import validate_coupon_code


@extend_schema_view(
    list=extend_schema(tags=["Coupon Endpoints"], summary="List coupons"),
    retrieve=extend_schema(tags=["Coupon Endpoints"], summary="Get coupon"),
    create=extend_schema(tags=["Coupon Endpoints"], summary="Create coupon"),
    update=extend_schema(tags=["Coupon Endpoints"], summary="Update coupon"),
    partial_update=extend_schema(tags=["Coupon Endpoints"], summary="Partial update coupon"),
    destroy=extend_schema(tags=["Coupon Endpoints"], summary="Delete coupon"),
)
class CouponViewSet(viewsets.ModelViewSet):
    permission_classes = [permissions.IsAdminUser]
    serializer_class = CouponSerializer
    throttle_scope = "coupons"
    filterset_fields = ["is_active", "discount_type"]
    search_fields = ["code", "name"]
    ordering_fields = ["created_at", "code", "used_count"]

    def get_queryset(self):
        return list_coupons()


class CouponValidateView(APIView):
    throttle_scope = "coupons"

    @extend_schema(
        tags=["Coupon Endpoints"],
        summary="Validate a coupon code",
        description=(
            "Checks a code against an order amount without redeeming it. "
            "404 when the code is unknown, 400 with the reason when the coupon does not apply."
        ),
        request=CouponValidateSerializer,
        responses={200: CouponValidationResultSerializer, 400: CouponValidationResultSerializer},
        examples=[
            OpenApiExample("Validate", value={"code": "SAVE20", "total_amount": "291.00"}, request_only=True),
            OpenApiExample(
                "Rejected",
                value={"valid": False, "discount": "0.00", "reason": "coupon expired", "coupon": None},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request):
        serializer = CouponValidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            coupon, evaluation = validate_coupon_code(
                code=serializer.validated_data["code"],
                order_amount=serializer.validated_data["total_amount"],
            )
        except NotFoundError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_404_NOT_FOUND)
        except CouponRejected as exc:
            body = {"valid": False, "discount": "0.00", "reason": exc.reason, "coupon": None, "detail": exc.reason}
            return Response(body, status=status.HTTP_400_BAD_REQUEST)
        body = {
            "valid": True,
            "discount": str(evaluation.discount),
            "reason": "",
            "coupon": CouponSerializer(coupon).data,
        }
        return Response(body)
