"""Customer account and administration endpoints.

Views stay thin: they validate payload shape with serializers and delegate
business rules to `customer.services`.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import generics, permissions, serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from common.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError

from . import selectors, services
from .serializers import (
    ChangePasswordSerializer,
    CustomerListSerializer,
    CustomerSerializer,
    LoginSerializer,
    RegisterSerializer,
)


class RegisterView(APIView):
    throttle_scope = "auth"

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="Register a customer account",
        request=RegisterSerializer,
        responses={201: CustomerSerializer},
        examples=[
            OpenApiExample(
                "Register",
                value={"email": "sara@example.com", "password": "secret1", "name": "Sara", "phone": "0100"},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            customer = services.register_customer(**serializer.validated_data)
        except ValidationError as exc:
            return Response(exc.as_response(), status=status.HTTP_400_BAD_REQUEST)
        except ConflictError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_409_CONFLICT)
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    throttle_scope = "auth"

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="Log in with email and password",
        request=LoginSerializer,
        responses={200: CustomerSerializer},
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            customer = services.authenticate_customer(**serializer.validated_data)
        except AuthenticationError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_401_UNAUTHORIZED)
        return Response(CustomerSerializer(customer).data)


class ChangePasswordView(APIView):
    throttle_scope = "auth"

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="Change password",
        request=ChangePasswordSerializer,
        responses={200: inline_serializer(name="ChangePasswordResponse", fields={"detail": serializers.CharField()})},
    )
    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            services.change_password(**serializer.validated_data)
        except AuthenticationError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_401_UNAUTHORIZED)
        except ValidationError as exc:
            return Response(exc.as_response(), status=status.HTTP_400_BAD_REQUEST)
        return Response({"detail": "Password updated."})


class CustomerListView(generics.ListAPIView):
    permission_classes = [permissions.IsAdminUser]
    serializer_class = CustomerListSerializer
    throttle_scope = "customers"
    filter_backends = []

    def get_queryset(self):
        return selectors.list_customers(
            search=self.request.query_params.get("search"),
            status=self.request.query_params.get("status"),
        )

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="List customers",
        description="Customers newest first with their cart and wishlist item counts.",
        parameters=[
            OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Match name, email or phone"),
            OpenApiParameter("status", OpenApiTypes.STR, location="query", description="active or inactive"),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class CustomerStatsView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "customers"

    @extend_schema(tags=["Customer Endpoints"], summary="Customer statistics", responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        stats = selectors.customer_stats()
        stats["total_spent"] = str(stats["total_spent"])
        return Response(stats)


class CustomerDetailView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "customers"

    @extend_schema(tags=["Customer Endpoints"], summary="Get customer", responses={200: CustomerSerializer})
    def get(self, request, customer_id: int):
        customer = selectors.get_customer(customer_id)
        if customer is None:
            return Response({"detail": "Customer not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(CustomerSerializer(customer).data)

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="Delete customer",
        description="Deletes the account along with its cart and wishlist lines.",
        responses={204: None},
    )
    def delete(self, request, customer_id: int):
        try:
            services.delete_customer(customer_id=customer_id)
        except NotFoundError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
