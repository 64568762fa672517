"""Read-only viewsets for catalog resources plus product reviews."""

from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle
from rest_framework.views import APIView

from common.exceptions import NotFoundError, ValidationError
from common.throttling import SettingsScopedRateThrottle

from . import selectors
from .models import Category, Product
from .serializers import (
    CategorySerializer,
    ProductDetailSerializer,
    ProductListSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
)
from .services import add_review, delete_review


@extend_schema_view(
    list=extend_schema(
        summary="List categories",
        description="Returns active categories ordered by display_order then name",
        tags=["Catalog Endpoints"],
    ),
    retrieve=extend_schema(
        summary="Get category by slug",
        description="Returns a single category by its slug",
        tags=["Catalog Endpoints"],
    ),
)
class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Category.objects.filter(is_active=True).order_by("display_order", "name")
    serializer_class = CategorySerializer
    lookup_field = "slug"
    throttle_scope = "catalog"
    throttle_classes = [SettingsScopedRateThrottle, UserRateThrottle, AnonRateThrottle]


class ProductFilterSet(filters.FilterSet):
    category = filters.CharFilter(field_name="category__slug")
    featured = filters.BooleanFilter(field_name="featured")

    class Meta:
        model = Product
        fields = ["category", "featured"]


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description=(
            "Returns active products. Supports filtering by `category` slug and `featured`, "
            "ordering by `name`, `price` or `created_at`, and search via `search`."
        ),
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category slug"),
            OpenApiParameter("featured", OpenApiTypes.BOOL, location="query", description="Only featured products"),
            OpenApiParameter(
                "ordering", OpenApiTypes.STR, location="query", description="Order by `name`, `price`, `created_at`"
            ),
            OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Search products by text"),
        ],
    ),
    retrieve=extend_schema(
        summary="Get product",
        description="Returns an active product with its category and options",
        tags=["Catalog Endpoints"],
    ),
)
class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    filterset_class = ProductFilterSet
    throttle_scope = "catalog"
    throttle_classes = [SettingsScopedRateThrottle, UserRateThrottle, AnonRateThrottle]
    filter_backends = [filters.DjangoFilterBackend, drf_filters.OrderingFilter, drf_filters.SearchFilter]
    ordering_fields = ["name", "price", "created_at"]
    search_fields = ["name", "description", "category__name"]

    def get_queryset(self):
        return selectors.list_products()

    def get_serializer_class(self):
        return ProductDetailSerializer if self.action == "retrieve" else ProductListSerializer

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="List or add product reviews",
        description="GET returns the product's reviews, newest first. POST adds a review.",
        request=ReviewCreateSerializer,
        responses={200: ReviewSerializer(many=True), 201: ReviewSerializer},
        examples=[
            OpenApiExample(
                "New review",
                value={"customer_id": "7", "customer_name": "Sara", "comment": "Great quality"},
                request_only=True,
            )
        ],
    )
    @action(detail=True, methods=["get", "post"], url_path="reviews")
    def reviews(self, request, pk=None):
        if request.method == "GET":
            if selectors.get_product(pk) is None:
                return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
            qs = selectors.list_reviews(product_id=int(pk))
            return Response(ReviewSerializer(qs, many=True).data)

        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            review = add_review(product_id=pk, **serializer.validated_data)
        except NotFoundError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_404_NOT_FOUND)
        except ValidationError as exc:
            return Response(exc.as_response(), status=status.HTTP_400_BAD_REQUEST)
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


class ReviewListView(generics.ListAPIView):
    """List every review across products (moderation view)."""

    serializer_class = ReviewSerializer
    throttle_scope = "catalog"

    def get_queryset(self):
        return selectors.list_reviews()

    @extend_schema(tags=["Catalog Endpoints"], summary="List all reviews")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class ReviewDeleteView(APIView):
    throttle_scope = "catalog"

    @extend_schema(tags=["Catalog Endpoints"], summary="Delete review", responses={204: None})
    def delete(self, request, review_id: int):
        try:
            delete_review(review_id=review_id)
        except NotFoundError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
