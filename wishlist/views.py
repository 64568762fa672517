"""Wishlist endpoints scoped by the `user_id` path segment."""

from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from common.exceptions import ConflictError, NotFoundError

from .selectors import is_in_wishlist, list_wishlist
from .serializers import AddToWishlistSerializer, WishlistItemSerializer
from .services import add_to_wishlist, remove_from_wishlist


class WishlistView(APIView):
    throttle_scope = "wishlist"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Get wishlist",
        description="Returns the user's saved products newest first, each with live product details.",
        responses={200: WishlistItemSerializer(many=True)},
    )
    def get(self, request, user_id: str):
        return Response(WishlistItemSerializer(list_wishlist(user_id), many=True).data)

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Add product to wishlist",
        request=AddToWishlistSerializer,
        responses={
            201: WishlistItemSerializer,
            404: inline_serializer(name="WishlistNotFound", fields={"detail": rf_serializers.CharField()}),
            409: inline_serializer(name="WishlistConflict", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[OpenApiExample("Add", value={"product_id": 5}, request_only=True)],
    )
    def post(self, request, user_id: str):
        serializer = AddToWishlistSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            item = add_to_wishlist(user_id=user_id, **serializer.validated_data)
        except NotFoundError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_404_NOT_FOUND)
        except ConflictError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_409_CONFLICT)
        return Response(WishlistItemSerializer(item).data, status=status.HTTP_201_CREATED)


class WishlistProductView(APIView):
    throttle_scope = "wishlist"

    @extend_schema(tags=["Wishlist Endpoints"], summary="Remove product from wishlist", responses={204: None})
    def delete(self, request, user_id: str, product_id: int):
        try:
            remove_from_wishlist(user_id=user_id, product_id=product_id)
        except NotFoundError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class WishlistCheckView(APIView):
    throttle_scope = "wishlist"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Check whether a product is wishlisted",
        responses={200: inline_serializer(name="WishlistCheck", fields={"in_wishlist": rf_serializers.BooleanField()})},
    )
    def get(self, request, user_id: str, product_id: int):
        return Response({"in_wishlist": is_in_wishlist(user_id, product_id)})
