from django.urls import path

from .views import WishlistCheckView, WishlistProductView, WishlistView

urlpatterns = [
    path("", WishlistView.as_view(), name="wishlist"),
    path("products/<int:product_id>/", WishlistProductView.as_view(), name="wishlist-product"),
    path("check/<int:product_id>/", WishlistCheckView.as_view(), name="wishlist-check"),
]
