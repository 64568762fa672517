"""URL routes for the cart app, mounted under users/<user_id>/cart/."""

from django.urls import path

from .views import CartCheckoutView, CartClearView, CartItemView, CartOptionsView, CartProductView, CartView

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("items/<int:item_id>/", CartItemView.as_view(), name="cart-item"),
    path("products/<int:product_id>/", CartProductView.as_view(), name="cart-product"),
    path("options/", CartOptionsView.as_view(), name="cart-options"),
    path("clear/", CartClearView.as_view(), name="cart-clear"),
    path("checkout/", CartCheckoutView.as_view(), name="cart-checkout"),
]
