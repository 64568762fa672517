"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import (
    OrderDetailView,
    OrderListCreateView,
    OrderPaymentView,
    OrderStatsView,
    OrderStatusView,
    OrderTransitionView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="order-list"),
    path("stats/", OrderStatsView.as_view(), name="order-stats"),
    path("<int:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<int:order_id>/status/", OrderStatusView.as_view(), name="order-status"),
    path("<int:order_id>/payment/", OrderPaymentView.as_view(), name="order-payment"),
    path("<int:order_id>/confirm/", OrderTransitionView.as_view(step="confirm"), name="order-confirm"),
    path("<int:order_id>/prepare/", OrderTransitionView.as_view(step="prepare"), name="order-prepare"),
    path("<int:order_id>/ship/", OrderTransitionView.as_view(step="ship"), name="order-ship"),
    path("<int:order_id>/deliver/", OrderTransitionView.as_view(step="deliver"), name="order-deliver"),
    path("<int:order_id>/cancel/", OrderTransitionView.as_view(step="cancel"), name="order-cancel"),
]
