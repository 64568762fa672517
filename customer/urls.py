from django.urls import path

from .views import (
    ChangePasswordView,
    CustomerDetailView,
    CustomerListView,
    CustomerStatsView,
    LoginView,
    RegisterView,
)

urlpatterns = [
    path("", CustomerListView.as_view(), name="customer-list"),
    path("stats/", CustomerStatsView.as_view(), name="customer-stats"),
    path("<int:customer_id>/", CustomerDetailView.as_view(), name="customer-detail"),
    path("auth/register/", RegisterView.as_view(), name="customer-register"),
    path("auth/login/", LoginView.as_view(), name="customer-login"),
    path("auth/change-password/", ChangePasswordView.as_view(), name="customer-change-password"),
]
