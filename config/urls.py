"""Root URL configuration for the storefront API."""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from catalog.urls import review_urlpatterns

from .health import health

admin.site.site_header = "Storefront Admin"
admin.site.index_title = "Admin"

urlpatterns = [
    path("admin/", admin.site.urls),
    # API schema and Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="api-schema"), name="api-docs"),
    # Healthcheck
    path("health/", health, name="health"),
    path("api/v1/health/", health, name="health-v1"),
    # Versioned v1 routes
    path("api/v1/catalog/", include("catalog.urls")),
    path("api/v1/reviews/", include(review_urlpatterns)),
    path("api/v1/admin/catalog/", include("catalog.admin_urls")),
    path("api/v1/customers/", include("customer.urls")),
    path("api/v1/users/<str:user_id>/cart/", include("cart.urls")),
    path("api/v1/users/<str:user_id>/wishlist/", include("wishlist.urls")),
    path("api/v1/coupons/", include("coupons.urls")),
    path("api/v1/orders/", include("orders.urls")),
]
