"""Staff router for catalog writes."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .admin_views import CategoryAdminViewSet, ProductAdminViewSet

router = SimpleRouter()
router.register(r"categories", CategoryAdminViewSet, basename="admin-category")
router.register(r"products", ProductAdminViewSet, basename="admin-product")

urlpatterns = [path("", include(router.urls))]
