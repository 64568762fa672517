"""URL routes for the catalog app."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import CategoryViewSet, ProductViewSet, ReviewDeleteView, ReviewListView

router = SimpleRouter()
router.register(r"categories", CategoryViewSet, basename="category")
router.register(r"products", ProductViewSet, basename="product")

urlpatterns = [
    path("", include(router.urls)),
]

# Mounted separately under /api/v1/reviews/
review_urlpatterns = [
    path("", ReviewListView.as_view(), name="review-list"),
    path("<int:review_id>/", ReviewDeleteView.as_view(), name="review-delete"),
]
