from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import CouponValidateView, CouponViewSet

router = SimpleRouter()
router.register(r"", CouponViewSet, basename="coupon")

urlpatterns = [
    path("validate/", CouponValidateView.as_view(), name="coupon-validate"),
    path("", include(router.urls)),
]
