"""Scoped throttle shared by the API apps.

DRF's ScopedRateThrottle caches THROTTLE_RATES at import time; this variant
looks the rate up from Django settings on every request so that
override_settings in tests takes effect.
"""

from django.conf import settings
from rest_framework.throttling import ScopedRateThrottle


class SettingsScopedRateThrottle(ScopedRateThrottle):
    def get_rate(self):
        rates = getattr(settings, "REST_FRAMEWORK", {}).get("DEFAULT_THROTTLE_RATES", {})
        return rates.get(self.scope)
