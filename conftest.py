import pytest
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def _clear_cache():
    # Throttle history lives in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def staff_client(db, django_user_model):
    staff = django_user_model.objects.create_user(username="staff", password="pass1234", is_staff=True)
    client = APIClient()
    client.force_authenticate(user=staff)
    return client
