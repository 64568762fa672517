import pytest
from rest_framework.test import APIClient

from customer.models import Customer
from customer.tests.factories import CustomerFactory

REGISTER_URL = "/api/v1/customers/auth/register/"
LOGIN_URL = "/api/v1/customers/auth/login/"
CHANGE_PASSWORD_URL = "/api/v1/customers/auth/change-password/"


@pytest.mark.django_db
def test_register_creates_customer_and_sends_welcome_email(django_capture_on_commit_callbacks, mailoutbox):
    client = APIClient()
    with django_capture_on_commit_callbacks(execute=True):
        resp = client.post(
            REGISTER_URL,
            {"email": "Sara@Example.com", "password": "secret1", "name": "Sara", "phone": "0100"},
            format="json",
        )

    assert resp.status_code == 201
    assert resp.data["email"] == "sara@example.com"
    assert "password" not in resp.data
    customer = Customer.objects.get(email="sara@example.com")
    assert customer.password != "secret1"
    assert customer.check_password("secret1")
    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == ["sara@example.com"]


@pytest.mark.django_db
def test_register_duplicate_email_conflicts():
    CustomerFactory(email="sara@example.com")

    resp = APIClient().post(
        REGISTER_URL,
        {"email": "SARA@example.com", "password": "secret1", "name": "Sara"},
        format="json",
    )

    assert resp.status_code == 409
    assert Customer.objects.filter(email="sara@example.com").count() == 1


@pytest.mark.django_db
def test_register_short_password_rejected():
    resp = APIClient().post(REGISTER_URL, {"email": "a@example.com", "password": "123", "name": "A"}, format="json")

    assert resp.status_code == 400
    assert "password" in resp.data["errors"]


@pytest.mark.django_db
def test_login_success_and_generic_failure():
    CustomerFactory(email="sara@example.com")
    client = APIClient()

    ok = client.post(LOGIN_URL, {"email": "sara@example.com", "password": "secret1"}, format="json")
    assert ok.status_code == 200
    assert ok.data["email"] == "sara@example.com"

    wrong = client.post(LOGIN_URL, {"email": "sara@example.com", "password": "nope"}, format="json")
    unknown = client.post(LOGIN_URL, {"email": "ghost@example.com", "password": "secret1"}, format="json")
    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.data["detail"] == unknown.data["detail"]


@pytest.mark.django_db
def test_login_inactive_account_rejected():
    CustomerFactory(email="sara@example.com", status=Customer.STATUS_INACTIVE)

    resp = APIClient().post(LOGIN_URL, {"email": "sara@example.com", "password": "secret1"}, format="json")

    assert resp.status_code == 401
    assert resp.data["detail"] == "Account is inactive."


@pytest.mark.django_db
def test_change_password_flow():
    CustomerFactory(email="sara@example.com")
    client = APIClient()

    bad = client.post(
        CHANGE_PASSWORD_URL,
        {"email": "sara@example.com", "current_password": "wrong1", "new_password": "newsecret"},
        format="json",
    )
    assert bad.status_code == 401

    short = client.post(
        CHANGE_PASSWORD_URL,
        {"email": "sara@example.com", "current_password": "secret1", "new_password": "abc"},
        format="json",
    )
    assert short.status_code == 400

    ok = client.post(
        CHANGE_PASSWORD_URL,
        {"email": "sara@example.com", "current_password": "secret1", "new_password": "newsecret"},
        format="json",
    )
    assert ok.status_code == 200
    assert client.post(LOGIN_URL, {"email": "sara@example.com", "password": "newsecret"}, format="json").status_code == 200
