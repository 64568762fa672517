from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.management import call_command
from django.utils import timezone

from orders.models import IdempotencyKey
from orders.services import compute_request_hash, with_idempotency

pytestmark = pytest.mark.django_db

PATH = "/api/v1/orders/1/confirm/"


def test_replays_stored_response_for_same_key():
    calls = []

    def handler():
        calls.append(1)
        return {"detail": "ok", "value": Decimal("1.23")}, 200

    body1, code1 = with_idempotency(key="k1", scope="order:1", path=PATH, method="post", handler=handler)
    body2, code2 = with_idempotency(key="k1", scope="order:1", path=PATH, method="POST", handler=handler)

    assert len(calls) == 1
    assert code1 == code2 == 200
    assert body2["detail"] == "ok"
    assert Decimal(body2["value"]) == Decimal("1.23")


def test_same_key_in_another_scope_runs_again():
    calls = []

    def handler():
        calls.append(1)
        return {"n": len(calls)}, 201

    with_idempotency(key="k", scope="user:1", path=PATH, method="POST", handler=handler)
    with_idempotency(key="k", scope="user:2", path=PATH, method="POST", handler=handler)

    assert len(calls) == 2


def test_conflict_on_different_payload():
    IdempotencyKey.objects.create(
        key="k2", scope="anon", path=PATH, method="POST", request_hash=compute_request_hash({"a": 1})
    )

    body, code = with_idempotency(
        key="k2",
        scope="anon",
        path=PATH,
        method="POST",
        request_hash=compute_request_hash({"a": 2}),
        handler=lambda: ({"detail": "ok"}, 200),
    )

    assert code == 409
    assert "Idempotency key reused" in body["detail"]


def test_in_progress_key_conflicts():
    IdempotencyKey.objects.create(key="k3", scope="anon", path=PATH, method="POST")

    body, code = with_idempotency(
        key="k3", scope="anon", path=PATH, method="POST", handler=lambda: ({"detail": "ok"}, 200)
    )

    assert code == 409
    assert body["detail"] == "Request in progress"


def test_server_errors_and_exceptions_release_the_key():
    with_idempotency(key="k4", scope="anon", path=PATH, method="POST", handler=lambda: ({"detail": "boom"}, 500))
    assert not IdempotencyKey.objects.filter(key="k4").exists()

    def explode():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        with_idempotency(key="k5", scope="anon", path=PATH, method="POST", handler=explode)
    assert not IdempotencyKey.objects.filter(key="k5").exists()


def test_request_hash_is_key_order_independent():
    assert compute_request_hash({"a": 1, "b": 2}) == compute_request_hash({"b": 2, "a": 1})
    assert compute_request_hash({}) is None
    assert compute_request_hash({"x": Decimal("1.5")}) is not None


def test_cleanup_command_removes_expired_keys():
    now = timezone.now()
    IdempotencyKey.objects.create(key="old", scope="anon", path=PATH, method="POST", expires_at=now - timedelta(hours=1))
    IdempotencyKey.objects.create(key="new", scope="anon", path=PATH, method="POST", expires_at=now + timedelta(hours=1))

    call_command("cleanup_idempotency")

    assert list(IdempotencyKey.objects.values_list("key", flat=True)) == ["new"]
