import asyncio
import time
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from app.core.config import settings

WEBHOOK_URL = "/api/v1/stripe/webhook"


@pytest.mark.asyncio
async def test_completed_checkout_marks_user_paid(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    payload, headers = signed_event(metadata={"userId": "u1"})

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    assert await fetch_paid("u1") is True


@pytest.mark.asyncio
async def test_redelivered_event_is_idempotent(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    payload, headers = signed_event(metadata={"userId": "u1"})

    first = await client.post(WEBHOOK_URL, content=payload, headers=headers)
    second = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json() == {"received": True}
    assert await fetch_paid("u1") is True


@pytest.mark.asyncio
async def test_second_checkout_for_paid_user_is_noop(client, make_account, fetch_paid, signed_event):
    await make_account("u1", paid=True)
    payload, headers = signed_event(metadata={"userId": "u1"}, event_id="evt_repeat")

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 200
    assert await fetch_paid("u1") is True


@pytest.mark.asyncio
async def test_tampered_body_with_original_signature_is_rejected(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    await make_account("attacker")
    payload, headers = signed_event(metadata={"userId": "u1"})
    tampered = payload.replace(b'"u1"', b'"attacker"')

    response = await client.post(WEBHOOK_URL, content=tampered, headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid signature"}
    assert await fetch_paid("u1") is False
    assert await fetch_paid("attacker") is False


@pytest.mark.asyncio
async def test_missing_signature_header_is_rejected(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    payload, _ = signed_event(metadata={"userId": "u1"})

    response = await client.post(WEBHOOK_URL, content=payload, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert await fetch_paid("u1") is False


@pytest.mark.asyncio
async def test_signature_with_wrong_secret_is_rejected(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    payload, headers = signed_event(metadata={"userId": "u1"}, secret="whsec_someone_else")

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 400
    assert await fetch_paid("u1") is False


@pytest.mark.asyncio
async def test_expired_signature_timestamp_is_rejected(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    old = int(time.time()) - settings.STRIPE_WEBHOOK_TOLERANCE - 60
    payload, headers = signed_event(metadata={"userId": "u1"}, timestamp=old)

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 400
    assert await fetch_paid("u1") is False


@pytest.mark.asyncio
async def test_unrelated_event_types_are_acknowledged_and_ignored(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    payload, headers = signed_event(event_type="checkout.session.expired", metadata={"userId": "u1"})

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"received": True, "ignored": True}
    assert await fetch_paid("u1") is False


@pytest.mark.asyncio
async def test_no_event_type_ever_unpays_a_user(client, make_account, fetch_paid, signed_event):
    await make_account("u1", paid=True)

    for i, event_type in enumerate(
        ["checkout.session.expired", "charge.refunded", "customer.subscription.deleted", "checkout.session.completed"]
    ):
        payload, headers = signed_event(event_type=event_type, metadata={"userId": "u1"}, event_id=f"evt_{i}")
        response = await client.post(WEBHOOK_URL, content=payload, headers=headers)
        assert response.status_code == 200
        assert await fetch_paid("u1") is True


@pytest.mark.asyncio
@pytest.mark.parametrize("metadata", [{}, {"userId": ""}, {"userId": "   "}, {"environment": "test"}])
async def test_missing_user_id_metadata_is_rejected(client, make_account, fetch_paid, signed_event, metadata):
    await make_account("u1")
    payload, headers = signed_event(metadata=metadata)

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": "No userId found"}
    assert await fetch_paid("u1") is False


@pytest.mark.asyncio
async def test_unknown_user_returns_404(client, signed_event):
    payload, headers = signed_event(metadata={"userId": "ghost"})

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_store_failure_returns_500_for_redelivery(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    payload, headers = signed_event(metadata={"userId": "u1"})

    failing = AsyncMock(side_effect=OperationalError("UPDATE accounts", {}, Exception("db down")))
    with patch("app.services.stripe_webhook_service.mark_paid", failing):
        response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 500
    assert await fetch_paid("u1") is False


@pytest.mark.asyncio
async def test_missing_webhook_secret_fails_closed(client, make_account, fetch_paid, signed_event, monkeypatch):
    await make_account("u1")
    payload, headers = signed_event(metadata={"userId": "u1"})
    monkeypatch.setattr(settings, "STRIPE_WEBHOOK_SECRET", "")

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 500
    assert await fetch_paid("u1") is False


def _attribute_only_event(event_type="checkout.session.completed", metadata=None):
    # Shaped like a StripeObject that no longer subclasses dict
    session = SimpleNamespace(id="cs_test_001", metadata=SimpleNamespace(**(metadata or {})))
    return SimpleNamespace(id="evt_attr", type=event_type, data=SimpleNamespace(object=session))


@pytest.mark.asyncio
async def test_event_fields_are_read_by_attribute(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    payload, headers = signed_event(metadata={"userId": "u1"})

    with patch("stripe.Webhook.construct_event", return_value=_attribute_only_event(metadata={"userId": "u1"})):
        completed = await client.post(WEBHOOK_URL, content=payload, headers=headers)
    with patch("stripe.Webhook.construct_event", return_value=_attribute_only_event("invoice.paid")):
        ignored = await client.post(WEBHOOK_URL, content=payload, headers=headers)
    with patch("stripe.Webhook.construct_event", return_value=_attribute_only_event(metadata={})):
        untagged = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert completed.status_code == 200
    assert await fetch_paid("u1") is True
    assert ignored.json() == {"received": True, "ignored": True}
    assert untagged.status_code == 400


@pytest.mark.asyncio
async def test_concurrent_deliveries_for_one_user(client, make_account, fetch_paid, signed_event):
    await make_account("u1")
    same_payload, same_headers = signed_event(metadata={"userId": "u1"}, event_id="evt_dup")
    other_payload, other_headers = signed_event(metadata={"userId": "u1"}, event_id="evt_other")

    responses = await asyncio.gather(
        client.post(WEBHOOK_URL, content=same_payload, headers=same_headers),
        client.post(WEBHOOK_URL, content=same_payload, headers=same_headers),
        client.post(WEBHOOK_URL, content=other_payload, headers=other_headers),
        client.post(WEBHOOK_URL, content=same_payload, headers=same_headers),
    )

    assert [r.status_code for r in responses] == [200, 200, 200, 200]
    assert all(r.json() == {"received": True} for r in responses)
    assert await fetch_paid("u1") is True
