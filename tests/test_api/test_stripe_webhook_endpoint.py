"""Tests for the Stripe webhook endpoint."""

import json
import os
import pytest
from unittest.mock import patch
from api.stripe.webhook import handler
from tests.fixtures.stripe_events import checkout_completed, subscription_deleted
from tests.utils.assertions import assert_json_error, assert_subscription_state
from tests.utils.fake_supabase import FakeSupabaseClient
from tests.utils.helpers import call_handler, generate_stripe_signature


@pytest.fixture
def client():
    fake = FakeSupabaseClient()
    with patch("src.utils.http.get_supabase_client", return_value=fake):
        yield fake


def _deliver(event, secret=None, signature=None):
    payload = json.dumps(event)
    if signature is None:
        signature = generate_stripe_signature(secret or os.environ["STRIPE_WEBHOOK_SECRET"], payload)
    return call_handler(handler, "POST", "/api/stripe/webhook", body=payload, headers={"Stripe-Signature": signature})


@pytest.mark.unit
def test_signed_checkout_event_updates_subscription(client):
    response = _deliver(checkout_completed("cus_1", "price_pro_monthly", "user_r"))

    assert response.status == 200
    assert response.json() == {"received": True}
    assert_subscription_state(client.rows("subscriptions")[0], "pro", 10, "active")


@pytest.mark.unit
def test_bad_signature_is_rejected_without_writes(client):
    response = _deliver(checkout_completed("cus_1", "price_pro_monthly", "user_r"), secret="whsec_wrong")

    assert_json_error(response, 400)
    assert client.calls == []


@pytest.mark.unit
def test_missing_signature_is_rejected(client):
    response = _deliver(subscription_deleted("cus_1"), signature="")

    assert_json_error(response, 400)
    assert client.calls == []


@pytest.mark.unit
def test_stale_timestamp_is_rejected(client):
    event = subscription_deleted("cus_1")
    payload = json.dumps(event)
    signature = generate_stripe_signature(os.environ["STRIPE_WEBHOOK_SECRET"], payload, timestamp=1000)

    response = _deliver(event, signature=signature)

    assert_json_error(response, 400)
    assert client.calls == []


@pytest.mark.unit
def test_unmapped_price_is_client_error(client):
    response = _deliver(checkout_completed("cus_1", "price_retired", "user_r"))

    assert_json_error(response, 400)
    assert client.rows("subscriptions") == []


@pytest.mark.unit
def test_unhandled_event_is_acknowledged(client):
    response = _deliver({"id": "evt_x", "object": "event", "type": "customer.created", "data": {"object": {}}})

    assert response.status == 200
    assert client.calls == []
