"""Tests for the legal documents endpoint."""

import pytest
from unittest.mock import patch
from api.legal_documents import handler
from tests.utils.assertions import assert_json_error
from tests.utils.fake_supabase import FakeSupabaseClient
from tests.utils.helpers import call_handler


def _patched(fake):
    return patch("src.utils.http.get_supabase_client", return_value=fake)


@pytest.mark.unit
def test_post_without_content_saves_generated_template(realtor_id):
    fake = FakeSupabaseClient({
        "tenants": [{"id": "t1", "realtor_id": realtor_id, "name": "Jordan Lee"}],
        "properties": [{"id": "p1", "realtor_id": realtor_id, "title": "Loft", "address": "12 Harbor Rd", "price": 1800}],
    })

    with _patched(fake):
        response = call_handler(handler, "POST", "/api/legal_documents", body={
            "realtor_id": realtor_id, "tenant_id": "t1", "property_id": "p1", "type": "lease",
        })

    assert response.status == 201
    saved = fake.rows("legal_documents")[0]
    assert saved["realtor_id"] == realtor_id
    assert saved["type"] == "lease"
    assert "Tenant: Jordan Lee" in saved["content"]


@pytest.mark.unit
def test_post_keeps_edited_content(realtor_id):
    fake = FakeSupabaseClient()

    with _patched(fake):
        response = call_handler(handler, "POST", "/api/legal_documents", body={
            "realtor_id": realtor_id, "type": "notice", "content": "Edited notice text",
        })

    assert response.status == 201
    assert fake.rows("legal_documents")[0]["content"] == "Edited notice text"


@pytest.mark.unit
def test_post_rejects_unknown_type(realtor_id):
    fake = FakeSupabaseClient()

    with _patched(fake):
        response = call_handler(handler, "POST", "/api/legal_documents", body={
            "realtor_id": realtor_id, "type": "will", "content": "text",
        })

    assert_json_error(response, 400)
    assert fake.rows("legal_documents") == []


@pytest.mark.unit
def test_recent_listing_is_scoped(realtor_id):
    fake = FakeSupabaseClient({"legal_documents": [
        {"id": "d1", "realtor_id": realtor_id, "type": "lease", "content": "a", "created_at": "2025-01-01"},
        {"id": "d2", "realtor_id": "user_other", "type": "lease", "content": "b", "created_at": "2025-01-02"},
    ]})

    with _patched(fake):
        response = call_handler(handler, "GET", f"/api/legal_documents?realtor_id={realtor_id}&recent=1")

    assert [d["id"] for d in response.json()] == ["d1"]
