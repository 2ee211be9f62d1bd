"""Tests for owner-scoped record CRUD."""

import pytest
from pydantic import ValidationError
from src.services.records import (
    create_record,
    delete_record,
    get_record,
    get_resource,
    list_records,
    payment_summary,
    update_record,
)
from src.utils.errors import PropertyLimitExceededError, RecordNotFoundError, RequestValidationError
from tests.utils.factories import create_maintenance_data, create_property_data
from tests.utils.fake_supabase import FakeSupabaseClient


@pytest.fixture
def client(realtor_id):
    return FakeSupabaseClient({
        "leads": [
            {"id": "l1", "realtor_id": realtor_id, "name": "Ann", "created_at": "2025-01-01"},
            {"id": "l2", "realtor_id": realtor_id, "name": "Ben", "created_at": "2025-02-01"},
            {"id": "l3", "realtor_id": "user_other", "name": "Cat", "created_at": "2025-03-01"},
        ],
        "appointments": [
            {"id": "a1", "realtor_id": realtor_id, "scheduled_at": "2025-03-05T10:00:00"},
            {"id": "a2", "realtor_id": realtor_id, "scheduled_at": "2025-03-02T10:00:00"},
        ],
    })


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_is_scoped_and_newest_first(client, realtor_id):
    rows = await list_records(client, "leads", realtor_id)

    assert [r["id"] for r in rows] == ["l2", "l1"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_appointments_listed_in_schedule_order(client, realtor_id):
    rows = await list_records(client, "appointments", realtor_id)

    assert [r["id"] for r in rows] == ["a2", "a1"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_requires_owner(client):
    with pytest.raises(RequestValidationError):
        await list_records(client, "leads", "")


@pytest.mark.unit
def test_unknown_resource_rejected():
    with pytest.raises(RequestValidationError):
        get_resource("invoices")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_other_owners_record_is_not_found(client, realtor_id):
    with pytest.raises(RecordNotFoundError):
        await get_record(client, "leads", "l3", realtor_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_sets_owner_and_defaults(client, realtor_id):
    row = await create_record(client, "leads", realtor_id, {"name": "Dee", "realtor_id": "user_spoofed"})

    assert row["realtor_id"] == realtor_id
    assert row["status"] == "New"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_validates_payload(client, realtor_id):
    with pytest.raises(ValidationError) as exc_info:
        await create_record(client, "rent_payments", realtor_id, {"amount": -5})

    assert "amount" in str(exc_info.value)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_property_goes_through_limit_guard(realtor_id):
    client = FakeSupabaseClient({
        "subscriptions": [{"customer_id": "cus_1", "realtor_id": realtor_id, "property_limit": 0, "status": "canceled"}],
    })

    with pytest.raises(PropertyLimitExceededError):
        await create_record(client, "properties", realtor_id, {"title": "Loft"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_ignores_protected_columns(client, realtor_id):
    row = await update_record(client, "leads", "l1", realtor_id, {"status": "Contacted", "realtor_id": "user_other"})

    assert row["status"] == "Contacted"
    assert row["realtor_id"] == realtor_id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_with_only_protected_columns_is_rejected(client, realtor_id):
    with pytest.raises(RequestValidationError):
        await update_record(client, "leads", "l1", realtor_id, {"id": "l9"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_other_owners_record_is_not_found(client, realtor_id):
    with pytest.raises(RecordNotFoundError):
        await update_record(client, "leads", "l3", realtor_id, {"status": "Lost"})

    assert client.rows("leads")[2].get("status") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_record(client, realtor_id):
    await delete_record(client, "leads", "l1", realtor_id)

    assert [r["id"] for r in client.rows("leads")] == ["l2", "l3"]
    with pytest.raises(RecordNotFoundError):
        await delete_record(client, "leads", "l1", realtor_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_payment_summary_calls_rpc():
    client = FakeSupabaseClient()
    client.rpc_results["get_monthly_payment_summary"] = [{"total": 4200}]

    result = await payment_summary(client, 2025, 3)

    assert result == [{"total": 4200}]
    assert client.calls[-1] == ("get_monthly_payment_summary", "rpc", {"year": 2025, "month": 3}, [])


@pytest.mark.unit
@pytest.mark.asyncio
async def test_payment_summary_rejects_bad_month():
    with pytest.raises(RequestValidationError):
        await payment_summary(FakeSupabaseClient(), 2025, 13)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_normalizes_priority_casing(realtor_id):
    client = FakeSupabaseClient({"maintenance_requests": [create_maintenance_data(realtor_id, priority="Low")]})
    request_id = client.rows("maintenance_requests")[0]["id"]

    row = await update_record(client, "maintenance_requests", request_id, realtor_id, {"priority": "medium"})

    assert row["priority"] == "Medium"
    assert client.rows("maintenance_requests")[0]["priority"] == "Medium"


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("resource,changes", [
    ("maintenance_requests", {"status": "bogus"}),
    ("maintenance_requests", {"priority": "urgent"}),
    ("properties", {"status": "Sold"}),
    ("leads", {"status": "Archived"}),
])
async def test_update_rejects_values_outside_enums(realtor_id, resource, changes):
    client = FakeSupabaseClient({
        "maintenance_requests": [create_maintenance_data(realtor_id)],
        "properties": [create_property_data(realtor_id)],
        "leads": [{"id": "l1", "realtor_id": realtor_id, "name": "Ann"}],
    })
    record_id = client.rows(resource)[0]["id"]
    before = dict(client.rows(resource)[0])

    with pytest.raises(ValidationError):
        await update_record(client, resource, record_id, realtor_id, changes)

    assert client.rows(resource)[0] == before


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_rejects_unknown_columns(client, realtor_id):
    with pytest.raises(RequestValidationError):
        await update_record(client, "leads", "l1", realtor_id, {"score": 10})
