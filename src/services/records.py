"""Owner-scoped CRUD over the realtor's tables."""

from typing import Optional
from pydantic import BaseModel
from supabase import Client
from src.models.appointment import Appointment
from src.models.lead import Lead
from src.models.legal_document import LegalDocument
from src.models.maintenance import MaintenanceRequest
from src.models.notification import Notification
from src.models.payment import RentPayment
from src.models.property import Property
from src.models.tenant import Tenant
from src.services.maintenance_triage import create_maintenance_request
from src.services.property_guard import create_property
from src.services.supabase_client import (
    fetch_rows,
    fetch_one,
    insert_row,
    update_rows,
    delete_rows,
    call_rpc,
)
from src.utils.errors import RecordNotFoundError, RequestValidationError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

OWNER_COLUMN = "realtor_id"

# Columns a client may never rewrite through an update
PROTECTED_COLUMNS = ("id", OWNER_COLUMN, "created_at")


class ResourceSpec(BaseModel):
    name: str
    table: str
    model: Optional[type[BaseModel]] = None
    order_by: Optional[str] = "created_at"
    descending: bool = True


RESOURCES: dict[str, ResourceSpec] = {
    spec.name: spec
    for spec in (
        ResourceSpec(name="properties", table="properties", model=Property),
        ResourceSpec(name="tenants", table="tenants", model=Tenant),
        ResourceSpec(name="appointments", table="appointments", model=Appointment, order_by="scheduled_at", descending=False),
        ResourceSpec(name="maintenance_requests", table="maintenance_requests", model=MaintenanceRequest),
        ResourceSpec(name="rent_payments", table="rent_payments", model=RentPayment),
        ResourceSpec(name="leads", table="leads", model=Lead),
        ResourceSpec(name="notifications", table="notification", model=Notification),
        ResourceSpec(name="legal_documents", table="legal_documents", model=LegalDocument),
    )
}


def get_resource(name: str) -> ResourceSpec:
    try:
        return RESOURCES[name]
    except KeyError:
        raise RequestValidationError(f"Unknown resource: {name}")


def _require_owner(realtor_id: Optional[str]) -> str:
    if not realtor_id:
        raise RequestValidationError("realtor_id is required")
    return realtor_id


async def list_records(client: Client, resource: str, realtor_id: str) -> list[dict]:
    spec = get_resource(resource)
    return fetch_rows(
        client,
        spec.table,
        {OWNER_COLUMN: _require_owner(realtor_id)},
        order_by=spec.order_by,
        descending=spec.descending,
    )


async def get_record(client: Client, resource: str, record_id: str, realtor_id: str) -> dict:
    spec = get_resource(resource)
    row = fetch_one(client, spec.table, {"id": record_id, OWNER_COLUMN: _require_owner(realtor_id)})
    if row is None:
        raise RecordNotFoundError(f"{resource} {record_id} not found")
    return row


async def create_record(client: Client, resource: str, realtor_id: str, payload: dict) -> dict:
    """Validate against the resource model and insert under the owner."""
    spec = get_resource(resource)

    # Resources with their own write path
    if resource == "properties":
        return await create_property(client, realtor_id, payload)
    if resource == "maintenance_requests":
        return await create_maintenance_request(client, {**payload, OWNER_COLUMN: _require_owner(realtor_id)})

    data = dict(payload)
    data[OWNER_COLUMN] = _require_owner(realtor_id)

    if spec.model is not None:
        data = spec.model(**data).model_dump(mode="json", exclude_none=True)

    created = insert_row(client, spec.table, data)
    logger.info(
        "Record created",
        resource=resource,
        realtor_id=mask_user_id(realtor_id),
        record_id=created.get("id")
    )
    return created


async def update_record(client: Client, resource: str, record_id: str, realtor_id: str, updates: dict) -> dict:
    spec = get_resource(resource)
    _require_owner(realtor_id)
    if not record_id:
        raise RequestValidationError("id is required")

    changes = {k: v for k, v in updates.items() if k not in PROTECTED_COLUMNS}
    if not changes:
        raise RequestValidationError("No updatable fields supplied")

    if spec.model is not None:
        # The row as it would be after the update must still satisfy the model
        existing = await get_record(client, resource, record_id, realtor_id)
        unknown = sorted(set(changes) - set(spec.model.model_fields))
        if unknown:
            raise RequestValidationError(f"Unknown fields for {resource}: {', '.join(unknown)}")
        merged = spec.model.model_validate({**existing, **changes}).model_dump(mode="json")
        changes = {k: merged[k] for k in changes}

    rows = update_rows(client, spec.table, changes, {"id": record_id, OWNER_COLUMN: realtor_id})
    if not rows:
        raise RecordNotFoundError(f"{resource} {record_id} not found")
    return rows[0]


async def delete_record(client: Client, resource: str, record_id: str, realtor_id: str) -> None:
    spec = get_resource(resource)
    _require_owner(realtor_id)
    if not record_id:
        raise RequestValidationError("id is required")

    rows = delete_rows(client, spec.table, {"id": record_id, OWNER_COLUMN: realtor_id})
    if not rows:
        raise RecordNotFoundError(f"{resource} {record_id} not found")
    logger.info(
        "Record deleted",
        resource=resource,
        realtor_id=mask_user_id(realtor_id),
        record_id=record_id
    )


async def payment_summary(client: Client, year: int, month: int) -> list[dict]:
    """Monthly rent totals computed by the get_monthly_payment_summary function."""
    if not 1 <= month <= 12:
        raise RequestValidationError("month must be between 1 and 12")
    data = call_rpc(client, "get_monthly_payment_summary", {"year": year, "month": month})
    return data or []
