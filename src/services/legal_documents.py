"""Legal document templates for a realtor's tenants and properties."""

from typing import Optional
from supabase import Client
from src.models.legal_document import DocumentType
from src.services.supabase_client import fetch_one, fetch_rows
from src.utils.errors import RequestValidationError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

DOCUMENTS_TABLE = "legal_documents"
RECENT_LIMIT = 5


def _value(value, placeholder: str) -> str:
    return placeholder if value in (None, "") else str(value)


def build_document_content(
    doc_type: DocumentType,
    tenant: Optional[dict] = None,
    prop: Optional[dict] = None
) -> str:
    """Fill the agreement template; missing values keep their placeholder."""
    tenant = tenant or {}
    prop = prop or {}
    lease_start = prop.get("lease_start") or tenant.get("lease_start")
    lease_end = prop.get("lease_end") or tenant.get("lease_end")

    lines = [
        f"{doc_type.value.upper()} Agreement",
        "",
        f"Tenant: {_value(tenant.get('name'), '[Tenant Name]')}",
        f"Property: {_value(prop.get('address'), '[Property Address]')}",
        f"Rent: ${_value(prop.get('price'), '[Amount]')}",
        f"Lease Start: {_value(lease_start, '[Start Date]')}",
        f"Lease End: {_value(lease_end, '[End Date]')}",
        "",
        "Terms and conditions apply...",
    ]
    return "\n".join(lines) + "\n"


async def generate_document_content(client: Client, realtor_id: str, payload: dict) -> str:
    """Template text for the tenant and property named in the payload."""
    try:
        doc_type = DocumentType(payload.get("type") or DocumentType.LEASE.value)
    except ValueError:
        raise RequestValidationError(f"Unknown document type: {payload.get('type')}")

    tenant = None
    if payload.get("tenant_id"):
        tenant = fetch_one(client, "tenants", {"id": payload["tenant_id"], "realtor_id": realtor_id})
    prop = None
    if payload.get("property_id"):
        prop = fetch_one(client, "properties", {"id": payload["property_id"], "realtor_id": realtor_id})

    if tenant is None or prop is None:
        logger.info(
            "Generating document with placeholders",
            realtor_id=mask_user_id(realtor_id),
            tenant_found=tenant is not None,
            property_found=prop is not None
        )
    return build_document_content(doc_type, tenant, prop)


async def recent_documents(client: Client, realtor_id: str, limit: int = RECENT_LIMIT) -> list[dict]:
    return fetch_rows(
        client,
        DOCUMENTS_TABLE,
        {"realtor_id": realtor_id},
        order_by="created_at",
        descending=True,
        limit=limit,
    )
