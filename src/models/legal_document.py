"""Legal document models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class DocumentType(str, Enum):
    LEASE = "lease"
    NOTICE = "notice"
    CONTRACT = "contract"


class LegalDocument(BaseModel):
    """Lease, notice or contract text a realtor saved for a tenant and property."""
    id: Optional[str] = None
    realtor_id: str = Field(..., description="Owning realtor ID")
    tenant_id: Optional[str] = None
    property_id: Optional[str] = None
    type: DocumentType = DocumentType.LEASE
    content: str = Field(..., min_length=1)
    created_at: Optional[str] = None
