"""Lead models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class LeadStatus(str, Enum):
    NEW = "New"
    CONTACTED = "Contacted"
    QUALIFIED = "Qualified"
    LOST = "Lost"


class Lead(BaseModel):
    """Prospective contact captured from a public form."""
    id: Optional[str] = None
    realtor_id: str = Field(..., description="Owning realtor or company ID")
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    property_id: Optional[str] = None
    status: LeadStatus = LeadStatus.NEW
    created_at: Optional[str] = None
