"""Appointment model."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class Appointment(BaseModel):
    """Viewing or maintenance visit scheduled by a realtor."""
    id: Optional[str] = None
    realtor_id: str
    title: str = Field(..., min_length=1)
    scheduled_at: datetime
    property_id: Optional[str] = None
    tenant_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
