"""Tenant model."""

from typing import Optional
from datetime import date
from pydantic import BaseModel, Field


class Tenant(BaseModel):
    """
    Row in the tenants table.

    The same table holds tenant owner rows (id = identity id, created on role
    selection) and tenant records a realtor manages (realtor_id set).
    """
    id: Optional[str] = Field(None, description="Row id or identity-provider user id")
    realtor_id: Optional[str] = Field(None, description="Managing realtor")
    property_id: Optional[str] = Field(None, description="Leased property")
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    lease_start: Optional[date] = None
    lease_end: Optional[date] = None
    created_at: Optional[str] = None
