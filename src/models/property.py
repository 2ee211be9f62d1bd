"""Property models."""

from enum import Enum
from typing import Optional
from datetime import date
from pydantic import BaseModel, Field


class PropertyStatus(str, Enum):
    VACANT = "Vacant"
    OCCUPIED = "Occupied"
    PENDING = "Pending"


class Property(BaseModel):
    """Property owned by exactly one realtor."""
    id: Optional[str] = Field(None, description="Property ID")
    realtor_id: str = Field(..., description="Owning realtor ID")
    title: str = Field(..., min_length=1, description="Display title")
    address: Optional[str] = Field(None, description="Street address")
    price: Optional[float] = Field(None, ge=0, description="Rent or sale price")
    status: PropertyStatus = Field(default=PropertyStatus.VACANT)
    lease_end: Optional[date] = Field(None, description="Current lease end date")
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None


class PropertyCreate(BaseModel):
    """Payload accepted when a realtor adds a property."""
    title: str = Field(..., min_length=1)
    address: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    status: PropertyStatus = PropertyStatus.VACANT
    lease_end: Optional[date] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
