"""Maintenance request models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class Priority(str, Enum):
    """Canonical triage priority shared by every call site."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Priority"]:
        """Parse a loosely formatted answer ("high", " Low.") into a Priority."""
        if not value or not isinstance(value, str):
            return None
        normalized = value.strip().strip(".!\"'").strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


FALLBACK_PRIORITY = Priority.MEDIUM


class MaintenanceStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MaintenanceRequest(BaseModel):
    """Tenant-submitted maintenance request."""
    id: Optional[str] = None
    tenant_id: Optional[str] = Field(None, description="Submitting tenant")
    realtor_id: str = Field(..., description="Realtor responsible for the property")
    property_id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    status: MaintenanceStatus = MaintenanceStatus.PENDING
    priority: Optional[Priority] = None
    media_url: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, value):
        """Accept any casing ("medium", "HIGH") and store the canonical value."""
        if value is None or isinstance(value, Priority):
            return value
        priority = Priority.parse(str(value))
        if priority is None:
            raise ValueError("priority must be Low, Medium or High")
        return priority
