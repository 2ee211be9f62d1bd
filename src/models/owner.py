"""Owner models - the role rows an authenticated identity can hold."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class OwnerRole(str, Enum):
    """Roles, in resolution precedence order."""
    REALTOR = "realtor"
    TENANT = "tenant"
    COMPANY = "company"


ROLE_SELECTION_PATH = "/role-selection"


class Realtor(BaseModel):
    """Realtor owner row, keyed by identity-provider user id."""
    id: str = Field(..., description="Identity-provider user id")
    name: Optional[str] = Field(None, description="Full name")
    email: Optional[str] = Field(None, description="Email address")
    phone: Optional[str] = Field(None, description="Phone number")
    company_id: Optional[str] = Field(None, description="Company the realtor belongs to")
    created_at: Optional[str] = None


class TeamMember(BaseModel):
    """Membership of an identity in a company team."""
    id: str
    team_id: str
    member_id: str
    role: str = "member"
    email: Optional[str] = None
    created_at: Optional[str] = None


class RoleResolution(BaseModel):
    """Outcome of resolving an identity to a dashboard."""
    identity_id: str
    role: Optional[OwnerRole] = None
    dashboard_path: str = ROLE_SELECTION_PATH
    matched_roles: list[OwnerRole] = Field(default_factory=list)
    company_id: Optional[str] = None

    @property
    def has_role(self) -> bool:
        return self.role is not None

    @property
    def is_anomalous(self) -> bool:
        """More than one owner table matched this identity."""
        return len(self.matched_roles) > 1
