"""Subscription models and the plan limit table."""

from enum import Enum
from typing import Literal, Optional, Union
from datetime import datetime
from pydantic import BaseModel, Field


class PlanTier(str, Enum):
    BASIC = "basic"
    PRO = "pro"
    PREMIUM = "premium"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    TRIALING = "trialing"


UNLIMITED = "unlimited"

PropertyLimit = Union[int, Literal["unlimited"]]

# Single source of truth for per-plan property limits
PLAN_LIMITS: dict[PlanTier, PropertyLimit] = {
    PlanTier.BASIC: 5,
    PlanTier.PRO: 10,
    PlanTier.PREMIUM: UNLIMITED,
}


class Subscription(BaseModel):
    """Subscription row keyed by Stripe customer id."""
    customer_id: str = Field(..., description="Stripe customer id")
    realtor_id: Optional[str] = Field(None, description="Realtor who started checkout")
    subscription_id: Optional[str] = Field(None, description="Stripe subscription id")
    plan: Optional[PlanTier] = None
    property_limit: PropertyLimit = 0
    status: SubscriptionStatus
    trial_end: Optional[datetime] = None
    updated_at: Optional[str] = None

    @property
    def is_unlimited(self) -> bool:
        return self.property_limit == UNLIMITED
