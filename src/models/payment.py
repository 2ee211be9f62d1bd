"""Rent payment model."""

from enum import Enum
from typing import Optional
from datetime import date
from pydantic import BaseModel, Field


class PaymentStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    LATE = "late"


class RentPayment(BaseModel):
    id: Optional[str] = None
    realtor_id: str
    tenant_id: Optional[str] = None
    property_id: Optional[str] = None
    amount: float = Field(..., gt=0)
    payment_date: Optional[date] = None
    status: PaymentStatus = PaymentStatus.PAID
    method: Optional[str] = None
    created_at: Optional[str] = None
