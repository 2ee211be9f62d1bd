"""Notification model."""

from typing import Optional
from pydantic import BaseModel


class Notification(BaseModel):
    """Realtor-facing notification; unique per (realtor_id, message)."""
    id: Optional[str] = None
    realtor_id: str
    message: str
    read: bool = False
    created_at: Optional[str] = None
