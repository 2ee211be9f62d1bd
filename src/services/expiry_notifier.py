"""Lease-expiry notification sweep for a realtor's properties."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from supabase import Client
from src.services.supabase_client import fetch_rows, insert_row
from src.utils.config import get_expiry_horizon_days
from src.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)

NOTIFICATIONS_TABLE = "notification"
PROPERTIES_TABLE = "properties"


def _as_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def expiring_properties(properties: list[dict], now: datetime, horizon_days: int = 30) -> list[dict]:
    """Properties whose lease_end falls within [today, today + horizon], inclusive."""
    # Dates, not instants: a lease ending today still counts however late it is
    today = now.date()
    horizon = today + timedelta(days=horizon_days)

    expiring = []
    for prop in properties:
        lease_end = _as_date(prop.get("lease_end"))
        if lease_end is not None and today <= lease_end <= horizon:
            expiring.append(prop)
    return expiring


def build_expiry_message(prop: dict) -> str:
    lease_end = _as_date(prop.get("lease_end"))
    return f'Lease for property "{prop.get("title")}" is expiring on {lease_end.isoformat()}'


async def sweep_lease_expirations(
    client: Client,
    realtor_id: str,
    properties: list[dict],
    now: Optional[datetime] = None,
    horizon_days: Optional[int] = None,
) -> list[dict]:
    """
    Ensure one notification exists per property whose lease is about to end.

    The existence check keeps reruns quiet; where the store has a unique
    (realtor_id, message) constraint a concurrent duplicate insert is absorbed
    as success. Returns only the notifications inserted by this run.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if horizon_days is None:
        horizon_days = get_expiry_horizon_days()

    created = []
    with log_timing("lease_expiry_sweep", logger=logger, realtor_id=mask_user_id(realtor_id)):
        for prop in expiring_properties(properties, now, horizon_days):
            message = build_expiry_message(prop)

            existing = fetch_rows(
                client,
                NOTIFICATIONS_TABLE,
                {"realtor_id": realtor_id, "message": message},
                columns="id",
            )
            if existing:
                continue

            row = insert_row(
                client,
                NOTIFICATIONS_TABLE,
                {
                    "realtor_id": realtor_id,
                    "message": message,
                    "read": False,
                    "created_at": now.isoformat(),
                },
                ignore_duplicates=True,
            )
            if row is not None:
                created.append(row)

    if created:
        logger.info(
            "Lease expiry notifications created",
            realtor_id=mask_user_id(realtor_id),
            count=len(created)
        )
    return created


async def sweep_realtor_properties(client: Client, realtor_id: str, now: Optional[datetime] = None) -> list[dict]:
    """Reload every property the realtor owns and sweep them."""
    properties = fetch_rows(client, PROPERTIES_TABLE, {"realtor_id": realtor_id})
    return await sweep_lease_expirations(client, realtor_id, properties, now=now)


def compute_dashboard_stats(properties: list[dict], now: datetime) -> dict:
    """Counts shown on the realtor dashboard."""
    today = now.date()
    occupied = sum(1 for p in properties if p.get("status") == "Occupied")
    active_leases = 0
    for prop in properties:
        lease_end = _as_date(prop.get("lease_end"))
        if lease_end is not None and lease_end > today:
            active_leases += 1
    return {
        "properties": len(properties),
        "occupied": occupied,
        "leases": active_leases,
    }


async def refresh_dashboard(client: Client, realtor_id: str, now: Optional[datetime] = None) -> dict:
    """Reload a realtor's properties, recompute stats and rerun the sweep."""
    if now is None:
        now = datetime.now(timezone.utc)

    properties = fetch_rows(client, PROPERTIES_TABLE, {"realtor_id": realtor_id})
    stats = compute_dashboard_stats(properties, now)
    notifications = await sweep_lease_expirations(client, realtor_id, properties, now=now)

    return {
        "realtor_id": realtor_id,
        "stats": stats,
        "new_notifications": notifications,
    }
