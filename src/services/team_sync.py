"""Sync identity-provider organization memberships into team_members."""

from datetime import datetime, timezone
from typing import Optional
from ulid import ULID
from supabase import Client
from src.models.owner import TeamMember
from src.services.supabase_client import fetch_one, insert_row, update_rows, delete_rows
from src.utils.errors import WebhookPayloadError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

TEAM_MEMBERS_TABLE = "team_members"

MEMBERSHIP_CREATED = "organizationMembership.created"
MEMBERSHIP_DELETED = "organizationMembership.deleted"


def generate_member_id() -> str:
    """Generate a text-based team member row ID (ULID format)."""
    return str(ULID())


def _member_fields(data: dict) -> tuple[str, dict]:
    user_data = data.get("public_user_data") or {}
    member_id = user_data.get("user_id")
    if not member_id:
        raise WebhookPayloadError("Membership event has no public_user_data.user_id")
    return member_id, user_data


async def sync_membership_event(client: Client, payload: dict) -> Optional[dict]:
    """
    Apply one membership webhook event.

    Created events write a single row per (team, member); deleted events
    remove every row of the member. Other event types are ignored.
    """
    event_type = payload.get("type")
    data = payload.get("data") or {}

    if event_type == MEMBERSHIP_CREATED:
        member_id, user_data = _member_fields(data)
        team_id = (data.get("organization") or {}).get("id")
        if not team_id:
            raise WebhookPayloadError("Membership event has no organization.id")

        fields = {
            "role": data.get("role") or "member",
            "email": user_data.get("identifier"),
        }

        existing = fetch_one(client, TEAM_MEMBERS_TABLE, {"team_id": team_id, "member_id": member_id})
        if existing:
            rows = update_rows(client, TEAM_MEMBERS_TABLE, fields, {"id": existing["id"]})
            row = rows[0] if rows else existing
        else:
            member = TeamMember(
                id=generate_member_id(),
                team_id=team_id,
                member_id=member_id,
                created_at=datetime.now(timezone.utc).isoformat(),
                **fields,
            )
            row = insert_row(client, TEAM_MEMBERS_TABLE, member.model_dump(), ignore_duplicates=True) or member.model_dump()

        logger.info(
            "Team member synced",
            team_id=team_id,
            member_id=mask_user_id(member_id),
            role=fields["role"]
        )
        return row

    if event_type == MEMBERSHIP_DELETED:
        member_id, _ = _member_fields(data)
        removed = delete_rows(client, TEAM_MEMBERS_TABLE, {"member_id": member_id})
        logger.info(
            "Team member removed",
            member_id=mask_user_id(member_id),
            rows_removed=len(removed)
        )
        return {"member_id": member_id, "removed": len(removed)}

    logger.info("Ignoring membership webhook event", event_type=event_type)
    return None
