"""Identity-provider organizations: create one per company, invite members."""

from typing import Optional
import requests
from src.utils.config import get_clerk_api_url, get_clerk_secret_key
from src.utils.errors import OrganizationError, RequestValidationError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

DEFAULT_MEMBER_ROLE = "member"
REQUEST_TIMEOUT = 30


def _post(path: str, payload: dict, action: str) -> dict:
    url = f"{get_clerk_api_url()}{path}"
    headers = {
        "Authorization": f"Bearer {get_clerk_secret_key()}",
        "Content-Type": "application/json",
    }
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        logger.error(f"{action} request failed", error=str(e))
        raise OrganizationError(f"Failed to {action}: {e}")

    if not response.ok:
        logger.error(
            f"{action} rejected",
            status_code=response.status_code,
            body=response.text[:500]
        )
        raise OrganizationError(f"Failed to {action}")
    return response.json()


def invite_member(owner_id: str, email: str, role: Optional[str] = None) -> dict:
    """Invite an email address into the organization owned by owner_id."""
    if not owner_id or not email:
        raise RequestValidationError("ownerId and email are required")

    data = _post(
        f"/organizations/{owner_id}/members",
        {"email_address": email, "role": role or DEFAULT_MEMBER_ROLE},
        "send invite",
    )
    logger.info("Organization invite sent", owner_id=mask_user_id(owner_id), role=role or DEFAULT_MEMBER_ROLE)
    return data


def create_organization(name: str, owner_id: str) -> dict:
    if not name or not owner_id:
        raise RequestValidationError("name and ownerId are required")

    data = _post("/organizations", {"name": name, "created_by": owner_id}, "create organization")
    logger.info("Organization created", owner_id=mask_user_id(owner_id), organization_id=data.get("id"))
    return data
