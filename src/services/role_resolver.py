"""Role resolution - map an authenticated identity to its dashboard."""

from typing import Optional
from supabase import Client
from src.models.owner import OwnerRole, Realtor, RoleResolution, ROLE_SELECTION_PATH
from src.models.tenant import Tenant
from src.services.supabase_client import fetch_one, insert_row
from src.utils.errors import SupabaseError, RoleConflictError, RequestValidationError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

OWNER_TABLES = {
    OwnerRole.REALTOR: "realtors",
    OwnerRole.TENANT: "tenants",
    OwnerRole.COMPANY: "companies",
}

# Roles a user may pick on the role-selection screen
SELECTABLE_ROLES = {
    OwnerRole.REALTOR: Realtor,
    OwnerRole.TENANT: Tenant,
}


def dashboard_path_for(role: Optional[OwnerRole], company_id: Optional[str] = None) -> str:
    """Dashboard route for a resolved role."""
    if role == OwnerRole.REALTOR:
        return "/realtordashboard"
    if role == OwnerRole.TENANT:
        return "/tenantdashboard"
    if role == OwnerRole.COMPANY and company_id:
        return f"/company/{company_id}"
    return ROLE_SELECTION_PATH


def _safe_lookup(client: Client, table: str, filters: dict, identity_id: str) -> Optional[dict]:
    """Lookup that treats store errors as a miss."""
    try:
        return fetch_one(client, table, filters)
    except SupabaseError as e:
        logger.warning(
            "Owner lookup failed, treating as not found",
            table=table,
            identity_id=mask_user_id(identity_id),
            error=str(e)
        )
        return None


def _find_company(client: Client, identity_id: str) -> Optional[str]:
    """Company id owned by, or joined through membership by, this identity."""
    company = _safe_lookup(client, "companies", {"id": identity_id}, identity_id)
    if company:
        return company.get("id")

    membership = _safe_lookup(client, "team_members", {"member_id": identity_id}, identity_id)
    if membership:
        return membership.get("team_id")
    return None


async def resolve_role(client: Client, identity_id: str) -> RoleResolution:
    """
    Resolve which dashboard an identity belongs on.

    Precedence is realtor, then tenant, then company. All tables are checked
    so that an identity present in more than one of them is reported in
    matched_roles and logged; the precedence winner is still returned.
    Read errors count as "not found" and never block the caller.
    """
    if not identity_id:
        return RoleResolution(identity_id="")

    matched: list[OwnerRole] = []

    if _safe_lookup(client, "realtors", {"id": identity_id}, identity_id):
        matched.append(OwnerRole.REALTOR)

    if _safe_lookup(client, "tenants", {"id": identity_id}, identity_id):
        matched.append(OwnerRole.TENANT)

    company_id = _find_company(client, identity_id)
    if company_id:
        matched.append(OwnerRole.COMPANY)

    role = matched[0] if matched else None

    if len(matched) > 1:
        logger.warning(
            "Identity matches multiple owner tables",
            identity_id=mask_user_id(identity_id),
            matched_roles=[r.value for r in matched],
            resolved_role=role.value
        )

    resolution = RoleResolution(
        identity_id=identity_id,
        role=role,
        dashboard_path=dashboard_path_for(role, company_id),
        matched_roles=matched,
        company_id=company_id,
    )

    logger.info(
        "Role resolved",
        identity_id=mask_user_id(identity_id),
        role=role.value if role else None,
        dashboard_path=resolution.dashboard_path
    )
    return resolution


async def select_role(
    client: Client,
    identity_id: str,
    role: OwnerRole,
    profile: Optional[dict] = None
) -> RoleResolution:
    """
    Assign a role to an identity that has none.

    Selecting the role the identity already has is a no-op. A concurrent
    insert that hits the primary key counts as success.
    """
    if not identity_id:
        raise RequestValidationError("user_id is required")
    if role not in SELECTABLE_ROLES:
        raise RequestValidationError(f"Role cannot be self-selected: {role.value}")

    current = await resolve_role(client, identity_id)
    if current.role == role:
        return current
    if current.has_role:
        raise RoleConflictError(
            f"Identity already has role {current.role.value}"
        )

    fields = {k: v for k, v in (profile or {}).items() if k in ("name", "email", "phone") and v}
    owner = SELECTABLE_ROLES[role](id=identity_id, **fields)
    row = owner.model_dump(mode="json", exclude_none=True)

    insert_row(client, OWNER_TABLES[role], row, ignore_duplicates=True)

    logger.info(
        "Role selected",
        identity_id=mask_user_id(identity_id),
        role=role.value
    )

    return RoleResolution(
        identity_id=identity_id,
        role=role,
        dashboard_path=dashboard_path_for(role),
        matched_roles=[role],
    )
