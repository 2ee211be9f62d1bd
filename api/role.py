"""Role check and role selection endpoint."""

from src.models.owner import OwnerRole
from src.services.role_resolver import resolve_role, select_role
from src.utils.errors import RequestValidationError
from src.utils.http import JSONRequestHandler, run_async


class handler(JSONRequestHandler):
    """
    GET ?user_id=           where should this identity land
    POST {user_id, role}    pick realtor or tenant for a new identity
    """

    endpoint = "role"

    def handle_get(self):
        user_id = self.require_query("user_id")
        resolution = run_async(resolve_role(self.supabase(), user_id))
        return 200, resolution.model_dump(mode="json")

    def handle_post(self):
        body = self.read_json()
        user_id = body.get("user_id")
        if not user_id:
            raise RequestValidationError("user_id is required")
        try:
            role = OwnerRole(str(body.get("role", "")).lower())
        except ValueError:
            raise RequestValidationError("role must be realtor or tenant")

        profile = {k: body.get(k) for k in ("name", "email", "phone")}
        resolution = run_async(select_role(self.supabase(), user_id, role, profile))
        return 201, resolution.model_dump(mode="json")
