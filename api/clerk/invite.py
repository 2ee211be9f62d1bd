"""Invite a member into a company organization."""

from src.services.organizations import invite_member
from src.utils.http import JSONRequestHandler


class handler(JSONRequestHandler):
    endpoint = "clerk/invite"

    def handle_post(self):
        body = self.read_json()
        data = invite_member(body.get("ownerId"), body.get("email"), body.get("role"))
        return 200, {"success": True, "data": data}
