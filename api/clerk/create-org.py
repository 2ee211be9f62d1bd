"""Create the organization backing a company account."""

from src.services.organizations import create_organization
from src.utils.http import JSONRequestHandler


class handler(JSONRequestHandler):
    endpoint = "clerk/create-org"

    def handle_post(self):
        body = self.read_json()
        organization = create_organization(body.get("name"), body.get("ownerId"))
        return 200, {"success": True, "organization": organization}
