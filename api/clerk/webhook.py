"""Identity-provider organization webhook - mirrors team memberships."""

from src.services.team_sync import sync_membership_event
from src.utils.http import JSONRequestHandler, run_async


class handler(JSONRequestHandler):
    endpoint = "clerk/webhook"

    def handle_post(self):
        payload = self.read_json()
        result = run_async(sync_membership_event(self.supabase(), payload))
        if result is None:
            return 200, {"message": f"Ignored event: {payload.get('type')}"}
        return 200, {"success": True}
