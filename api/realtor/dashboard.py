"""Realtor dashboard refresh - stats plus the lease-expiry sweep."""

from src.services.expiry_notifier import refresh_dashboard
from src.utils.http import JSONRequestHandler, run_async


class handler(JSONRequestHandler):
    endpoint = "realtor/dashboard"

    def handle_get(self):
        realtor_id = self.require_query("realtor_id")
        return 200, run_async(refresh_dashboard(self.supabase(), realtor_id))
