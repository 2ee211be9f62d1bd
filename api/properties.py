"""
Properties endpoint. Creation enforces the realtor's plan property limit.

Listing, creating and updating properties rerun the lease-expiry sweep so
notifications appear without a dashboard visit.
"""

from src.services.expiry_notifier import sweep_lease_expirations, sweep_realtor_properties
from src.utils.http import ResourceHandler, run_async


class handler(ResourceHandler):
    endpoint = "properties"
    resource = "properties"

    def handle_get(self):
        status, payload = super().handle_get()
        if isinstance(payload, list):
            run_async(sweep_lease_expirations(self.supabase(), self._owner(), payload))
        return status, payload

    def handle_post(self):
        status, payload = super().handle_post()
        run_async(sweep_realtor_properties(self.supabase(), payload["realtor_id"]))
        return status, payload

    def handle_put(self):
        status, payload = super().handle_put()
        run_async(sweep_realtor_properties(self.supabase(), payload["realtor_id"]))
        return status, payload
