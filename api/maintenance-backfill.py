"""Backfill LLM priorities on a realtor's unprioritized maintenance requests."""

from src.services.maintenance_triage import backfill_priorities
from src.utils.errors import RequestValidationError
from src.utils.http import JSONRequestHandler, run_async


class handler(JSONRequestHandler):
    endpoint = "maintenance-backfill"

    def handle_post(self):
        body = self.read_json()
        realtor_id = body.get("realtor_id") or self.query.get("realtor_id")
        if not realtor_id:
            raise RequestValidationError("realtor_id is required")

        updated = run_async(backfill_priorities(self.supabase(), realtor_id))
        return 200, {"updated": updated}
