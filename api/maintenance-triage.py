"""Free-text maintenance triage endpoint."""

from src.services.maintenance_triage import triage_priority
from src.utils.errors import RequestValidationError
from src.utils.http import JSONRequestHandler, run_async


class handler(JSONRequestHandler):
    endpoint = "maintenance-triage"

    def handle_post(self):
        body = self.read_json()
        description = body.get("description")
        if not description or not str(description).strip():
            raise RequestValidationError("Description is required")

        result = run_async(triage_priority(str(description)))
        return 200, {"priority": result.priority.value, "fallback": result.fallback}
