"""
Legal documents endpoint.

GET ?realtor_id=&recent=1 returns the five newest documents. POST without
content fills the agreement template from the tenant and property rows.
"""

from src.services import records
from src.services.legal_documents import generate_document_content, recent_documents
from src.utils.http import ResourceHandler, run_async


class handler(ResourceHandler):
    endpoint = "legal_documents"
    resource = "legal_documents"

    def handle_get(self):
        if self.query.get("recent"):
            return 200, run_async(recent_documents(self.supabase(), self._owner()))
        return super().handle_get()

    def handle_post(self):
        body = self.read_json()
        realtor_id = self._owner(body)
        payload = {k: v for k, v in body.items() if k != "realtor_id"}
        if not payload.get("content"):
            payload["content"] = run_async(generate_document_content(self.supabase(), realtor_id, payload))
        return 201, run_async(records.create_record(self.supabase(), self.resource, realtor_id, payload))
