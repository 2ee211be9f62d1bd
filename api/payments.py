"""Rent payments endpoint, plus the monthly summary when year and month are given."""

from src.services.records import payment_summary
from src.utils.errors import RequestValidationError
from src.utils.http import ResourceHandler, run_async


class handler(ResourceHandler):
    endpoint = "payments"
    resource = "rent_payments"

    def handle_get(self):
        if "year" in self.query or "month" in self.query:
            try:
                year = int(self.require_query("year"))
                month = int(self.require_query("month"))
            except ValueError:
                raise RequestValidationError("year and month must be integers")
            return 200, run_async(payment_summary(self.supabase(), year, month))
        return super().handle_get()
