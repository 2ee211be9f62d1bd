"""Stripe checkout session endpoint."""

from src.services.checkout import create_checkout_session
from src.utils.http import JSONRequestHandler


class handler(JSONRequestHandler):
    endpoint = "checkout"

    def handle_post(self):
        body = self.read_json()
        session = create_checkout_session(body.get("realtor_id"), body.get("price_id"))
        return 200, {"url": session["url"], "plan": session["plan"]}
