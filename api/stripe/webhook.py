"""Stripe webhook endpoint - keeps the subscriptions table in step with billing."""

from src.services.plan_mapper import apply_stripe_event
from src.services.stripe_verifier import verify_stripe_event
from src.utils.http import JSONRequestHandler, run_async


class handler(JSONRequestHandler):
    endpoint = "stripe/webhook"

    def handle_post(self):
        signature = self.headers.get("Stripe-Signature", "")

        # Verification must succeed before anything is written
        event = verify_stripe_event(self.raw_body(), signature)

        run_async(apply_stripe_event(self.supabase(), event))
        return 200, {"received": True}
