"""Stripe webhook signature verification."""

import json
import stripe
from src.utils.config import get_stripe_webhook_secret
from src.utils.errors import WebhookVerificationError, SkyRealtyError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

# Seconds of clock skew accepted on the Stripe-Signature timestamp
SIGNATURE_TOLERANCE = 300


def verify_stripe_event(payload: bytes, sig_header: str) -> dict:
    """
    Verify a Stripe webhook delivery and return the event as a plain dict.

    Raises WebhookVerificationError on a missing header, bad signature, stale
    timestamp, or malformed payload. No state may be touched before this
    returns.
    """
    if not sig_header:
        raise WebhookVerificationError("Missing Stripe-Signature header")

    try:
        secret = get_stripe_webhook_secret()
    except SkyRealtyError as e:
        raise WebhookVerificationError(str(e))

    try:
        stripe.Webhook.construct_event(
            payload=payload,
            sig_header=sig_header,
            secret=secret,
            tolerance=SIGNATURE_TOLERANCE,
        )
    except ValueError as e:
        logger.warning("Invalid Stripe webhook payload", error=str(e))
        raise WebhookVerificationError("Invalid payload")
    except stripe.SignatureVerificationError as e:
        logger.warning("Stripe signature verification failed", error=str(e))
        raise WebhookVerificationError("Invalid signature")

    # The signature covers the raw bytes; parse them into a plain dict
    event = json.loads(payload.decode("utf-8") if isinstance(payload, bytes) else payload)
    logger.info("Stripe event verified", event_type=event.get("type"), event_id=event.get("id"))
    return event
