"""Stripe Checkout session creation for plan subscriptions."""

from typing import Optional
import stripe
from src.services.plan_mapper import classify_price
from src.utils.config import get_app_url, get_stripe_secret_key, get_price_catalog
from src.utils.errors import CheckoutError, RequestValidationError, SkyRealtyError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


def create_checkout_session(
    realtor_id: str,
    price_id: str,
    catalog: Optional[dict[str, str]] = None
) -> dict:
    """
    Start a subscription checkout for a catalogued price.

    The realtor id and price id ride along in metadata so the webhook can
    attribute the resulting subscription.
    """
    if not realtor_id or not price_id:
        raise RequestValidationError("realtor_id and price_id are required")

    plan = classify_price(price_id, catalog if catalog is not None else get_price_catalog())
    app_url = get_app_url()

    try:
        stripe.api_key = get_stripe_secret_key()
        session = stripe.checkout.Session.create(
            mode="subscription",
            payment_method_types=["card"],
            line_items=[{"price": price_id, "quantity": 1}],
            success_url=f"{app_url}/realtordashboard?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{app_url}/subscription",
            client_reference_id=realtor_id,
            metadata={"realtor_id": realtor_id, "price_id": price_id},
            subscription_data={"metadata": {"realtor_id": realtor_id}},
        )
    except SkyRealtyError as e:
        raise CheckoutError(str(e))
    except stripe.StripeError as e:
        logger.error(
            "Stripe checkout session creation failed",
            realtor_id=mask_user_id(realtor_id),
            plan=plan.value,
            error=str(e)
        )
        raise CheckoutError(f"Checkout session creation failed: {e.user_message or e}")

    logger.info(
        "Checkout session created",
        realtor_id=mask_user_id(realtor_id),
        plan=plan.value,
        session_id=session.id
    )
    return {"id": session.id, "url": session.url, "plan": plan.value}
