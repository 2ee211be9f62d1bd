"""Stripe subscription events -> persisted plan state."""

from datetime import datetime, timezone
from typing import Optional
from supabase import Client
from src.models.subscription import (
    PlanTier,
    PLAN_LIMITS,
    PropertyLimit,
    Subscription,
    SubscriptionStatus,
)
from src.services.supabase_client import upsert_row, update_rows, fetch_rows
from src.utils.config import get_price_catalog
from src.utils.errors import UnknownPriceError, WebhookPayloadError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

SUBSCRIPTIONS_TABLE = "subscriptions"

CHECKOUT_COMPLETED = "checkout.session.completed"
SUBSCRIPTION_UPDATED = "customer.subscription.updated"
INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"

HANDLED_EVENTS = (
    CHECKOUT_COMPLETED,
    SUBSCRIPTION_UPDATED,
    INVOICE_PAYMENT_FAILED,
    SUBSCRIPTION_DELETED,
)

# Stripe statuses with no stored equivalent
STRIPE_STATUS_ALIASES: dict[str, SubscriptionStatus] = {
    "incomplete": SubscriptionStatus.PAST_DUE,
    "unpaid": SubscriptionStatus.PAST_DUE,
    "paused": SubscriptionStatus.PAST_DUE,
    "incomplete_expired": SubscriptionStatus.CANCELED,
}


def classify_price(price_id: str, catalog: Optional[dict[str, str]] = None) -> PlanTier:
    """Map a literal Stripe price id to a plan tier via the price catalog."""
    if catalog is None:
        catalog = get_price_catalog()

    plan = catalog.get(price_id) if price_id else None
    if plan is None:
        raise UnknownPriceError(f"Price id not in catalog: {price_id}")
    try:
        return PlanTier(plan)
    except ValueError:
        raise UnknownPriceError(f"Catalog maps {price_id} to unknown plan {plan}")


def limit_for_plan(plan: PlanTier) -> PropertyLimit:
    return PLAN_LIMITS[plan]


def trial_end_from_timestamp(value) -> Optional[str]:
    """Unix timestamp -> ISO-8601 UTC string, or None."""
    if value in (None, "", 0):
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc).isoformat()
    except (TypeError, ValueError, OverflowError, OSError):
        logger.warning("Ignoring unparseable trial_end", trial_end=str(value))
        return None


def _customer_id(obj: dict) -> str:
    customer = obj.get("customer")
    # Expanded objects carry the id inside
    if isinstance(customer, dict):
        customer = customer.get("id")
    if not customer:
        raise WebhookPayloadError("Event object has no customer id")
    return str(customer)


def _subscription_price_id(subscription: dict) -> Optional[str]:
    items = (subscription.get("items") or {}).get("data") or []
    if not items:
        return None
    price = items[0].get("price") or {}
    return price.get("id") if isinstance(price, dict) else price


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _write_subscription(client: Client, row: dict) -> dict:
    """Validate a subscription row and upsert it by customer id."""
    row["updated_at"] = _now_iso()
    data = Subscription.model_validate(row).model_dump(mode="json", exclude_unset=True)
    return upsert_row(client, SUBSCRIPTIONS_TABLE, data, on_conflict="customer_id")


def _plan_row(customer_id: str, price_id: Optional[str], catalog: Optional[dict[str, str]]) -> dict:
    if not price_id:
        raise WebhookPayloadError(f"No price id for customer {customer_id}")
    plan = classify_price(price_id, catalog)
    return {
        "customer_id": customer_id,
        "plan": plan.value,
        "property_limit": limit_for_plan(plan),
    }


def _on_checkout_completed(client: Client, session: dict, catalog) -> dict:
    customer_id = _customer_id(session)
    metadata = session.get("metadata") or {}
    row = _plan_row(customer_id, metadata.get("price_id"), catalog)

    if session.get("payment_status") == "no_payment_required":
        status = SubscriptionStatus.TRIALING
    else:
        status = SubscriptionStatus.ACTIVE

    row["status"] = status.value
    if metadata.get("realtor_id"):
        row["realtor_id"] = metadata["realtor_id"]
    if session.get("subscription"):
        row["subscription_id"] = session["subscription"]
    return _write_subscription(client, row)


def map_stripe_status(value: Optional[str]) -> Optional[SubscriptionStatus]:
    """Stripe subscription status -> stored status, or None if unrecognized."""
    try:
        return SubscriptionStatus(value)
    except ValueError:
        return STRIPE_STATUS_ALIASES.get(value)


def _on_subscription_updated(client: Client, subscription: dict, catalog) -> Optional[dict]:
    customer_id = _customer_id(subscription)
    row = _plan_row(customer_id, _subscription_price_id(subscription), catalog)

    raw_status = subscription.get("status")
    status = map_stripe_status(raw_status)
    if status is None:
        # Acknowledged without a write so Stripe stops redelivering
        logger.warning(
            "Unrecognized Stripe subscription status, event not applied",
            customer_id=customer_id,
            stripe_status=str(raw_status)
        )
        return None
    if status.value != raw_status:
        logger.info("Stripe status mapped", stripe_status=raw_status, status=status.value)

    row["status"] = status.value
    row["trial_end"] = trial_end_from_timestamp(subscription.get("trial_end"))
    if status == SubscriptionStatus.CANCELED:
        row["property_limit"] = 0
        row["trial_end"] = None
    if subscription.get("id"):
        row["subscription_id"] = subscription["id"]
    metadata = subscription.get("metadata") or {}
    if metadata.get("realtor_id"):
        row["realtor_id"] = metadata["realtor_id"]
    return _write_subscription(client, row)


def _on_payment_failed(client: Client, invoice: dict) -> Optional[dict]:
    customer_id = _customer_id(invoice)
    rows = update_rows(
        client,
        SUBSCRIPTIONS_TABLE,
        {"status": SubscriptionStatus.PAST_DUE.value, "updated_at": _now_iso()},
        {"customer_id": customer_id},
    )
    if not rows:
        logger.warning("Payment failed for customer without subscription row", customer_id=customer_id)
        return None
    return rows[0]


def _on_subscription_deleted(client: Client, subscription: dict) -> dict:
    customer_id = _customer_id(subscription)
    row = {
        "customer_id": customer_id,
        "status": SubscriptionStatus.CANCELED.value,
        "property_limit": 0,
        "trial_end": None,
    }
    return _write_subscription(client, row)


async def apply_stripe_event(
    client: Client,
    event: dict,
    catalog: Optional[dict[str, str]] = None
) -> Optional[dict]:
    """
    Apply one verified Stripe event to the subscriptions table.

    Every transition is an upsert or update keyed by customer id, so replaying
    an event converges on the same row. Returns the written row, or None for
    event types we do not track.
    """
    event_type = event.get("type")
    obj = (event.get("data") or {}).get("object") or {}

    if event_type not in HANDLED_EVENTS:
        logger.info("Ignoring Stripe event", event_type=event_type, event_id=event.get("id"))
        return None

    if event_type == CHECKOUT_COMPLETED:
        row = _on_checkout_completed(client, obj, catalog)
    elif event_type == SUBSCRIPTION_UPDATED:
        row = _on_subscription_updated(client, obj, catalog)
    elif event_type == INVOICE_PAYMENT_FAILED:
        row = _on_payment_failed(client, obj)
    else:
        row = _on_subscription_deleted(client, obj)

    logger.info(
        "Stripe event applied",
        event_type=event_type,
        event_id=event.get("id"),
        customer_id=row.get("customer_id") if row else None,
        plan=row.get("plan") if row else None,
        status=row.get("status") if row else None
    )
    return row


async def get_subscription_for_realtor(client: Client, realtor_id: str) -> Optional[dict]:
    """Most recently updated subscription row for a realtor."""
    rows = fetch_rows(
        client,
        SUBSCRIPTIONS_TABLE,
        {"realtor_id": realtor_id},
        order_by="updated_at",
        descending=True,
        limit=1,
    )
    return rows[0] if rows else None
