"""Property creation with plan limit enforcement."""

from supabase import Client
from src.models.property import PropertyCreate
from src.models.subscription import UNLIMITED, PropertyLimit
from src.services.plan_mapper import get_subscription_for_realtor
from src.services.supabase_client import count_rows, insert_row
from src.utils.config import get_free_property_limit
from src.utils.errors import PropertyLimitExceededError, RequestValidationError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

PROPERTIES_TABLE = "properties"


def _coerce_limit(value) -> PropertyLimit:
    if value == UNLIMITED:
        return UNLIMITED
    try:
        return int(value)
    except (TypeError, ValueError):
        # Unreadable limits lock the account rather than unlock it
        logger.warning("Unreadable property_limit, treating as 0", property_limit=str(value))
        return 0


async def get_property_limit(client: Client, realtor_id: str) -> PropertyLimit:
    """Persisted limit for the realtor; free-tier limit without a subscription."""
    subscription = await get_subscription_for_realtor(client, realtor_id)
    if subscription is None:
        return get_free_property_limit()
    return _coerce_limit(subscription.get("property_limit"))


async def check_property_limit(client: Client, realtor_id: str) -> int:
    """
    Raise PropertyLimitExceededError if one more property would exceed the plan.

    Returns the current property count.
    """
    limit = await get_property_limit(client, realtor_id)
    current = count_rows(client, PROPERTIES_TABLE, {"realtor_id": realtor_id})

    if limit != UNLIMITED and current + 1 > limit:
        logger.info(
            "Property limit reached",
            realtor_id=mask_user_id(realtor_id),
            property_count=current,
            property_limit=limit
        )
        raise PropertyLimitExceededError(
            f"Property limit exceeded: plan allows {limit}, realtor has {current}"
        )
    return current


async def create_property(client: Client, realtor_id: str, payload: dict) -> dict:
    """Single write path for new properties: validate, enforce the limit, insert."""
    if not realtor_id:
        raise RequestValidationError("realtor_id is required")

    data = PropertyCreate(**payload)
    await check_property_limit(client, realtor_id)

    row = data.model_dump(mode="json", exclude_none=True)
    row["realtor_id"] = realtor_id
    created = insert_row(client, PROPERTIES_TABLE, row)

    logger.info(
        "Property created",
        realtor_id=mask_user_id(realtor_id),
        property_id=created.get("id")
    )
    return created
