"""Error handling utilities."""


class SkyRealtyError(Exception):
    """Base exception for Sky Realty backend."""
    status_code = 500


class SupabaseError(SkyRealtyError):
    """Supabase operation error."""
    pass


class RequestValidationError(SkyRealtyError):
    """Request payload or query parameters are missing or malformed."""
    status_code = 400


class WebhookVerificationError(SkyRealtyError):
    """Webhook signature verification failed."""
    status_code = 400


class WebhookPayloadError(SkyRealtyError):
    """Verified webhook event is missing fields we need."""
    status_code = 400


class UnknownPriceError(SkyRealtyError):
    """Price id is not present in the configured price catalog."""
    status_code = 400


class RecordNotFoundError(SkyRealtyError):
    """Requested row does not exist for this owner."""
    status_code = 404


class PropertyLimitExceededError(SkyRealtyError):
    """Realtor has reached the property limit of their plan."""
    status_code = 409


class RoleConflictError(SkyRealtyError):
    """Identity already has a different role."""
    status_code = 409


class TriageError(SkyRealtyError):
    """LLM maintenance triage error."""
    pass


class CheckoutError(SkyRealtyError):
    """Stripe checkout session creation failed."""
    pass


class OrganizationError(SkyRealtyError):
    """Identity-provider organization call failed."""
    pass
