"""Environment-backed configuration getters.

Values are read at call time so tests and serverless cold starts see the
current environment.
"""

import json
import os
from typing import Optional

from src.utils.errors import SkyRealtyError


def _require(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise SkyRealtyError(f"{name} not set")
    return value


def get_supabase_credentials() -> tuple[str, str]:
    """Return (url, service role key) for the Supabase project."""
    return _require("SUPABASE_URL"), _require("SUPABASE_SERVICE_ROLE_KEY")


def get_stripe_secret_key() -> str:
    return _require("STRIPE_SECRET_KEY")


def get_stripe_webhook_secret() -> str:
    return _require("STRIPE_WEBHOOK_SECRET")


def get_price_catalog() -> dict[str, str]:
    """
    Load the Stripe price catalog.

    STRIPE_PRICE_PLANS holds a JSON object of literal price id -> plan tier.
    """
    raw = os.environ.get("STRIPE_PRICE_PLANS", "").strip()
    if not raw:
        return {}
    try:
        catalog = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SkyRealtyError(f"STRIPE_PRICE_PLANS is not valid JSON: {e}")
    if not isinstance(catalog, dict):
        raise SkyRealtyError("STRIPE_PRICE_PLANS must be a JSON object")
    return {str(k): str(v).lower() for k, v in catalog.items()}


def get_app_url() -> str:
    return os.environ.get("APP_URL", "http://localhost:3000").rstrip("/")


def get_free_property_limit() -> int:
    return int(os.environ.get("FREE_PROPERTY_LIMIT", "1"))


def get_expiry_horizon_days() -> int:
    return int(os.environ.get("LEASE_EXPIRY_HORIZON_DAYS", "30"))


def get_llm_settings() -> tuple[str, str]:
    """Return (provider, model) for maintenance triage."""
    provider = os.environ.get("LLM_PROVIDER", "openai").lower()
    model_name = os.environ.get("LLM_MODEL", "gpt-4")
    return provider, model_name


def is_llm_triage_enabled() -> bool:
    return os.environ.get("USE_LLM_TRIAGE", "true").lower() == "true"


def get_llm_api_key(provider: str) -> Optional[str]:
    if provider == "anthropic":
        return os.environ.get("ANTHROPIC_API_KEY")
    if provider == "openai":
        return os.environ.get("OPENAI_API_KEY")
    return None


def get_clerk_secret_key() -> str:
    return _require("CLERK_SECRET_KEY")


def get_clerk_api_url() -> str:
    return os.environ.get("CLERK_API_URL", "https://api.clerk.dev/v1").rstrip("/")
