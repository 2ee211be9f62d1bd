"""Shared pytest fixtures and configuration."""

import json
import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")
os.environ.setdefault("CLERK_SECRET_KEY", "sk_clerk_test")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("USE_LLM_TRIAGE", "true")
os.environ.setdefault("APP_URL", "https://app.test")

from src.utils.logging_config import LoggingConfig  # noqa: E402
from tests.utils.fake_supabase import FakeSupabaseClient  # noqa: E402

# Keep pytest's own log capture handlers in place
LoggingConfig._configured = True

PRICE_CATALOG = {
    "price_basic_monthly": "basic",
    "price_pro_monthly": "pro",
    "price_premium_monthly": "premium",
}


@pytest.fixture(autouse=True)
def price_catalog_env(monkeypatch):
    """Explicit price catalog used by checkout and the webhook."""
    monkeypatch.setenv("STRIPE_PRICE_PLANS", json.dumps(PRICE_CATALOG))
    return PRICE_CATALOG


@pytest.fixture
def fake_client():
    """Empty in-memory Supabase client."""
    return FakeSupabaseClient()


@pytest.fixture
def notification_client():
    """Supabase client whose notification table enforces (realtor_id, message) uniqueness."""
    return FakeSupabaseClient(unique_constraints={"notification": ("realtor_id", "message")})


@pytest.fixture
def realtor_id():
    return "user_2abcdefghijklmnopqrstuv"


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2025-03-01 12:00:00") as frozen_time:
        yield frozen_time
