"""LLM priority triage for maintenance requests using LangChain chat models."""

import time
from typing import Optional
from pydantic import BaseModel
from supabase import Client
from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI
from src.models.maintenance import MaintenanceRequest, Priority, FALLBACK_PRIORITY
from src.services.supabase_client import fetch_rows, insert_row, update_rows
from src.utils.config import get_llm_settings, get_llm_api_key, is_llm_triage_enabled
from src.utils.errors import TriageError
from src.utils.logging import get_structured_logger, sanitize_text, mask_user_id

logger = get_structured_logger(__name__)

MAINTENANCE_TABLE = "maintenance_requests"

SYSTEM_PROMPT = (
    "You are an assistant that assigns priority to maintenance requests. "
    "Return only one word: Low, Medium, or High."
)


class TriageResult(BaseModel):
    priority: Priority
    fallback: bool = False


def build_triage_messages(description: str) -> list[tuple[str, str]]:
    return [
        ("system", SYSTEM_PROMPT),
        ("human", f'Prioritize this maintenance request: "{description}"'),
    ]


def get_llm_model():
    """Get configured LLM model."""
    provider, model_name = get_llm_settings()
    api_key = get_llm_api_key(provider)

    if provider == "anthropic":
        if not api_key:
            raise TriageError("ANTHROPIC_API_KEY not set")
        return ChatAnthropic(model=model_name, api_key=api_key, temperature=0)
    elif provider == "openai":
        if not api_key:
            raise TriageError("OPENAI_API_KEY not set")
        return ChatOpenAI(model=model_name, api_key=api_key, temperature=0)
    else:
        raise TriageError(f"Unsupported LLM provider: {provider}")


async def triage_priority(description: str) -> TriageResult:
    """
    Ask the LLM for a priority.

    Never raises: a disabled classifier, provider error, or answer outside
    {Low, Medium, High} yields the Medium fallback so the caller's write goes
    ahead.
    """
    if not description or not description.strip():
        return TriageResult(priority=FALLBACK_PRIORITY, fallback=True)

    if not is_llm_triage_enabled():
        logger.debug("LLM triage disabled via feature flag")
        return TriageResult(priority=FALLBACK_PRIORITY, fallback=True)

    provider, model_name = get_llm_settings()
    start = time.time()
    try:
        model = get_llm_model()
        response = await model.ainvoke(build_triage_messages(description))
        content = response.content if hasattr(response, "content") else str(response)
    except Exception as e:
        logger.error(
            "Maintenance triage failed, using fallback",
            llm_provider=provider,
            llm_model=model_name,
            error=str(e),
            description_preview=sanitize_text(description, max_length=80)
        )
        return TriageResult(priority=FALLBACK_PRIORITY, fallback=True)

    priority = Priority.parse(content if isinstance(content, str) else str(content))
    latency_ms = round((time.time() - start) * 1000, 2)

    if priority is None:
        logger.warning(
            "Unrecognized triage answer, using fallback",
            llm_provider=provider,
            llm_model=model_name,
            answer=str(content)[:40],
            llm_latency_ms=latency_ms
        )
        return TriageResult(priority=FALLBACK_PRIORITY, fallback=True)

    logger.info(
        "Maintenance request triaged",
        llm_provider=provider,
        llm_model=model_name,
        priority=priority.value,
        llm_latency_ms=latency_ms
    )
    return TriageResult(priority=priority)


async def create_maintenance_request(client: Client, payload: dict) -> dict:
    """Insert a maintenance request, triaging it first when no priority was given."""
    request = MaintenanceRequest(**payload)
    if request.priority is None:
        result = await triage_priority(request.description)
        request.priority = result.priority

    row = request.model_dump(mode="json", exclude_none=True)
    return insert_row(client, MAINTENANCE_TABLE, row)


async def backfill_priorities(client: Client, realtor_id: str, limit: Optional[int] = None) -> int:
    """Triage every request of a realtor that still has no priority."""
    rows = fetch_rows(
        client,
        MAINTENANCE_TABLE,
        {"realtor_id": realtor_id, "priority": None},
        limit=limit,
    )

    updated = 0
    for row in rows:
        result = await triage_priority(row.get("description") or row.get("title") or "")
        update_rows(
            client,
            MAINTENANCE_TABLE,
            {"priority": result.priority.value},
            {"id": row["id"], "realtor_id": realtor_id},
        )
        updated += 1

    logger.info(
        "Maintenance priority backfill finished",
        realtor_id=mask_user_id(realtor_id),
        updated=updated
    )
    return updated
