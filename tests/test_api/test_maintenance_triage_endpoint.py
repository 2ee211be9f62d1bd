"""Tests for the maintenance triage endpoint."""

import importlib
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from tests.utils.assertions import assert_json_error
from tests.utils.helpers import call_handler

handler = importlib.import_module("api.maintenance-triage").handler


def _model(answer=None, error=None):
    model = MagicMock()
    if error is not None:
        model.ainvoke = AsyncMock(side_effect=error)
    else:
        model.ainvoke = AsyncMock(return_value=MagicMock(content=answer))
    return model


@pytest.mark.unit
def test_triage_returns_priority():
    with patch("src.services.maintenance_triage.get_llm_model", return_value=_model("High")):
        response = call_handler(handler, "POST", "/api/maintenance-triage", body={"description": "Gas smell in kitchen"})

    assert response.status == 200
    assert response.json() == {"priority": "High", "fallback": False}


@pytest.mark.unit
def test_triage_failure_returns_medium_fallback():
    with patch("src.services.maintenance_triage.get_llm_model", return_value=_model(error=RuntimeError("down"))):
        response = call_handler(handler, "POST", "/api/maintenance-triage", body={"description": "Door squeaks"})

    assert response.status == 200
    assert response.json() == {"priority": "Medium", "fallback": True}


@pytest.mark.unit
def test_missing_description_is_400():
    response = call_handler(handler, "POST", "/api/maintenance-triage", body={})

    assert_json_error(response, 400)
