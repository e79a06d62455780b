"""Form steps behind the Streamlit UI, operating on a session-state mapping."""

from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping
from typing import Any

from core.models import CheckType, FormState, FormStatus

logger = logging.getLogger(__name__)

# Owned by the text_input widget; Streamlit drops it whenever the widget is not rendered.
VEHICLE_INFO_KEY = "vehicle_info"
# Description the lite checklist was generated for; no widget owns this key.
SUBMITTED_INFO_KEY = "submitted_vehicle_info"

INTAKE_RESULT_FIELDS = {
    "photo": "vehicleDescription",
    "document": "extractedInfo",
    "voice": "transcript",
}


def call_endpoint(module, payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    """Invoke a serverless handler in-process, exactly as Vercel would."""
    response = module.handler({"method": "POST", "body": json.dumps(payload)})
    try:
        body = json.loads(response["body"])
    except (TypeError, ValueError):
        body = {"error": "Unreadable response"}
    return response["statusCode"], body


def run_step(session: MutableMapping, state_key: str, module, payload: dict[str, Any]) -> FormState:
    """Move one form step through Loading to Result or Error."""
    state: FormState = session.get(state_key, FormState.idle()).start()
    session[state_key] = state
    status, body = call_endpoint(module, payload)
    state = state.complete(status, body)
    session[state_key] = state
    if state.status is FormStatus.ERROR:
        logger.warning("%s failed with %s: %s", state_key, status, state.error)
    return state


def run_intake(session: MutableMapping, mode: str, module, payload: dict[str, Any]) -> FormState:
    """Run a photo/document/voice step and prefill the text field from its result."""
    state = run_step(session, "intake", module, payload)
    if state.status is FormStatus.RESULT:
        session[VEHICLE_INFO_KEY] = state.payload.get(INTAKE_RESULT_FIELDS[mode], "") or ""
        session["input_mode"] = "text"
    return state


def submit_lite(session: MutableMapping, module, vehicle_info: str) -> FormState:
    session[SUBMITTED_INFO_KEY] = vehicle_info.strip()
    session["premium"] = FormState.idle()
    return run_step(
        session,
        "lite",
        module,
        {"vehicleInfo": session[SUBMITTED_INFO_KEY], "checkType": CheckType.LITE.value},
    )


def request_premium(session: MutableMapping, module) -> FormState:
    """Fetch the premium checklist for the description the lite check used."""
    return run_step(
        session,
        "premium",
        module,
        {"vehicleInfo": session.get(SUBMITTED_INFO_KEY, ""), "checkType": CheckType.PREMIUM.value},
    )
