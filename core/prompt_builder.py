"""Prompt builder that turns request fields into Gemini instructions."""

from __future__ import annotations

import logging

from core.errors import InvalidRequest
from core.models import CheckType
from prompts.templates import (
    ANALYSIS_FOCUS,
    CHECKLIST_SYSTEM,
    CHECKLIST_TIERS,
    CHECKLIST_USER,
    DOCUMENT_LABELS,
    REGISTRATION_DOCUMENT,
    VEHICLE_PHOTO,
    VOICE_TRANSCRIPTION,
)

logger = logging.getLogger(__name__)


def _option(value: object, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidRequest(f"Field '{field_name}' must be a string")
    return value.strip()


def build_vehicle_photo_prompt(analysis_type: object = None) -> str:
    """Build the identification prompt for a car photo."""
    focus = ANALYSIS_FOCUS.get(_option(analysis_type, "analysisType"), "")
    return VEHICLE_PHOTO.substitute(focus=focus)


def build_document_prompt(document_type: object = None) -> str:
    key = _option(document_type, "documentType") or "registration"
    label = DOCUMENT_LABELS.get(key, DOCUMENT_LABELS["registration"])
    return REGISTRATION_DOCUMENT.substitute(document_label=label)


def build_checklist_prompt(vehicle_info: str, check_type: CheckType) -> str:
    """Build the full checklist prompt for one vehicle description and tier."""
    tier = CHECKLIST_TIERS[check_type.value]
    system = CHECKLIST_SYSTEM.substitute(**tier)
    prompt = CHECKLIST_USER.substitute(system=system, vehicle_info=vehicle_info.strip())
    logger.debug("Built %s checklist prompt (%d chars)", check_type.value, len(prompt))
    return prompt


def build_transcription_prompt() -> str:
    return VOICE_TRANSCRIPTION
