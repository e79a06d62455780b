"""Use-case orchestration: build prompt, call Gemini once, extract the result."""

from __future__ import annotations

import logging
from typing import Any

from core.config import Settings
from core.errors import DomainRejection, InvalidRequest, MalformedReply
from core.extractor import extract_json
from core.media import prepare_audio, prepare_image
from core.models import Checklist, CheckType, ExtractionRequest
from core.prompt_builder import (
    build_checklist_prompt,
    build_document_prompt,
    build_transcription_prompt,
    build_vehicle_photo_prompt,
)
from core.providers import GeminiClient

logger = logging.getLogger(__name__)

VEHICLE_PHOTO_TEMPERATURE = 0.4
DOCUMENT_TEMPERATURE = 0.2  # low for accurate OCR
CHECKLIST_TEMPERATURE = 0.7
TRANSCRIPTION_TEMPERATURE = 0.0

VISION_MAX_TOKENS = 1024
CHECKLIST_MAX_TOKENS: dict[CheckType, int] = {
    CheckType.LITE: 2048,
    CheckType.PREMIUM: 8192,
}
TRANSCRIPTION_MAX_TOKENS = 512

MAX_VEHICLE_INFO_CHARS = 500


def _reject_on_error_field(result: dict[str, Any]) -> dict[str, Any]:
    error = result.get("error")
    if error:
        logger.info("Model rejected input: %s", error)
        raise DomainRejection(str(error))
    return result


def analyze_vehicle_image(
    client: GeminiClient,
    settings: Settings,
    image: object,
    analysis_type: object = None,
    mime_type: str | None = None,
) -> dict[str, Any]:
    """Identify make, model, year and body type from a car photo."""
    data, mime = prepare_image(image, "image", mime_type)
    request = ExtractionRequest(
        prompt=build_vehicle_photo_prompt(analysis_type),
        model=settings.vision_model,
        temperature=VEHICLE_PHOTO_TEMPERATURE,
        max_output_tokens=VISION_MAX_TOKENS,
        inline_data=data,
        mime_type=mime,
    )
    return _reject_on_error_field(extract_json(client.generate(request)))


def analyze_registration_document(
    client: GeminiClient,
    settings: Settings,
    document: object,
    document_type: object = None,
    mime_type: str | None = None,
) -> dict[str, Any]:
    """OCR the fields of a German registration document.

    Raises DomainRejection when the model reports the scan as unreadable.
    """
    data, mime = prepare_image(document, "document", mime_type)
    request = ExtractionRequest(
        prompt=build_document_prompt(document_type),
        model=settings.vision_model,
        temperature=DOCUMENT_TEMPERATURE,
        max_output_tokens=VISION_MAX_TOKENS,
        inline_data=data,
        mime_type=mime,
    )
    return _reject_on_error_field(extract_json(client.generate(request)))


def generate_checklist(
    client: GeminiClient,
    settings: Settings,
    vehicle_info: object,
    check_type: object = None,
) -> dict[str, Any]:
    """Generate a model-specific inspection checklist in the requested tier."""
    if not isinstance(vehicle_info, str) or not vehicle_info.strip():
        raise InvalidRequest("Missing required field 'vehicleInfo'")
    if len(vehicle_info) > MAX_VEHICLE_INFO_CHARS:
        raise InvalidRequest(f"'vehicleInfo' exceeds {MAX_VEHICLE_INFO_CHARS} characters")
    tier = CheckType.parse(check_type)

    request = ExtractionRequest(
        prompt=build_checklist_prompt(vehicle_info, tier),
        model=settings.text_model,
        temperature=CHECKLIST_TEMPERATURE,
        max_output_tokens=CHECKLIST_MAX_TOKENS[tier],
    )
    reply = client.generate(request)
    checklist = Checklist.from_dict(extract_json(reply), tier, raw_text=reply)
    logger.info(
        "Checklist generated tier=%s items=%d risk_score=%s",
        tier.value,
        len(checklist.items),
        checklist.risk_score,
    )
    return checklist.to_dict()


def transcribe_voice_note(
    client: GeminiClient,
    settings: Settings,
    audio: object,
    mime_type: str | None = None,
) -> dict[str, Any]:
    data, mime = prepare_audio(audio, "audio", mime_type)
    request = ExtractionRequest(
        prompt=build_transcription_prompt(),
        model=settings.vision_model,
        temperature=TRANSCRIPTION_TEMPERATURE,
        max_output_tokens=TRANSCRIPTION_MAX_TOKENS,
        inline_data=data,
        mime_type=mime,
    )
    reply = client.generate(request)
    result = _reject_on_error_field(extract_json(reply))
    transcript = result.get("transcript")
    if not isinstance(transcript, str) or not transcript.strip():
        raise MalformedReply("Reply has no transcript", raw_text=reply)
    return {"transcript": transcript.strip()}
