"""Request parsing and response shaping shared by the serverless handlers."""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from core.config import Settings, load_settings
from core.errors import (
    ConfigurationMissing,
    DomainRejection,
    InvalidRequest,
    MalformedReply,
    UpstreamFailure,
    UpstreamShapeError,
)
from core.providers import GeminiClient

logger = logging.getLogger(__name__)

JSON_HEADERS = {"content-type": "application/json"}

Operation = Callable[[GeminiClient, Settings, dict[str, Any]], dict[str, Any]]


def json_response(status_code: int, body: Any) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(body, ensure_ascii=False),
    }


def _request_field(request: Any, *names: str) -> Any:
    for name in names:
        if isinstance(request, Mapping):
            if name in request:
                return request[name]
        elif hasattr(request, name):
            return getattr(request, name)
    return None


def request_method(request: Any) -> str:
    method = _request_field(request, "method", "httpMethod")
    return str(method or "").upper()


def parse_json_body(request: Any) -> dict[str, Any]:
    """Return the JSON object sent as the request body."""
    body = _request_field(request, "body")
    if body is None or body == "" or body == b"":
        raise InvalidRequest("Request body is empty")
    if isinstance(body, Mapping):
        return dict(body)

    if _request_field(request, "isBase64Encoded"):
        try:
            body = base64.b64decode(body)
        except ValueError as exc:
            raise InvalidRequest("Request body is not valid base64") from exc
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidRequest("Request body is not UTF-8") from exc

    try:
        parsed = json.loads(body)
    except (TypeError, json.JSONDecodeError) as exc:
        raise InvalidRequest(f"Request body is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return parsed


def build_client(settings: Settings) -> GeminiClient:
    return GeminiClient.from_settings(settings)


def handle(request: Any, operation: Operation, name: str) -> dict[str, Any]:
    """Run one use case behind the POST/credential checks and map failures to HTTP."""
    if request_method(request) != "POST":
        return json_response(405, {"error": "Method not allowed"})

    try:
        settings = load_settings()
        if not settings.has_api_key:
            raise ConfigurationMissing("API key not configured")
        body = parse_json_body(request)
        result = operation(build_client(settings), settings, body)
        return json_response(200, result)

    except ConfigurationMissing as exc:
        logger.error("%s: GEMINI_API_KEY not configured", name)
        return json_response(500, {"error": str(exc)})
    except InvalidRequest as exc:
        logger.info("%s: rejected request: %s", name, exc)
        return json_response(400, {"error": str(exc)})
    except DomainRejection as exc:
        return json_response(400, {"error": exc.message, "extractedInfo": ""})
    except UpstreamFailure as exc:
        status = exc.status_code if 400 <= exc.status_code <= 599 else 502
        return json_response(status, {
            "error": f"Vision API Error: {exc.status_code}",
            "details": exc.body,
        })
    except UpstreamShapeError as exc:
        details = exc.payload
        if not isinstance(details, str):
            details = json.dumps(details, ensure_ascii=False)
        return json_response(500, {"error": str(exc), "details": details})
    except MalformedReply as exc:
        logger.error("%s: could not parse reply: %s", name, exc)
        return json_response(500, {
            "error": "Could not parse API response",
            "details": str(exc),
            "rawResponse": exc.raw_text,
        })
    except Exception as exc:
        logger.exception("%s: unexpected server error", name)
        return json_response(500, {"error": "Internal server error", "message": str(exc)})
