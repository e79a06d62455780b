"""Recover a JSON object from a free-text model reply.

Gemini is asked to answer with a bare JSON object but regularly wraps it in
prose or ```json fences. The extractor starts at the first ``{`` and walks
forward tracking brace depth and string-literal state until the matching
``}``, so trailing commentary and braces inside string values do not corrupt
the result.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from core.errors import MalformedReply

logger = logging.getLogger(__name__)

_LOG_PREVIEW_CHARS = 300


def find_json_span(text: str) -> tuple[int, int] | None:
    """Return ``(start, end)`` of the first balanced ``{...}`` block, end exclusive."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        ch = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return start, pos + 1

    # Ran out of text before the object closed (usually a truncated reply).
    return None


def extract_json(text: str) -> dict[str, Any]:
    """Parse the first JSON object embedded in ``text``.

    Raises:
        MalformedReply: no object was found, the braces never balance, or the
            span is not valid JSON. The raw text is attached for diagnostics.
    """
    if not isinstance(text, str):
        raise MalformedReply("Reply is not text", raw_text=repr(text))

    span = find_json_span(text)
    if span is None:
        if "{" in text:
            reason = "Unbalanced braces in reply"
        else:
            reason = "No JSON object in reply"
        logger.error("%s: %s", reason, text[:_LOG_PREVIEW_CHARS])
        raise MalformedReply(reason, raw_text=text)

    candidate = text[span[0]:span[1]]
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON in reply (%s): %s", exc, text[:_LOG_PREVIEW_CHARS])
        raise MalformedReply(f"Invalid JSON in reply: {exc}", raw_text=text) from exc

    return parsed
