"""Vercel serverless function: OCR a vehicle registration document."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.http import handle
from core.pipeline import analyze_registration_document


def _run(client, settings, body):
    return analyze_registration_document(
        client,
        settings,
        body.get("document"),
        document_type=body.get("documentType"),
        mime_type=body.get("mimeType"),
    )


def handler(request):
    """POST ``{document, documentType?, mimeType?}`` -> registration fields.

    An unreadable scan answers 400 ``{error, extractedInfo: ""}``.
    """
    return handle(request, _run, "analyze-document")
