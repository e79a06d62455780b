"""Vercel serverless function: identify a car from a photo."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.http import handle
from core.pipeline import analyze_vehicle_image


def _run(client, settings, body):
    return analyze_vehicle_image(
        client,
        settings,
        body.get("image"),
        analysis_type=body.get("analysisType"),
        mime_type=body.get("mimeType"),
    )


def handler(request):
    """POST ``{image, analysisType?, mimeType?}`` -> vehicle attributes."""
    return handle(request, _run, "analyze-image")
