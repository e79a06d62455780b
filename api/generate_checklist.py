"""Vercel serverless function: model-specific used-car inspection checklist."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.http import handle
from core.pipeline import generate_checklist


def _run(client, settings, body):
    return generate_checklist(client, settings, body.get("vehicleInfo"), body.get("checkType"))


def handler(request):
    """POST ``{vehicleInfo, checkType: "lite" | "premium"}`` -> checklist."""
    return handle(request, _run, "generate-checklist")
