"""Vercel serverless function: transcribe a spoken vehicle description."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.http import handle
from core.pipeline import transcribe_voice_note


def _run(client, settings, body):
    return transcribe_voice_note(client, settings, body.get("audio"), mime_type=body.get("mimeType"))


def handler(request):
    return handle(request, _run, "transcribe-audio")
