"""Vercel serverless entrypoint describing the CheckCar API.

The form UI lives in app/streamlit_app.py. Each use case is its own function
under api/; this one only tells callers where they are.
"""

from __future__ import annotations

import json

ENDPOINTS = {
    "/api/analyze_image": "POST {image, analysisType?, mimeType?} -> vehicle attributes",
    "/api/analyze_document": "POST {document, documentType?, mimeType?} -> registration fields",
    "/api/generate_checklist": "POST {vehicleInfo, checkType} -> inspection checklist",
    "/api/transcribe_audio": "POST {audio, mimeType?} -> {transcript}",
}


def handler(request):
    """Vercel Python serverless function handler."""
    body = {
        "ok": True,
        "project": "checkcar",
        "message": "AI-powered used car inspection checklists.",
        "endpoints": ENDPOINTS,
        "streamlit_entrypoint": "app/streamlit_app.py",
    }

    return {
        "statusCode": 200,
        "headers": {"content-type": "application/json"},
        "body": json.dumps(body),
    }
