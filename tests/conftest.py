from pathlib import Path
import base64
import io
import json
import sys

import pytest
from PIL import Image

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from core.config import Settings


class FakeGemini:
    """Stands in for GeminiClient; records requests and replays canned text."""

    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.requests = []

    def generate(self, request):
        self.requests.append(request)
        return self.reply


CHECKLIST_REPLY = {
    "vehicleInfo": {"make": "VW", "model": "Golf 7 TDI", "year": 2015, "mileage": "140.000 km"},
    "riskScore": 42,
    "priceEstimate": {"min": 9500, "max": 12500},
    "checklistItems": [
        {
            "category": "Motor & Antrieb",
            "item": "Dieselpartikelfilter auf Verstopfung prüfen",
            "risk": "high",
            "why": "Bei Kurzstrecke setzt sich der DPF beim 2.0 TDI häufig zu.",
        },
        {
            "category": "Fahrwerk & Bremsen",
            "item": "Koppelstangen auf Spiel prüfen",
            "risk": "Medium",
            "why": "Verschleißteil, klappert hörbar.",
        },
        {
            "category": "innenraum &  elektronik",
            "item": "Infotainment auf Neustarts testen",
            "risk": "low",
            "why": "",
        },
    ],
}


@pytest.fixture
def settings():
    return Settings(api_key="test-key")


@pytest.fixture
def png_base64():
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), (200, 30, 30)).save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def checklist_text():
    return "```json\n" + json.dumps(CHECKLIST_REPLY, ensure_ascii=False) + "\n```"


@pytest.fixture
def fake_gemini():
    return FakeGemini


@pytest.fixture
def checklist_reply():
    return json.loads(json.dumps(CHECKLIST_REPLY))
