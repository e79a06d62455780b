from pathlib import Path
import json
import sys

import httpx
import pytest
from streamlit.testing.v1 import AppTest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import core.http
from core.models import FormStatus
from core.providers import GeminiClient

APP_PATH = str(ROOT / "app" / "streamlit_app.py")
PREMIUM_MAX_TOKENS = 8192
TIP = "Fehlende Zahnriemen-Rechnung als Verhandlungspunkt nutzen"


@pytest.fixture
def gemini(monkeypatch, checklist_reply):
    """Serve lite and premium checklists and keep every request body."""
    sent = []

    def handler(request):
        body = json.loads(request.content)
        sent.append(body)
        reply = dict(checklist_reply)
        if body["generationConfig"]["maxOutputTokens"] == PREMIUM_MAX_TOKENS:
            reply["negotiationTips"] = [TIP]
        text = json.dumps(reply, ensure_ascii=False)
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})

    def build_client(settings):
        return GeminiClient.from_settings(settings, transport=httpx.MockTransport(handler))

    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(core.http, "build_client", build_client)
    return sent


def click(at, label):
    next(b for b in at.button if b.label == label).click().run()


def run_lite_check(at, vehicle_info):
    at.run()
    click(at, "✍️ Type Details")
    at.text_input(key="vehicle_info").input(vehicle_info).run()
    click(at, "✓ Generate Free Inspection Check")
    assert not at.exception
    assert at.session_state["lite"].status is FormStatus.RESULT


def test_lite_then_premium_keeps_vehicle_info(gemini, monkeypatch):
    monkeypatch.setenv("CHECKCAR_PREMIUM_DEMO", "1")
    at = AppTest.from_file(APP_PATH, default_timeout=30)

    run_lite_check(at, "VW Golf 7 TDI, 2015")
    click(at, "Upgrade to Premium - €2.50")

    assert not at.exception
    assert not at.error
    assert at.session_state["premium"].status is FormStatus.RESULT
    assert at.success[0].value.startswith("✓ Premium Check Unlocked!")
    assert len(at.checkbox) == 3

    assert len(gemini) == 2
    premium_prompt = gemini[1]["contents"][0]["parts"][0]["text"]
    assert "Fahrzeug-Info: VW Golf 7 TDI, 2015" in premium_prompt
    assert gemini[1]["generationConfig"]["maxOutputTokens"] == PREMIUM_MAX_TOKENS


def test_premium_is_disabled_without_demo_mode(gemini, monkeypatch):
    monkeypatch.delenv("CHECKCAR_PREMIUM_DEMO", raising=False)
    at = AppTest.from_file(APP_PATH, default_timeout=30)

    run_lite_check(at, "Audi A4 B8, 2012")

    upgrade = next(b for b in at.button if b.label == "Upgrade to Premium - €2.50")
    assert upgrade.disabled
    assert at.info[0].value == "Premium checkout is not available yet."
    assert at.session_state["premium"].status is FormStatus.IDLE
    assert len(gemini) == 1


def test_intake_result_is_shown_in_text_field(gemini):
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    # State as left behind by a successful photo/document/voice step.
    at.session_state["vehicle_info"] = "BMW 3er E90, 2010, 180.000 km"
    at.session_state["input_mode"] = "text"
    at.run()

    assert not at.exception
    assert at.text_input(key="vehicle_info").value == "BMW 3er E90, 2010, 180.000 km"
    generate = next(b for b in at.button if b.label == "✓ Generate Free Inspection Check")
    assert not generate.disabled
    assert gemini == []


def test_quick_example_fills_text_field(gemini):
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()

    example = "Mercedes C-Class W204, 2011"
    at.button(key=f"example_{example}").click().run()

    assert not at.exception
    assert at.session_state["input_mode"] == "text"
    assert at.text_input(key="vehicle_info").value == example


def test_check_another_car_returns_to_mode_selection(gemini, monkeypatch):
    monkeypatch.setenv("CHECKCAR_PREMIUM_DEMO", "1")
    at = AppTest.from_file(APP_PATH, default_timeout=30)

    run_lite_check(at, "VW Golf 7 TDI, 2015")
    click(at, "Check another car")

    assert not at.exception
    assert at.session_state["input_mode"] == "select"
    assert at.session_state["lite"].status is FormStatus.IDLE
    assert at.session_state["submitted_vehicle_info"] == ""
