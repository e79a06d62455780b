from pathlib import Path
import json
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from core.errors import DomainRejection, InvalidRequest, MalformedReply
from core.models import CheckType
from core.pipeline import (
    CHECKLIST_MAX_TOKENS,
    DOCUMENT_TEMPERATURE,
    VEHICLE_PHOTO_TEMPERATURE,
    analyze_registration_document,
    analyze_vehicle_image,
    generate_checklist,
    transcribe_voice_note,
)


def test_analyze_vehicle_image_returns_parsed_object(settings, png_base64, fake_gemini):
    reply = {"make": "BMW", "model": "3er", "year": "2008-2011", "bodyType": "sedan",
             "vehicleDescription": "BMW 3er E90 2010"}
    client = fake_gemini("Here is the result:\n" + json.dumps(reply))

    result = analyze_vehicle_image(client, settings, png_base64, "vehicle-identification")

    assert result == reply
    request = client.requests[0]
    assert request.model == settings.vision_model
    assert request.temperature == VEHICLE_PHOTO_TEMPERATURE
    assert request.max_output_tokens == 1024
    assert request.mime_type == "image/png"
    assert request.inline_data == png_base64
    assert "Analyze this car image" in request.prompt


def test_analyze_vehicle_image_honours_explicit_mime(settings, png_base64, fake_gemini):
    client = fake_gemini('{"make": "unknown"}')
    analyze_vehicle_image(client, settings, png_base64, mime_type="image/webp")
    assert client.requests[0].mime_type == "image/webp"


def test_analyze_vehicle_image_accepts_data_url(settings, png_base64, fake_gemini):
    client = fake_gemini('{"make": "unknown"}')
    analyze_vehicle_image(client, settings, f"data:image/heic;base64,{png_base64}")
    assert client.requests[0].mime_type == "image/heic"
    assert client.requests[0].inline_data == png_base64


def test_missing_image_is_rejected_before_upstream_call(settings, fake_gemini):
    client = fake_gemini("{}")
    with pytest.raises(InvalidRequest):
        analyze_vehicle_image(client, settings, None)
    with pytest.raises(InvalidRequest):
        analyze_vehicle_image(client, settings, "not base64!!")
    assert client.requests == []


def test_document_error_field_becomes_domain_rejection(settings, png_base64, fake_gemini):
    client = fake_gemini(
        '{"error": "Document not readable or not a vehicle registration", "extractedInfo": ""}'
    )
    with pytest.raises(DomainRejection) as excinfo:
        analyze_registration_document(client, settings, png_base64, "registration")
    assert excinfo.value.message == "Document not readable or not a vehicle registration"


def test_document_success_uses_low_temperature(settings, png_base64, fake_gemini):
    reply = {"make": "VOLKSWAGEN", "model": "GOLF", "extractedInfo": "VW Golf, 2015, Diesel, 110 kW"}
    client = fake_gemini(json.dumps(reply))

    result = analyze_registration_document(client, settings, png_base64)

    assert result == reply
    request = client.requests[0]
    assert request.temperature == DOCUMENT_TEMPERATURE
    assert "Zulassungsbescheinigung Teil I" in request.prompt


def test_unparseable_document_reply_raises_malformed(settings, png_base64, fake_gemini):
    client = fake_gemini("I cannot read this image.")
    with pytest.raises(MalformedReply):
        analyze_registration_document(client, settings, png_base64)


def test_generate_lite_checklist(settings, checklist_text, fake_gemini, checklist_reply):
    client = fake_gemini(checklist_text)

    result = generate_checklist(client, settings, "VW Golf 7 TDI, 2015", "lite")

    assert result["checkType"] == "lite"
    assert result["vehicleInfo"] == checklist_reply["vehicleInfo"]
    assert result["riskScore"] == 42
    assert result["priceEstimate"] == {"min": 9500.0, "max": 12500.0}
    assert [i["risk"] for i in result["checklistItems"]] == ["high", "medium", "low"]
    assert result["checklistItems"][2]["category"] == "Innenraum & Elektronik"
    assert "negotiationTips" not in result

    request = client.requests[0]
    assert request.model == settings.text_model
    assert request.inline_data is None
    assert request.max_output_tokens == CHECKLIST_MAX_TOKENS[CheckType.LITE]
    assert "Fahrzeug-Info: VW Golf 7 TDI, 2015" in request.prompt
    assert "Mind. 8-12" in request.prompt


def test_generate_premium_checklist_includes_tips(settings, fake_gemini, checklist_reply):
    reply = dict(checklist_reply, negotiationTips=["DPF-Risiko einpreisen", " "])
    client = fake_gemini(json.dumps(reply))

    result = generate_checklist(client, settings, "VW Golf 7 TDI", "premium")

    assert result["checkType"] == "premium"
    assert result["negotiationTips"] == ["DPF-Risiko einpreisen"]
    request = client.requests[0]
    assert request.max_output_tokens == CHECKLIST_MAX_TOKENS[CheckType.PREMIUM]
    assert "Mind. 25-30" in request.prompt
    assert "negotiationTips" in request.prompt


def test_check_type_defaults_to_lite(settings, checklist_text, fake_gemini):
    client = fake_gemini(checklist_text)
    assert generate_checklist(client, settings, "Audi A4 B8")["checkType"] == "lite"


@pytest.mark.parametrize("vehicle_info, check_type", [
    ("", "lite"),
    ("   ", "lite"),
    (None, "lite"),
    ("x" * 501, "lite"),
    ("Audi A4", "gold"),
])
def test_generate_checklist_rejects_bad_input(settings, vehicle_info, check_type, fake_gemini):
    client = fake_gemini("{}")
    with pytest.raises(InvalidRequest):
        generate_checklist(client, settings, vehicle_info, check_type)
    assert client.requests == []


def test_checklist_with_unknown_risk_is_malformed(settings, fake_gemini, checklist_reply):
    reply = dict(checklist_reply, checklistItems=[
        {"category": "Motor & Antrieb", "item": "Ölverlust", "risk": "critical", "why": ""},
    ])
    client = fake_gemini(json.dumps(reply))
    with pytest.raises(MalformedReply) as excinfo:
        generate_checklist(client, settings, "Audi A4", "lite")
    assert excinfo.value.raw_text == json.dumps(reply)


def test_transcribe_voice_note(settings, fake_gemini):
    client = fake_gemini('{"transcript": " Mercedes C-Klasse W204, 2011 "}')

    result = transcribe_voice_note(client, settings, "UklGRg==")

    assert result == {"transcript": "Mercedes C-Klasse W204, 2011"}
    assert client.requests[0].mime_type == "audio/wav"


def test_transcribe_without_speech_is_domain_rejection(settings, fake_gemini):
    client = fake_gemini('{"error": "No speech detected"}')
    with pytest.raises(DomainRejection):
        transcribe_voice_note(client, settings, "UklGRg==", mime_type="audio/webm")
