"""Streamlit form for CheckCar, the AI-powered used car inspection.

Features:
- Four input modes: photo, registration document, text, voice
- Free lite checklist generated from the vehicle description
- Premium checklist behind a (stubbed) payment gate, with interactive checkboxes
- Every form step is an explicit FormState (idle, loading, result, error)
"""

from __future__ import annotations

import base64
import logging
import sys
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from api import analyze_document, analyze_image, generate_checklist, transcribe_audio
from app.form_steps import (
    SUBMITTED_INFO_KEY,
    VEHICLE_INFO_KEY,
    request_premium,
    run_intake,
    submit_lite,
)
from core.config import load_settings
from core.models import RISK_ICONS, FormState, FormStatus, Risk

load_dotenv()
logging.basicConfig(level=logging.INFO)

st.set_page_config(page_title="CheckCar", page_icon="🚗", layout="centered")

QUICK_EXAMPLES = [
    "BMW 3 Series E90, 2010, 180k km",
    "VW Golf 7 GTI, 2015, DSG",
    "Audi A4 B8, 2012, TDI, 200k km",
    "Mercedes C-Class W204, 2011",
]

CHECKBOX_PREFIX = "premium-item-"

# ============================================================================
# Session state
# ============================================================================


def init_session_state():
    defaults = {
        "input_mode": "select",
        VEHICLE_INFO_KEY: "",
        SUBMITTED_INFO_KEY: "",
        "intake": FormState.idle(),
        "lite": FormState.idle(),
        "premium": FormState.idle(),
    }
    for key, val in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = val


def clear_checkboxes():
    for key in [k for k in st.session_state if str(k).startswith(CHECKBOX_PREFIX)]:
        del st.session_state[key]


def reset_form():
    """Drop all form state; defaults come back on the next rerun."""
    for key in ("input_mode", VEHICLE_INFO_KEY, SUBMITTED_INFO_KEY, "intake", "lite", "premium"):
        st.session_state.pop(key, None)
    clear_checkboxes()


def encode_upload(uploaded) -> tuple[str, str | None]:
    return base64.b64encode(uploaded.getvalue()).decode("ascii"), uploaded.type


def intake(mode: str, module, payload: dict, spinner: str):
    with st.spinner(spinner):
        state = run_intake(st.session_state, mode, module, payload)
    if state.status is FormStatus.RESULT:
        st.rerun()


init_session_state()
settings = load_settings()

# ============================================================================
# Header
# ============================================================================

st.title("🚗 CheckCar")
st.markdown("**AI-Powered Used Car Inspection**")
st.caption("Photo • Document • Text • Voice")

if not settings.has_api_key:
    st.warning("GEMINI_API_KEY is not set. Requests will fail with a configuration error.")

lite_state: FormState = st.session_state["lite"]
premium_state: FormState = st.session_state["premium"]
has_checklist = lite_state.status is FormStatus.RESULT

# ============================================================================
# Input mode selection
# ============================================================================

if st.session_state["input_mode"] == "select" and not has_checklist:
    st.subheader("How do you want to start?")
    col1, col2, col3, col4 = st.columns(4)
    if col1.button("📸 Take Photo", use_container_width=True):
        st.session_state["input_mode"] = "photo"
        st.rerun()
    if col2.button("📄 Scan Document", use_container_width=True):
        st.session_state["input_mode"] = "document"
        st.rerun()
    if col3.button("✍️ Type Details", use_container_width=True):
        st.session_state["input_mode"] = "text"
        st.rerun()
    if col4.button("🎤 Voice Input", use_container_width=True):
        st.session_state["input_mode"] = "voice"
        st.rerun()

    with st.expander("💡 Quick Start Examples"):
        for example in QUICK_EXAMPLES:
            if st.button(example, key=f"example_{example}"):
                st.session_state[VEHICLE_INFO_KEY] = example
                st.session_state["input_mode"] = "text"
                st.rerun()

# ============================================================================
# Photo / document / voice intake
# ============================================================================

mode = st.session_state["input_mode"]

if mode == "photo" and not has_checklist:
    st.subheader("Snap a picture of the car")
    snapshot = st.camera_input("Camera")
    upload = st.file_uploader("...or upload a photo", type=["jpg", "jpeg", "png", "webp", "heic"])
    photo = snapshot or upload
    if photo is not None and st.button("Identify vehicle", type="primary"):
        data, mime = encode_upload(photo)
        intake(
            "photo",
            analyze_image,
            {"image": data, "mimeType": mime, "analysisType": "vehicle-identification"},
            "Analyzing photo...",
        )

elif mode == "document" and not has_checklist:
    st.subheader("Upload the registration document")
    scan = st.file_uploader("Fahrzeugschein / Zulassungsbescheinigung", type=["jpg", "jpeg", "png"])
    if scan is not None and st.button("Read document", type="primary"):
        data, mime = encode_upload(scan)
        intake(
            "document",
            analyze_document,
            {"document": data, "mimeType": mime, "documentType": "registration"},
            "Reading document...",
        )

elif mode == "voice" and not has_checklist:
    st.subheader("Just speak the details")
    recording = st.audio_input("Record the vehicle details")
    if recording is not None and st.button("Transcribe", type="primary"):
        data, mime = encode_upload(recording)
        intake("voice", transcribe_audio, {"audio": data, "mimeType": mime or "audio/wav"}, "Listening...")

if st.session_state["intake"].status is FormStatus.ERROR and mode != "text":
    st.error(f"❌ {st.session_state['intake'].error}")
    if st.button("Try another method →"):
        st.session_state["intake"] = FormState.idle()
        st.session_state["input_mode"] = "select"
        st.rerun()

# ============================================================================
# Text input and lite check
# ============================================================================

if mode == "text" and not has_checklist:
    header_col, back_col = st.columns([3, 1])
    header_col.subheader("Vehicle Information")
    if back_col.button("← Change Input Method"):
        reset_form()
        st.rerun()

    vehicle_info = st.text_input(
        "Vehicle",
        key=VEHICLE_INFO_KEY,
        placeholder="e.g. BMW 3 Series E90, Year 2010, Petrol, 180,000 km",
    )
    if st.button(
        "✓ Generate Free Inspection Check",
        type="primary",
        disabled=not vehicle_info.strip(),
        use_container_width=True,
    ):
        clear_checkboxes()
        with st.spinner("Analyzing vehicle..."):
            state = submit_lite(st.session_state, generate_checklist, vehicle_info)
        if state.status is FormStatus.RESULT:
            st.rerun()

    if st.session_state["lite"].status is FormStatus.ERROR:
        st.error(f"❌ {st.session_state['lite'].error}")

# ============================================================================
# Checklist rendering
# ============================================================================


def render_vehicle_header(checklist: dict):
    info = checklist.get("vehicleInfo") or {}
    title = " ".join(str(info.get(k, "")) for k in ("make", "model") if info.get(k))
    st.header(title or st.session_state[SUBMITTED_INFO_KEY])
    details = [str(info[k]) for k in ("year", "mileage") if info.get(k)]
    if details:
        st.caption(" • ".join(details))

    metric_cols = st.columns(2)
    if checklist.get("riskScore") is not None:
        metric_cols[0].metric("Risk Score", f"{checklist['riskScore']} / 100")
    estimate = checklist.get("priceEstimate")
    if estimate:
        metric_cols[1].metric(
            "💰 Estimated Market Value",
            f"€{estimate['min']:,.0f} - €{estimate['max']:,.0f}",
        )


def group_items(checklist: dict) -> dict[str, list[dict]]:
    grouped: dict[str, list[dict]] = {}
    for item in checklist.get("checklistItems", []):
        grouped.setdefault(item["category"], []).append(item)
    return grouped


def risk_label(risk: str) -> str:
    return f"{RISK_ICONS.get(Risk(risk), '⚪')} {risk}"


def render_lite(checklist: dict):
    st.subheader("🔍 Free Lite Check")
    for category, items in group_items(checklist).items():
        st.markdown(f"#### {category}")
        for item in items:
            st.markdown(f"**{item['item']}** · {risk_label(item['risk'])}")
            if item.get("why"):
                st.caption(item["why"])


def render_premium(checklist: dict):
    st.success("✓ Premium Check Unlocked! Complete inspection with interactive checkboxes")
    total = len(checklist.get("checklistItems", []))
    done = sum(
        1 for k, v in st.session_state.items() if str(k).startswith(CHECKBOX_PREFIX) and v
    )
    st.progress(done / total if total else 0.0, text=f"Progress {done} / {total}")

    for category, items in group_items(checklist).items():
        with st.expander(category, expanded=True):
            for idx, item in enumerate(items):
                st.checkbox(
                    f"{item['item']} ({risk_label(item['risk'])})",
                    key=f"{CHECKBOX_PREFIX}{category}-{idx}",
                    help=item.get("why") or None,
                )

    tips = checklist.get("negotiationTips") or []
    if tips:
        st.subheader("🤝 Negotiation Tips")
        for tip in tips:
            st.markdown(f"- {tip}")


if has_checklist:
    render_vehicle_header(lite_state.payload)

    if premium_state.status is FormStatus.RESULT:
        render_premium(premium_state.payload)
    else:
        render_lite(lite_state.payload)

        st.divider()
        st.subheader("🚀 Unlock Premium Full Check")
        st.write("Get 25-30+ detailed inspection points with interactive checkboxes")
        # Payment is not integrated; premium is only reachable in demo mode.
        if not settings.premium_demo:
            st.info("Premium checkout is not available yet.")
        if st.button(
            "Upgrade to Premium - €2.50",
            type="primary",
            disabled=not settings.premium_demo,
            use_container_width=True,
        ):
            with st.spinner("Generating premium checklist..."):
                state = request_premium(st.session_state, generate_checklist)
            if state.status is FormStatus.RESULT:
                st.rerun()
        if st.session_state["premium"].status is FormStatus.ERROR:
            st.error(f"❌ {st.session_state['premium'].error}")

    st.divider()
    if st.button("Check another car"):
        reset_form()
        st.rerun()
