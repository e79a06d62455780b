"""Runtime settings, read from the environment on every request."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_VISION_MODEL = "gemini-2.0-flash-exp"
DEFAULT_TEXT_MODEL = "gemini-1.5-flash"
DEFAULT_TIMEOUT_S = 120.0

API_KEY_ENV_NAMES = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

_TRUTHY = {"1", "true", "yes", "on"}


def resolve_api_key(explicit: str | None, *env_names: str) -> str:
    """Return the explicit key if given, otherwise the first non-empty env var."""
    if explicit and explicit.strip():
        return explicit.strip()
    for name in env_names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return ""


@dataclass(frozen=True)
class Settings:
    api_key: str
    api_base: str = DEFAULT_API_BASE
    vision_model: str = DEFAULT_VISION_MODEL
    text_model: str = DEFAULT_TEXT_MODEL
    timeout_s: float = DEFAULT_TIMEOUT_S
    premium_demo: bool = False

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def load_settings(api_key: str | None = None) -> Settings:
    """Build settings from the current process environment."""
    timeout_raw = os.environ.get("GEMINI_TIMEOUT_S", "").strip()
    return Settings(
        api_key=resolve_api_key(api_key, *API_KEY_ENV_NAMES),
        api_base=os.environ.get("GEMINI_API_BASE", "").strip().rstrip("/") or DEFAULT_API_BASE,
        vision_model=os.environ.get("GEMINI_VISION_MODEL", "").strip() or DEFAULT_VISION_MODEL,
        text_model=os.environ.get("GEMINI_TEXT_MODEL", "").strip() or DEFAULT_TEXT_MODEL,
        timeout_s=float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_S,
        premium_demo=os.environ.get("CHECKCAR_PREMIUM_DEMO", "").strip().lower() in _TRUTHY,
    )
