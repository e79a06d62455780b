"""Gemini generateContent client used by every CheckCar use case."""

from __future__ import annotations

import logging

import httpx

from core.config import DEFAULT_API_BASE, DEFAULT_TIMEOUT_S, Settings
from core.errors import ConfigurationMissing, UpstreamFailure, UpstreamShapeError
from core.models import ExtractionRequest

logger = logging.getLogger(__name__)

# Status reported when the API could not be reached at all.
NETWORK_FAILURE_STATUS = 502


class GeminiClient:
    """Issues exactly one generateContent POST per call. No retries, no streaming."""

    provider_name = "gemini"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationMissing("API key not configured")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.BaseTransport | None = None
    ) -> GeminiClient:
        return cls(
            api_key=settings.api_key,
            base_url=settings.api_base,
            timeout=settings.timeout_s,
            transport=transport,
        )

    def endpoint(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    def generate(self, request: ExtractionRequest) -> str:
        """Send ``request`` and return the reply text."""
        logger.info(
            "Calling Gemini model=%s prompt_chars=%d inline_chars=%d",
            request.model,
            len(request.prompt),
            len(request.inline_data or ""),
        )

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as http:
                resp = http.post(
                    self.endpoint(request.model),
                    params={"key": self.api_key},
                    json=request.to_payload(),
                )
        except httpx.HTTPError as exc:
            logger.error("Gemini request failed: %s", exc.__class__.__name__)
            raise UpstreamFailure(NETWORK_FAILURE_STATUS, str(exc)) from exc

        if not resp.is_success:
            logger.error("Gemini API error: %s %s", resp.status_code, resp.text[:500])
            raise UpstreamFailure(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamShapeError("Gemini returned a non-JSON body", resp.text) from exc

        text = self._reply_text(data)
        logger.info("Gemini replied model=%s reply_chars=%d", request.model, len(text))
        return text

    @staticmethod
    def _reply_text(data: object) -> str:
        try:
            parts = data["candidates"][0]["content"]["parts"]  # type: ignore[index]
            texts = [part["text"] for part in parts if isinstance(part, dict) and "text" in part]
        except (KeyError, IndexError, TypeError) as exc:
            logger.error("Invalid Gemini response: %s", str(data)[:500])
            raise UpstreamShapeError("Invalid response from Vision API", data) from exc

        if not texts:
            logger.error("Gemini response without text parts: %s", str(data)[:500])
            raise UpstreamShapeError("Invalid response from Vision API", data)
        return "".join(texts)
