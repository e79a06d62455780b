"""Data models for CheckCar requests, checklists and UI state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.errors import InvalidRequest, MalformedReply


class Risk(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ChecklistCategory(str, Enum):
    ENGINE = "Motor & Antrieb"
    CHASSIS = "Fahrwerk & Bremsen"
    BODY = "Karosserie & Rost"
    INTERIOR = "Innenraum & Elektronik"


class CheckType(str, Enum):
    LITE = "lite"
    PREMIUM = "premium"

    @classmethod
    def parse(cls, value: Any) -> CheckType:
        if value is None or value == "":
            return cls.LITE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidRequest(
                f"Unknown checkType: {value!r}. Expected one of {[c.value for c in cls]}"
            ) from None


RISK_ICONS: dict[Risk, str] = {
    Risk.HIGH: "🔴",
    Risk.MEDIUM: "🟡",
    Risk.LOW: "🟢",
}


def _parse_enum(enum_cls: type[Enum], value: Any, field_name: str, raw_text: str) -> Any:
    if isinstance(value, str):
        needle = " ".join(value.split()).lower()
        for member in enum_cls:
            if member.value.lower() == needle:
                return member
    raise MalformedReply(f"Invalid {field_name}: {value!r}", raw_text=raw_text)


@dataclass
class ExtractionRequest:
    """One upstream call: instruction text plus an optional inline payload."""

    prompt: str
    model: str
    temperature: float
    max_output_tokens: int
    inline_data: str | None = None
    mime_type: str | None = None

    def to_payload(self) -> dict[str, Any]:
        parts: list[dict[str, Any]] = [{"text": self.prompt}]
        if self.inline_data:
            parts.append({
                "inline_data": {
                    "mime_type": self.mime_type or "image/jpeg",
                    "data": self.inline_data,
                }
            })
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }


@dataclass
class ChecklistItem:
    category: ChecklistCategory
    item: str
    risk: Risk
    why: str = ""

    @classmethod
    def from_dict(cls, data: Any, raw_text: str = "") -> ChecklistItem:
        if not isinstance(data, dict):
            raise MalformedReply(f"Checklist item is not an object: {data!r}", raw_text=raw_text)
        item = data.get("item")
        if not isinstance(item, str) or not item.strip():
            raise MalformedReply("Checklist item without text", raw_text=raw_text)
        return cls(
            category=_parse_enum(ChecklistCategory, data.get("category"), "category", raw_text),
            item=item.strip(),
            risk=_parse_enum(Risk, data.get("risk"), "risk", raw_text),
            why=str(data.get("why") or "").strip(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "item": self.item,
            "risk": self.risk.value,
            "why": self.why,
        }


@dataclass
class Checklist:
    check_type: CheckType
    vehicle_info: dict[str, Any]
    items: list[ChecklistItem]
    risk_score: int | None = None
    price_min: float | None = None
    price_max: float | None = None
    negotiation_tips: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any], check_type: CheckType, raw_text: str = "") -> Checklist:
        """Validate a parsed model reply into a checklist."""
        raw_items = data.get("checklistItems")
        if not isinstance(raw_items, list) or not raw_items:
            raise MalformedReply("Reply has no checklistItems", raw_text=raw_text)
        items = [ChecklistItem.from_dict(entry, raw_text) for entry in raw_items]

        vehicle_info = data.get("vehicleInfo")
        if not isinstance(vehicle_info, dict):
            vehicle_info = {}

        risk_score = data.get("riskScore")
        if isinstance(risk_score, bool) or not isinstance(risk_score, (int, float)):
            risk_score = None
        else:
            risk_score = max(0, min(100, int(risk_score)))

        price_min = price_max = None
        estimate = data.get("priceEstimate")
        if isinstance(estimate, dict):
            low, high = estimate.get("min"), estimate.get("max")
            if isinstance(low, (int, float)) and isinstance(high, (int, float)):
                price_min, price_max = sorted((float(low), float(high)))

        tips: list[str] = []
        if check_type is CheckType.PREMIUM:
            raw_tips = data.get("negotiationTips")
            if isinstance(raw_tips, list):
                tips = [str(t).strip() for t in raw_tips if str(t).strip()]

        return cls(
            check_type=check_type,
            vehicle_info=vehicle_info,
            items=items,
            risk_score=risk_score,
            price_min=price_min,
            price_max=price_max,
            negotiation_tips=tips,
        )

    def items_by_category(self) -> dict[ChecklistCategory, list[ChecklistItem]]:
        grouped: dict[ChecklistCategory, list[ChecklistItem]] = {}
        for item in self.items:
            grouped.setdefault(item.category, []).append(item)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape returned by the checklist endpoint."""
        result: dict[str, Any] = {
            "checkType": self.check_type.value,
            "vehicleInfo": self.vehicle_info,
            "riskScore": self.risk_score,
            "priceEstimate": None,
            "checklistItems": [item.to_dict() for item in self.items],
        }
        if self.price_min is not None and self.price_max is not None:
            result["priceEstimate"] = {"min": self.price_min, "max": self.price_max}
        if self.check_type is CheckType.PREMIUM:
            result["negotiationTips"] = self.negotiation_tips
        return result


class FormStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    RESULT = "result"
    ERROR = "error"


@dataclass(frozen=True)
class FormState:
    """UI state of one form step: Idle, Loading, Result(payload) or Error(message)."""

    status: FormStatus = FormStatus.IDLE
    payload: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def idle(cls) -> FormState:
        return cls()

    def start(self) -> FormState:
        return FormState(status=FormStatus.LOADING)

    def complete(self, status_code: int, body: dict[str, Any]) -> FormState:
        """Transition out of Loading once a handler call has returned."""
        if self.status is not FormStatus.LOADING:
            raise ValueError(f"Cannot complete a form in state {self.status.value}")
        if 200 <= status_code < 300:
            return FormState(status=FormStatus.RESULT, payload=body)
        message = body.get("error") if isinstance(body, dict) else None
        return FormState(status=FormStatus.ERROR, error=message or f"Request failed ({status_code})")

    @property
    def is_loading(self) -> bool:
        return self.status is FormStatus.LOADING
