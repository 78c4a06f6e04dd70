"""Turns raw model text into a JSON object without raising."""

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class DecodeOutcome:
    """Either a parsed JSON object or the reason decoding failed."""

    payload: dict[str, Any] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.payload is not None


def decode_response(raw: str | None) -> DecodeOutcome:
    """Parse model output into a JSON object. Never raises.

    Markdown code fences around the document are tolerated. Floats are
    parsed as Decimal so money amounts keep their exact digits.
    """
    if raw is None or not raw.strip():
        return DecodeOutcome(error="empty response")

    cleaned = _strip_code_fences(raw)
    try:
        parsed = json.loads(cleaned, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        return DecodeOutcome(error=f"invalid JSON at line {exc.lineno} column {exc.colno}")
    except (ValueError, RecursionError) as exc:
        return DecodeOutcome(error=f"invalid JSON: {type(exc).__name__}")

    if not isinstance(parsed, dict):
        return DecodeOutcome(error="JSON document must be an object")
    return DecodeOutcome(payload=parsed)


def _strip_code_fences(raw: str) -> str:
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)
    return cleaned
