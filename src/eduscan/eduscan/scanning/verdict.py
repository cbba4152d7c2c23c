from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.exceptions import AnalysisError


@dataclass(frozen=True)
class Verdict:
    """Structured result of one analyzer call."""

    match_id: Optional[str]
    confidence: float
    is_real_person: bool
    emotion: Optional[str]
    description: str


# Analyzer payloads use camelCase keys; snake_case is accepted as well.
_ALIASES = {
    "match_id": ("matchId", "match_id"),
    "confidence": ("confidence",),
    "is_real_person": ("isRealPerson", "is_real_person"),
    "emotion": ("emotion",),
    "description": ("description",),
}


def _pick(payload: Mapping[str, Any], field: str, *, required: bool = True) -> Any:
    for key in _ALIASES[field]:
        if key in payload:
            return payload[key]
    if required:
        raise AnalysisError(f"Malformed verdict: missing {field!r}")
    return None


def parse_verdict(payload: Any) -> Verdict:
    """Validate an analyzer payload and build a Verdict.

    Raises AnalysisError for anything that is not a well-formed verdict.
    """
    if isinstance(payload, Verdict):
        return payload
    if not isinstance(payload, Mapping):
        raise AnalysisError(f"Malformed verdict: expected an object, got {type(payload).__name__}")

    match_id = _pick(payload, "match_id", required=False)
    if match_id is not None and not isinstance(match_id, (str, int)):
        raise AnalysisError("Malformed verdict: 'match_id' must be a string or null")
    if isinstance(match_id, str) and not match_id.strip():
        match_id = None

    confidence = _pick(payload, "confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise AnalysisError("Malformed verdict: 'confidence' must be a number")

    is_real_person = _pick(payload, "is_real_person")
    if not isinstance(is_real_person, bool):
        raise AnalysisError("Malformed verdict: 'is_real_person' must be a boolean")

    # Analyzers without an emotion model leave it out or send null.
    emotion = _pick(payload, "emotion", required=False)
    if emotion is not None and not isinstance(emotion, str):
        raise AnalysisError("Malformed verdict: 'emotion' must be a string or null")
    description = _pick(payload, "description")
    if not isinstance(description, str):
        raise AnalysisError("Malformed verdict: 'description' must be a string")

    return Verdict(
        match_id=None if match_id is None else str(match_id),
        confidence=min(1.0, max(0.0, float(confidence))),
        is_real_person=is_real_person,
        emotion=emotion,
        description=description,
    )
