from __future__ import annotations

from datetime import datetime

import pytest

from src.eduscan.eduscan.core.enums import AttendanceStatus
from src.eduscan.eduscan.core.exceptions import AnalysisError
from src.eduscan.eduscan.scanning.interpreter import ScanVerdictInterpreter
from src.eduscan.eduscan.scanning.reference_set import ReferenceSet
from src.eduscan.eduscan.scanning.verdict import Verdict, parse_verdict
from tests.fakes import make_student, verdict_payload

NOW = datetime(2024, 5, 6, 14, 5, 9)
REFERENCE = ReferenceSet(students=(make_student("s1", "An Nguyen", "10-A"), make_student("s3", "Chi Vo", "10-A")))


def _interpreter() -> ScanVerdictInterpreter:
    return ScanVerdictInterpreter(id_factory=lambda: "evt-1")


def test_no_match_yields_no_event():
    verdict = parse_verdict(verdict_payload(None, confidence=0, real=False, description="Nobody in frame"))

    result = _interpreter().interpret(verdict, REFERENCE, now=NOW)

    assert result.event is None
    assert result.reason == "Nobody in frame"


def test_unknown_student_yields_no_event():
    verdict = parse_verdict(verdict_payload("s2"))

    result = _interpreter().interpret(verdict, REFERENCE, now=NOW)

    assert result.event is None
    assert "s2" in result.reason


def test_real_person_is_present():
    verdict = parse_verdict(verdict_payload("s3", confidence=0.87, emotion="Happy", description="Smiling"))

    event = _interpreter().interpret(verdict, REFERENCE, now=NOW).event

    assert event is not None
    assert event.id == "evt-1"
    assert event.student_id == "s3"
    assert event.student_name == "Chi Vo"
    assert event.status == AttendanceStatus.PRESENT
    assert event.confidence == pytest.approx(0.87)
    assert event.emotion == "Happy"
    assert event.notes == "Smiling"
    assert event.date == "2024-05-06"
    assert event.timestamp == "14:05:09"


def test_spoof_is_proxy_attempt_with_note_prefix():
    verdict = parse_verdict(verdict_payload("s1", confidence=0.8, real=False, description="Phone screen glare"))

    event = _interpreter().interpret(verdict, REFERENCE, now=NOW).event

    assert event is not None
    assert event.status == AttendanceStatus.PROXY_ATTEMPT
    assert event.notes == "Spoofing Detected: Phone screen glare"


def test_parse_accepts_snake_case_keys():
    verdict = parse_verdict(
        {
            "match_id": "s1",
            "confidence": 0.5,
            "is_real_person": True,
            "emotion": "Neutral",
            "description": "",
        }
    )

    assert verdict == Verdict(match_id="s1", confidence=0.5, is_real_person=True, emotion="Neutral", description="")


@pytest.mark.parametrize("raw, expected", [(1.7, 1.0), (-0.2, 0.0), (1, 1.0)])
def test_parse_clamps_confidence(raw, expected):
    assert parse_verdict(verdict_payload("s1", confidence=raw)).confidence == expected


def test_parse_treats_blank_match_id_as_no_match():
    assert parse_verdict(verdict_payload("  ")).match_id is None


def test_emotion_is_optional():
    payload = verdict_payload("s1")
    del payload["emotion"]

    assert parse_verdict(payload).emotion is None
    verdict = parse_verdict({**verdict_payload("s1"), "emotion": None})
    assert verdict.emotion is None
    assert _interpreter().interpret(verdict, REFERENCE, now=NOW).event.emotion is None


@pytest.mark.parametrize(
    "payload",
    [
        None,
        "not a verdict",
        {"matchId": "s1"},
        {**verdict_payload("s1"), "confidence": "high"},
        {**verdict_payload("s1"), "confidence": True},
        {**verdict_payload("s1"), "isRealPerson": "yes"},
        {**verdict_payload("s1"), "emotion": 42},
        {**verdict_payload("s1"), "matchId": ["s1"]},
    ],
)
def test_parse_rejects_malformed_payloads(payload):
    with pytest.raises(AnalysisError):
        parse_verdict(payload)
