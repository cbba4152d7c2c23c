"""Analyzer collaborator contract.

The scanner treats the analyzer as opaque: one frame plus an ordered list of
reference images in, one verdict payload out, ``AnalysisError`` on any
failure. The payload is validated by ``verdict.parse_verdict``.
"""
from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from .reference_set import ReferenceEntry


class Analyzer(Protocol):
    def analyze(self, frame: bytes, references: Sequence[ReferenceEntry]) -> Mapping[str, Any]:
        ...
