from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_SCHOOL_NAME


@dataclass(frozen=True)
class SchoolConfig:
    name: str = DEFAULT_SCHOOL_NAME
    logo: str = ""
