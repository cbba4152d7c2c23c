from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Domain entity: a registered student.

    Note: ``photo_url`` is the single reference image handed to the analyzer
    (usually a base64 data URL, but any encoding the analyzer accepts).
    """

    id: str
    name: str
    roll_number: str
    class_section: str
    photo_url: str
    registered_at: str = ""
