from __future__ import annotations

from typing import Protocol

from ..core.constants import DEFAULT_SCHOOL_NAME
from ..database.document_store import SCHOOL_CONFIG, DocumentStore
from .model import SchoolConfig


class SchoolConfigRepository(Protocol):
    def get(self) -> SchoolConfig:
        raise NotImplementedError

    def save(self, config: SchoolConfig) -> None:
        raise NotImplementedError


class StoreSchoolConfigRepository(SchoolConfigRepository):
    """Singleton settings kept as a one-record collection."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self) -> SchoolConfig:
        records = self._store.load_all(SCHOOL_CONFIG)
        if not records:
            return SchoolConfig()
        r = records[0]
        return SchoolConfig(name=str(r.get("name") or DEFAULT_SCHOOL_NAME), logo=str(r.get("logo") or ""))

    def save(self, config: SchoolConfig) -> None:
        self._store.save_all(SCHOOL_CONFIG, [{"name": config.name, "logo": config.logo}])
