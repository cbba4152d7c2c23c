from __future__ import annotations

import json
import logging
from typing import Any, Protocol, Sequence

from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchone

logger = logging.getLogger(__name__)

STUDENTS = "students"
USERS = "users"
ATTENDANCE_EVENTS = "attendance_events"
SCHOOL_CONFIG = "school_config"

COLLECTIONS = (STUDENTS, USERS, ATTENDANCE_EVENTS, SCHOOL_CONFIG)


class DocumentStore(Protocol):
    """Whole-collection key/value storage.

    Every collection is read and written as one list of plain dict records;
    there are no partial updates.
    """

    def load_all(self, collection: str) -> Sequence[dict[str, Any]]:
        raise NotImplementedError

    def save_all(self, collection: str, records: Sequence[dict[str, Any]]) -> None:
        raise NotImplementedError


class MySQLDocumentStore(DocumentStore):
    """Stores each collection as a JSON array in the ``documents`` table."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_all(self, collection: str) -> Sequence[dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT payload FROM documents WHERE collection=%s",
                (collection,),
            )
            row = fetchone(cur)
            if not row or not row.get("payload"):
                return []
            records = json.loads(row["payload"])
            if not isinstance(records, list):
                logger.warning("Collection %s holds a non-list payload, ignoring it", collection)
                return []
            return records

    def save_all(self, collection: str, records: Sequence[dict[str, Any]]) -> None:
        payload = json.dumps(list(records), ensure_ascii=False)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO documents(collection, payload)
                VALUES(%s, %s)
                ON DUPLICATE KEY UPDATE payload=VALUES(payload)
                """,
                (collection, payload),
            )
        logger.debug("Saved %d record(s) to %s", len(records), collection)
