from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import Collection
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall, fetchone
from .record_store import RecordStore, record_key


class MySQLRecordStore(RecordStore):
    """Record store backed by a single ``records`` table holding JSON payloads."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, collection: Collection, key: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payload
                FROM records
                WHERE collection=%s AND record_key=%s
                """,
                (collection.value, str(key)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return json.loads(r["payload"])

    def get_all(self, collection: Collection) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payload
                FROM records
                WHERE collection=%s
                ORDER BY record_id ASC
                """,
                (collection.value,),
            )
            return [json.loads(r["payload"]) for r in fetchall(cur)]

    def add(self, collection: Collection, record: dict) -> str:
        key = record_key(collection, record)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO records(collection, record_key, payload)
                VALUES(%s,%s,%s)
                """,
                (collection.value, key, json.dumps(record, ensure_ascii=False)),
            )
        return key

    def put(self, collection: Collection, record: dict) -> str:
        key = record_key(collection, record)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO records(collection, record_key, payload)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE payload=VALUES(payload)
                """,
                (collection.value, key, json.dumps(record, ensure_ascii=False)),
            )
        return key

    def delete(self, collection: Collection, key: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM records WHERE collection=%s AND record_key=%s",
                (collection.value, str(key)),
            )
            return cur.rowcount > 0
