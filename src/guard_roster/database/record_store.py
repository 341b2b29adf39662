from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Collection
from ..core.exceptions import ValidationError


class RecordStore(Protocol):
    """Flat collection-of-records store.

    Records are plain dicts keyed by ``id`` (``key`` for the config
    collection). There are no transactions and no query pushdown: callers
    filter after ``get_all``. Writes replace the whole record, so two
    read-modify-write round trips racing on the same key resolve as
    last-write-wins.
    """

    def get(self, collection: Collection, key: str) -> Optional[dict]:
        raise NotImplementedError

    def get_all(self, collection: Collection) -> Sequence[dict]:
        raise NotImplementedError

    def add(self, collection: Collection, record: dict) -> str:
        """Insert a new record. Raises ConflictError if the key exists."""

        raise NotImplementedError

    def put(self, collection: Collection, record: dict) -> str:
        """Insert or replace a record. Returns its key."""

        raise NotImplementedError

    def delete(self, collection: Collection, key: str) -> bool:
        raise NotImplementedError


def record_key(collection: Collection, record: dict) -> str:
    key = record.get(collection.key_field)
    if not key:
        raise ValidationError(f"{collection.value} record is missing '{collection.key_field}'")
    return str(key)
