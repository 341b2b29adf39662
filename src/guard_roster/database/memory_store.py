from __future__ import annotations

import copy
from typing import Optional, Sequence

from ..core.enums import Collection
from ..core.exceptions import ConflictError
from .record_store import RecordStore, record_key


class InMemoryRecordStore(RecordStore):
    """Process-local store used by the testing settings and the test suite.

    Records are copied on the way in and out so callers never share state
    with the store, mirroring a real round trip.
    """

    def __init__(self):
        self._data: dict[Collection, dict[str, dict]] = {c: {} for c in Collection}

    def get(self, collection: Collection, key: str) -> Optional[dict]:
        rec = self._data[collection].get(key)
        return copy.deepcopy(rec) if rec is not None else None

    def get_all(self, collection: Collection) -> Sequence[dict]:
        return [copy.deepcopy(r) for r in self._data[collection].values()]

    def add(self, collection: Collection, record: dict) -> str:
        key = record_key(collection, record)
        if key in self._data[collection]:
            raise ConflictError("Record already exists")
        self._data[collection][key] = copy.deepcopy(record)
        return key

    def put(self, collection: Collection, record: dict) -> str:
        key = record_key(collection, record)
        self._data[collection][key] = copy.deepcopy(record)
        return key

    def delete(self, collection: Collection, key: str) -> bool:
        return self._data[collection].pop(key, None) is not None
