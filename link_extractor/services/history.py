from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Generic

from link_extractor.schemas import FieldsT, Record
from link_extractor.services.errors import RemoteError
from link_extractor.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def _value_text(value: Any) -> str:
    if isinstance(value, Mapping) and "label" in value:
        return str(value["label"])
    return str(value)


def field_value_matches(value: Any, needle: str) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple)):
        return any(item is not None and needle in _value_text(item).lower() for item in value)
    return needle in _value_text(value).lower()


def record_matches(record: Record[Any], query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return any(field_value_matches(value, needle) for value in record.fields.model_dump().values())


class HistoryCollection(Generic[FieldsT]):
    """Locally held copy of the store's records.

    ``refresh`` is the authoritative reconciliation; ``remove_locally`` lets a
    confirmed delete show up before the next refresh.
    """

    def __init__(self, store: RecordStore[FieldsT]) -> None:
        self._store = store
        self._records: list[Record[FieldsT]] = []
        self.loaded = False
        self.last_error: str | None = None

    @property
    def records(self) -> list[Record[FieldsT]]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: str) -> Record[FieldsT] | None:
        for record in self._records:
            if record.record_id == record_id:
                return record
        return None

    def sorted(self) -> list[Record[FieldsT]]:
        return sorted(self._records, key=lambda record: record.created_at, reverse=True)

    def search(self, query: str) -> list[Record[FieldsT]]:
        return [record for record in self.sorted() if record_matches(record, query)]

    def remove_locally(self, record_id: str) -> bool:
        remaining = [record for record in self._records if record.record_id != record_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        return True

    async def refresh(self) -> list[Record[FieldsT]]:
        try:
            records = await self._store.list()
        except RemoteError as exc:
            self.last_error = exc.message
            logger.warning("History refresh failed: %s", exc.message)
            raise
        self._records = records
        self.loaded = True
        self.last_error = None
        return self.records
