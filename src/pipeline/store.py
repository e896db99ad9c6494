# src/pipeline/store.py — v1
"""Process-scoped request store: id → RequestRecord and key → id.

Records are never deleted. A record leaves ``pending`` exactly once:
the first terminal write wins and later writers get the stored terminal
record back. Methods do not await, so each call is atomic with respect
to other coroutines on the event loop.
"""

from __future__ import annotations

import logging
from typing import Any

from mpfscore.core.keys import normalize_text, request_id, request_key
from mpfscore.core.models import RequestRecord

logger = logging.getLogger(__name__)


class RequestStore:
    """In-memory owner of every RequestRecord."""

    def __init__(self) -> None:
        self._records: dict[str, RequestRecord] = {}
        self._ids_by_key: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, rid: object) -> bool:
        return rid in self._records

    def get_or_create(self, city: str, sector: str) -> tuple[RequestRecord, bool]:
        """Return the record for this input, creating a pending one if new.

        Returns:
            (record copy, created flag).
        """
        key = request_key(city, sector)
        existing_id = self._ids_by_key.get(key)
        if existing_id is not None:
            return self._records[existing_id].model_copy(deep=True), False

        rid = request_id(key)
        record = RequestRecord(
            id=rid,
            key=key,
            city=normalize_text(city),
            sector=normalize_text(sector),
        )
        self._ids_by_key[key] = rid
        self._records[rid] = record
        return record.model_copy(deep=True), True

    def get(self, rid: str) -> RequestRecord | None:
        record = self._records.get(rid)
        return record.model_copy(deep=True) if record is not None else None

    def id_for_key(self, key: str) -> str | None:
        return self._ids_by_key.get(key)

    def complete(self, rid: str, update: dict[str, Any]) -> RequestRecord:
        """Move a pending record to a terminal state (compare-and-set).

        Args:
            rid: Request id.
            update: Terminal field values (status, result, error, ...).

        Returns:
            The stored terminal record, which is the existing one when
            another writer already completed it.

        Raises:
            KeyError: Unknown id.
            ValueError: ``update`` does not carry a terminal status.
        """
        current = self._records[rid]
        if current.is_terminal:
            logger.debug("Request %s already %s; keeping stored state", rid, current.status)
            return current.model_copy(deep=True)

        updated = RequestRecord.model_validate(
            {**current.model_dump(), **update}
        )
        if not updated.is_terminal:
            raise ValueError(f"Cannot complete request with status {updated.status!r}")

        self._records[rid] = updated
        return updated.model_copy(deep=True)
