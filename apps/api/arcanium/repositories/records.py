"""In-memory record store standing in for the marketplace database."""
from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping

from ..models import Collection, Record
from ..services.errors import DuplicateIdentifierError, NotFoundError

logger = logging.getLogger(__name__)


class RecordStore:
    """Ordered, identifier-keyed collections of properties and mortgage offers.

    Every operation is a coroutine so a networked store can take its place
    later. None of them await internally, so each call is applied atomically
    on the event loop. Returned collections are copies; callers may cache
    them without seeing later mutations.
    """

    def __init__(self, identifier_width: int = 3) -> None:
        self._width = identifier_width
        self._collections: Dict[Collection, List[Record]] = {name: [] for name in Collection}
        self._ordinals: Dict[Collection, int] = {name: 0 for name in Collection}

    async def append(self, collection: Collection, record: Record) -> List[Record]:
        self._insert(collection, record)
        return list(self._collections[collection])

    async def list(self, collection: Collection) -> List[Record]:
        return list(self._collections[collection])

    async def remove(self, collection: Collection, identifier: str) -> None:
        records = self._collections[collection]
        kept = [record for record in records if record.id != identifier]
        if len(kept) != len(records):
            logger.debug("Removed %s from %s", identifier, collection.value)
        self._collections[collection] = kept

    async def get(self, collection: Collection, identifier: str) -> Record:
        for record in self._collections[collection]:
            if record.id == identifier:
                return record
        raise NotFoundError(identifier)

    def next_identifier(self, collection: Collection) -> str:
        """Reserve the next sequential identifier, e.g. ``PROP003``.

        The ordinal only moves forward, so identifiers freed by removals are
        never handed out again.
        """

        self._ordinals[collection] += 1
        return f"{collection.prefix}{self._ordinals[collection]:0{self._width}d}"

    def seed(self, catalog: Mapping[Collection, Iterable[Record]]) -> None:
        """Load a catalogue synchronously, copying each record."""

        for collection, records in catalog.items():
            for record in records:
                self._insert(collection, replace(record))

    def _insert(self, collection: Collection, record: Record) -> None:
        records = self._collections[collection]
        if any(existing.id == record.id for existing in records):
            raise DuplicateIdentifierError(record.id)

        records.append(record)
        self._advance_ordinal(collection, record.id)
        logger.debug("Appended %s to %s (%d records)", record.id, collection.value, len(records))

    def _advance_ordinal(self, collection: Collection, identifier: str) -> None:
        match = re.fullmatch(rf"{collection.prefix}(\d+)", identifier)
        if match:
            self._ordinals[collection] = max(self._ordinals[collection], int(match.group(1)))
