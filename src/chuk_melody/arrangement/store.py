"""
Arrangement store - persists the user's arrangements.

Storage layout under ARRANGEMENTS_STORAGE_KEY:
    {"version": 1, "arrangements": [...], "lastOpenedId": "..."}
"""

from __future__ import annotations

import logging

from pydantic import Field, ValidationError

from chuk_melody.constants import ARRANGEMENT_STORAGE_VERSION, ARRANGEMENTS_STORAGE_KEY
from chuk_melody.models.base import CamelModel
from chuk_melody.models.lanes import Arrangement
from chuk_melody.storage.kv import KeyValueStore, MemoryKeyValueStore, read_json, write_json

logger = logging.getLogger(__name__)


class ArrangementStorage(CamelModel):
    """Persisted arrangement list."""

    version: int = ARRANGEMENT_STORAGE_VERSION
    arrangements: list[Arrangement] = Field(default_factory=list)
    last_opened_id: str | None = None

    def get(self, arrangement_id: str) -> Arrangement | None:
        for arrangement in self.arrangements:
            if arrangement.id == arrangement_id:
                return arrangement
        return None


class ArrangementStore:
    """
    Loads and saves arrangements through a key-value store.

    Every operation reads the current state, so several stores over the
    same backend stay consistent. Corrupt state reads as empty.
    """

    def __init__(
        self,
        backend: KeyValueStore | None = None,
        key: str = ARRANGEMENTS_STORAGE_KEY,
    ):
        """
        Initialize the store.

        Args:
            backend: Key-value backend (in-memory if omitted)
            key: Storage key for the arrangement list
        """
        self.backend = backend if backend is not None else MemoryKeyValueStore()
        self.key = key

    def load(self) -> ArrangementStorage:
        """Load stored arrangements, falling back to empty storage."""
        data = read_json(self.backend, self.key)
        if data is None:
            return ArrangementStorage()
        try:
            return ArrangementStorage.model_validate(data)
        except ValidationError as e:
            logger.warning("Discarding invalid arrangement storage: %s", e)
            return ArrangementStorage()

    def save(self, storage: ArrangementStorage) -> bool:
        return write_json(self.backend, self.key, storage.to_wire())

    def get(self, arrangement_id: str) -> Arrangement | None:
        """Get a stored arrangement by id."""
        return self.load().get(arrangement_id)

    def list_arrangements(self) -> list[Arrangement]:
        return list(self.load().arrangements)

    def last_opened(self) -> Arrangement | None:
        """The arrangement opened most recently, if it still exists."""
        storage = self.load()
        if storage.last_opened_id is None:
            return None
        return storage.get(storage.last_opened_id)

    def save_arrangement(self, arrangement: Arrangement) -> bool:
        """Insert or replace an arrangement and mark it last opened."""
        storage = self.load()
        arrangements = list(storage.arrangements)
        for i, existing in enumerate(arrangements):
            if existing.id == arrangement.id:
                arrangements[i] = arrangement
                break
        else:
            arrangements.append(arrangement)

        return self.save(
            storage.model_copy(
                update={"arrangements": arrangements, "last_opened_id": arrangement.id}
            )
        )

    def delete_arrangement(self, arrangement_id: str) -> bool:
        """
        Delete an arrangement.

        If it was last opened, the first remaining arrangement (or none)
        becomes last opened.
        """
        storage = self.load()
        arrangements = [a for a in storage.arrangements if a.id != arrangement_id]
        last_opened_id = storage.last_opened_id
        if last_opened_id == arrangement_id:
            last_opened_id = arrangements[0].id if arrangements else None

        return self.save(
            storage.model_copy(
                update={"arrangements": arrangements, "last_opened_id": last_opened_id}
            )
        )
