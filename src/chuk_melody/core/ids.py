"""
Id generation.

Factories take an IdFactory so callers control identity: the default is a
stateless uuid4 generator, tests inject SequentialIds for stable ids.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable

IdFactory = Callable[[], str]


def new_id() -> str:
    """Generate a collision-free id (uuid4 hex)."""
    return uuid.uuid4().hex


class SequentialIds:
    """
    Deterministic id factory: prefix + running counter.

    Unique per instance only; not a substitute for new_id across processes.
    """

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self._counter = 0

    def __call__(self) -> str:
        self._counter += 1
        return f"{self.prefix}_{self._counter}"

    def __repr__(self) -> str:
        return f"SequentialIds({self.prefix!r}, next={self._counter + 1})"


def prefixed(prefix: str, ids: IdFactory | None = None) -> IdFactory:
    """Wrap an id factory (default new_id) so every id starts with prefix."""
    source = ids or new_id

    def factory() -> str:
        return f"{prefix}_{source()}"

    return factory
