"""
Arrangement schema migrations.

MIGRATIONS maps a version to the function that lifts arrangement data
from that version to the next. Payloads are walked up the chain one step
at a time until they reach ARRANGEMENT_SCHEMA_VERSION.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from chuk_melody.constants import ARRANGEMENT_SCHEMA_VERSION, ErrorMessages
from chuk_melody.models.lanes import NoteMode

logger = logging.getLogger(__name__)

Migration = Callable[[dict[str, Any]], dict[str, Any]]


def migrate_v1_to_v2(data: dict[str, Any]) -> dict[str, Any]:
    """
    v1 -> v2: add schemaVersion and a per-lane noteMode.

    Drum lanes default to one-shot, every other lane to sustain.
    """
    if not isinstance(data.get("lanes"), list):
        return {**data, "schemaVersion": 2}

    lanes = []
    for lane in data["lanes"]:
        if isinstance(lane, dict) and "noteMode" not in lane:
            mode = NoteMode.ONE_SHOT if lane.get("type") == "drums" else NoteMode.SUSTAIN
            lane = {**lane, "noteMode": mode.value}
        lanes.append(lane)
    return {**data, "schemaVersion": 2, "lanes": lanes}


MIGRATIONS: dict[int, Migration] = {
    1: migrate_v1_to_v2,
}


def wrap_legacy_payload(payload: Any) -> Any:
    """Treat a bare v1 arrangement object as `{v: 1, data: ...}`."""
    if not isinstance(payload, dict):
        return payload
    if "v" not in payload and "data" not in payload and "id" in payload:
        return {"v": 1, "data": payload}
    return payload


def migrate_arrangement_payload(payload: dict[str, Any]) -> dict[str, Any] | None:
    """
    Bring a `{v, data}` payload up to the current schema version.

    Returns:
        The migrated payload. Payloads from a newer version are returned
        unchanged (with a warning). None for a missing or invalid version.
    """
    version = payload.get("v")
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        logger.warning("Arrangement payload has no usable version: %r", version)
        return None

    if version > ARRANGEMENT_SCHEMA_VERSION:
        logger.warning(
            ErrorMessages.NEWER_SCHEMA.format(version=version, supported=ARRANGEMENT_SCHEMA_VERSION)
        )
        return payload

    data = payload.get("data")
    if not isinstance(data, dict):
        logger.warning("Arrangement payload has no data object")
        return None

    while version < ARRANGEMENT_SCHEMA_VERSION:
        migration = MIGRATIONS.get(version)
        if migration is None:
            logger.warning("No migration from arrangement version %d", version)
            return None
        data = migration(data)
        version += 1
        logger.debug("Migrated arrangement payload to version %d", version)

    return {"v": version, "data": data}
