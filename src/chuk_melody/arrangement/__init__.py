"""
Arrangement container - lane operations, URL sharing and persistence.
"""

from chuk_melody.arrangement.codec import (
    arrangement_from_payload,
    arrangement_to_payload,
    decode_arrangement_from_url,
    encode_arrangement_to_url,
)
from chuk_melody.arrangement.lanes import (
    add_lane,
    create_arrangement,
    create_chord_lane,
    create_drum_lane,
    create_lane,
    create_melody_lane,
    lane_label,
    move_lane,
    remove_lane,
    update_lane,
)
from chuk_melody.arrangement.migrations import (
    MIGRATIONS,
    migrate_arrangement_payload,
    migrate_v1_to_v2,
    wrap_legacy_payload,
)
from chuk_melody.arrangement.store import ArrangementStorage, ArrangementStore
from chuk_melody.arrangement.validator import ArrangementPayloadValidator

__all__ = [
    # Lanes
    "add_lane",
    "create_arrangement",
    "create_chord_lane",
    "create_drum_lane",
    "create_lane",
    "create_melody_lane",
    "lane_label",
    "move_lane",
    "remove_lane",
    "update_lane",
    # Wire format
    "MIGRATIONS",
    "ArrangementPayloadValidator",
    "arrangement_from_payload",
    "arrangement_to_payload",
    "decode_arrangement_from_url",
    "encode_arrangement_to_url",
    "migrate_arrangement_payload",
    "migrate_v1_to_v2",
    "wrap_legacy_payload",
    # Persistence
    "ArrangementStorage",
    "ArrangementStore",
]
