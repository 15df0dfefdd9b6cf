"""
Lane and arrangement operations.

Factories build new lanes and arrangements; the mutators are pure and
return a new Arrangement with updated_at refreshed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, assert_never

from chuk_melody.core.ids import IdFactory, new_id
from chuk_melody.models.base import utc_now
from chuk_melody.models.lanes import (
    Arrangement,
    ChordLane,
    DrumLane,
    LaneType,
    MelodyLane,
)

AnyLane = MelodyLane | DrumLane | ChordLane


def create_melody_lane(name: str = "Melody", ids: IdFactory | None = None) -> MelodyLane:
    """Create an empty piano-roll lane in C major."""
    return MelodyLane(id=(ids or new_id)(), name=name)


def create_drum_lane(name: str = "Drums", ids: IdFactory | None = None) -> DrumLane:
    """Create an empty acoustic drum lane with a 16-step pattern."""
    return DrumLane(id=(ids or new_id)(), name=name)


def create_chord_lane(name: str = "Chords", ids: IdFactory | None = None) -> ChordLane:
    """Create an empty chord lane."""
    return ChordLane(id=(ids or new_id)(), name=name)


def lane_label(lane_type: LaneType | str) -> str:
    """Default display name for a lane type."""
    lane_type = LaneType(lane_type)
    match lane_type:
        case LaneType.MELODY:
            return "Melody"
        case LaneType.DRUMS:
            return "Drums"
        case LaneType.CHORDS:
            return "Chords"
        case _:
            assert_never(lane_type)


def create_lane(
    lane_type: LaneType | str, name: str | None = None, ids: IdFactory | None = None
) -> AnyLane:
    """Create an empty lane of the given type."""
    lane_type = LaneType(lane_type)
    name = name or lane_label(lane_type)
    match lane_type:
        case LaneType.MELODY:
            return create_melody_lane(name, ids)
        case LaneType.DRUMS:
            return create_drum_lane(name, ids)
        case LaneType.CHORDS:
            return create_chord_lane(name, ids)
        case _:
            assert_never(lane_type)


def create_arrangement(name: str = "New Arrangement", ids: IdFactory | None = None) -> Arrangement:
    """
    Create an arrangement with a "Piano" melody lane and a "Drums" lane.

    Defaults: 120 BPM, 4/4, 4 bars, C major.
    """
    ids = ids or new_id
    now = utc_now()
    return Arrangement(
        id=ids(),
        name=name,
        created_at=now,
        updated_at=now,
        lanes=[create_melody_lane("Piano", ids), create_drum_lane("Drums", ids)],
    )


def _with_lanes(arrangement: Arrangement, lanes: list[AnyLane]) -> Arrangement:
    return arrangement.model_copy(update={"lanes": lanes, "updated_at": utc_now()})


def add_lane(
    arrangement: Arrangement, lane_type: LaneType | str, ids: IdFactory | None = None
) -> Arrangement:
    """Append an empty lane named after its type and position, e.g. "Melody 2"."""
    count = len(arrangement.lanes_of_type(lane_type))
    lane = create_lane(lane_type, f"{lane_label(lane_type)} {count + 1}", ids)
    return _with_lanes(arrangement, [*arrangement.lanes, lane])


def remove_lane(arrangement: Arrangement, lane_id: str) -> Arrangement:
    """Drop a lane by id; an unknown id leaves the lanes unchanged."""
    return _with_lanes(arrangement, [lane for lane in arrangement.lanes if lane.id != lane_id])


def update_lane(arrangement: Arrangement, lane_id: str, updates: Mapping[str, Any]) -> Arrangement:
    """
    Merge field updates into one lane.

    The merged lane is validated as the same lane type, so updates that
    change `type` or break a field constraint raise ValidationError.

    Args:
        arrangement: Arrangement to update
        lane_id: Id of the lane to change
        updates: Field names (snake_case) mapped to new values
    """
    lanes = [
        type(lane).model_validate({**lane.model_dump(), **updates}) if lane.id == lane_id else lane
        for lane in arrangement.lanes
    ]
    return _with_lanes(arrangement, lanes)


def move_lane(
    arrangement: Arrangement, lane_id: str, direction: Literal["up", "down"]
) -> Arrangement:
    """
    Swap a lane with its neighbour.

    Unknown ids and moves past either end return the arrangement unchanged.
    """
    index = next((i for i, lane in enumerate(arrangement.lanes) if lane.id == lane_id), None)
    if index is None:
        return arrangement

    target = index - 1 if direction == "up" else index + 1
    if not 0 <= target < len(arrangement.lanes):
        return arrangement

    lanes = list(arrangement.lanes)
    lanes[index], lanes[target] = lanes[target], lanes[index]
    return _with_lanes(arrangement, lanes)
