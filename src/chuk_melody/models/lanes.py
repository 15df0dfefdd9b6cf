"""
Lane and arrangement models - the multi-lane editor's data.

An Arrangement contains:
- Global context (tempo, time signature, bars, key and scale)
- Lanes (melody, drum and chord lanes, discriminated by `type`)
- Global humanize settings

An arrangement owns its lanes; no lane is shared between arrangements.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import Field

from chuk_melody.constants import (
    ARRANGEMENT_SCHEMA_VERSION,
    MAX_BARS,
    MAX_BPM,
    MIN_BARS,
    MIN_BPM,
)
from chuk_melody.core.rhythm import COMMON_TIME, TimeSignature, beats_per_bar
from chuk_melody.core.scale import ScaleType
from chuk_melody.models.base import CamelModel, utc_now
from chuk_melody.models.music import ChordBlock, HumanizeConfig, MelodyNote, ScaleConfig


class LaneType(str, Enum):
    """Lane discriminator values."""

    MELODY = "melody"
    DRUMS = "drums"
    CHORDS = "chords"


class NoteMode(str, Enum):
    """How note-offs are treated when a lane plays."""

    ONE_SHOT = "oneShot"
    SUSTAIN = "sustain"


class MelodyInstrument(str, Enum):
    """Pitched instruments for melody and chord lanes."""

    GRAND_PIANO = "grand-piano"
    ELECTRIC_PIANO = "electric-piano"
    SYNTH_LEAD = "synth-lead"
    SYNTH_PAD = "synth-pad"
    BASS = "bass"
    STRINGS = "strings"


class DrumKit(str, Enum):
    """Drum kits for drum lanes."""

    ACOUSTIC = "acoustic"
    ELECTRONIC = "electronic"
    TR_808 = "808"
    TR_909 = "909"
    TRAP = "trap"
    DNB = "dnb"


def default_note_mode(lane_type: LaneType | str) -> NoteMode:
    """Drums are one-shot, everything else sustains."""
    return NoteMode.ONE_SHOT if LaneType(lane_type) == LaneType.DRUMS else NoteMode.SUSTAIN


class DrumPattern(CamelModel):
    """Step-sequencer settings for a drum lane."""

    id: str = "default"
    name: str = "Default"
    steps: Literal[16, 32, 64] = 16
    swing: float = Field(0, ge=0, le=100)


class BaseLane(CamelModel):
    """Fields shared by every lane type."""

    id: str
    name: str
    muted: bool = False
    solo: bool = False
    volume: int = Field(100, ge=0, le=127)
    pan: int = Field(0, ge=-64, le=63, description="-64 (left) to 63 (right), 0 = center")
    color: str = "#92d36e"
    collapsed: bool = False
    note_mode: NoteMode = NoteMode.SUSTAIN


class MelodyLane(BaseLane):
    """A piano-roll lane of pitched notes."""

    type: Literal["melody"] = "melody"
    notes: list[MelodyNote] = Field(default_factory=list)
    scale: ScaleConfig = Field(
        default_factory=lambda: ScaleConfig(root="C", type=ScaleType.MAJOR, snap_to_scale=False)
    )
    instrument: MelodyInstrument = MelodyInstrument.GRAND_PIANO


class DrumLane(BaseLane):
    """A drum lane; note pitch selects the drum sound."""

    type: Literal["drums"] = "drums"
    color: str = "#ff9f43"
    note_mode: NoteMode = NoteMode.ONE_SHOT
    notes: list[MelodyNote] = Field(default_factory=list)
    kit: DrumKit = DrumKit.ACOUSTIC
    pattern: DrumPattern = Field(default_factory=DrumPattern)


class ChordLane(BaseLane):
    """A lane of chord blocks."""

    type: Literal["chords"] = "chords"
    color: str = "#54a0ff"
    chords: list[ChordBlock] = Field(default_factory=list)
    instrument: MelodyInstrument = MelodyInstrument.SYNTH_PAD


Lane = Annotated[MelodyLane | DrumLane | ChordLane, Field(discriminator="type")]


class Arrangement(CamelModel):
    """
    A complete multi-lane arrangement.

    This is the aggregate persisted to storage and shared via URL.
    """

    id: str
    name: str = "New Arrangement"
    schema_version: int = ARRANGEMENT_SCHEMA_VERSION
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Global settings
    bpm: float = Field(120, ge=MIN_BPM, le=MAX_BPM)
    time_signature: TimeSignature = COMMON_TIME
    bars: int = Field(4, ge=MIN_BARS, le=MAX_BARS)
    key: str = "C"
    scale: ScaleConfig = Field(
        default_factory=lambda: ScaleConfig(root="C", type=ScaleType.MAJOR, snap_to_scale=False)
    )

    lanes: list[Lane] = Field(default_factory=list)

    humanize: HumanizeConfig = Field(
        default_factory=lambda: HumanizeConfig(timing_range=0.02, velocity_range=15)
    )

    def get_lane(self, lane_id: str) -> MelodyLane | DrumLane | ChordLane | None:
        """Get a lane by id."""
        for lane in self.lanes:
            if lane.id == lane_id:
                return lane
        return None

    def lanes_of_type(self, lane_type: LaneType | str) -> list[MelodyLane | DrumLane | ChordLane]:
        """All lanes of one type, in display order."""
        wanted = LaneType(lane_type)
        return [lane for lane in self.lanes if lane.type == wanted]

    def total_beats(self) -> float:
        """Length of the arrangement in beats."""
        return self.bars * beats_per_bar(self.time_signature)
