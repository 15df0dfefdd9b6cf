"""
Music entities - notes, chord blocks, scale and humanize configuration.

All entities are immutable; "updates" produce new values via model_copy.
Factories assign fresh ids and clamp numeric inputs into playable ranges.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from chuk_melody.core.chord import ChordType, VoicingStyle
from chuk_melody.core.ids import IdFactory, new_id
from chuk_melody.core.pitch import (
    NoteName,
    validate_duration,
    validate_pitch,
    validate_velocity,
)
from chuk_melody.core.rhythm import COMMON_TIME, TimeSignature
from chuk_melody.core.scale import ScaleType
from chuk_melody.models.base import CamelModel, utc_now


class ChordRhythmPattern(str, Enum):
    """How chord blocks are re-cut rhythmically."""

    WHOLE = "whole"
    HALF = "half"
    STABS = "stabs"
    OFFBEAT = "offbeat"
    PADS = "pads"
    ARPEGGIATED = "arpeggiated"


class MelodyNote(CamelModel):
    """A single timed note. Times are in beats (quarter notes)."""

    id: str
    pitch: int = Field(..., description="MIDI note number")
    start_beat: float = Field(..., ge=0, description="Start position in beats")
    duration: float = Field(..., description="Duration in beats")
    velocity: int = Field(..., description="Velocity 1-127")


class ChordBlock(CamelModel):
    """
    A chord placed on the timeline.

    The effective inversion is inversion mod chord_type.tone_count.
    """

    id: str
    root_pitch: int = Field(..., description="MIDI note number of the chord root")
    chord_type: ChordType
    start_beat: float = Field(..., ge=0)
    duration: float
    velocity: int
    inversion: int = Field(0, ge=0, description="0 = root position, 1 = first inversion, ...")
    voicing_style: VoicingStyle = VoicingStyle.CLOSE
    bass_note: int | None = Field(None, description="Optional separate bass note (MIDI)")


class ScaleConfig(CamelModel):
    """Key root, scale type and whether generated pitches snap to it."""

    root: NoteName = "C"
    type: ScaleType = ScaleType.MINOR
    snap_to_scale: bool = True


class HumanizeConfig(CamelModel):
    """Random timing/velocity jitter and swing."""

    enabled: bool = False
    timing_range: float = Field(0.02, ge=0, description="Max timing offset in beats")
    velocity_range: float = Field(10, ge=0, description="Max velocity variation")
    swing_amount: float = Field(0.0, ge=0.0, le=1.0, description="0-1 swing on off-beats")
    link_to_global_swing: bool = False


DEFAULT_SCALE = ScaleConfig()
DEFAULT_HUMANIZE = HumanizeConfig()


class ChordProgressionTemplate(CamelModel):
    """A roman-numeral progression preset."""

    id: str
    name: str
    genre: str
    description: str = ""
    numerals: list[str] = Field(..., min_length=1)
    durations: list[float] = Field(default_factory=list, description="Beats per chord")
    rhythm_pattern: ChordRhythmPattern = ChordRhythmPattern.WHOLE


class MelodyTemplate(CamelModel):
    """A saved melody + chord sketch."""

    id: str
    name: str
    scale: ScaleConfig = Field(default_factory=ScaleConfig)
    bpm: float = 120
    time_signature: TimeSignature = COMMON_TIME
    bars: int = 4
    melody_notes: list[MelodyNote] = Field(default_factory=list)
    chord_blocks: list[ChordBlock] = Field(default_factory=list)
    humanize: HumanizeConfig = Field(default_factory=HumanizeConfig)
    chord_rhythm_pattern: ChordRhythmPattern = ChordRhythmPattern.WHOLE
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


def create_note(
    pitch: float,
    start_beat: float,
    duration: float = 1,
    velocity: float = 100,
    ids: IdFactory | None = None,
) -> MelodyNote:
    """Create a note, clamping every numeric field into range."""
    return MelodyNote(
        id=(ids or new_id)(),
        pitch=validate_pitch(pitch),
        start_beat=max(0.0, start_beat),
        duration=validate_duration(duration),
        velocity=validate_velocity(velocity),
    )


def create_chord_block(
    root_pitch: float,
    chord_type: ChordType | str,
    start_beat: float,
    duration: float = 4,
    velocity: float = 100,
    ids: IdFactory | None = None,
) -> ChordBlock:
    """Create a root-position, close-voiced chord block."""
    return ChordBlock(
        id=(ids or new_id)(),
        root_pitch=validate_pitch(root_pitch),
        chord_type=ChordType(chord_type),
        start_beat=max(0.0, start_beat),
        duration=validate_duration(duration),
        velocity=validate_velocity(velocity),
    )


def create_empty_template(
    name: str = "New Template", ids: IdFactory | None = None
) -> MelodyTemplate:
    """Create an empty melody template with default scale and humanize settings."""
    now = utc_now()
    return MelodyTemplate(
        id=(ids or new_id)(),
        name=name,
        created_at=now,
        updated_at=now,
    )
