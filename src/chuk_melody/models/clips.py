"""
Clip reference models.

ProjectClipRef is the rich in-memory snapshot of a lane attached to a
project. SerializedClip is its compact wire form: one- and two-letter keys
keep shared URLs short.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from chuk_melody.constants import CLIP_REF_SCHEMA_VERSION, CLIP_STORAGE_VERSION
from chuk_melody.core.pitch import NoteName, normalize_note_name
from chuk_melody.core.rhythm import COMMON_TIME, TimeSignature
from chuk_melody.models.base import CamelModel, utc_now
from chuk_melody.models.lanes import NoteMode
from chuk_melody.models.music import MelodyNote, ScaleConfig


class ClipKind(str, Enum):
    """What a clip was captured from."""

    DRUM_LANE = "drumLane"
    MELODY_LANE = "melodyLane"
    CHORD_LANE = "chordLane"
    AUDIO_LOOP = "audioLoop"


class QuantizeGrid(str, Enum):
    """Editing grid for a clip."""

    QUARTER = "1/4"
    EIGHTH = "1/8"
    SIXTEENTH = "1/16"
    THIRTY_SECOND = "1/32"
    OFF = "off"


class LaneSettings(CamelModel):
    """Per-clip playback settings."""

    instrument_id: str
    note_mode: NoteMode
    velocity_default: int = Field(100, ge=1, le=127)
    quantize_grid: QuantizeGrid = QuantizeGrid.SIXTEENTH


class ClipMetadata(CamelModel):
    """Musical context captured with a clip."""

    bpm: float
    key: NoteName
    scale: ScaleConfig
    time_signature: TimeSignature = COMMON_TIME

    @field_validator("key", mode="before")
    @classmethod
    def validate_key(cls, v: Any) -> Any:
        """Accept flat and enum spellings, stored as the sharp name."""
        return normalize_note_name(v)


class ProjectClipRef(CamelModel):
    """
    A denormalized, shareable snapshot of a lane.

    A copy, not a live reference: edits to the source lane do not reach it.
    """

    id: str
    kind: ClipKind
    ref_id: str = Field(..., description="Id of the source lane/clip")
    name: str
    start_bar: int = Field(1, ge=1, description="Position in arrangement (1-based)")
    length_bars: int = Field(4, ge=1)
    metadata: ClipMetadata
    lane_settings: LaneSettings
    notes: list[MelodyNote] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# Wire shapes - plain field names, no alias generation


class SerializedNote(BaseModel):
    """Note on the wire: pitch, start, duration, velocity."""

    p: int
    s: float = Field(..., ge=0)
    d: float
    v: int


class SerializedMetadata(BaseModel):
    """Metadata on the wire: bpm, key, scale type, time signature."""

    b: float
    k: str
    s: str
    t: TimeSignature = COMMON_TIME


class SerializedLaneSettings(BaseModel):
    """Lane settings on the wire: instrument, note mode, velocity, quantize."""

    i: str
    nm: NoteMode
    v: int = Field(..., ge=1, le=127)
    q: QuantizeGrid


class SerializedClip(BaseModel):
    """Compact clip for URL embedding."""

    id: str | None = None
    k: ClipKind
    n: str
    sb: int = Field(..., ge=1)
    lb: int = Field(..., ge=1)
    m: SerializedMetadata
    ls: SerializedLaneSettings
    nt: list[SerializedNote] = Field(default_factory=list)


class SerializedClipPayload(BaseModel):
    """Versioned envelope for a list of clips."""

    v: int = Field(CLIP_REF_SCHEMA_VERSION, ge=1)
    clips: list[SerializedClip] = Field(default_factory=list)


class ClipsStorage(CamelModel):
    """Persisted per-project clip lists: project id -> clips."""

    version: int = CLIP_STORAGE_VERSION
    project_clips: dict[str, list[ProjectClipRef]] = Field(default_factory=dict)
