"""
Pydantic models for the melody core.

This module provides:
- MelodyNote, ChordBlock: timed musical events
- ScaleConfig, HumanizeConfig: musical context and jitter settings
- Lanes and Arrangement: the multi-lane editor aggregate
- ProjectClipRef and its compact wire shapes
"""

from chuk_melody.models.base import CamelModel, utc_now
from chuk_melody.models.clips import (
    ClipKind,
    ClipMetadata,
    ClipsStorage,
    LaneSettings,
    ProjectClipRef,
    QuantizeGrid,
    SerializedClip,
    SerializedClipPayload,
    SerializedNote,
)
from chuk_melody.models.lanes import (
    Arrangement,
    BaseLane,
    ChordLane,
    DrumKit,
    DrumLane,
    DrumPattern,
    Lane,
    LaneType,
    MelodyInstrument,
    MelodyLane,
    NoteMode,
    default_note_mode,
)
from chuk_melody.models.music import (
    DEFAULT_HUMANIZE,
    DEFAULT_SCALE,
    ChordBlock,
    ChordProgressionTemplate,
    ChordRhythmPattern,
    HumanizeConfig,
    MelodyNote,
    MelodyTemplate,
    ScaleConfig,
    create_chord_block,
    create_empty_template,
    create_note,
)

__all__ = [
    "CamelModel",
    "utc_now",
    # Music
    "DEFAULT_HUMANIZE",
    "DEFAULT_SCALE",
    "ChordBlock",
    "ChordProgressionTemplate",
    "ChordRhythmPattern",
    "HumanizeConfig",
    "MelodyNote",
    "MelodyTemplate",
    "ScaleConfig",
    "create_chord_block",
    "create_empty_template",
    "create_note",
    # Lanes
    "Arrangement",
    "BaseLane",
    "ChordLane",
    "DrumKit",
    "DrumLane",
    "DrumPattern",
    "Lane",
    "LaneType",
    "MelodyInstrument",
    "MelodyLane",
    "NoteMode",
    "default_note_mode",
    # Clips
    "ClipKind",
    "ClipMetadata",
    "ClipsStorage",
    "LaneSettings",
    "ProjectClipRef",
    "QuantizeGrid",
    "SerializedClip",
    "SerializedClipPayload",
    "SerializedNote",
]
