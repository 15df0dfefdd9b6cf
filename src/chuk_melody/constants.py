"""
Constants and enums for the melody core.

No magic numbers - limits, payload caps, schema versions and storage keys
all live here.
"""

from enum import IntEnum

# Playable ranges (clamp targets)
MIN_PITCH = 21  # A0
MAX_PITCH = 108  # C8
MIN_VELOCITY = 1
MAX_VELOCITY = 127
MIN_DURATION = 0.0625  # 1/16th note minimum
MAX_DURATION = 16.0  # 4 bars maximum

# Arrangement bounds
MIN_BPM = 20
MAX_BPM = 300
MIN_BARS = 1
MAX_BARS = 64

# Schema versions
ARRANGEMENT_SCHEMA_VERSION = 2
CLIP_REF_SCHEMA_VERSION = 1
TEMPLATE_STORAGE_VERSION = 1
CLIP_STORAGE_VERSION = 1
ARRANGEMENT_STORAGE_VERSION = 1

# Wire size caps (characters of serialized JSON, before URL encoding)
MAX_ARRANGEMENT_PAYLOAD_SIZE = 12_000
MAX_CLIP_PAYLOAD_SIZE = 8_000

# Encoded inputs longer than cap * factor are rejected before decoding
ENCODED_SIZE_GUARD_FACTOR = 1.5

# Storage keys
ARRANGEMENTS_STORAGE_KEY = "daw_arrangements_v1"
CLIPS_STORAGE_KEY = "daw_project_clips_v1"
TEMPLATES_STORAGE_KEY = "daw_melody_templates_v1"


class GMDrumNote(IntEnum):
    """General MIDI drum note numbers used by drum lanes."""

    KICK = 36
    RIM_SHOT = 37
    SNARE = 38
    CLAP = 39
    SNARE_2 = 40
    TOM_LOW = 41
    CLOSED_HIHAT = 42
    TOM_MID = 43
    PEDAL_HIHAT = 44
    TOM_HIGH = 45
    OPEN_HIHAT = 46
    TOM_4 = 47
    TOM_5 = 48
    CRASH = 49
    TOM_6 = 50
    RIDE = 51
    CHINA = 52
    RIDE_BELL = 53
    TAMBOURINE = 54
    SPLASH = 55
    COWBELL = 56


# Display names for drum sounds: note -> (name, short name)
DRUM_SOUNDS: dict[GMDrumNote, tuple[str, str]] = {
    GMDrumNote.KICK: ("Kick", "KK"),
    GMDrumNote.RIM_SHOT: ("Rim Shot", "RM"),
    GMDrumNote.SNARE: ("Snare", "SN"),
    GMDrumNote.CLAP: ("Clap", "CP"),
    GMDrumNote.SNARE_2: ("Snare 2", "S2"),
    GMDrumNote.TOM_LOW: ("Low Tom", "LT"),
    GMDrumNote.CLOSED_HIHAT: ("Closed Hi-Hat", "CH"),
    GMDrumNote.TOM_MID: ("Mid Tom", "MT"),
    GMDrumNote.PEDAL_HIHAT: ("Pedal Hi-Hat", "PH"),
    GMDrumNote.TOM_HIGH: ("High Tom", "HT"),
    GMDrumNote.OPEN_HIHAT: ("Open Hi-Hat", "OH"),
    GMDrumNote.TOM_4: ("Tom 4", "T4"),
    GMDrumNote.TOM_5: ("Tom 5", "T5"),
    GMDrumNote.CRASH: ("Crash", "CR"),
    GMDrumNote.TOM_6: ("Tom 6", "T6"),
    GMDrumNote.RIDE: ("Ride", "RD"),
    GMDrumNote.CHINA: ("China", "CN"),
    GMDrumNote.RIDE_BELL: ("Ride Bell", "RB"),
    GMDrumNote.TAMBOURINE: ("Tambourine", "TB"),
    GMDrumNote.SPLASH: ("Splash", "SP"),
    GMDrumNote.COWBELL: ("Cowbell", "CB"),
}

# Step-sequencer row order, top to bottom
DEFAULT_DRUM_PITCHES: list[GMDrumNote] = [
    GMDrumNote.CRASH,
    GMDrumNote.OPEN_HIHAT,
    GMDrumNote.CLOSED_HIHAT,
    GMDrumNote.CLAP,
    GMDrumNote.SNARE,
    GMDrumNote.KICK,
]


class ErrorMessages:
    """Standardized error messages."""

    UNKNOWN_NOTE_NAME = "Unknown note name: '{name}'."
    UNKNOWN_SCALE_TYPE = "Unknown scale type: '{scale}'."
    UNKNOWN_CHORD_TYPE = "Unknown chord type: '{chord}'."
    INVALID_TIME_SIGNATURE = "Invalid time signature: '{notation}'. Expected format like '4/4'."
    PAYLOAD_TOO_LARGE = "Payload of {size} characters exceeds the {limit} character limit."
    NEWER_SCHEMA = "Payload version {version} is newer than supported {supported}."
