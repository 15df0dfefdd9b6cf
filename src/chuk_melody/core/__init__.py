"""
Core music primitives - the theory layer.

These are the pure functions everything else composes on:
- PitchClass / note names: MIDI conversion and clamp-and-round validators
- ScaleType: interval patterns, membership and snapping
- ChordType / VoicingStyle: chord tones, inversions and voicings
- Rhythm: beat, tick and millisecond conversion
- Ids: injectable id factories
"""

from chuk_melody.core.chord import (
    CHORD_INTERVALS,
    ChordType,
    VoicingStyle,
    apply_inversion,
    apply_voicing,
    get_chord_notes,
    get_voiced_chord_notes,
)
from chuk_melody.core.ids import IdFactory, SequentialIds, new_id, prefixed
from chuk_melody.core.pitch import (
    NOTE_NAMES,
    NoteName,
    PitchClass,
    midi_to_note,
    normalize_note_name,
    note_to_midi,
    round_half_up,
    validate_duration,
    validate_pitch,
    validate_velocity,
)
from chuk_melody.core.rhythm import (
    TICKS_PER_BEAT,
    TimeSignature,
    beats_per_bar,
    ms_to_beats,
    parse_time_signature,
    quantize_beat,
    ticks_to_beats,
)
from chuk_melody.core.scale import (
    SCALE_INTERVALS,
    ScaleType,
    get_scale_notes,
    is_in_scale,
    snap_to_scale,
)

__all__ = [
    # Pitch
    "NOTE_NAMES",
    "NoteName",
    "PitchClass",
    "midi_to_note",
    "normalize_note_name",
    "note_to_midi",
    "round_half_up",
    "validate_duration",
    "validate_pitch",
    "validate_velocity",
    # Scale
    "SCALE_INTERVALS",
    "ScaleType",
    "get_scale_notes",
    "is_in_scale",
    "snap_to_scale",
    # Chord
    "CHORD_INTERVALS",
    "ChordType",
    "VoicingStyle",
    "apply_inversion",
    "apply_voicing",
    "get_chord_notes",
    "get_voiced_chord_notes",
    # Rhythm
    "TICKS_PER_BEAT",
    "TimeSignature",
    "beats_per_bar",
    "ms_to_beats",
    "parse_time_signature",
    "quantize_beat",
    "ticks_to_beats",
    # Ids
    "IdFactory",
    "SequentialIds",
    "new_id",
    "prefixed",
]
