"""
Harmonic analysis of note data.
"""

from chuk_melody.analysis.chords import (
    CHORD_TEMPLATES,
    ChordTemplate,
    DetectedChord,
    detect_chord,
    detect_chord_at_beat,
    detect_chords_in_sequence,
    get_chord_description,
)

__all__ = [
    "CHORD_TEMPLATES",
    "ChordTemplate",
    "DetectedChord",
    "detect_chord",
    "detect_chord_at_beat",
    "detect_chords_in_sequence",
    "get_chord_description",
]
