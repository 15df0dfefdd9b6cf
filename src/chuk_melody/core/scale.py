"""
Scale primitives - ScaleType, scale membership and snapping.

Scales are interval patterns from a root (cumulative semitones, ascending).
Scale membership is octave-independent.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from chuk_melody.constants import MAX_PITCH, MIN_PITCH
from chuk_melody.core.pitch import NoteName, PitchClass

if TYPE_CHECKING:
    from chuk_melody.models.music import ScaleConfig


class ScaleType(str, Enum):
    """The 13 supported scale types."""

    MAJOR = "major"
    MINOR = "minor"
    DORIAN = "dorian"
    PHRYGIAN = "phrygian"
    LYDIAN = "lydian"
    MIXOLYDIAN = "mixolydian"
    AEOLIAN = "aeolian"  # same intervals as natural minor
    LOCRIAN = "locrian"
    HARMONIC_MINOR = "harmonicMinor"
    MELODIC_MINOR = "melodicMinor"
    PENTATONIC_MAJOR = "pentatonicMajor"
    PENTATONIC_MINOR = "pentatonicMinor"
    BLUES = "blues"

    @property
    def intervals(self) -> tuple[int, ...]:
        """Semitones from the root, ascending."""
        return SCALE_INTERVALS[self]


SCALE_INTERVALS: dict[ScaleType, tuple[int, ...]] = {
    ScaleType.MAJOR: (0, 2, 4, 5, 7, 9, 11),
    ScaleType.MINOR: (0, 2, 3, 5, 7, 8, 10),
    ScaleType.DORIAN: (0, 2, 3, 5, 7, 9, 10),
    ScaleType.PHRYGIAN: (0, 1, 3, 5, 7, 8, 10),
    ScaleType.LYDIAN: (0, 2, 4, 6, 7, 9, 11),
    ScaleType.MIXOLYDIAN: (0, 2, 4, 5, 7, 9, 10),
    ScaleType.AEOLIAN: (0, 2, 3, 5, 7, 8, 10),
    ScaleType.LOCRIAN: (0, 1, 3, 5, 6, 8, 10),
    ScaleType.HARMONIC_MINOR: (0, 2, 3, 5, 7, 8, 11),
    ScaleType.MELODIC_MINOR: (0, 2, 3, 5, 7, 9, 11),
    ScaleType.PENTATONIC_MAJOR: (0, 2, 4, 7, 9),
    ScaleType.PENTATONIC_MINOR: (0, 3, 5, 7, 10),
    ScaleType.BLUES: (0, 3, 5, 6, 7, 10),
}


def get_scale_notes(root: NoteName | str, scale_type: ScaleType | str) -> list[int]:
    """
    Get the pitch classes of a scale.

    Args:
        root: Root note name
        scale_type: Scale type (enum or its wire value)

    Returns:
        Pitch classes (0-11) in ascending interval order from the root
    """
    root_index = PitchClass.parse(root).value
    return [(root_index + interval) % 12 for interval in ScaleType(scale_type).intervals]


def is_in_scale(pitch: int, scale: ScaleConfig) -> bool:
    """Check if a MIDI pitch belongs to the scale."""
    return pitch % 12 in get_scale_notes(scale.root, scale.type)


def snap_to_scale(pitch: int, scale: ScaleConfig) -> int:
    """
    Snap a pitch to the nearest scale degree.

    Pitches already in the scale are returned unchanged. Otherwise the
    scale pitch class with the smallest circular distance wins; on ties
    the first one in ascending interval order is kept. The octave is
    corrected when the chosen class sits across the octave boundary. A
    result outside the playable range is clamped, then moved inward to the
    nearest in-scale pitch.
    """
    if is_in_scale(pitch, scale):
        return pitch

    scale_notes = get_scale_notes(scale.root, scale.type)
    pitch_class = pitch % 12
    octave = pitch // 12

    min_distance = 13
    nearest = pitch_class
    for scale_note in scale_notes:
        raw = abs(scale_note - pitch_class)
        distance = min(raw, 12 - raw)
        if distance < min_distance:
            min_distance = distance
            nearest = scale_note

    # Wrap-around correction
    result = octave * 12 + nearest
    if nearest < pitch_class and pitch_class - nearest > 6:
        result += 12
    elif nearest > pitch_class and nearest - pitch_class > 6:
        result -= 12

    clamped = max(MIN_PITCH, min(MAX_PITCH, result))
    step = 1 if clamped > result else -1
    while not is_in_scale(clamped, scale):
        clamped += step
    return clamped
