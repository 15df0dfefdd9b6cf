"""
Chord primitives - ChordType, VoicingStyle and voicing math.

Chord types are interval stacks measured from the root (not stacked).
Inversions rotate tones upward; voicings move tones between octaves.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from chuk_melody.core.pitch import validate_pitch

if TYPE_CHECKING:
    from chuk_melody.models.music import ChordBlock


class ChordType(str, Enum):
    """The 15 chord qualities a chord block can carry."""

    MAJOR = "major"
    MINOR = "minor"
    DIMINISHED = "diminished"
    AUGMENTED = "augmented"
    SUS2 = "sus2"
    SUS4 = "sus4"
    MAJOR_7 = "major7"
    MINOR_7 = "minor7"
    DOMINANT_7 = "dominant7"
    DIMINISHED_7 = "diminished7"
    HALF_DIMINISHED_7 = "halfDiminished7"
    MINOR_MAJOR_7 = "minorMajor7"
    ADD_9 = "add9"
    MINOR_9 = "minor9"
    MAJOR_9 = "major9"

    @property
    def intervals(self) -> tuple[int, ...]:
        """Semitones from the root."""
        return CHORD_INTERVALS[self]

    @property
    def tone_count(self) -> int:
        """Number of chord tones."""
        return len(CHORD_INTERVALS[self])


CHORD_INTERVALS: dict[ChordType, tuple[int, ...]] = {
    ChordType.MAJOR: (0, 4, 7),
    ChordType.MINOR: (0, 3, 7),
    ChordType.DIMINISHED: (0, 3, 6),
    ChordType.AUGMENTED: (0, 4, 8),
    ChordType.SUS2: (0, 2, 7),
    ChordType.SUS4: (0, 5, 7),
    ChordType.MAJOR_7: (0, 4, 7, 11),
    ChordType.MINOR_7: (0, 3, 7, 10),
    ChordType.DOMINANT_7: (0, 4, 7, 10),
    ChordType.DIMINISHED_7: (0, 3, 6, 9),
    ChordType.HALF_DIMINISHED_7: (0, 3, 6, 10),
    ChordType.MINOR_MAJOR_7: (0, 3, 7, 11),
    ChordType.ADD_9: (0, 4, 7, 14),
    ChordType.MINOR_9: (0, 3, 7, 10, 14),
    ChordType.MAJOR_9: (0, 4, 7, 11, 14),
}


class VoicingStyle(str, Enum):
    """Vertical arrangement of chord tones."""

    CLOSE = "close"
    OPEN = "open"
    SPREAD = "spread"
    DROP2 = "drop2"
    DROP3 = "drop3"


def get_chord_notes(root_pitch: int, chord_type: ChordType | str) -> list[int]:
    """Get the MIDI notes of a chord in root position."""
    return [root_pitch + interval for interval in ChordType(chord_type).intervals]


def apply_inversion(notes: list[int], inversion: int) -> list[int]:
    """
    Invert a chord by rotating its lowest tones up an octave.

    The effective inversion is taken modulo the number of notes, so
    inverting by len(notes) returns the chord unchanged.
    """
    if inversion == 0 or not notes:
        return list(notes)

    result = list(notes)
    for _ in range(inversion % len(notes)):
        result.append(result.pop(0) + 12)
    return result


def apply_voicing(notes: list[int], style: VoicingStyle | str) -> list[int]:
    """
    Apply a voicing style to chord notes.

    - close: unchanged
    - open: second note up an octave
    - spread: note i raised by 12 * (i // 2)
    - drop2 / drop3: second / third highest pitch down an octave

    Chords with fewer than 3 notes are returned unchanged.
    """
    if len(notes) < 3:
        return list(notes)

    style = VoicingStyle(style)
    if style == VoicingStyle.OPEN:
        return [n + 12 if i == 1 else n for i, n in enumerate(notes)]
    if style == VoicingStyle.SPREAD:
        # Offsets by list index, not by pitch rank
        return [n + (i // 2) * 12 for i, n in enumerate(notes)]
    if style in (VoicingStyle.DROP2, VoicingStyle.DROP3):
        rank = 1 if style == VoicingStyle.DROP2 else 2
        target = sorted(notes, reverse=True)[rank]
        return [n - 12 if n == target else n for n in notes]
    return list(notes)


def get_voiced_chord_notes(chord: ChordBlock) -> list[int]:
    """
    Get fully voiced chord notes with inversion, voicing and bass applied.

    When the chord has a bass note, its pitch class is placed in the octave
    below the lowest voiced note and prepended; any voiced note equal to
    that pitch is dropped. Every pitch is clamped to the playable range.
    """
    notes = get_chord_notes(chord.root_pitch, chord.chord_type)
    notes = apply_inversion(notes, chord.inversion)
    notes = apply_voicing(notes, chord.voicing_style)

    if chord.bass_note is not None:
        bass_octave = min(notes) // 12 - 1
        bass = chord.bass_note % 12 + bass_octave * 12
        notes = [bass, *(n for n in notes if n != bass)]

    return [validate_pitch(n) for n in notes]
