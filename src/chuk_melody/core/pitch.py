"""
Pitch primitives - PitchClass, note names, MIDI conversion and validators.

PitchClass represents the 12 chromatic pitches (octave-independent).
Note names are the sharp spellings used on the wire ("C", "C#", ... "B").
Validators clamp-and-round rather than reject: producing a playable
result outranks strict validation.
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Any, Literal, get_args

from chuk_melody.constants import (
    MAX_DURATION,
    MAX_PITCH,
    MAX_VELOCITY,
    MIN_DURATION,
    MIN_PITCH,
    MIN_VELOCITY,
    ErrorMessages,
)

NoteName = Literal["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Display name mappings (module level to avoid IntEnum member issues)
NOTE_NAMES: tuple[NoteName, ...] = get_args(NoteName)
_FLAT_NAMES: tuple[str, ...] = (
    "C",
    "Db",
    "D",
    "Eb",
    "E",
    "F",
    "Gb",
    "G",
    "Ab",
    "A",
    "Bb",
    "B",
)


class PitchClass(IntEnum):
    """
    The 12 chromatic pitch classes (0-11).

    Octave-independent - C4 and C5 are both PitchClass.C.
    Enharmonic equivalents share the same value (C# == Db == 1).
    """

    C = 0
    Cs = 1  # C# / Db
    D = 2
    Ds = 3  # D# / Eb
    E = 4
    F = 5
    Fs = 6  # F# / Gb
    G = 7
    Gs = 8  # G# / Ab
    A = 9
    As = 10  # A# / Bb
    B = 11

    def transpose(self, semitones: int) -> PitchClass:
        """Transpose by a number of semitones (positive or negative)."""
        return PitchClass((self.value + semitones) % 12)

    def to_midi(self, octave: int = 4) -> int:
        """Convert to MIDI note number. C4 = 60."""
        return self.value + (octave + 1) * 12

    def spell(self, prefer_flats: bool = False) -> str:
        """Get human-readable name."""
        names = _FLAT_NAMES if prefer_flats else NOTE_NAMES
        return names[self.value]

    @classmethod
    def from_midi(cls, midi_note: int) -> PitchClass:
        """Extract pitch class from MIDI note number."""
        return cls(midi_note % 12)

    @classmethod
    def parse(cls, name: str) -> PitchClass:
        """Parse a pitch class from a string like 'C', 'C#', 'Db'."""
        name = name.strip()

        if name in NOTE_NAMES:
            return cls(NOTE_NAMES.index(name))

        if name in _FLAT_NAMES:
            return cls(_FLAT_NAMES.index(name))

        # Enum names (C, Cs, D, Ds, etc.)
        name_upper = name.upper()
        for member in cls:
            if member.name.upper() == name_upper:
                return member

        raise ValueError(ErrorMessages.UNKNOWN_NOTE_NAME.format(name=name))


def note_to_midi(note: NoteName | str, octave: int) -> int:
    """
    Convert a note name and octave to a MIDI pitch.

    Args:
        note: Note name ('C', 'F#', 'Bb', ...)
        octave: Octave number, where C4 = 60

    Returns:
        MIDI note number
    """
    return (octave + 1) * 12 + PitchClass.parse(note).value


def midi_to_note(midi: int) -> tuple[NoteName, int]:
    """
    Convert a MIDI pitch to (note name, octave).

    Exact inverse of note_to_midi for every MIDI pitch.
    """
    octave = midi // 12 - 1
    return NOTE_NAMES[midi % 12], octave


def normalize_note_name(value: Any) -> Any:
    """
    Respell a parseable note name ("Db", "Cs") as its sharp name.

    Anything else is returned unchanged for the caller's own validation
    to reject.
    """
    if isinstance(value, str):
        try:
            return PitchClass.parse(value).spell()
        except ValueError:
            return value
    return value


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 rounding toward +infinity."""
    return math.floor(value + 0.5)


def validate_pitch(pitch: float) -> int:
    """Round and clamp a pitch into the playable range."""
    return max(MIN_PITCH, min(MAX_PITCH, round_half_up(pitch)))


def validate_velocity(velocity: float) -> int:
    """Round and clamp a velocity into [1, 127]."""
    return max(MIN_VELOCITY, min(MAX_VELOCITY, round_half_up(velocity)))


def validate_duration(duration: float) -> float:
    """Clamp a duration in beats (no rounding)."""
    return max(MIN_DURATION, min(MAX_DURATION, duration))
