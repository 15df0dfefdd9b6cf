"""
Rhythm primitives - beat/tick/millisecond conversion and time signatures.

Positions and durations are floats in beats (quarter notes).
MIDI resolution is fixed at 480 ticks per beat.
"""

from __future__ import annotations

from chuk_melody.constants import ErrorMessages
from chuk_melody.core.pitch import round_half_up

TICKS_PER_BEAT = 480

# Grid used when grouping simultaneous notes (a sixteenth note)
SIXTEENTH_STEPS_PER_BEAT = 4

TimeSignature = tuple[int, int]

COMMON_TIME: TimeSignature = (4, 4)


def ticks_to_beats(ticks: float, ticks_per_beat: int = TICKS_PER_BEAT) -> float:
    """Convert MIDI ticks to beats."""
    return ticks / ticks_per_beat


def ms_to_beats(ms: float, bpm: float) -> float:
    """
    Convert milliseconds to beats at a tempo.

    Args:
        ms: Time in milliseconds
        bpm: Tempo in beats per minute

    Returns:
        Time in beats
    """
    return (ms / 1000) * (bpm / 60)


def quantize_beat(beat: float, steps_per_beat: int = SIXTEENTH_STEPS_PER_BEAT) -> float:
    """Round a beat position to the nearest grid step (half steps round up)."""
    return round_half_up(beat * steps_per_beat) / steps_per_beat


def beats_per_bar(time_signature: TimeSignature) -> float:
    """Number of quarter-note beats in one bar."""
    numerator, denominator = time_signature
    return numerator * 4 / denominator


def parse_time_signature(notation: str) -> TimeSignature:
    """
    Parse a time signature from notation like '4/4', '3/4', '6/8'.

    Args:
        notation: Time signature string

    Returns:
        (beats per bar, beat unit) tuple
    """
    parts = notation.split("/")
    if len(parts) != 2:
        raise ValueError(ErrorMessages.INVALID_TIME_SIGNATURE.format(notation=notation))

    try:
        numerator, denominator = int(parts[0]), int(parts[1])
    except ValueError as e:
        raise ValueError(ErrorMessages.INVALID_TIME_SIGNATURE.format(notation=notation)) from e

    if numerator <= 0 or denominator not in (1, 2, 4, 8, 16):
        raise ValueError(ErrorMessages.INVALID_TIME_SIGNATURE.format(notation=notation))

    return numerator, denominator


def format_time_signature(time_signature: TimeSignature) -> str:
    """Format a (numerator, denominator) tuple as '4/4'."""
    return f"{time_signature[0]}/{time_signature[1]}"
