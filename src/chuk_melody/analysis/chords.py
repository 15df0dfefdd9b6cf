"""
Chord detection - identifies root, quality and inversion from pitches.

Detection is octave-invariant: pitches are reduced to a sorted set of
pitch classes, every pitch class is tried as the root, and the interval
set is compared against a fixed template table. A later match only wins
with a strictly higher priority, so table order breaks ties.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from chuk_melody.core.pitch import NOTE_NAMES
from chuk_melody.core.rhythm import quantize_beat
from chuk_melody.models.music import MelodyNote


@dataclass(frozen=True)
class ChordTemplate:
    """An interval pattern the detector can recognize."""

    type: str
    intervals: tuple[int, ...]
    symbol: str
    priority: int

    @property
    def pitch_class_set(self) -> frozenset[int]:
        """Intervals reduced mod 12 (octave duplicates collapse)."""
        return frozenset(i % 12 for i in self.intervals)


# Declaration order is the tie-break order
CHORD_TEMPLATES: tuple[ChordTemplate, ...] = (
    # Triads
    ChordTemplate("major", (0, 4, 7), "", 10),
    ChordTemplate("minor", (0, 3, 7), "m", 10),
    ChordTemplate("diminished", (0, 3, 6), "dim", 8),
    ChordTemplate("augmented", (0, 4, 8), "aug", 8),
    ChordTemplate("sus2", (0, 2, 7), "sus2", 6),
    ChordTemplate("sus4", (0, 5, 7), "sus4", 6),
    # Sevenths
    ChordTemplate("major7", (0, 4, 7, 11), "maj7", 9),
    ChordTemplate("minor7", (0, 3, 7, 10), "m7", 9),
    ChordTemplate("dominant7", (0, 4, 7, 10), "7", 9),
    ChordTemplate("diminished7", (0, 3, 6, 9), "dim7", 7),
    ChordTemplate("halfDiminished7", (0, 3, 6, 10), "m7♭5", 7),
    ChordTemplate("minorMajor7", (0, 3, 7, 11), "mMaj7", 7),
    ChordTemplate("augmented7", (0, 4, 8, 10), "aug7", 7),
    # Extensions (key intervals only)
    ChordTemplate("add9", (0, 4, 7, 14), "add9", 5),
    ChordTemplate("madd9", (0, 3, 7, 14), "madd9", 5),
    ChordTemplate("6", (0, 4, 7, 9), "6", 5),
    ChordTemplate("m6", (0, 3, 7, 9), "m6", 5),
    # Power chord
    ChordTemplate("power", (0, 7), "5", 4),
    # Single interval
    ChordTemplate("octave", (0, 12), "oct", 2),
)

_INVERSION_NAMES = ("root position", "1st inversion", "2nd inversion", "3rd inversion")


@dataclass(frozen=True)
class DetectedChord:
    """Result of chord detection."""

    root: str
    type: str
    symbol: str
    notes: tuple[int, ...]
    inversion: int
    confidence: float


def normalize_pitches(pitches: Iterable[int]) -> list[int]:
    """Reduce to sorted, deduplicated pitch classes."""
    return sorted({p % 12 for p in pitches})


def intervals_from(pitch_classes: Sequence[int], root: int) -> frozenset[int]:
    """Intervals of each pitch class above a root, mod 12."""
    return frozenset((pc - root) % 12 for pc in pitch_classes)


def detect_chord(pitches: Sequence[int]) -> DetectedChord | None:
    """
    Detect a chord from MIDI pitches.

    Args:
        pitches: MIDI pitches, any order, duplicates allowed

    Returns:
        The best match, or None for fewer than two distinct pitch classes
        or no matching template
    """
    if len(pitches) < 2:
        return None

    pitch_classes = normalize_pitches(pitches)
    if len(pitch_classes) < 2:
        return None

    best: DetectedChord | None = None
    best_priority = -1

    for inversion, root in enumerate(pitch_classes):
        intervals = intervals_from(pitch_classes, root)
        for template in CHORD_TEMPLATES:
            if intervals != template.pitch_class_set or template.priority <= best_priority:
                continue
            best_priority = template.priority
            name = NOTE_NAMES[root]
            best = DetectedChord(
                root=name,
                type=template.type,
                symbol=name + template.symbol,
                notes=tuple(pitches),
                inversion=inversion,
                confidence=template.priority / 10,
            )

    return best


def detect_chord_at_beat(
    notes: Sequence[MelodyNote], beat: float, tolerance: float = 0.5
) -> DetectedChord | None:
    """Detect the chord formed by the notes sounding at a beat."""
    active = [
        note.pitch
        for note in notes
        if note.start_beat - tolerance <= beat < note.start_beat + note.duration + tolerance
    ]
    if len(active) < 2:
        return None
    return detect_chord(active)


def detect_chords_in_sequence(notes: Sequence[MelodyNote]) -> dict[float, DetectedChord]:
    """
    Detect chords in a note sequence.

    Notes are grouped by start beat rounded to the nearest sixteenth; each
    group of two or more notes that forms a chord gets an entry.

    Returns:
        Mapping of grouped beat -> detected chord, in first-seen order
    """
    groups: dict[float, list[int]] = {}
    for note in notes:
        groups.setdefault(quantize_beat(note.start_beat), []).append(note.pitch)

    chords: dict[float, DetectedChord] = {}
    for beat, pitches in groups.items():
        if len(pitches) < 2:
            continue
        chord = detect_chord(pitches)
        if chord is not None:
            chords[beat] = chord
    return chords


def get_chord_description(chord: DetectedChord) -> str:
    """Symbol plus inversion, e.g. 'Am (1st inversion)'."""
    if chord.inversion == 0:
        return chord.symbol
    if chord.inversion < len(_INVERSION_NAMES):
        return f"{chord.symbol} ({_INVERSION_NAMES[chord.inversion]})"
    return f"{chord.symbol} (inverted)"
