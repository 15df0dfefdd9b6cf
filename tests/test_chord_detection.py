"""
Tests for chord detection.
"""

import pytest

from chuk_melody.analysis import (
    CHORD_TEMPLATES,
    DetectedChord,
    detect_chord,
    detect_chord_at_beat,
    detect_chords_in_sequence,
    get_chord_description,
)
from chuk_melody.core import SequentialIds
from chuk_melody.models import MelodyNote, create_note


def _notes(
    ids: SequentialIds, pitches: list[int], start: float, duration: float = 1
) -> list[MelodyNote]:
    return [create_note(p, start, duration, ids=ids) for p in pitches]


class TestDetectChord:
    """Tests for detect_chord."""

    def test_c_major(self) -> None:
        """C-E-G is C major in root position."""
        chord = detect_chord([60, 64, 67])
        assert chord is not None
        assert (chord.root, chord.type, chord.symbol) == ("C", "major", "C")
        assert chord.inversion == 0
        assert chord.confidence == 1.0
        assert chord.notes == (60, 64, 67)

    def test_a_minor_inverted(self) -> None:
        """A-C-E voiced with A on the bottom is still A minor."""
        chord = detect_chord([57, 60, 64])
        assert chord is not None
        assert (chord.root, chord.type, chord.symbol) == ("A", "minor", "Am")

    @pytest.mark.parametrize("pitches", [[], [60], [60, 72, 84]])
    def test_too_few_pitch_classes(self, pitches: list[int]) -> None:
        """Fewer than two distinct pitch classes is not a chord."""
        assert detect_chord(pitches) is None

    def test_no_match(self) -> None:
        """Clusters with no template return None."""
        assert detect_chord([60, 61, 62]) is None

    def test_power_chord(self) -> None:
        """Root and fifth is a power chord."""
        chord = detect_chord([48, 55])
        assert chord is not None
        assert chord.symbol == "C5"
        assert chord.confidence == 0.4

    def test_octave_invariant(self) -> None:
        """Spread and doubled voicings detect the same chord."""
        close = detect_chord([60, 64, 67, 70])
        spread = detect_chord([36, 52, 67, 70, 84])
        assert close is not None and spread is not None
        assert close.symbol == spread.symbol == "C7"

    def test_higher_priority_rotation_wins(self) -> None:
        """C6 and Am7 share pitch classes; the seventh chord outranks the sixth."""
        chord = detect_chord([60, 64, 67, 69])
        assert chord is not None
        assert chord.symbol == "Am7"
        assert chord.inversion == 3

    def test_extension_detected(self) -> None:
        """add9 matches on pitch classes."""
        chord = detect_chord([60, 62, 64, 67])
        assert chord is not None
        assert chord.symbol == "Cadd9"

    def test_symmetric_chord_tie_keeps_first_root(self) -> None:
        """Every rotation of a diminished seventh matches; the first wins."""
        chord = detect_chord([60, 63, 66, 69])
        assert chord is not None
        assert chord.symbol == "Cdim7"
        assert chord.inversion == 0

    def test_half_diminished_symbol(self) -> None:
        """Half-diminished uses the flat-five symbol."""
        chord = detect_chord([71, 74, 77, 81])
        assert chord is not None
        assert chord.symbol == "Bm7♭5"

    def test_template_table_order(self) -> None:
        """The template table keeps its declared order."""
        assert [t.type for t in CHORD_TEMPLATES[:3]] == ["major", "minor", "diminished"]
        assert CHORD_TEMPLATES[-1].type == "octave"
        assert len(CHORD_TEMPLATES) == 19


class TestSequenceDetection:
    """Tests for detecting chords in note sequences."""

    def test_groups_by_sixteenth(self, ids: SequentialIds) -> None:
        """Notes starting within a sixteenth are grouped together."""
        notes = [
            *_notes(ids, [60, 64], 0),
            create_note(67, 0.05, ids=ids),
            *_notes(ids, [57, 60, 64], 4),
            create_note(72, 8, ids=ids),
        ]
        chords = detect_chords_in_sequence(notes)
        assert list(chords) == [0.0, 4.0]
        assert chords[0.0].symbol == "C"
        assert chords[4.0].symbol == "Am"

    def test_empty_sequence(self) -> None:
        """No notes, no chords."""
        assert detect_chords_in_sequence([]) == {}

    def test_chord_at_beat(self, ids: SequentialIds) -> None:
        """Notes sounding at a beat form the chord."""
        notes = _notes(ids, [60, 64, 67], 0, duration=4)
        chord = detect_chord_at_beat(notes, 2)
        assert chord is not None
        assert chord.symbol == "C"
        assert detect_chord_at_beat(notes, 10) is None


class TestChordDescription:
    """Tests for get_chord_description."""

    def test_root_position(self) -> None:
        """Root position is just the symbol."""
        chord = detect_chord([60, 64, 67])
        assert chord is not None
        assert get_chord_description(chord) == "C"

    def test_inversion_suffix(self) -> None:
        """Inversions are spelled out."""
        chord = DetectedChord("A", "minor", "Am", (64, 69, 72), 1, 1.0)
        assert get_chord_description(chord) == "Am (1st inversion)"

    def test_high_inversion(self) -> None:
        """Inversions past the third are just 'inverted'."""
        chord = DetectedChord("C", "major9", "Cmaj9", (), 4, 0.5)
        assert get_chord_description(chord) == "Cmaj9 (inverted)"
