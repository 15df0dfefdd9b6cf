"""
Tests for the progression generator and template library.
"""

import random
from pathlib import Path

import pytest

from chuk_melody.core import ChordType, SequentialIds, VoicingStyle
from chuk_melody.generation import (
    ParsedNumeral,
    ProgressionLibrary,
    add_bass_notes,
    apply_rhythm_pattern,
    generate_chord_blocks,
    generate_progression,
    generate_simple_melody,
    get_genres,
    get_template_by_id,
    get_templates_by_genre,
    parse_numeral,
    progression_templates,
    regenerate_voicings,
    remove_bass_notes,
    set_inversion,
)
from chuk_melody.models import ChordBlock, ChordRhythmPattern, ScaleConfig


class TestNumerals:
    """Tests for roman numeral lookup."""

    def test_major_and_minor_case(self) -> None:
        """Case selects the chord quality."""
        upper = parse_numeral("IV")
        lower = parse_numeral("iv")
        assert upper is not None and lower is not None
        assert (upper.degree_offset, upper.chord_type) == (5, ChordType.MAJOR)
        assert (lower.degree_offset, lower.chord_type) == (5, ChordType.MINOR)

    def test_sevenths_and_diminished(self) -> None:
        """Suffixes select seventh and diminished qualities."""
        assert parse_numeral("V7").chord_type == ChordType.DOMINANT_7
        assert parse_numeral("Imaj7").chord_type == ChordType.MAJOR_7
        assert parse_numeral("ii°").chord_type == ChordType.DIMINISHED
        assert parse_numeral("viiø7").chord_type == ChordType.HALF_DIMINISHED_7

    @pytest.mark.parametrize("numeral", ["bVII", "", "IX", "v7"])
    def test_unknown_numeral(self, numeral: str) -> None:
        """Unlisted numerals are not recognized."""
        assert parse_numeral(numeral) is None


class TestTemplateLibrary:
    """Tests for the built-in progression presets."""

    def test_built_in_presets(self) -> None:
        """Eighteen presets ship with the package."""
        templates = progression_templates()
        assert len(templates) == 18
        assert len({t.id for t in templates}) == 18

    def test_genres_in_order(self) -> None:
        """Genres come back in first-seen order."""
        assert get_genres() == [
            "Pop", "House", "Techno", "Dubstep", "DnB", "Trap", "Jazz", "Lo-fi"
        ]

    def test_templates_by_genre(self) -> None:
        """Filtering by genre keeps file order."""
        jazz = get_templates_by_genre("Jazz")
        assert [t.id for t in jazz] == ["jazz-ii-v-i", "jazz-i-vi-ii-v"]
        assert get_templates_by_genre("Polka") == []

    def test_template_by_id(self) -> None:
        """Look up a preset by id."""
        template = get_template_by_id("house-i-vi")
        assert template is not None
        assert template.numerals == ["i", "VI"]
        assert template.durations == [8, 8]
        assert template.rhythm_pattern == ChordRhythmPattern.STABS
        assert get_template_by_id("missing") is None

    def test_every_numeral_parses(self) -> None:
        """All preset numerals are recognized."""
        for template in progression_templates():
            for numeral in template.numerals:
                assert parse_numeral(numeral) is not None, (template.id, numeral)

    def test_project_overrides_library(self, temp_dir: Path) -> None:
        """A project file replaces a preset with the same id and adds new ones."""
        (temp_dir / "mine.yaml").write_text(
            "progressions:\n"
            "  - id: pop-i-v-vi-iv\n"
            "    name: My Pop\n"
            "    genre: Pop\n"
            "    numerals: [I, IV]\n"
            "  - id: custom-1\n"
            "    name: Custom\n"
            "    genre: Custom\n"
            "    numerals: [vi]\n",
            encoding="utf-8",
        )
        library = ProgressionLibrary(project_path=temp_dir)
        templates = library.templates()
        assert len(templates) == 19
        assert library.get_template_by_id("pop-i-v-vi-iv").name == "My Pop"
        assert library.get_genres()[-1] == "Custom"

    def test_invalid_entries_skipped(self, temp_dir: Path) -> None:
        """Invalid entries and unreadable files are skipped."""
        (temp_dir / "bad.yaml").write_text(
            "progressions:\n  - id: no-numerals\n    name: Broken\n    genre: X\n",
            encoding="utf-8",
        )
        (temp_dir / "worse.yaml").write_text("progressions: [unclosed\n", encoding="utf-8")
        library = ProgressionLibrary(library_path=temp_dir)
        assert library.templates() == []

    def test_cache_cleared(self, temp_dir: Path) -> None:
        """New files show up after clear_cache."""
        library = ProgressionLibrary(library_path=temp_dir)
        assert library.templates() == []
        (temp_dir / "one.yaml").write_text(
            "progressions:\n  - {id: a, name: A, genre: G, numerals: [I]}\n",
            encoding="utf-8",
        )
        assert library.templates() == []
        library.clear_cache()
        assert [t.id for t in library.templates()] == ["a"]


class TestGenerateChordBlocks:
    """Tests for numeral-to-chord generation."""

    def test_pop_progression_in_c(self, c_major: ScaleConfig, ids: SequentialIds) -> None:
        """I-V-vi-IV in C at octave 3 lays chords end to end."""
        template = get_template_by_id("pop-i-v-vi-iv")
        chords = generate_progression(template, c_major, ids=ids)
        assert [c.root_pitch for c in chords] == [48, 55, 57, 53]
        assert [c.chord_type for c in chords] == [
            ChordType.MAJOR,
            ChordType.MAJOR,
            ChordType.MINOR,
            ChordType.MAJOR,
        ]
        assert [c.start_beat for c in chords] == [0, 4, 8, 12]
        assert [c.id for c in chords] == ["t_1", "t_2", "t_3", "t_4"]
        assert all(c.velocity == 100 and c.inversion == 0 for c in chords)

    def test_key_and_octave(self, ids: SequentialIds) -> None:
        """Degree offsets are taken from the key root at the base octave."""
        scale = ScaleConfig(root="A", type="minor")
        chords = generate_chord_blocks([("i", 4), ("VI", 4)], scale, base_octave=4, ids=ids)
        assert [c.root_pitch for c in chords] == [69, 78]

    def test_unknown_numerals_take_no_time(self, c_major: ScaleConfig, ids: SequentialIds) -> None:
        """Skipped numerals do not advance the timeline."""
        chords = generate_chord_blocks([("I", 2), ("bVII", 4), ("V", 2)], c_major, ids=ids)
        assert [c.start_beat for c in chords] == [0, 2]

    def test_missing_duration_defaults(self, c_major: ScaleConfig, ids: SequentialIds) -> None:
        """Missing and zero durations mean four beats."""
        chords = generate_chord_blocks([("I", None), ("IV", 0), ("V", 2)], c_major, ids=ids)
        assert [c.duration for c in chords] == [4, 4, 2]
        assert [c.start_beat for c in chords] == [0, 4, 8]

    def test_template_with_short_durations(self, c_major: ScaleConfig, ids: SequentialIds) -> None:
        """Numerals past the durations list get the default length."""
        template = get_template_by_id("jazz-ii-v-i").model_copy(update={"durations": [2]})
        chords = generate_progression(template, c_major, ids=ids)
        assert [c.duration for c in chords] == [2, 4, 4]

    def test_voicing_style_applied(self, c_major: ScaleConfig, ids: SequentialIds) -> None:
        """The requested voicing is set on every block."""
        chords = generate_chord_blocks(
            [("I", 4), ("V", 4)], c_major, voicing_style=VoicingStyle.DROP2, ids=ids
        )
        assert {c.voicing_style for c in chords} == {VoicingStyle.DROP2}

    def test_custom_numeral_parser(self, c_major: ScaleConfig, ids: SequentialIds) -> None:
        """A custom parser can extend the numeral vocabulary."""

        def parser(numeral: str) -> ParsedNumeral | None:
            if numeral == "bVII":
                return ParsedNumeral(10, ChordType.MAJOR)
            return parse_numeral(numeral)

        pairs = [("I", 4), ("bVII", 4)]
        chords = generate_chord_blocks(pairs, c_major, parse_numeral=parser, ids=ids)
        assert [c.root_pitch for c in chords] == [48, 58]

    def test_parser_quality_strings(self, c_major: ScaleConfig, ids: SequentialIds) -> None:
        """Known quality strings are used; unknown ones fall back to major."""
        qualities = {"I": "minor7", "IV": "sus9", "V": ""}

        def parser(numeral: str) -> ParsedNumeral | None:
            return ParsedNumeral(0, qualities[numeral])

        pairs = [("I", 4), ("IV", 4), ("V", 4)]
        chords = generate_chord_blocks(pairs, c_major, parse_numeral=parser, ids=ids)
        assert [c.chord_type for c in chords] == [
            ChordType.MINOR_7,
            ChordType.MAJOR,
            ChordType.MAJOR,
        ]
        assert [c.start_beat for c in chords] == [0, 4, 8]


class TestRhythmPatterns:
    """Tests for apply_rhythm_pattern."""

    def test_whole_unchanged(self, c_major_chord: ChordBlock) -> None:
        """Whole leaves the chords alone."""
        assert apply_rhythm_pattern([c_major_chord], "whole") == [c_major_chord]

    def test_half(self, c_major_chord: ChordBlock, ids: SequentialIds) -> None:
        """Half splits each chord into two shortened hits with fresh ids."""
        hits = apply_rhythm_pattern([c_major_chord], ChordRhythmPattern.HALF, ids=ids)
        assert [h.start_beat for h in hits] == [0, 2]
        assert [h.duration for h in hits] == pytest.approx([1.8, 1.8])
        assert [h.id for h in hits] == ["t_1", "t_2"]

    def test_stabs(self, c_major_chord: ChordBlock) -> None:
        """Stabs shorten each chord to at most half a beat."""
        short = c_major_chord.model_copy(update={"duration": 1})
        hits = apply_rhythm_pattern([c_major_chord, short], "stabs")
        assert [h.duration for h in hits] == [0.5, 0.25]
        assert hits[0].id == c_major_chord.id

    def test_offbeat(self, c_major_chord: ChordBlock, ids: SequentialIds) -> None:
        """Offbeat hits every "and" of the chord's whole beats."""
        hits = apply_rhythm_pattern([c_major_chord], "offbeat", ids=ids)
        assert [h.start_beat for h in hits] == [0.5, 1.5, 2.5, 3.5]
        assert {h.duration for h in hits} == {0.4}
        assert len({h.id for h in hits}) == 4

    def test_pads(self, c_major_chord: ChordBlock) -> None:
        """Pads overlap into the next chord."""
        (pad,) = apply_rhythm_pattern([c_major_chord], "pads")
        assert pad.duration == pytest.approx(4.4)

    def test_unknown_pattern(self, c_major_chord: ChordBlock) -> None:
        """Unknown pattern names raise ValueError."""
        with pytest.raises(ValueError):
            apply_rhythm_pattern([c_major_chord], "swing")


class TestChordEditing:
    """Tests for bass notes, voicings and inversions."""

    def test_add_and_remove_bass(self, c_major_chord: ChordBlock) -> None:
        """Bass notes use the root pitch class at the bass octave."""
        a_minor = c_major_chord.model_copy(
            update={"root_pitch": 69, "chord_type": ChordType.MINOR}
        )
        with_bass = add_bass_notes([c_major_chord, a_minor], bass_octave=2)
        assert [c.bass_note for c in with_bass] == [36, 45]
        assert [c.bass_note for c in remove_bass_notes(with_bass)] == [None, None]

    def test_regenerate_voicings(self, c_major_chord: ChordBlock) -> None:
        """Voicing style changes; inversions stay unless randomized."""
        inverted = c_major_chord.model_copy(update={"inversion": 2})
        (chord,) = regenerate_voicings([inverted], VoicingStyle.OPEN)
        assert chord.voicing_style == VoicingStyle.OPEN
        assert chord.inversion == 2

    def test_randomized_inversions_are_seeded(self, c_major_chord: ChordBlock) -> None:
        """Random inversions are 0-2 and reproducible with a seeded rng."""
        chords = [c_major_chord] * 20
        first = regenerate_voicings(chords, "close", True, rng=random.Random(7))
        second = regenerate_voicings(chords, "close", True, rng=random.Random(7))
        assert [c.inversion for c in first] == [c.inversion for c in second]
        assert {c.inversion for c in first} <= {0, 1, 2}

    def test_set_inversion(self, c_major_chord: ChordBlock) -> None:
        """Every chord gets the same inversion."""
        assert [c.inversion for c in set_inversion([c_major_chord] * 2, 1)] == [1, 1]


class TestSimpleMelody:
    """Tests for generate_simple_melody."""

    def test_medium_density(self, c_major_chord: ChordBlock, c_major: ScaleConfig) -> None:
        """One note per beat; even steps play the root an octave up."""
        notes = generate_simple_melody([c_major_chord], c_major, "medium", rng=random.Random(1))
        assert [n[1] for n in notes] == [0, 1, 2, 3]
        assert notes[0][0] == notes[2][0] == 72
        assert all(n[2] == pytest.approx(0.8) for n in notes)
        assert all(80 <= n[3] < 100 for n in notes)

    def test_passing_tones_in_key(self, c_major_chord: ChordBlock, c_major: ScaleConfig) -> None:
        """Odd steps are major-scale tones of the key in octave 4."""
        notes = generate_simple_melody([c_major_chord], c_major, "dense", rng=random.Random(3))
        assert len(notes) == 8
        for pitch, *_ in notes[1::2]:
            assert 60 <= pitch < 72
            assert pitch % 12 in {0, 2, 4, 5, 7, 9, 11}

    def test_sparse_density(self, c_major_chord: ChordBlock, c_major: ScaleConfig) -> None:
        """Half a note per beat."""
        notes = generate_simple_melody([c_major_chord], c_major, "sparse", rng=random.Random(1))
        assert [n[1] for n in notes] == [0, 2]
        assert notes[0][2] == pytest.approx(1.6)
