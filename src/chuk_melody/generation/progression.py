"""
Progression generator - roman numerals to chord blocks.

Chords are laid end to end from beat 0. Rhythm patterns then re-cut the
blocks (stabs, off-beat hits, split halves) without touching harmony.
"""

from __future__ import annotations

import math
import random
from collections.abc import Iterable, Sequence
from typing import Literal

from chuk_melody.core.chord import ChordType, VoicingStyle
from chuk_melody.core.ids import IdFactory, new_id
from chuk_melody.core.pitch import PitchClass, note_to_midi
from chuk_melody.generation.numerals import NumeralParser, parse_numeral
from chuk_melody.models.music import (
    ChordBlock,
    ChordProgressionTemplate,
    ChordRhythmPattern,
    ScaleConfig,
)

DEFAULT_CHORD_DURATION = 4.0
DEFAULT_CHORD_VELOCITY = 100

# Major-scale offsets used for passing tones in generated melodies
_PASSING_TONE_OFFSETS = (0, 2, 4, 5, 7, 9, 11)

MelodyDensity = Literal["sparse", "medium", "dense"]
_NOTES_PER_BEAT: dict[str, float] = {"sparse": 0.5, "medium": 1, "dense": 2}


def _resolve_quality(quality: ChordType | str) -> ChordType:
    """A parser's chord quality as a ChordType; unknown qualities are major."""
    try:
        return ChordType(quality)
    except ValueError:
        return ChordType.MAJOR


def generate_chord_blocks(
    pairs: Iterable[tuple[str, float | None]],
    scale: ScaleConfig,
    base_octave: int = 3,
    voicing_style: VoicingStyle = VoicingStyle.CLOSE,
    parse_numeral: NumeralParser = parse_numeral,
    ids: IdFactory | None = None,
) -> list[ChordBlock]:
    """
    Build chord blocks from (numeral, duration) pairs.

    Args:
        pairs: Numerals with their length in beats; a missing or zero
            duration means 4 beats
        scale: Key; its root at base_octave is degree 0
        base_octave: Octave of the key root
        voicing_style: Voicing for every block
        parse_numeral: Numeral lookup; a quality it returns that is not a
            known chord type is read as major
        ids: Id factory

    Returns:
        One block per recognized numeral. Unrecognized numerals are
        skipped and take up no time.
    """
    ids = ids or new_id
    root_midi = note_to_midi(scale.root, base_octave)
    chords: list[ChordBlock] = []
    current_beat = 0.0

    for numeral, duration in pairs:
        duration = duration or DEFAULT_CHORD_DURATION
        parsed = parse_numeral(numeral)
        if parsed is None:
            continue

        chords.append(
            ChordBlock(
                id=ids(),
                root_pitch=root_midi + parsed.degree_offset,
                chord_type=_resolve_quality(parsed.chord_type),
                start_beat=current_beat,
                duration=duration,
                velocity=DEFAULT_CHORD_VELOCITY,
                inversion=0,
                voicing_style=voicing_style,
            )
        )
        current_beat += duration

    return chords


def generate_progression(
    template: ChordProgressionTemplate,
    scale: ScaleConfig,
    base_octave: int = 3,
    voicing_style: VoicingStyle = VoicingStyle.CLOSE,
    parse_numeral: NumeralParser = parse_numeral,
    ids: IdFactory | None = None,
) -> list[ChordBlock]:
    """Generate chord blocks from a progression template."""
    durations = list(template.durations)
    pairs = [
        (numeral, durations[i] if i < len(durations) else None)
        for i, numeral in enumerate(template.numerals)
    ]
    return generate_chord_blocks(
        pairs,
        scale,
        base_octave=base_octave,
        voicing_style=voicing_style,
        parse_numeral=parse_numeral,
        ids=ids,
    )


def apply_rhythm_pattern(
    chords: Sequence[ChordBlock],
    pattern: ChordRhythmPattern | str,
    ids: IdFactory | None = None,
) -> list[ChordBlock]:
    """
    Re-cut chord blocks to a rhythm pattern.

    - whole: unchanged
    - half: two hits per chord, each 90% of half the length
    - stabs / arpeggiated: one short hit, min(0.5, duration / 4)
    - offbeat: a 0.4 beat hit on the "and" of every whole beat
    - pads: stretched 1.1x to overlap the next chord

    Patterns that split a chord give every hit a fresh id.
    """
    ids = ids or new_id
    pattern = ChordRhythmPattern(pattern)

    if pattern == ChordRhythmPattern.HALF:
        result = []
        for chord in chords:
            half = chord.duration / 2
            result.append(chord.model_copy(update={"id": ids(), "duration": half * 0.9}))
            result.append(
                chord.model_copy(
                    update={
                        "id": ids(),
                        "start_beat": chord.start_beat + half,
                        "duration": half * 0.9,
                    }
                )
            )
        return result

    if pattern in (ChordRhythmPattern.STABS, ChordRhythmPattern.ARPEGGIATED):
        return [
            chord.model_copy(update={"duration": min(0.5, chord.duration / 4)}) for chord in chords
        ]

    if pattern == ChordRhythmPattern.OFFBEAT:
        return [
            chord.model_copy(
                update={"id": ids(), "start_beat": chord.start_beat + i + 0.5, "duration": 0.4}
            )
            for chord in chords
            for i in range(math.floor(chord.duration))
        ]

    if pattern == ChordRhythmPattern.PADS:
        return [chord.model_copy(update={"duration": chord.duration * 1.1}) for chord in chords]

    return list(chords)


def add_bass_notes(chords: Sequence[ChordBlock], bass_octave: int = 2) -> list[ChordBlock]:
    """Put each chord's root in the bass at bass_octave."""
    return [
        chord.model_copy(update={"bass_note": chord.root_pitch % 12 + (bass_octave + 1) * 12})
        for chord in chords
    ]


def remove_bass_notes(chords: Sequence[ChordBlock]) -> list[ChordBlock]:
    """Clear the bass note from every chord."""
    return [chord.model_copy(update={"bass_note": None}) for chord in chords]


def regenerate_voicings(
    chords: Sequence[ChordBlock],
    voicing_style: VoicingStyle,
    randomize_inversions: bool = False,
    rng: random.Random | None = None,
) -> list[ChordBlock]:
    """
    Apply a voicing style to every chord.

    With randomize_inversions each chord gets a random inversion 0-2.
    """
    rng = rng or random.Random()
    return [
        chord.model_copy(
            update={
                "voicing_style": voicing_style,
                "inversion": rng.randrange(3) if randomize_inversions else chord.inversion,
            }
        )
        for chord in chords
    ]


def set_inversion(chords: Sequence[ChordBlock], inversion: int) -> list[ChordBlock]:
    """Set every chord to the same inversion."""
    return [chord.model_copy(update={"inversion": inversion}) for chord in chords]


def generate_simple_melody(
    chords: Sequence[ChordBlock],
    scale: ScaleConfig,
    density: MelodyDensity = "medium",
    rng: random.Random | None = None,
) -> list[tuple[int, float, float, int]]:
    """
    Sketch a melody over a progression.

    Even steps play the chord root an octave up; odd steps play a random
    major-scale tone of the key in octave 4.

    Returns:
        (pitch, start_beat, duration, velocity) tuples for create_note
    """
    rng = rng or random.Random()
    notes_per_beat = _NOTES_PER_BEAT[density]
    scale_root = PitchClass.parse(scale.root)
    notes: list[tuple[int, float, float, int]] = []

    for chord in chords:
        count = math.ceil(chord.duration * notes_per_beat)
        if count <= 0:
            continue
        step = chord.duration / count

        for i in range(count):
            if i % 2 == 0:
                pitch = chord.root_pitch + 12
            else:
                pitch = scale_root + rng.choice(_PASSING_TONE_OFFSETS) + 5 * 12
            notes.append(
                (pitch, chord.start_beat + i * step, step * 0.8, 80 + rng.randrange(20))
            )

    return notes
