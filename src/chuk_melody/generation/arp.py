"""
Arpeggiator / strum engine - chord blocks to individual notes.

Two modes per chord:
- Arp: chord tones played one after another at a fixed rate, following
  a pattern (up, down, random, ...) across one or more octaves
- Strum: all chord tones sounding together, each onset nudged by a small
  offset, with a velocity curve across the strum

The engine is non-destructive: generate_arp_preview produces notes that
commit_arp_preview later merges into a lane.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from enum import Enum

from pydantic import Field

from chuk_melody.core.chord import get_voiced_chord_notes
from chuk_melody.core.ids import IdFactory, new_id
from chuk_melody.core.pitch import round_half_up
from chuk_melody.core.rhythm import TICKS_PER_BEAT, ms_to_beats, ticks_to_beats
from chuk_melody.core.scale import snap_to_scale
from chuk_melody.generation.humanize import humanize_notes
from chuk_melody.models.base import CamelModel
from chuk_melody.models.music import ChordBlock, HumanizeConfig, MelodyNote, ScaleConfig

logger = logging.getLogger(__name__)

# Strums shorter than this still sound
MIN_STRUM_NOTE_BEATS = 0.1


class ArpPattern(str, Enum):
    """Order in which chord tones are played."""

    UP = "up"
    DOWN = "down"
    UP_DOWN = "upDown"
    DOWN_UP = "downUp"
    RANDOM = "random"
    PLAYED = "played"


class ArpRate(str, Enum):
    """Rhythmic division of arp steps."""

    WHOLE = "1/1"
    HALF = "1/2"
    QUARTER = "1/4"
    EIGHTH = "1/8"
    SIXTEENTH = "1/16"
    THIRTY_SECOND = "1/32"

    @property
    def beats(self) -> float:
        return RATE_TO_BEATS[self]


RATE_TO_BEATS: dict[ArpRate, float] = {
    ArpRate.WHOLE: 4,
    ArpRate.HALF: 2,
    ArpRate.QUARTER: 1,
    ArpRate.EIGHTH: 0.5,
    ArpRate.SIXTEENTH: 0.25,
    ArpRate.THIRTY_SECOND: 0.125,
}


class StrumDirection(str, Enum):
    """Strum direction; alternate flips per chord (even up, odd down)."""

    UP = "up"
    DOWN = "down"
    ALTERNATE = "alternate"


class VelocityCurve(str, Enum):
    """Velocity shape across the notes of a strum."""

    FLAT = "flat"
    ACCENT_FIRST = "accentFirst"
    ACCENT_LAST = "accentLast"
    CRESCENDO = "crescendo"
    DECRESCENDO = "decrescendo"


class ArpConfig(CamelModel):
    """Arpeggiator settings. Ranges are checked by validate_arp_config."""

    pattern: ArpPattern = ArpPattern.UP
    rate: ArpRate = ArpRate.EIGHTH
    gate: float = Field(80, description="Note length as % of the rate (1-200)")
    octaves: int = Field(1, description="Octaves to span (1-4)")
    include_root: bool = Field(False, description="Append the lowest tone to each cycle")


class StrumConfig(CamelModel):
    """Strum settings. Ranges are checked by validate_arp_config."""

    enabled: bool = False
    time_ms: float = Field(30, description="Gap between strummed notes in ms (0-500)")
    time_ticks: float = Field(20, description="Gap between strummed notes in ticks (0-480)")
    use_ticks: bool = False
    direction: StrumDirection = StrumDirection.UP
    velocity_curve: VelocityCurve = VelocityCurve.FLAT


class ArpEngineConfig(CamelModel):
    arp: ArpConfig = Field(default_factory=ArpConfig)
    strum: StrumConfig = Field(default_factory=StrumConfig)


class ArpPreviewResult(CamelModel):
    """Generated notes alongside the chords and config that produced them."""

    notes: list[MelodyNote]
    original_chords: list[ChordBlock]
    config: ArpEngineConfig


DEFAULT_ARP_CONFIG = ArpConfig()
DEFAULT_STRUM_CONFIG = StrumConfig()
DEFAULT_ARP_ENGINE_CONFIG = ArpEngineConfig()


# ============================================================================
# Pattern ordering
# ============================================================================


def _expand_octaves(pitches: Sequence[int], octaves: int) -> list[int]:
    return [p + octave * 12 for octave in range(octaves) for p in pitches]


def _order(
    pitches: Sequence[int],
    pattern: ArpPattern | str,
    octaves: int,
    include_root: bool,
    rng: random.Random,
) -> list[int]:
    if not pitches:
        return []

    pattern = ArpPattern(pattern)
    ordered = sorted(pitches)
    expanded = _expand_octaves(ordered, octaves)

    if pattern == ArpPattern.DOWN:
        result = expanded[::-1]
    elif pattern == ArpPattern.UP_DOWN:
        result = expanded + expanded[:-1][::-1]
    elif pattern == ArpPattern.DOWN_UP:
        descending = expanded[::-1]
        result = descending + descending[:-1][::-1]
    elif pattern == ArpPattern.RANDOM:
        result = list(expanded)
        rng.shuffle(result)
    elif pattern == ArpPattern.PLAYED:
        result = _expand_octaves(pitches, octaves)
    else:
        result = expanded

    if include_root:
        result.append(ordered[0])
    return result


def get_pattern_order(
    pitches: Sequence[int],
    pattern: ArpPattern | str,
    octaves: int = 1,
    include_root: bool = False,
    rng: random.Random | None = None,
) -> list[int]:
    """
    Order chord tones for arpeggiation.

    Pitches are sorted ascending and repeated an octave higher for each
    extra octave, then:
    - up: as is; down: reversed
    - upDown: up then back down without repeating the top note
    - downUp: down then back up without repeating the bottom note
    - random: shuffled (rng, or a fresh unseeded generator)
    - played: input order, repeated per octave

    include_root appends the lowest pitch at the end of the cycle.
    """
    return _order(pitches, pattern, octaves, include_root, rng or random.Random())


def get_seeded_pattern_order(
    pitches: Sequence[int],
    pattern: ArpPattern | str,
    octaves: int,
    include_root: bool,
    seed: int,
) -> list[int]:
    """get_pattern_order with a reproducible shuffle for the random pattern."""
    return _order(pitches, pattern, octaves, include_root, random.Random(seed))


# ============================================================================
# Strum
# ============================================================================


def get_strum_offset_beats(
    config: StrumConfig,
    bpm: float,
    note_index: int,
    total_notes: int,
    chord_index: int,
) -> float:
    """Onset delay in beats of one note within a strum."""
    if not config.enabled or total_notes <= 1:
        return 0.0

    if config.use_ticks:
        offset_per_note = ticks_to_beats(config.time_ticks)
    else:
        offset_per_note = ms_to_beats(config.time_ms, bpm)

    direction = config.direction
    if direction == StrumDirection.ALTERNATE:
        direction = StrumDirection.UP if chord_index % 2 == 0 else StrumDirection.DOWN

    if direction == StrumDirection.UP:
        return note_index * offset_per_note
    return (total_notes - 1 - note_index) * offset_per_note


def apply_velocity_curve(
    base_velocity: int,
    curve: VelocityCurve | str,
    note_index: int,
    total_notes: int,
) -> int:
    """Velocity of one note within a strum."""
    if total_notes <= 1:
        return base_velocity

    curve = VelocityCurve(curve)
    position = note_index / (total_notes - 1)

    if curve == VelocityCurve.ACCENT_FIRST:
        if note_index == 0:
            return min(127, base_velocity + 20)
        return max(1, base_velocity - 10)
    if curve == VelocityCurve.ACCENT_LAST:
        if note_index == total_notes - 1:
            return min(127, base_velocity + 20)
        return max(1, base_velocity - 10)
    if curve == VelocityCurve.CRESCENDO:
        return round_half_up(base_velocity * (0.6 + 0.4 * position))
    if curve == VelocityCurve.DECRESCENDO:
        return round_half_up(base_velocity * (1 - 0.4 * position))
    return base_velocity


# ============================================================================
# Engine
# ============================================================================


def arpeggiate_single_chord(
    chord: ChordBlock,
    config: ArpEngineConfig,
    bpm: float,
    chord_index: int = 0,
    seed: int | None = None,
    rng: random.Random | None = None,
    ids: IdFactory | None = None,
) -> list[MelodyNote]:
    """
    Turn one chord block into notes.

    Strum mode emits one note per voiced pitch, ascending, each starting
    at its strum offset and ending with the chord (at least 0.1 beats).

    Arp mode emits floor(duration / rate) notes, one per rate step,
    cycling through the pattern order. Each lasts rate * gate / 100 beats
    at the chord's velocity. A seed makes the random pattern reproducible.
    """
    ids = ids or new_id
    pitches = get_voiced_chord_notes(chord)
    if not pitches:
        return []

    arp, strum = config.arp, config.strum

    if strum.enabled:
        ordered = sorted(pitches)
        notes = []
        for i, pitch in enumerate(ordered):
            offset = get_strum_offset_beats(strum, bpm, i, len(ordered), chord_index)
            velocity = apply_velocity_curve(chord.velocity, strum.velocity_curve, i, len(ordered))
            notes.append(
                MelodyNote(
                    id=ids(),
                    pitch=pitch,
                    start_beat=chord.start_beat + offset,
                    duration=max(MIN_STRUM_NOTE_BEATS, chord.duration - offset),
                    velocity=velocity,
                )
            )
        return notes

    if seed is not None:
        order = get_seeded_pattern_order(pitches, arp.pattern, arp.octaves, arp.include_root, seed)
    else:
        order = get_pattern_order(pitches, arp.pattern, arp.octaves, arp.include_root, rng=rng)
    if not order:
        return []

    step = arp.rate.beats
    note_duration = step * (arp.gate / 100)
    count = int(chord.duration // step)

    return [
        MelodyNote(
            id=ids(),
            pitch=order[i % len(order)],
            start_beat=chord.start_beat + i * step,
            duration=note_duration,
            velocity=chord.velocity,
        )
        for i in range(count)
    ]


def generate_arp_preview(
    chords: Sequence[ChordBlock],
    config: ArpEngineConfig,
    bpm: float,
    scale: ScaleConfig | None = None,
    humanize: HumanizeConfig | None = None,
    seed: int | None = None,
    rng: random.Random | None = None,
    ids: IdFactory | None = None,
) -> ArpPreviewResult:
    """
    Arpeggiate a whole progression.

    Chord i uses seed + i when a seed is given. Pitches snap to the scale
    when scale.snap_to_scale is set; humanization applies when enabled.
    The result is stably sorted by start beat.
    """
    notes: list[MelodyNote] = []
    for index, chord in enumerate(chords):
        chord_seed = seed + index if seed is not None else None
        notes.extend(
            arpeggiate_single_chord(chord, config, bpm, index, seed=chord_seed, rng=rng, ids=ids)
        )

    if scale is not None and scale.snap_to_scale:
        notes = [
            note.model_copy(update={"pitch": snap_to_scale(note.pitch, scale)}) for note in notes
        ]

    if humanize is not None and humanize.enabled:
        notes = humanize_notes(notes, humanize, rng=rng)

    notes.sort(key=lambda note: note.start_beat)
    logger.debug("Arp preview: %d chords -> %d notes", len(chords), len(notes))

    return ArpPreviewResult(notes=notes, original_chords=list(chords), config=config)


def commit_arp_preview(
    existing_notes: Sequence[MelodyNote],
    preview: ArpPreviewResult,
    ids: IdFactory | None = None,
) -> list[MelodyNote]:
    """Merge preview notes (with fresh ids) into existing notes, sorted by start."""
    ids = ids or new_id
    committed = [note.model_copy(update={"id": ids()}) for note in preview.notes]
    return sorted([*existing_notes, *committed], key=lambda note: note.start_beat)


def validate_arp_config(config: ArpEngineConfig) -> list[str]:
    """
    Check config ranges.

    Returns:
        Human-readable problems; empty when the config is valid
    """
    errors = []
    if not 1 <= config.arp.gate <= 200:
        errors.append("Gate must be between 1 and 200")
    if not 1 <= config.arp.octaves <= 4:
        errors.append("Octaves must be between 1 and 4")
    if not 0 <= config.strum.time_ms <= 500:
        errors.append("Strum time (ms) must be between 0 and 500")
    if not 0 <= config.strum.time_ticks <= TICKS_PER_BEAT:
        errors.append("Strum time (ticks) must be between 0 and 480")
    return errors
