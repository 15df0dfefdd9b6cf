"""
Humanization - random timing and velocity jitter plus off-beat swing.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from chuk_melody.core.pitch import round_half_up, validate_velocity
from chuk_melody.models.music import HumanizeConfig, MelodyNote

# Swing at full amount delays off-beats by this many beats
MAX_SWING_BEATS = 0.1


def is_off_beat(start_beat: float) -> bool:
    """True for notes on the "and" of a beat (0.5, 1.5, ...)."""
    return (start_beat * 2) % 2 == 1


def humanize_notes(
    notes: Sequence[MelodyNote],
    config: HumanizeConfig,
    rng: random.Random | None = None,
) -> list[MelodyNote]:
    """
    Jitter note timing and velocity.

    Each note moves by up to +/- timing_range beats and its velocity by up
    to +/- velocity_range. Off-beat notes are additionally delayed by
    swing_amount * 0.1 beats. Start beats never go below 0.

    Returns the notes unchanged when the config is disabled.
    """
    if not config.enabled:
        return list(notes)

    rng = rng or random.Random()
    result = []
    for note in notes:
        timing_offset = rng.uniform(-config.timing_range, config.timing_range)
        velocity_offset = round_half_up(rng.uniform(-config.velocity_range, config.velocity_range))

        swing_offset = 0.0
        if config.swing_amount > 0 and is_off_beat(note.start_beat):
            swing_offset = config.swing_amount * MAX_SWING_BEATS

        result.append(
            note.model_copy(
                update={
                    "start_beat": max(0.0, note.start_beat + timing_offset + swing_offset),
                    "velocity": validate_velocity(note.velocity + velocity_offset),
                }
            )
        )
    return result
