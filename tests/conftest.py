"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_melody.core import ChordType, ScaleType, SequentialIds
from chuk_melody.models import ChordBlock, ClipMetadata, ScaleConfig


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def ids() -> SequentialIds:
    """Deterministic id factory."""
    return SequentialIds("t")


@pytest.fixture
def c_major() -> ScaleConfig:
    """C major scale with snapping enabled."""
    return ScaleConfig(root="C", type=ScaleType.MAJOR, snap_to_scale=True)


@pytest.fixture
def c_major_chord() -> ChordBlock:
    """C major triad at beat 0 lasting one bar."""
    return ChordBlock(
        id="chord_c",
        root_pitch=60,
        chord_type=ChordType.MAJOR,
        start_beat=0,
        duration=4,
        velocity=100,
    )


@pytest.fixture
def clip_metadata() -> ClipMetadata:
    """Clip metadata for 120 BPM in C major."""
    return ClipMetadata(
        bpm=120,
        key="C",
        scale=ScaleConfig(root="C", type=ScaleType.MAJOR, snap_to_scale=False),
        time_signature=(4, 4),
    )
