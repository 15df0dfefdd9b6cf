"""
chuk-melody - the music authoring core.

Subpackages:
- core: pitches, scales, chords, voicings, rhythm math and id factories
- models: pydantic models for notes, chords, lanes, arrangements and clips
- analysis: chord detection
- generation: progressions, arpeggiator / strum engine, humanization
- arrangement: lane operations, URL sharing and persistence
- clips: clip references and their compact URL format
- storage: key-value backends and the melody template store
"""

__version__ = "0.1.0"
