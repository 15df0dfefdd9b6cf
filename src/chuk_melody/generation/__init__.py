"""
Note generation - progressions, arpeggios, strums and humanization.
"""

from chuk_melody.generation.arp import (
    DEFAULT_ARP_CONFIG,
    DEFAULT_ARP_ENGINE_CONFIG,
    DEFAULT_STRUM_CONFIG,
    RATE_TO_BEATS,
    ArpConfig,
    ArpEngineConfig,
    ArpPattern,
    ArpPreviewResult,
    ArpRate,
    StrumConfig,
    StrumDirection,
    VelocityCurve,
    apply_velocity_curve,
    arpeggiate_single_chord,
    commit_arp_preview,
    generate_arp_preview,
    get_pattern_order,
    get_seeded_pattern_order,
    get_strum_offset_beats,
    validate_arp_config,
)
from chuk_melody.generation.humanize import humanize_notes, is_off_beat
from chuk_melody.generation.numerals import (
    NumeralParser,
    ParsedNumeral,
    ProgressionLibrary,
    get_genres,
    get_template_by_id,
    get_templates_by_genre,
    parse_numeral,
    progression_templates,
)
from chuk_melody.generation.progression import (
    add_bass_notes,
    apply_rhythm_pattern,
    generate_chord_blocks,
    generate_progression,
    generate_simple_melody,
    regenerate_voicings,
    remove_bass_notes,
    set_inversion,
)

__all__ = [
    # Numerals and templates
    "NumeralParser",
    "ParsedNumeral",
    "ProgressionLibrary",
    "get_genres",
    "get_template_by_id",
    "get_templates_by_genre",
    "parse_numeral",
    "progression_templates",
    # Progressions
    "add_bass_notes",
    "apply_rhythm_pattern",
    "generate_chord_blocks",
    "generate_progression",
    "generate_simple_melody",
    "regenerate_voicings",
    "remove_bass_notes",
    "set_inversion",
    # Humanize
    "humanize_notes",
    "is_off_beat",
    # Arp / strum
    "DEFAULT_ARP_CONFIG",
    "DEFAULT_ARP_ENGINE_CONFIG",
    "DEFAULT_STRUM_CONFIG",
    "RATE_TO_BEATS",
    "ArpConfig",
    "ArpEngineConfig",
    "ArpPattern",
    "ArpPreviewResult",
    "ArpRate",
    "StrumConfig",
    "StrumDirection",
    "VelocityCurve",
    "apply_velocity_curve",
    "arpeggiate_single_chord",
    "commit_arp_preview",
    "generate_arp_preview",
    "get_pattern_order",
    "get_seeded_pattern_order",
    "get_strum_offset_beats",
    "validate_arp_config",
]
