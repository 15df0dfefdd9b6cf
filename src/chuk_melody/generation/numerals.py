"""
Roman numeral lookup and the progression template library.

Numerals map to a semitone offset from the key root plus a chord quality.
Progression presets are loaded from YAML files:
1. Built-in library (shipped with package)
2. Project library (user's own progression files)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chuk_melody.core.chord import ChordType
from chuk_melody.models.music import ChordProgressionTemplate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedNumeral:
    """A numeral resolved against the key root."""

    degree_offset: int
    chord_type: ChordType | str


NumeralParser = Callable[[str], ParsedNumeral | None]


_NUMERAL_TABLE: dict[str, tuple[int, ChordType]] = {
    "I": (0, ChordType.MAJOR),
    "i": (0, ChordType.MINOR),
    "Imaj7": (0, ChordType.MAJOR_7),
    "II": (2, ChordType.MAJOR),
    "ii": (2, ChordType.MINOR),
    "ii7": (2, ChordType.MINOR_7),
    "ii°": (2, ChordType.DIMINISHED),
    "III": (4, ChordType.MAJOR),
    "iii": (4, ChordType.MINOR),
    "iii7": (4, ChordType.MINOR_7),
    "IV": (5, ChordType.MAJOR),
    "iv": (5, ChordType.MINOR),
    "V": (7, ChordType.MAJOR),
    "v": (7, ChordType.MINOR),
    "V7": (7, ChordType.DOMINANT_7),
    "VI": (9, ChordType.MAJOR),
    "vi": (9, ChordType.MINOR),
    "vi7": (9, ChordType.MINOR_7),
    "VII": (11, ChordType.MAJOR),
    "vii": (11, ChordType.MINOR),
    "vii°": (11, ChordType.DIMINISHED),
    "viiø7": (11, ChordType.HALF_DIMINISHED_7),
}


def parse_numeral(numeral: str) -> ParsedNumeral | None:
    """
    Resolve a roman numeral such as "vi" or "V7".

    Degree offsets are fixed semitone distances from the key root
    (major-key positions), independent of the scale type.

    Returns:
        The parsed numeral, or None if the numeral is not recognized
    """
    entry = _NUMERAL_TABLE.get(numeral)
    if entry is None:
        return None
    degree_offset, chord_type = entry
    return ParsedNumeral(degree_offset=degree_offset, chord_type=chord_type)


class ProgressionLibrary:
    """
    Discovers and loads progression templates.

    Each YAML file holds a `progressions` list. Project templates override
    library templates with the same id; file order is kept otherwise.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the library.

        Args:
            library_path: Path to the built-in progression files
            project_path: Path to a project progression directory
        """
        self.library_path = library_path or (Path(__file__).parent / "library")
        self.project_path = project_path
        self._cache: list[ChordProgressionTemplate] | None = None

    def templates(self) -> list[ChordProgressionTemplate]:
        """All templates, library first then project."""
        if self._cache is not None:
            return list(self._cache)

        by_id: dict[str, ChordProgressionTemplate] = {}
        for directory in (self.library_path, self.project_path):
            if directory is None or not directory.exists():
                continue
            for path in sorted(directory.glob("*.yaml")):
                for template in self._load_file(path):
                    by_id[template.id] = template

        self._cache = list(by_id.values())
        return list(self._cache)

    def get_genres(self) -> list[str]:
        """Distinct genres in first-seen order."""
        return list(dict.fromkeys(t.genre for t in self.templates()))

    def get_templates_by_genre(self, genre: str) -> list[ChordProgressionTemplate]:
        return [t for t in self.templates() if t.genre == genre]

    def get_template_by_id(self, template_id: str) -> ChordProgressionTemplate | None:
        for template in self.templates():
            if template.id == template_id:
                return template
        return None

    def clear_cache(self) -> None:
        """Clear the template cache."""
        self._cache = None

    def _load_file(self, path: Path) -> list[ChordProgressionTemplate]:
        """Load templates from a YAML file; an unreadable file yields none."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError):
            logger.warning("Could not read progression file %s", path, exc_info=True)
            return []

        templates = []
        for entry in self._entries(data):
            try:
                templates.append(ChordProgressionTemplate.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping invalid progression in %s: %r", path, entry.get("id"))
        return templates

    @staticmethod
    def _entries(data: Any) -> list[dict[str, Any]]:
        if not isinstance(data, dict):
            return []
        entries = data.get("progressions", [])
        if not isinstance(entries, list):
            return []
        return [e for e in entries if isinstance(e, dict)]


_default_library = ProgressionLibrary()


def progression_templates() -> list[ChordProgressionTemplate]:
    """The built-in progression presets."""
    return _default_library.templates()


def get_genres() -> list[str]:
    """Genres of the built-in presets."""
    return _default_library.get_genres()


def get_templates_by_genre(genre: str) -> list[ChordProgressionTemplate]:
    """Built-in presets for one genre."""
    return _default_library.get_templates_by_genre(genre)


def get_template_by_id(template_id: str) -> ChordProgressionTemplate | None:
    """A built-in preset by id."""
    return _default_library.get_template_by_id(template_id)
