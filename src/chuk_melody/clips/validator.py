"""
Clip payload validator - checks untrusted `{v, clips}` JSON.

Validates:
- The version is a number >= 1
- clips is a list of objects
- Each clip has a known kind, a string name, numeric start/length bars
  >= 1, metadata and lane-settings objects, and a list of notes
"""

from __future__ import annotations

from typing import Any

from chuk_melody.models.clips import ClipKind
from chuk_melody.validation import ValidationResult, is_number

_CLIP_KINDS = frozenset(kind.value for kind in ClipKind)


class ClipPayloadValidator:
    """Validates the structure of a clip payload before parsing."""

    def validate(self, payload: Any) -> ValidationResult:
        """
        Validate a decoded clip payload.

        Args:
            payload: Parsed JSON, expected to be `{v, clips}`

        Returns:
            ValidationResult with any issues found
        """
        result = ValidationResult()

        if not isinstance(payload, dict):
            result.add_error("NOT_AN_OBJECT", "Payload must be a JSON object")
            return result

        version = payload.get("v")
        if not is_number(version) or version < 1:
            result.add_error(
                "INVALID_VERSION", f"Version must be a number >= 1, got {version!r}", "v"
            )

        clips = payload.get("clips")
        if not isinstance(clips, list):
            result.add_error("CLIPS_NOT_LIST", "clips must be a list", "clips")
            return result

        for i, clip in enumerate(clips):
            self.validate_clip(clip, result, f"clips[{i}]")

        return result

    def validate_clip(self, clip: Any, result: ValidationResult, location: str = "clip") -> None:
        """Add issues for one serialized clip to result."""
        if not isinstance(clip, dict):
            result.add_error("INVALID_CLIP", "Clip must be an object", location)
            return

        kind = clip.get("k")
        if not isinstance(kind, str) or kind not in _CLIP_KINDS:
            result.add_error("INVALID_KIND", f"Unknown clip kind {kind!r}", f"{location}.k")
        if not isinstance(clip.get("n"), str):
            result.add_error("INVALID_NAME", "Clip name must be a string", f"{location}.n")

        for field in ("sb", "lb"):
            value = clip.get(field)
            if not is_number(value) or value < 1:
                result.add_error(
                    "INVALID_BARS",
                    f"{field} must be a number >= 1, got {value!r}",
                    f"{location}.{field}",
                )

        for field in ("m", "ls"):
            if not isinstance(clip.get(field), dict):
                result.add_error(
                    "MISSING_OBJECT", f"{field} must be an object", f"{location}.{field}"
                )

        if not isinstance(clip.get("nt"), list):
            result.add_error("NOTES_NOT_LIST", "nt must be a list", f"{location}.nt")


_validator = ClipPayloadValidator()


def validate_payload(payload: Any) -> bool:
    """True if payload has a valid clip payload structure."""
    return _validator.validate(payload).is_valid


def validate_serialized_clip(clip: Any) -> bool:
    """True if clip has a valid serialized clip structure."""
    result = ValidationResult()
    _validator.validate_clip(clip, result)
    return result.is_valid
