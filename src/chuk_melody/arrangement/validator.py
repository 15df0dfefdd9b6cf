"""
Arrangement payload validator - checks untrusted `{v, data}` JSON.

Validates:
- The envelope has an integer version >= 1 and a data object
- The arrangement has a string id and a list of lanes
- bpm and bars are numbers within range
- Lanes are objects with unique ids (duplicates only warn)
"""

from __future__ import annotations

from typing import Any

from chuk_melody.constants import MAX_BARS, MAX_BPM, MIN_BARS, MIN_BPM
from chuk_melody.validation import ValidationResult, is_number


class ArrangementPayloadValidator:
    """Validates the structure of an arrangement payload before parsing."""

    def validate(self, payload: Any) -> ValidationResult:
        """
        Validate a decoded arrangement payload.

        Args:
            payload: Parsed JSON, expected to be `{v, data}`

        Returns:
            ValidationResult with any issues found
        """
        result = ValidationResult()

        if not isinstance(payload, dict):
            result.add_error("NOT_AN_OBJECT", "Payload must be a JSON object")
            return result

        self._validate_version(payload.get("v"), result)

        data = payload.get("data")
        if not isinstance(data, dict):
            result.add_error("MISSING_DATA", "Payload has no arrangement object", "data")
            return result

        self._validate_arrangement(data, result)
        return result

    def _validate_version(self, version: Any, result: ValidationResult) -> None:
        if not isinstance(version, int) or isinstance(version, bool):
            result.add_error("INVALID_VERSION", f"Version must be an integer, got {version!r}", "v")
        elif version < 1:
            result.add_error("INVALID_VERSION", f"Version must be >= 1, got {version}", "v")

    def _validate_arrangement(self, data: dict[str, Any], result: ValidationResult) -> None:
        if not isinstance(data.get("id"), str):
            result.add_error("MISSING_ID", "Arrangement id must be a string", "data.id")

        bpm = data.get("bpm")
        if not is_number(bpm) or not MIN_BPM <= bpm <= MAX_BPM:
            result.add_error(
                "BPM_OUT_OF_RANGE",
                f"bpm must be a number in [{MIN_BPM}, {MAX_BPM}], got {bpm!r}",
                "data.bpm",
            )

        bars = data.get("bars")
        if not is_number(bars) or not MIN_BARS <= bars <= MAX_BARS:
            result.add_error(
                "BARS_OUT_OF_RANGE",
                f"bars must be a number in [{MIN_BARS}, {MAX_BARS}], got {bars!r}",
                "data.bars",
            )

        lanes = data.get("lanes")
        if not isinstance(lanes, list):
            result.add_error("LANES_NOT_LIST", "lanes must be a list", "data.lanes")
            return

        seen: set[str] = set()
        for i, lane in enumerate(lanes):
            location = f"data.lanes[{i}]"
            if not isinstance(lane, dict):
                result.add_error("INVALID_LANE", "Lane must be an object", location)
                continue
            lane_id = lane.get("id")
            if isinstance(lane_id, str):
                if lane_id in seen:
                    result.add_warning(
                        "DUPLICATE_LANE_ID", f"Lane id '{lane_id}' repeats", location
                    )
                seen.add(lane_id)
