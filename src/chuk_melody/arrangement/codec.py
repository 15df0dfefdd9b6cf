"""
Arrangement URL codec.

Wire format: `{"v": schema_version, "data": <arrangement>}` as compact
JSON, capped at MAX_ARRANGEMENT_PAYLOAD_SIZE characters, then URL-safe
encoded. Decoding validates, migrates and parses; any failure rejects
the whole payload.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from chuk_melody.arrangement.migrations import migrate_arrangement_payload, wrap_legacy_payload
from chuk_melody.arrangement.validator import ArrangementPayloadValidator
from chuk_melody.constants import MAX_ARRANGEMENT_PAYLOAD_SIZE, ErrorMessages
from chuk_melody.encoding import (
    decode_json_from_url,
    encode_json_for_url,
    exceeds_encoded_guard,
    to_json,
)
from chuk_melody.models.lanes import Arrangement

logger = logging.getLogger(__name__)

_validator = ArrangementPayloadValidator()


def arrangement_to_payload(arrangement: Arrangement) -> dict[str, Any]:
    """Wrap an arrangement in its versioned envelope."""
    return {"v": arrangement.schema_version, "data": arrangement.to_wire()}


def arrangement_from_payload(payload: Any) -> Arrangement | None:
    """
    Validate, migrate and parse a decoded payload.

    Bare legacy arrangement objects are accepted as version 1.

    Returns:
        The arrangement, or None if any step fails
    """
    payload = wrap_legacy_payload(payload)

    result = _validator.validate(payload)
    if not result:
        logger.warning("Rejected arrangement payload:\n%s", result)
        return None
    for issue in result.warnings:
        logger.debug("Arrangement payload: %s", issue)

    migrated = migrate_arrangement_payload(payload)
    if migrated is None:
        return None

    try:
        return Arrangement.model_validate(migrated["data"])
    except ValidationError as e:
        logger.warning("Arrangement payload failed model validation: %s", e)
        return None


def encode_arrangement_to_url(arrangement: Arrangement) -> str:
    """
    Encode an arrangement for a share URL.

    Returns:
        The encoded string, or "" if the JSON exceeds the size cap
    """
    json_text = to_json(arrangement_to_payload(arrangement))
    if len(json_text) > MAX_ARRANGEMENT_PAYLOAD_SIZE:
        logger.warning(
            ErrorMessages.PAYLOAD_TOO_LARGE.format(
                size=len(json_text), limit=MAX_ARRANGEMENT_PAYLOAD_SIZE
            )
        )
        return ""
    return encode_json_for_url(json_text)


def decode_arrangement_from_url(encoded: str) -> Arrangement | None:
    """
    Decode an arrangement from a share URL.

    Oversized input is rejected before decoding.

    Returns:
        The arrangement, or None for empty, oversized, malformed or
        invalid input
    """
    if not encoded:
        return None

    if exceeds_encoded_guard(encoded, MAX_ARRANGEMENT_PAYLOAD_SIZE):
        logger.warning("Encoded arrangement of %d characters rejected", len(encoded))
        return None

    try:
        payload = decode_json_from_url(encoded)
    except ValueError as e:
        logger.warning("Could not decode arrangement payload: %s", e)
        return None

    return arrangement_from_payload(payload)
