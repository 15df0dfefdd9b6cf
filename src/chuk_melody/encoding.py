"""
URL-safe payload encoding shared by arrangements and clips.

Payloads are compact JSON, percent-encoded like encodeURIComponent, then
base64'd. Size caps are checked on the JSON before encoding and on the
encoded string before decoding.
"""

from __future__ import annotations

import base64
import json
from typing import Any
from urllib.parse import quote, unquote

from chuk_melody.constants import ENCODED_SIZE_GUARD_FACTOR

# Characters encodeURIComponent leaves alone besides alphanumerics and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"


def to_json(data: Any) -> str:
    """Serialize to compact JSON (no whitespace, unicode kept)."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def encode_json_for_url(json_text: str) -> str:
    """base64(encodeURIComponent(json_text))."""
    escaped = quote(json_text, safe=_URI_COMPONENT_SAFE)
    return base64.b64encode(escaped.encode("ascii")).decode("ascii")


def decode_json_from_url(encoded: str) -> Any:
    """
    Reverse encode_json_for_url and parse the JSON.

    Raises:
        ValueError: malformed base64, percent-encoding or JSON, or JSON
            nested too deeply to parse
    """
    raw = base64.b64decode(encoded, validate=True).decode("ascii")
    try:
        return json.loads(unquote(raw, errors="strict"))
    except RecursionError as e:
        raise ValueError("JSON nested too deeply") from e


def exceeds_encoded_guard(encoded: str, json_cap: int) -> bool:
    """True when an encoded string is too long to be worth decoding."""
    return len(encoded) > json_cap * ENCODED_SIZE_GUARD_FACTOR
