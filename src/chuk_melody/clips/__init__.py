"""
Clip references - lane snapshots, their compact wire format and storage.
"""

from chuk_melody.clips.codec import (
    clips_from_payload,
    create_clip_ref_from_lane,
    create_default_lane_settings,
    decode_clips_from_url,
    deserialize_clip,
    deserialize_clips_from_payload,
    encode_clips_to_url,
    migrate_payload,
    serialize_clip,
    serialize_clips_to_payload,
)
from chuk_melody.clips.store import ClipStore
from chuk_melody.clips.validator import (
    ClipPayloadValidator,
    validate_payload,
    validate_serialized_clip,
)

__all__ = [
    "ClipPayloadValidator",
    "ClipStore",
    "clips_from_payload",
    "create_clip_ref_from_lane",
    "create_default_lane_settings",
    "decode_clips_from_url",
    "deserialize_clip",
    "deserialize_clips_from_payload",
    "encode_clips_to_url",
    "migrate_payload",
    "serialize_clip",
    "serialize_clips_to_payload",
    "validate_payload",
    "validate_serialized_clip",
]
