"""
Clip references and their compact URL encoding.

A ProjectClipRef is captured from a lane; serialize_clip shrinks it to
the short-key wire shape, and a list of clips travels as
`{"v": 1, "clips": [...]}`. Like arrangements, oversized payloads are
refused and any invalid payload is rejected whole.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, assert_never

from pydantic import ValidationError

from chuk_melody.clips.validator import ClipPayloadValidator
from chuk_melody.constants import CLIP_REF_SCHEMA_VERSION, MAX_CLIP_PAYLOAD_SIZE, ErrorMessages
from chuk_melody.core.chord import get_voiced_chord_notes
from chuk_melody.core.ids import IdFactory, new_id
from chuk_melody.core.pitch import normalize_note_name
from chuk_melody.encoding import (
    decode_json_from_url,
    encode_json_for_url,
    exceeds_encoded_guard,
    to_json,
)
from chuk_melody.models.base import utc_now
from chuk_melody.models.clips import (
    ClipKind,
    ClipMetadata,
    LaneSettings,
    ProjectClipRef,
    QuantizeGrid,
    SerializedClip,
    SerializedClipPayload,
    SerializedLaneSettings,
    SerializedMetadata,
    SerializedNote,
)
from chuk_melody.models.lanes import ChordLane, DrumLane, MelodyLane, NoteMode
from chuk_melody.models.music import MelodyNote, ScaleConfig

logger = logging.getLogger(__name__)

_validator = ClipPayloadValidator()


# ============================================================================
# Clip references
# ============================================================================


def create_default_lane_settings(kind: ClipKind | str) -> LaneSettings:
    """Drum clips play an acoustic kit one-shot; everything else a sustained piano."""
    if ClipKind(kind) == ClipKind.DRUM_LANE:
        return LaneSettings(instrument_id="acoustic-kit", note_mode=NoteMode.ONE_SHOT)
    return LaneSettings(instrument_id="grand-piano", note_mode=NoteMode.SUSTAIN)


def _chord_lane_notes(lane: ChordLane, ids: IdFactory) -> list[MelodyNote]:
    """Flatten chord blocks into one note per voiced pitch."""
    return [
        MelodyNote(
            id=ids(),
            pitch=pitch,
            start_beat=chord.start_beat,
            duration=chord.duration,
            velocity=chord.velocity,
        )
        for chord in lane.chords
        for pitch in get_voiced_chord_notes(chord)
    ]


def create_clip_ref_from_lane(
    lane: MelodyLane | DrumLane | ChordLane,
    metadata: ClipMetadata,
    start_bar: int = 1,
    length_bars: int = 4,
    ids: IdFactory | None = None,
) -> ProjectClipRef:
    """
    Snapshot a lane as a clip reference.

    The clip copies the lane's notes; chord lanes are flattened to their
    voiced notes. Later lane edits do not affect the clip.
    """
    ids = ids or new_id
    match lane:
        case MelodyLane():
            kind, notes = ClipKind.MELODY_LANE, list(lane.notes)
        case DrumLane():
            kind, notes = ClipKind.DRUM_LANE, list(lane.notes)
        case ChordLane():
            kind, notes = ClipKind.CHORD_LANE, _chord_lane_notes(lane, ids)
        case _:
            assert_never(lane)

    now = utc_now()
    return ProjectClipRef(
        id=ids(),
        kind=kind,
        ref_id=lane.id,
        name=lane.name,
        start_bar=start_bar,
        length_bars=length_bars,
        metadata=metadata,
        lane_settings=create_default_lane_settings(kind),
        notes=notes,
        created_at=now,
        updated_at=now,
    )


# ============================================================================
# Serialization
# ============================================================================


def serialize_clip(clip: ProjectClipRef) -> SerializedClip:
    """Shrink a clip to its wire shape. Note ids and timestamps are dropped."""
    return SerializedClip(
        id=clip.id,
        k=clip.kind,
        n=clip.name,
        sb=clip.start_bar,
        lb=clip.length_bars,
        m=SerializedMetadata(
            b=clip.metadata.bpm,
            k=clip.metadata.key,
            s=clip.metadata.scale.type.value,
            t=clip.metadata.time_signature,
        ),
        ls=SerializedLaneSettings(
            i=clip.lane_settings.instrument_id,
            nm=clip.lane_settings.note_mode,
            v=clip.lane_settings.velocity_default,
            q=clip.lane_settings.quantize_grid,
        ),
        nt=[
            SerializedNote(p=n.pitch, s=n.start_beat, d=n.duration, v=n.velocity)
            for n in clip.notes
        ],
    )


def deserialize_clip(data: SerializedClip, ids: IdFactory | None = None) -> ProjectClipRef:
    """
    Expand a wire clip.

    The key doubles as the scale root (flat spellings are respelled as
    sharps). Notes get fresh ids, and a clip without an id gets a fresh
    one that also serves as its ref_id.

    Raises:
        ValidationError: the key is not a note name or the scale type is unknown
    """
    ids = ids or new_id
    clip_id = data.id or ids()
    key = normalize_note_name(data.m.k)
    now = utc_now()
    return ProjectClipRef(
        id=clip_id,
        kind=data.k,
        ref_id=data.id or clip_id,
        name=data.n,
        start_bar=data.sb,
        length_bars=data.lb,
        metadata=ClipMetadata(
            bpm=data.m.b,
            key=key,
            scale=ScaleConfig(root=key, type=data.m.s, snap_to_scale=False),
            time_signature=data.m.t,
        ),
        lane_settings=LaneSettings(
            instrument_id=data.ls.i,
            note_mode=data.ls.nm,
            velocity_default=data.ls.v,
            quantize_grid=QuantizeGrid(data.ls.q),
        ),
        notes=[
            MelodyNote(id=ids(), pitch=n.p, start_beat=n.s, duration=n.d, velocity=n.v)
            for n in data.nt
        ],
        created_at=now,
        updated_at=now,
    )


def serialize_clips_to_payload(clips: Sequence[ProjectClipRef]) -> SerializedClipPayload:
    return SerializedClipPayload(
        v=CLIP_REF_SCHEMA_VERSION, clips=[serialize_clip(clip) for clip in clips]
    )


def deserialize_clips_from_payload(
    payload: SerializedClipPayload, ids: IdFactory | None = None
) -> list[ProjectClipRef]:
    """Migrate a payload to the current version and expand its clips."""
    migrated = migrate_payload(payload)
    return [deserialize_clip(clip, ids) for clip in migrated.clips]


def migrate_payload(payload: SerializedClipPayload) -> SerializedClipPayload:
    """
    Bring a clip payload up to the current version.

    Version 1 is current, so this is the identity. Newer payloads pass
    through unchanged with a warning.
    """
    if payload.v > CLIP_REF_SCHEMA_VERSION:
        logger.warning(
            ErrorMessages.NEWER_SCHEMA.format(version=payload.v, supported=CLIP_REF_SCHEMA_VERSION)
        )
    return payload


# ============================================================================
# URL encoding
# ============================================================================


def encode_clips_to_url(clips: Sequence[ProjectClipRef]) -> str | None:
    """
    Encode clips for a share URL.

    Returns:
        The encoded string, or None if the JSON exceeds the size cap
    """
    json_text = to_json(serialize_clips_to_payload(clips).model_dump(mode="json"))
    if len(json_text) > MAX_CLIP_PAYLOAD_SIZE:
        logger.warning(
            ErrorMessages.PAYLOAD_TOO_LARGE.format(size=len(json_text), limit=MAX_CLIP_PAYLOAD_SIZE)
        )
        return None
    return encode_json_for_url(json_text)


def clips_from_payload(raw: Any, ids: IdFactory | None = None) -> list[ProjectClipRef] | None:
    """
    Validate and expand a decoded clip payload.

    Returns:
        The clips, or None if the payload is invalid anywhere
    """
    result = _validator.validate(raw)
    if not result:
        logger.warning("Rejected clip payload:\n%s", result)
        return None

    try:
        return deserialize_clips_from_payload(SerializedClipPayload.model_validate(raw), ids)
    except ValidationError as e:
        logger.warning("Clip payload failed model validation: %s", e)
        return None


def decode_clips_from_url(
    encoded: str, ids: IdFactory | None = None
) -> list[ProjectClipRef] | None:
    """
    Decode clips from a share URL.

    Returns:
        The clips, or None for empty, oversized, malformed or invalid input
    """
    if not encoded or not isinstance(encoded, str):
        return None

    if exceeds_encoded_guard(encoded, MAX_CLIP_PAYLOAD_SIZE):
        logger.warning("Encoded clip payload of %d characters rejected", len(encoded))
        return None

    try:
        raw = decode_json_from_url(encoded)
    except ValueError as e:
        logger.warning("Could not decode clip payload: %s", e)
        return None

    return clips_from_payload(raw, ids)
