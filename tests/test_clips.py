"""
Tests for clip references and their URL encoding.
"""

from typing import Any

import pytest
from pydantic import ValidationError

from chuk_melody.arrangement import create_chord_lane, create_drum_lane, create_melody_lane
from chuk_melody.clips import (
    clips_from_payload,
    create_clip_ref_from_lane,
    create_default_lane_settings,
    decode_clips_from_url,
    deserialize_clip,
    encode_clips_to_url,
    migrate_payload,
    serialize_clip,
    serialize_clips_to_payload,
    validate_payload,
    validate_serialized_clip,
)
from chuk_melody.core import SequentialIds
from chuk_melody.encoding import encode_json_for_url, to_json
from chuk_melody.models import (
    ChordBlock,
    ClipKind,
    ClipMetadata,
    NoteMode,
    ProjectClipRef,
    QuantizeGrid,
    ScaleConfig,
    SerializedClip,
    SerializedClipPayload,
    create_note,
)


@pytest.fixture
def melody_clip(ids: SequentialIds, clip_metadata: ClipMetadata) -> ProjectClipRef:
    """A two-note melody clip."""
    lane = create_melody_lane("Lead", ids=ids).model_copy(
        update={"notes": [create_note(72, 0, 0.5, 90, ids=ids), create_note(74, 0.5, ids=ids)]}
    )
    return create_clip_ref_from_lane(lane, clip_metadata, start_bar=5, length_bars=2, ids=ids)


def _serialized(**overrides: Any) -> dict[str, Any]:
    clip = {
        "id": "clip_1",
        "k": "melodyLane",
        "n": "Lead",
        "sb": 1,
        "lb": 4,
        "m": {"b": 120, "k": "C", "s": "major", "t": [4, 4]},
        "ls": {"i": "grand-piano", "nm": "sustain", "v": 100, "q": "1/16"},
        "nt": [{"p": 60, "s": 0, "d": 1, "v": 100}],
    }
    clip.update(overrides)
    return clip


def _encode(payload: Any) -> str:
    return encode_json_for_url(to_json(payload))


class TestClipRefs:
    """Tests for capturing clips from lanes."""

    def test_default_lane_settings(self) -> None:
        """Drum clips are one-shot kits; everything else a sustained piano."""
        drums = create_default_lane_settings(ClipKind.DRUM_LANE)
        assert (drums.instrument_id, drums.note_mode) == ("acoustic-kit", NoteMode.ONE_SHOT)
        for kind in ("melodyLane", "chordLane", "audioLoop"):
            settings = create_default_lane_settings(kind)
            assert (settings.instrument_id, settings.note_mode) == ("grand-piano", NoteMode.SUSTAIN)
            assert settings.velocity_default == 100
            assert settings.quantize_grid == QuantizeGrid.SIXTEENTH

    def test_melody_lane(self, melody_clip: ProjectClipRef) -> None:
        """Melody clips copy the lane's notes and remember the lane."""
        assert melody_clip.kind == ClipKind.MELODY_LANE
        assert melody_clip.ref_id == "t_1"
        assert melody_clip.name == "Lead"
        assert (melody_clip.start_bar, melody_clip.length_bars) == (5, 2)
        assert [n.pitch for n in melody_clip.notes] == [72, 74]
        assert melody_clip.lane_settings.note_mode == NoteMode.SUSTAIN

    def test_drum_lane(self, ids: SequentialIds, clip_metadata: ClipMetadata) -> None:
        """Drum clips get one-shot settings."""
        clip = create_clip_ref_from_lane(create_drum_lane(ids=ids), clip_metadata, ids=ids)
        assert clip.kind == ClipKind.DRUM_LANE
        assert clip.lane_settings.instrument_id == "acoustic-kit"
        assert clip.notes == []

    def test_chord_lane_flattened(
        self, ids: SequentialIds, clip_metadata: ClipMetadata, c_major_chord: ChordBlock
    ) -> None:
        """Chord lanes become one note per voiced chord tone."""
        second = c_major_chord.model_copy(
            update={"id": "chord_f", "root_pitch": 65, "start_beat": 4, "bass_note": 41}
        )
        lane = create_chord_lane(ids=ids).model_copy(update={"chords": [c_major_chord, second]})
        clip = create_clip_ref_from_lane(lane, clip_metadata, ids=ids)

        assert clip.kind == ClipKind.CHORD_LANE
        assert [(n.pitch, n.start_beat) for n in clip.notes] == [
            (60, 0),
            (64, 0),
            (67, 0),
            (53, 4),
            (65, 4),
            (69, 4),
            (72, 4),
        ]
        assert {n.duration for n in clip.notes} == {4}
        assert len({n.id for n in clip.notes}) == 7


class TestSerialization:
    """Tests for the compact wire shape."""

    def test_serialize_clip(self, melody_clip: ProjectClipRef) -> None:
        """Serialized clips use short keys and drop note ids."""
        data = serialize_clip(melody_clip).model_dump(mode="json")
        assert data == {
            "id": melody_clip.id,
            "k": "melodyLane",
            "n": "Lead",
            "sb": 5,
            "lb": 2,
            "m": {"b": 120.0, "k": "C", "s": "major", "t": [4, 4]},
            "ls": {"i": "grand-piano", "nm": "sustain", "v": 100, "q": "1/16"},
            "nt": [
                {"p": 72, "s": 0.0, "d": 0.5, "v": 90},
                {"p": 74, "s": 0.5, "d": 1.0, "v": 100},
            ],
        }

    def test_deserialize_clip(self, ids: SequentialIds) -> None:
        """The key doubles as scale root; notes get fresh ids."""
        clip = deserialize_clip(SerializedClip.model_validate(_serialized()), ids=ids)
        assert clip.id == clip.ref_id == "clip_1"
        assert clip.metadata.scale.root == "C"
        assert clip.metadata.scale.snap_to_scale is False
        assert clip.metadata.time_signature == (4, 4)
        assert [n.id for n in clip.notes] == ["t_1"]

    def test_deserialize_without_id(self, ids: SequentialIds) -> None:
        """A clip without an id gets a fresh one, used as its ref id too."""
        data = _serialized()
        del data["id"]
        clip = deserialize_clip(SerializedClip.model_validate(data), ids=ids)
        assert clip.id == clip.ref_id == "t_1"

    def test_payload_envelope(self, melody_clip: ProjectClipRef) -> None:
        """Payloads carry the clip schema version."""
        payload = serialize_clips_to_payload([melody_clip, melody_clip])
        assert payload.v == 1
        assert len(payload.clips) == 2

    def test_migrate_payload_identity(self) -> None:
        """Version 1 payloads need no migration."""
        payload = SerializedClipPayload(clips=[SerializedClip.model_validate(_serialized())])
        assert migrate_payload(payload) is payload

    def test_migrate_newer_payload(self, caplog: pytest.LogCaptureFixture) -> None:
        """Newer payloads pass through with a warning."""
        payload = SerializedClipPayload(v=2)
        assert migrate_payload(payload) is payload
        assert "newer than supported" in caplog.text


class TestClipUrls:
    """Tests for clip URL encoding."""

    def test_round_trip(self, melody_clip: ProjectClipRef, ids: SequentialIds) -> None:
        """Clips survive the trip except for note ids and timestamps."""
        encoded = encode_clips_to_url([melody_clip])
        assert encoded is not None

        decoded = decode_clips_from_url(encoded, ids=ids)
        assert decoded is not None
        (clip,) = decoded
        assert clip.id == melody_clip.id
        assert clip.kind == melody_clip.kind
        assert clip.name == melody_clip.name
        assert clip.metadata == melody_clip.metadata
        assert clip.lane_settings == melody_clip.lane_settings
        assert [(n.pitch, n.start_beat, n.duration, n.velocity) for n in clip.notes] == [
            (n.pitch, n.start_beat, n.duration, n.velocity) for n in melody_clip.notes
        ]
        assert not {n.id for n in clip.notes} & {n.id for n in melody_clip.notes}

    def test_flat_key_round_trip(self, melody_clip: ProjectClipRef, ids: SequentialIds) -> None:
        """A flat key is stored sharp, so the clip's own URL decodes."""
        metadata = ClipMetadata(bpm=120, key="Db", scale=ScaleConfig(root="C#"))
        assert metadata.key == "C#"

        clip = melody_clip.model_copy(update={"metadata": metadata})
        decoded = decode_clips_from_url(encode_clips_to_url([clip]), ids=ids)
        assert decoded is not None
        assert decoded[0].metadata.key == "C#"
        assert decoded[0].metadata.scale.root == "C#"

    @pytest.mark.parametrize("key", ["Am", "H", "", 5])
    def test_metadata_key_must_be_note_name(self, key: Any) -> None:
        """Keys that are not note names fail at construction."""
        with pytest.raises(ValidationError):
            ClipMetadata(bpm=120, key=key, scale=ScaleConfig())

    def test_flat_wire_key_decodes(self, ids: SequentialIds) -> None:
        """Flat keys from other writers are respelled on decode."""
        m = {"b": 120, "k": "Bb", "s": "minor", "t": [4, 4]}
        clips = clips_from_payload({"v": 1, "clips": [_serialized(m=m)]}, ids=ids)
        assert clips is not None
        assert clips[0].metadata.key == "A#"
        assert clips[0].metadata.scale.root == "A#"

    def test_oversized_returns_none(
        self, ids: SequentialIds, clip_metadata: ClipMetadata
    ) -> None:
        """Clips over the size cap do not encode."""
        notes = [create_note(60, i * 0.25, ids=ids) for i in range(300)]
        lane = create_melody_lane(ids=ids).model_copy(update={"notes": notes})
        clip = create_clip_ref_from_lane(lane, clip_metadata, ids=ids)
        assert encode_clips_to_url([clip]) is None

    @pytest.mark.parametrize("encoded", ["", "A" * 12_001, "not base64!", "aGVsbG8="])
    def test_rejected_input(self, encoded: str) -> None:
        """Empty, oversized and malformed input decodes to None."""
        assert decode_clips_from_url(encoded) is None

    def test_deeply_nested_json(self) -> None:
        """JSON nested past the parser's depth limit is malformed input."""
        encoded = encode_json_for_url("[" * 2000)
        assert len(encoded) < 12_000
        assert decode_clips_from_url(encoded) is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"k": "videoClip"},
            {"k": ["melodyLane"]},
            {"n": 5},
            {"sb": 0},
            {"lb": "4"},
            {"m": None},
            {"nt": {}},
            {"m": {"b": 120, "k": "H", "s": "major", "t": [4, 4]}},
            {"m": {"b": 120, "k": "C", "s": "bogus", "t": [4, 4]}},
            {"ls": {"i": "grand-piano", "nm": "sustain", "v": 0, "q": "1/16"}},
        ],
    )
    def test_invalid_clip_rejects_payload(self, overrides: dict[str, Any]) -> None:
        """One bad clip rejects the whole payload."""
        payload = {"v": 1, "clips": [_serialized(id="ok"), _serialized(**overrides)]}
        assert decode_clips_from_url(_encode(payload)) is None

    @pytest.mark.parametrize("payload", [[], {"v": 0, "clips": []}, {"v": 1, "clips": {}}])
    def test_invalid_envelope(self, payload: Any) -> None:
        """The envelope must be an object with a version and a clip list."""
        assert clips_from_payload(payload) is None

    def test_newer_payload_decodes(self, ids: SequentialIds) -> None:
        """Newer payloads are read as-is."""
        clips = clips_from_payload({"v": 2, "clips": [_serialized()]}, ids=ids)
        assert clips is not None
        assert clips[0].name == "Lead"

    def test_audio_loop_kind(self, ids: SequentialIds) -> None:
        """Audio loop clips decode without notes."""
        clips = clips_from_payload({"v": 1, "clips": [_serialized(k="audioLoop", nt=[])]}, ids=ids)
        assert clips is not None
        assert clips[0].kind == ClipKind.AUDIO_LOOP
        assert clips[0].notes == []


class TestClipValidation:
    """Tests for the boolean validation helpers."""

    def test_validate_payload(self) -> None:
        """Only well-formed envelopes pass."""
        assert validate_payload({"v": 1, "clips": [_serialized()]})
        assert validate_payload({"v": 1, "clips": []})
        assert not validate_payload({"v": True, "clips": []})
        assert not validate_payload("clips")

    def test_validate_serialized_clip(self) -> None:
        """Single clips are checked on their own."""
        assert validate_serialized_clip(_serialized())
        assert not validate_serialized_clip(_serialized(ls=[]))
        assert not validate_serialized_clip(None)
