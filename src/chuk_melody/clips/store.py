"""
Per-project clip store.

Storage layout under CLIPS_STORAGE_KEY:
    {"version": 1, "projectClips": {"<project id>": [<clip>, ...]}}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from chuk_melody.constants import CLIPS_STORAGE_KEY
from chuk_melody.models.base import utc_now
from chuk_melody.models.clips import ClipsStorage, ProjectClipRef
from chuk_melody.storage.kv import KeyValueStore, MemoryKeyValueStore, read_json, write_json

logger = logging.getLogger(__name__)


class ClipStore:
    """
    Attaches clip references to projects.

    Operations on an unknown project or clip id are no-ops.
    """

    def __init__(self, backend: KeyValueStore | None = None, key: str = CLIPS_STORAGE_KEY):
        """
        Initialize the store.

        Args:
            backend: Key-value backend (in-memory if omitted)
            key: Storage key for the clip map
        """
        self.backend = backend if backend is not None else MemoryKeyValueStore()
        self.key = key

    def load(self) -> ClipsStorage:
        """Load stored clips, falling back to empty storage."""
        data = read_json(self.backend, self.key)
        if data is None:
            return ClipsStorage()
        try:
            return ClipsStorage.model_validate(data)
        except ValidationError as e:
            logger.warning("Discarding invalid clip storage: %s", e)
            return ClipsStorage()

    def save(self, storage: ClipsStorage) -> bool:
        return write_json(self.backend, self.key, storage.to_wire())

    def get_project_clips(self, project_id: str) -> list[ProjectClipRef]:
        return list(self.load().project_clips.get(project_id, []))

    def attach(self, project_id: str, clip: ProjectClipRef) -> bool:
        """Append a clip to a project's list, creating the list if needed."""
        storage = self.load()
        clips = [*storage.project_clips.get(project_id, []), clip]
        return self._save_project(storage, project_id, clips)

    def detach(self, project_id: str, clip_id: str) -> bool:
        """Remove a clip from a project."""
        storage = self.load()
        if project_id not in storage.project_clips:
            return False
        clips = [c for c in storage.project_clips[project_id] if c.id != clip_id]
        return self._save_project(storage, project_id, clips)

    def update_project_clip(
        self, project_id: str, clip_id: str, updates: Mapping[str, Any]
    ) -> bool:
        """
        Merge field updates into one clip and refresh its updated_at.

        Raises:
            ValidationError: the merged clip is invalid
        """
        storage = self.load()
        if project_id not in storage.project_clips:
            return False
        clips = [
            ProjectClipRef.model_validate({**c.model_dump(), **updates, "updated_at": utc_now()})
            if c.id == clip_id
            else c
            for c in storage.project_clips[project_id]
        ]
        return self._save_project(storage, project_id, clips)

    def _save_project(
        self, storage: ClipsStorage, project_id: str, clips: list[ProjectClipRef]
    ) -> bool:
        project_clips = {**storage.project_clips, project_id: clips}
        return self.save(storage.model_copy(update={"project_clips": project_clips}))
