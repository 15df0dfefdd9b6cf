"""
Melody template storage.

Storage layout under TEMPLATES_STORAGE_KEY:
    {"version": 1, "templates": [...], "lastOpenedId": "..."}

State changes are pure functions over MelodyTemplateStorage; TemplateStore
only loads and saves it.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field, ValidationError

from chuk_melody.constants import TEMPLATE_STORAGE_VERSION, TEMPLATES_STORAGE_KEY
from chuk_melody.models.base import CamelModel, utc_now
from chuk_melody.models.music import MelodyTemplate
from chuk_melody.storage.kv import KeyValueStore, MemoryKeyValueStore, read_json, write_json

logger = logging.getLogger(__name__)


class MelodyTemplateStorage(CamelModel):
    """Persisted melody templates."""

    version: int = TEMPLATE_STORAGE_VERSION
    templates: list[MelodyTemplate] = Field(default_factory=list)
    last_opened_id: str | None = None


def migrate_template_storage(data: Any) -> MelodyTemplateStorage:
    """
    Read stored template state of any version.

    Version 1 keeps every valid template and drops invalid ones. Any
    other version, or data that is not an object, yields empty storage.
    """
    if not isinstance(data, dict):
        return MelodyTemplateStorage()

    version = data.get("version")
    if version != TEMPLATE_STORAGE_VERSION:
        logger.warning("Unknown template storage version %r, starting fresh", version)
        return MelodyTemplateStorage()

    templates = []
    raw_templates = data.get("templates")
    for raw in raw_templates if isinstance(raw_templates, list) else []:
        try:
            templates.append(MelodyTemplate.model_validate(raw))
        except ValidationError:
            logger.debug("Dropping invalid stored template: %r", raw)

    last_opened_id = data.get("lastOpenedId")
    return MelodyTemplateStorage(
        templates=templates,
        last_opened_id=last_opened_id if isinstance(last_opened_id, str) else None,
    )


def add_template(state: MelodyTemplateStorage, template: MelodyTemplate) -> MelodyTemplateStorage:
    """Append a template and mark it last opened."""
    return state.model_copy(
        update={"templates": [*state.templates, template], "last_opened_id": template.id}
    )


def update_template(
    state: MelodyTemplateStorage, template: MelodyTemplate
) -> MelodyTemplateStorage:
    """Replace the template with the same id, refreshing its updated_at."""
    updated = template.model_copy(update={"updated_at": utc_now()})
    return state.model_copy(
        update={"templates": [updated if t.id == template.id else t for t in state.templates]}
    )


def delete_template(state: MelodyTemplateStorage, template_id: str) -> MelodyTemplateStorage:
    last_opened_id = None if state.last_opened_id == template_id else state.last_opened_id
    return state.model_copy(
        update={
            "templates": [t for t in state.templates if t.id != template_id],
            "last_opened_id": last_opened_id,
        }
    )


def get_template(state: MelodyTemplateStorage, template_id: str) -> MelodyTemplate | None:
    for template in state.templates:
        if template.id == template_id:
            return template
    return None


def set_last_opened(state: MelodyTemplateStorage, template_id: str | None) -> MelodyTemplateStorage:
    return state.model_copy(update={"last_opened_id": template_id})


class TemplateStore:
    """Loads and saves melody templates through a key-value store."""

    def __init__(self, backend: KeyValueStore | None = None, key: str = TEMPLATES_STORAGE_KEY):
        self.backend = backend if backend is not None else MemoryKeyValueStore()
        self.key = key

    def load(self) -> MelodyTemplateStorage:
        """Load and migrate stored templates; anything unreadable is empty."""
        return migrate_template_storage(read_json(self.backend, self.key))

    def save(self, state: MelodyTemplateStorage) -> bool:
        return write_json(self.backend, self.key, state.to_wire())
