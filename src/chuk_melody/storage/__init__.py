"""
Persistence - key-value backends and the melody template store.
"""

from chuk_melody.storage.kv import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    read_json,
    write_json,
)
from chuk_melody.storage.templates import (
    MelodyTemplateStorage,
    TemplateStore,
    add_template,
    delete_template,
    get_template,
    migrate_template_storage,
    set_last_opened,
    update_template,
)

__all__ = [
    "FileKeyValueStore",
    "KeyValueStore",
    "MelodyTemplateStorage",
    "MemoryKeyValueStore",
    "TemplateStore",
    "add_template",
    "delete_template",
    "get_template",
    "migrate_template_storage",
    "read_json",
    "set_last_opened",
    "update_template",
    "write_json",
]
