"""
Save file storage.

Public API:
    - JsonProfileStore: Locked JSON save file
    - MemoryProfileStore: In-memory store for tests and simulations
    - locked_file, locked_read_json, locked_write_json: portalocker helpers
"""

from .file_locking import locked_file, locked_read_json, locked_write_json
from .profile_store import JsonProfileStore, MemoryProfileStore

__all__ = [
    "JsonProfileStore",
    "MemoryProfileStore",
    "locked_file",
    "locked_read_json",
    "locked_write_json",
]
