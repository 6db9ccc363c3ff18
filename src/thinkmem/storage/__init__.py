"""
Storage module - persistence and addressing.

- json_store: single-file JSON document store with secret sub-store
- name_path: NamePath grammar resolving to (get, set) pairs
- lock: optional advisory cross-process lock
"""

from thinkmem.storage.json_store import JsonStorage, Secret
from thinkmem.storage.name_path import ResolvedPath, parse_name_path, resolve_name_path

__all__ = ["JsonStorage", "ResolvedPath", "Secret", "parse_name_path", "resolve_name_path"]
