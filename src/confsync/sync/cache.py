"""
Configuration Cache

In-memory mapping from fully qualified profile name to its latest parsed
configuration. Entries are immutable and replaced whole, so a reader
sees either the previous value or the new one.
"""

import copy
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from confsync.utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class CacheEntry:
    """Latest parsed configuration of one profile."""
    parsed: Any
    content_type: str
    version: int | None
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert entry to a JSON-ready dictionary."""
        return {
            "parsed": copy.deepcopy(self.parsed),
            "content_type": self.content_type,
            "version": self.version,
            "updated_at": self.updated_at.isoformat(),
        }


class ConfigurationCache:
    """Profile name to CacheEntry mapping with prefix-aware lookup."""

    def __init__(self, prefix: str = ""):
        self._entries: dict[str, CacheEntry] = {}
        self._prefix = ""
        self.set_prefix(prefix)

    @property
    def prefix(self) -> str:
        return self._prefix

    def set_prefix(self, prefix: str) -> None:
        """Replace the prefix used for discovery filtering and lookups."""
        if not isinstance(prefix, str):
            raise ConfigurationError(
                f"prefix must be a string, got {type(prefix).__name__}",
                config_key="sync.config_prefix",
            )
        self._prefix = prefix

    def resolve(self, name: str) -> str:
        """Map a short name to its fully qualified cache key."""
        return f"{self._prefix}{name}"

    def matches(self, profile_name: str) -> bool:
        """Check whether a profile name falls under the prefix."""
        return profile_name.startswith(self._prefix)

    def get(self, name: str, default: Any = None) -> Any:
        """Return a copy of the parsed value for a short name, or default."""
        entry = self._entries.get(self.resolve(name))
        if entry is None:
            return default
        return copy.deepcopy(entry.parsed)

    def get_all(self) -> dict[str, dict[str, Any]]:
        """Return a snapshot of every entry keyed by fully qualified name."""
        return {name: entry.to_dict() for name, entry in self._entries.items()}

    def get_entry(self, profile_name: str) -> CacheEntry | None:
        return self._entries.get(profile_name)

    def put(self, profile_name: str, entry: CacheEntry) -> None:
        self._entries[profile_name] = entry

    def remove(self, profile_name: str) -> bool:
        return self._entries.pop(profile_name, None) is not None

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, profile_name: str) -> bool:
        return profile_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
