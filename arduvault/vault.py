"""The decrypted password vault and its JSON form."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field

_FIELDS = ("service", "username", "password")


@dataclass(frozen=True)
class PasswordEntry:
    """One stored credential."""

    service: str
    username: str
    password: str = field(repr=False)


def _key(service: str, username: str) -> str:
    return f"{service}|{username}"


@dataclass
class PasswordVault:
    """Credentials keyed by "service|username"."""

    version: int = 1
    entries: dict[str, PasswordEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, service: str, username: str, password: str) -> PasswordEntry | None:
        """Add an entry; return it, or None if one already exists for the pair."""
        key = _key(service, username)
        if key in self.entries:
            return None
        entry = PasswordEntry(service, username, password)
        self.entries[key] = entry
        return entry

    def get(self, service: str | None = None, username: str | None = None) -> list[PasswordEntry]:
        """Return entries matching the given filters.

        With no service every entry is returned. With a service alone, entries
        whose key equals it are returned. With both, the single exact match.
        """
        if service is None:
            return list(self.entries.values())
        if username is None:
            return [entry for key, entry in self.entries.items() if key == service]
        entry = self.entries.get(_key(service, username))
        return [entry] if entry is not None else []

    def delete(self, service: str, username: str) -> PasswordEntry | None:
        """Remove and return the entry for the pair, or None if absent."""
        return self.entries.pop(_key(service, username), None)

    def clear(self) -> None:
        """Drop every entry."""
        self.entries.clear()

    def to_json(self) -> str:
        """Serialize to compact JSON."""
        payload = {
            "version": self.version,
            "entries": {key: asdict(entry) for key, entry in self.entries.items()},
        }
        return json.dumps(payload, separators=(",", ":"))

    @classmethod
    def from_json(cls, data: str | bytes) -> PasswordVault:
        """Parse a vault from its JSON form; raise ValueError if malformed."""
        payload = json.loads(data)
        if not isinstance(payload, dict):
            raise ValueError("vault must be a JSON object")
        version = payload.get("version")
        if isinstance(version, bool) or not isinstance(version, int) or not 0 <= version <= 255:
            raise ValueError("vault version must be an integer between 0 and 255")
        raw_entries = payload.get("entries")
        if not isinstance(raw_entries, dict):
            raise ValueError("vault entries must be a JSON object")
        entries = {}
        for key, raw in raw_entries.items():
            if not isinstance(raw, dict):
                raise ValueError(f"entry {key!r} must be a JSON object")
            values = [raw.get(name) for name in _FIELDS]
            if not all(isinstance(value, str) for value in values):
                raise ValueError(f"entry {key!r} must have string fields {', '.join(_FIELDS)}")
            entries[key] = PasswordEntry(*values)
        return cls(version=version, entries=entries)