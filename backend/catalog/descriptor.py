"""
Runtime descriptor value type.

One supported (language, version) execution environment as reported by
the remote service. Pure data, immutable once fetched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class RuntimeDescriptor:
    """A single runtime offered by the execution service."""

    language: str
    version: str
    aliases: tuple[str, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        """Identity used for de-duplication."""
        return (self.language, self.version)

    @staticmethod
    def from_mapping(raw: Mapping[str, Any]) -> RuntimeDescriptor | None:
        """
        Build a descriptor from one raw catalog entry.

        Returns None for entries without string language/version.
        Non-string aliases are dropped.
        """
        language = raw.get("language")
        version = raw.get("version")
        if not isinstance(language, str) or not isinstance(version, str):
            return None
        if not language or not version:
            return None

        raw_aliases = raw.get("aliases") or ()
        if isinstance(raw_aliases, str) or not isinstance(raw_aliases, (list, tuple)):
            raw_aliases = ()

        return RuntimeDescriptor(
            language=language,
            version=version,
            aliases=tuple(a for a in raw_aliases if isinstance(a, str)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "version": self.version,
            "aliases": list(self.aliases),
        }
