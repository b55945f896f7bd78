"""
Runtime catalog.

Rules:
- The catalog is immutable; a refresh replaces it wholesale.
- Only allow-listed languages are kept.
- Entries are unique by (language, version); first occurrence wins.
- The catalog never touches the selection. The reducer reads it and decides.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from catalog.descriptor import RuntimeDescriptor
from constants import DEFAULT_ALLOWED_LANGUAGES, FALLBACK_LANGUAGES


@dataclass(frozen=True)
class RuntimeCatalog:
    """Filtered, de-duplicated view of the runtimes the service offers."""

    entries: tuple[RuntimeDescriptor, ...] = ()

    @staticmethod
    def from_raw(
        raw_entries: Iterable[Any],
        allowed_languages: Iterable[str] = DEFAULT_ALLOWED_LANGUAGES,
    ) -> RuntimeCatalog:
        """
        Build a catalog from the raw /runtimes payload.

        Malformed entries (non-objects, missing language/version) are skipped.
        """
        allowed = frozenset(allowed_languages)
        seen: set[tuple[str, str]] = set()
        kept: list[RuntimeDescriptor] = []

        for raw in raw_entries:
            if not isinstance(raw, dict):
                continue
            descriptor = RuntimeDescriptor.from_mapping(raw)
            if descriptor is None or descriptor.language not in allowed:
                continue
            if descriptor.key in seen:
                continue
            seen.add(descriptor.key)
            kept.append(descriptor)

        return RuntimeCatalog(entries=tuple(kept))

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def distinct_languages(self) -> tuple[str, ...]:
        """Unique languages in first-seen order."""
        return tuple(dict.fromkeys(d.language for d in self.entries))

    def default_for(self, language: str) -> RuntimeDescriptor | None:
        """First catalog entry for `language`, if any."""
        for descriptor in self.entries:
            if descriptor.language == language:
                return descriptor
        return None

    def language_options(self) -> tuple[str, ...]:
        """
        Languages the selector should offer.

        Falls back to a fixed built-in list while the catalog is empty,
        so the selector is never unusable.
        """
        return self.distinct_languages() or FALLBACK_LANGUAGES
