"""
Language/version selection.

Rules:
- Selection is a plain value; the reducer swaps it, never mutates it.
- Changing language re-resolves version from the catalog.
- A catalog miss keeps the previous version (a typed custom version survives).
- Version is free text: the service accepts aliases the catalog does not list.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from catalog.runtime_catalog import RuntimeCatalog
from constants import DEFAULT_LANGUAGE


@dataclass(frozen=True)
class Selection:
    """The user's current runtime choice."""

    language: str = DEFAULT_LANGUAGE
    version: str = ""


def set_language(
    selection: Selection,
    language: str,
    catalog: RuntimeCatalog,
) -> Selection:
    """Set language, then resolve version from the catalog default."""
    default = catalog.default_for(language)
    if default is None:
        return replace(selection, language=language)
    return Selection(language=language, version=default.version)


def set_version(selection: Selection, version: str) -> Selection:
    """Unconditional direct set. Language is never touched."""
    return replace(selection, version=version)


def reconcile(selection: Selection, catalog: RuntimeCatalog) -> Selection:
    """
    Bring a selection in line with a freshly loaded catalog.

    - Current language offered: take its default version.
    - Otherwise: move to the first catalog entry.
    - Empty catalog: unchanged.
    """
    if not catalog:
        return selection

    if catalog.default_for(selection.language) is not None:
        return set_language(selection, selection.language, catalog)

    first = catalog.entries[0]
    return Selection(language=first.language, version=first.version)
