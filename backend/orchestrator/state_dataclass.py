"""
Authoritative coordinator state container.

Rules:
- This dataclass is a pure data model.
- It contains ALL state the reducer may ever need.
- No behavior, no helpers, no derived logic.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from catalog.runtime_catalog import RuntimeCatalog
from constants import DEFAULT_ALLOWED_LANGUAGES, DEFAULT_LANGUAGE, STARTER_SNIPPETS
from orchestrator.enums.catalog_status import CatalogStatus
from orchestrator.enums.state import RunState
from orchestrator.outcome import ExecutionOutcome
from orchestrator.run_ids import RunIds
from orchestrator.selection import Selection


@dataclass(frozen=True)
class CoordinatorState:
    """Immutable snapshot of all coordinator-owned state."""

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------
    catalog: RuntimeCatalog = field(default_factory=RuntimeCatalog)
    catalog_status: CatalogStatus = CatalogStatus.LOADING
    catalog_error: str | None = None

    # Languages kept when a catalog is built from raw entries
    allowed_languages: tuple[str, ...] = DEFAULT_ALLOWED_LANGUAGES

    # ------------------------------------------------------------------
    # User choice / editor
    # ------------------------------------------------------------------
    selection: Selection = field(default_factory=Selection)
    source: str = STARTER_SNIPPETS.get(DEFAULT_LANGUAGE, "")

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------
    run_state: RunState = RunState.IDLE

    # Set only while COMPLETED; cleared the moment a new run starts
    outcome: ExecutionOutcome | None = None

    # ------------------------------------------------------------------
    # Request versioning
    # ------------------------------------------------------------------
    run_ids: RunIds = field(default_factory=RunIds)
