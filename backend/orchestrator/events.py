"""
Unified event definitions for the coordinator reducer.

Rules:
- Events describe facts that have occurred.
- Events carry data only (no behavior).
- All reducer decisions are based on these events.
- No clocks, no async, no side effects.

Completion events carry the id of the request they answer, for stale gating.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from orchestrator.outcome import ExecutionOutcome


# =============================================================================
# Event Type Enumeration
# =============================================================================

class EventType(str, Enum):
    """
    Canonical event types understood by the reducer.

    Every event_type must be explicitly handled or explicitly
    ignored by the reducer.
    """

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    SESSION_STARTED = "SESSION_STARTED"
    SESSION_ENDED = "SESSION_ENDED"

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    CATALOG_REFRESH_REQUESTED = "CATALOG_REFRESH_REQUESTED"
    CATALOG_LOADED = "CATALOG_LOADED"
    CATALOG_FAILED = "CATALOG_FAILED"

    # ------------------------------------------------------------------
    # User edits
    # ------------------------------------------------------------------
    LANGUAGE_CHANGED = "LANGUAGE_CHANGED"
    VERSION_CHANGED = "VERSION_CHANGED"
    SOURCE_CHANGED = "SOURCE_CHANGED"
    SOURCE_RESET = "SOURCE_RESET"

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    RUN_REQUESTED = "RUN_REQUESTED"
    RUN_FINISHED = "RUN_FINISHED"


# =============================================================================
# Base Event
# =============================================================================

@dataclass(frozen=True)
class Event:
    """
    Base event type.

    All events must specify:
    - event_type: discriminant
    - ts_ms: timestamp provided by the source (or fake in tests)
    """

    event_type: EventType
    ts_ms: int


# =============================================================================
# Session Lifecycle
# =============================================================================

@dataclass(frozen=True)
class SessionStarted(Event):
    session_id: str


@dataclass(frozen=True)
class SessionEnded(Event):
    session_id: str
    reason: str | None = None


# =============================================================================
# Catalog
# =============================================================================

@dataclass(frozen=True)
class CatalogRefreshRequested(Event):
    """Fetch (or re-fetch) the runtime list."""


@dataclass(frozen=True)
class CatalogLoaded(Event):
    """
    Raw runtime list returned by the service.

    entries is the decoded payload, unfiltered; the reducer builds the
    catalog so filtering stays deterministic and testable.
    """

    fetch_id: int
    entries: tuple[Any, ...]


@dataclass(frozen=True)
class CatalogFailed(Event):
    fetch_id: int
    reason: str


# =============================================================================
# User Edits
# =============================================================================

@dataclass(frozen=True)
class LanguageChanged(Event):
    language: str


@dataclass(frozen=True)
class VersionChanged(Event):
    version: str


@dataclass(frozen=True)
class SourceChanged(Event):
    source: str


@dataclass(frozen=True)
class SourceReset(Event):
    """Replace the source with the current language's starter snippet."""


# =============================================================================
# Execution
# =============================================================================

@dataclass(frozen=True)
class RunRequested(Event):
    """
    User pressed Run.

    source may carry the editor text captured at click time; None means
    "use the source the coordinator already holds".
    """

    source: str | None = None


@dataclass(frozen=True)
class RunFinished(Event):
    run_id: int
    outcome: ExecutionOutcome
