"""
Pure coordinator reducer.

(state, event) -> (new_state, commands)

Rules:
- Pure: no side effects, no IO, no clocks.
- Deterministic: output depends only on inputs.
- Total: every event is handled or explicitly ignored (logged).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from catalog.runtime_catalog import RuntimeCatalog
from constants import STARTER_SNIPPETS
from orchestrator.commands import (
    Command,
    FetchCatalog,
    LogEvent,
    StartExecution,
)
from orchestrator.enums.catalog_status import CatalogStatus
from orchestrator.enums.state import RunState
from orchestrator.events import (
    CatalogFailed,
    CatalogLoaded,
    CatalogRefreshRequested,
    Event,
    LanguageChanged,
    RunFinished,
    RunRequested,
    SessionEnded,
    SessionStarted,
    SourceChanged,
    SourceReset,
    VersionChanged,
)
from orchestrator.outcome import outcome_to_dict
from orchestrator.selection import reconcile, set_language, set_version
from orchestrator.state_dataclass import CoordinatorState
from protocol.execution import build_request


# =============================================================================
# Invariants
# =============================================================================
# - Run IDs are bumped ONLY when a new request is started
# - At most one run is in flight; RunRequested while RUNNING is ignored
# - Completions with a non-current id are stale and ignored
# - A new run clears the previous outcome before any result arrives
# - The catalog is replaced wholesale, never edited in place


# =============================================================================
# Small helpers
# =============================================================================

def _log(
    state: CoordinatorState,
    event: Event,
    decision: str,
    details: dict[str, Any] | None = None,
) -> LogEvent:
    return LogEvent(
        event={
            "ts_ms": event.ts_ms,
            "run_state": state.run_state.value,
            "catalog_status": state.catalog_status.value,
            "event_type": event.event_type.value,
            "decision": decision,
            "run_ids": {
                "execute": state.run_ids.execute,
                "catalog": state.run_ids.catalog,
            },
            "selection": {
                "language": state.selection.language,
                "version": state.selection.version,
            },
            "details": details or {},
        }
    )


def _state_changed(
    old: CoordinatorState,
    new: CoordinatorState,
    event: Event,
    source: str,
) -> LogEvent:
    return _log(
        new,
        event,
        "state_changed",
        {
            "from_state": old.run_state.value,
            "to_state": new.run_state.value,
            "source": source,
        },
    )


def _ignore(
    state: CoordinatorState, event: Event, reason: str
) -> tuple[CoordinatorState, tuple[Command, ...]]:
    return state, (_log(state, event, "ignored", {"reason": reason}),)


def _start_catalog_fetch(
    state: CoordinatorState, event: Event, decision: str
) -> tuple[CoordinatorState, tuple[Command, ...]]:
    fetch_id = state.run_ids.catalog + 1
    new_state = replace(
        state,
        catalog_status=CatalogStatus.LOADING,
        run_ids=replace(state.run_ids, catalog=fetch_id),
    )
    return new_state, (
        FetchCatalog(fetch_id=fetch_id),
        _log(new_state, event, decision, {"fetch_id": fetch_id}),
    )


# =============================================================================
# Handlers
# =============================================================================

def _on_catalog_loaded(
    state: CoordinatorState, event: CatalogLoaded
) -> tuple[CoordinatorState, tuple[Command, ...]]:
    if event.fetch_id != state.run_ids.catalog:
        return _ignore(state, event, "stale_catalog_fetch")

    catalog = RuntimeCatalog.from_raw(event.entries, state.allowed_languages)
    new_state = replace(
        state,
        catalog=catalog,
        catalog_status=CatalogStatus.READY,
        catalog_error=None,
        selection=reconcile(state.selection, catalog),
    )
    return new_state, (
        _log(
            new_state,
            event,
            "catalog_loaded",
            {
                "raw_count": len(event.entries),
                "kept_count": len(catalog),
                "languages": list(catalog.distinct_languages()),
            },
        ),
    )


def _on_catalog_failed(
    state: CoordinatorState, event: CatalogFailed
) -> tuple[CoordinatorState, tuple[Command, ...]]:
    if event.fetch_id != state.run_ids.catalog:
        return _ignore(state, event, "stale_catalog_fetch")

    # Previous catalog (empty on first fetch) stays in place
    new_state = replace(
        state,
        catalog_status=CatalogStatus.FAILED,
        catalog_error=event.reason,
    )
    return new_state, (
        _log(new_state, event, "catalog_failed", {"reason": event.reason}),
    )


def _on_run_requested(
    state: CoordinatorState, event: RunRequested
) -> tuple[CoordinatorState, tuple[Command, ...]]:
    if state.run_state is RunState.RUNNING:
        return _ignore(state, event, "run_in_flight")

    source = state.source if event.source is None else event.source
    request = build_request(state.selection, source)
    run_id = state.run_ids.execute + 1

    new_state = replace(
        state,
        source=source,
        run_state=RunState.RUNNING,
        outcome=None,
        run_ids=replace(state.run_ids, execute=run_id),
    )
    return new_state, (
        StartExecution(run_id=run_id, request=request),
        _log(
            new_state,
            event,
            "run_started",
            {
                "run_id": run_id,
                "language": request.language,
                "version": request.version,
                "file": request.files[0].name,
                "source_len": len(source),
            },
        ),
        _state_changed(state, new_state, event, "run_requested"),
    )


def _on_run_finished(
    state: CoordinatorState, event: RunFinished
) -> tuple[CoordinatorState, tuple[Command, ...]]:
    if event.run_id != state.run_ids.execute:
        return _ignore(state, event, "stale_run")
    if state.run_state is not RunState.RUNNING:
        return _ignore(state, event, "not_running")

    new_state = replace(
        state,
        run_state=RunState.COMPLETED,
        outcome=event.outcome,
    )
    return new_state, (
        _log(
            new_state,
            event,
            "run_completed",
            {"run_id": event.run_id, "outcome": outcome_to_dict(event.outcome)},
        ),
        _state_changed(state, new_state, event, "run_finished"),
    )


# =============================================================================
# Reducer
# =============================================================================

def reduce(
    state: CoordinatorState, event: Event
) -> tuple[CoordinatorState, tuple[Command, ...]]:
    """
    Pure reducer for the runtime & execution coordinator.

    Given the current state and a single event, returns:
    - the next state
    - a tuple of commands describing required side effects

    Properties:
    - Deterministic: no IO, clocks, or randomness
    - Total: every event is handled or explicitly ignored
    - Version-safe: ignores completions with stale ids
    """
    if isinstance(event, SessionStarted):
        return _start_catalog_fetch(state, event, "session_started")

    if isinstance(event, SessionEnded):
        return state, (
            _log(state, event, "session_ended", {"reason": event.reason}),
        )

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    if isinstance(event, CatalogRefreshRequested):
        return _start_catalog_fetch(state, event, "catalog_refresh")

    if isinstance(event, CatalogLoaded):
        return _on_catalog_loaded(state, event)

    if isinstance(event, CatalogFailed):
        return _on_catalog_failed(state, event)

    # ------------------------------------------------------------------
    # Selection / editor
    # ------------------------------------------------------------------
    if isinstance(event, LanguageChanged):
        new_state = replace(
            state,
            selection=set_language(state.selection, event.language, state.catalog),
        )
        return new_state, (
            _log(
                new_state,
                event,
                "language_changed",
                {"from_language": state.selection.language},
            ),
        )

    if isinstance(event, VersionChanged):
        new_state = replace(
            state,
            selection=set_version(state.selection, event.version),
        )
        return new_state, (_log(new_state, event, "version_changed"),)

    if isinstance(event, SourceChanged):
        if event.source == state.source:
            return state, ()
        return replace(state, source=event.source), ()

    if isinstance(event, SourceReset):
        snippet = STARTER_SNIPPETS.get(state.selection.language, "")
        new_state = replace(state, source=snippet)
        return new_state, (
            _log(new_state, event, "source_reset", {"source_len": len(snippet)}),
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    if isinstance(event, RunRequested):
        return _on_run_requested(state, event)

    if isinstance(event, RunFinished):
        return _on_run_finished(state, event)

    return _ignore(state, event, "unhandled_event")
