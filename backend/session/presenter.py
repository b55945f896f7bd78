"""
Output presenter.

Turns coordinator state into the view the page renders.

Rules:
- Pure functions of state; no IO.
- While RUNNING the output is blank (no stale output) and Run is disabled.
- Failures render as "Error: <message>".
"""

from __future__ import annotations

from typing import Any

from constants import ERROR_PREFIX, LOADING_LABEL, NO_OUTPUT_PLACEHOLDER, RUN_LABEL
from orchestrator.enums.state import RunState
from orchestrator.outcome import ExecutionOutcome, Success, outcome_to_dict
from orchestrator.state_dataclass import CoordinatorState


def render_outcome(outcome: ExecutionOutcome) -> str:
    """stdout, then "\\n" + stderr when stderr is non-empty."""
    if isinstance(outcome, Success):
        if outcome.stderr:
            return f"{outcome.stdout}\n{outcome.stderr}"
        return outcome.stdout
    return f"{ERROR_PREFIX}{outcome.message}"


def render_output(state: CoordinatorState) -> str:
    if state.run_state is not RunState.COMPLETED or state.outcome is None:
        return ""
    return render_outcome(state.outcome)


def present(state: CoordinatorState) -> dict[str, Any]:
    """Full client view of one coordinator state."""
    running = state.run_state is RunState.RUNNING
    output = render_output(state)

    return {
        "run_state": state.run_state.value,
        "loading": running,
        "run_enabled": not running,
        "run_label": LOADING_LABEL if running else RUN_LABEL,
        "output": output,
        "placeholder": NO_OUTPUT_PLACEHOLDER if not output and not running else "",
        "is_error": state.outcome is not None and not isinstance(state.outcome, Success),
        "outcome": outcome_to_dict(state.outcome),
        "selection": {
            "language": state.selection.language,
            "version": state.selection.version,
        },
        "languages": list(state.catalog.language_options()),
        "source": state.source,
        "catalog": {
            "status": state.catalog_status.value,
            "error": state.catalog_error,
            "runtimes": [d.to_dict() for d in state.catalog.entries],
        },
    }
