"""
Authoritative run state enumeration.

Rules:
- This enum defines ONLY the run lifecycle states.
- No behavior, no helper methods, no side effects.
- Transitions are defined exclusively in the reducer.
"""

from __future__ import annotations

from enum import Enum


class RunState(str, Enum):
    """
    Lifecycle of the most recent run in a session.

    IDLE:       no run has been requested yet
    RUNNING:    one execution is in flight; the run control is disabled
    COMPLETED:  the last run finished; an outcome is available
    """

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
