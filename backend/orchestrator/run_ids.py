"""
Run ID container for versioned requests to the execution service.

Rules:
- Run IDs are monotonic integers.
- They are owned and incremented ONLY by the orchestrator reducer.
- This module defines structure, not behavior.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RunIds:
    """
    Immutable container for the latest request IDs.

    Semantics:
    - A value of 0 means "nothing has been started yet".
    - Once an ID is incremented, it is never reused.
    - Completions carrying an older ID are stale and ignored.
    """

    execute: int = 0
    catalog: int = 0
