"""
Execution service adapter contract.

Purpose:
- Define the interface for runtime discovery and code execution.
- Keep orchestration (selection, run gating, presentation) OUT of the adapter.

Rules:
- This file contains NO logic.
- No retries.
- No knowledge of the UI or the state machine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from orchestrator.outcome import ExecutionOutcome
from protocol.execution import ExecutionRequest


# -------------------------
# Exceptions (catalog path only)
# -------------------------

class PistonError(Exception):
    """Base class for execution service errors."""


class PistonTransportError(PistonError):
    """
    Raised when no usable response was obtained.

    Covers network failures (DNS, refused, timeout) and non-2xx statuses.
    """


class PistonProtocolError(PistonError):
    """Raised when a response arrived but its body could not be interpreted."""


class ExecutionAdapter(ABC):
    """
    Abstract base class for execution service adapters.

    The adapter is a *dumb pipe*:
    request -> vendor -> outcome.

    Orchestrator responsibilities (NOT here):
    - When to fetch or run
    - Whether a result is stale
    - What the user sees
    """

    @abstractmethod
    async def fetch_runtimes(self) -> list[Any]:
        """
        Fetch the raw runtime list.

        Contract:
        - Single attempt, no retry.
        - Returns the decoded list exactly as the service sent it;
          filtering and de-duplication happen in RuntimeCatalog.
        - Raises PistonTransportError or PistonProtocolError on failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        """
        Submit one execution request.

        Contract:
        - Single attempt, no retry.
        - Never raises for transport or protocol faults; they are
          returned as TransportFailure / ProtocolFailure.
        - Suspends only the awaiting task.
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources. Idempotent."""
