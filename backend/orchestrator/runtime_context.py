"""
Runtime execution context.

Provides Runtime with live access to session-owned imperative resources
needed for command execution (the execution adapter, identity, status).

This module contains:
- Narrow Protocols (capabilities, not implementations)
- Zero orchestration logic
- Zero state mutation
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from session.connection_status import ConnectionStatus

if TYPE_CHECKING:
    from orchestrator.outcome import ExecutionOutcome
    from protocol.execution import ExecutionRequest
    from session.editor_session import EditorSession


# ---------------------------------------------------------------------
# Adapter Protocols
# ---------------------------------------------------------------------

@runtime_checkable
class ExecutionAdapterProtocol(Protocol):
    async def fetch_runtimes(self) -> list[Any]: ...
    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome: ...
    async def aclose(self) -> None: ...


# ---------------------------------------------------------------------
# Runtime Execution Context
# ---------------------------------------------------------------------

class RuntimeExecutionContext:
    """
    Imperative execution context for Runtime.

    This object provides *live views* into session-owned resources
    so Runtime does not need to synchronize or cache anything.

    Runtime is allowed to:
    - Call the execution adapter
    - Observe connection state

    Runtime is NOT allowed to:
    - Mutate session state directly
    - Perform orchestration decisions
    """

    def __init__(self, session: EditorSession) -> None:
        self.session = session

    # ----------------------------
    # Session metadata
    # ----------------------------

    @property
    def session_id(self) -> str:
        return self.session.session_id

    @property
    def connection_status(self) -> ConnectionStatus:
        return self.session.connection_status

    def log_context(self) -> dict[str, Any]:
        return self.session.log_context()

    # ----------------------------
    # Adapters
    # ----------------------------

    @property
    def execution_adapter(self) -> ExecutionAdapterProtocol | None:
        return self.session.execution_adapter
