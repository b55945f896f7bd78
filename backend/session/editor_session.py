"""
Editor session container.

- Owns the runtime (which owns coordinator state)
- Owns connection status (mutable, gateway-controlled)
- Owned and mutated by SessionGateway
- NOT a state machine
- Contains no orchestration logic
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Any

from orchestrator.runtime import Runtime
from session.connection_status import ConnectionStatus


# ---------------------------------------------------------------------
# EditorSession
# ---------------------------------------------------------------------


@dataclass
class EditorSession:
    """Mutable runtime container for a single editor session."""

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    session_id: str

    # ------------------------------------------------------------------
    # Connection / gateway-controlled state
    # ------------------------------------------------------------------

    connection_status: ConnectionStatus = ConnectionStatus.DOWN

    # ------------------------------------------------------------------
    # Runtime (executes commands + owns authoritative state)
    # ------------------------------------------------------------------

    runtime: Runtime | None = None

    # ------------------------------------------------------------------
    # Execution service adapter (concrete, side-effectful)
    # ------------------------------------------------------------------

    execution_adapter: Any = None

    def __post_init__(self) -> None:
        self._control_out: deque[dict[str, Any]] = deque()
        self._control_ready = asyncio.Event()

    # ------------------------------------------------------------------
    # Wiring helpers (called by SessionGateway)
    # ------------------------------------------------------------------

    def attach_execution_adapter(self, adapter: Any) -> None:
        """
        Attach a concrete execution adapter.

        Adapter must implement ExecutionAdapterProtocol.
        """
        self.execution_adapter = adapter

    def attach_runtime(self, runtime: Runtime) -> None:
        """
        Attach the runtime executor.

        Must be called after the adapter is attached.
        """
        self.runtime = runtime

    # ------------------------------------------------------------------
    # Observability helpers (read-only)
    # ------------------------------------------------------------------

    def log_context(self) -> dict[str, Any]:
        """Return standard logging context for this session."""
        return {
            "session_id": self.session_id,
            "connection_status": self.connection_status.value,
        }

    # ------------------------------------------------------------------
    # Outbound control messages
    # ------------------------------------------------------------------

    def enqueue_control(self, msg: dict[str, Any]) -> None:
        """
        Enqueue a control message for gateway delivery to the client.

        Messages are buffered in FIFO order and later retrieved via
        drain_control() or wait_control().
        """
        self._control_out.append(msg)
        self._control_ready.set()

    def drain_control(self) -> tuple[dict[str, Any], ...]:
        """
        Atomically drain all pending control messages.

        Returns:
            A FIFO-ordered tuple of control messages. Returns an empty
            tuple if no messages are pending.

        After this call, the control queue is empty.
        """
        self._control_ready.clear()
        if not self._control_out:
            return ()
        out = tuple(self._control_out)
        self._control_out.clear()
        return out

    async def wait_control(self) -> tuple[dict[str, Any], ...]:
        """
        Suspend until at least one control message is pending, then drain.

        Used by the outbound pump for messages produced outside an
        inbound request (e.g. a run finishing).
        """
        while not self._control_out:
            await self._control_ready.wait()
            self._control_ready.clear()
        return self.drain_control()
