"""
Runtime execution shell for a single editor session.

Responsibilities:
- Own coordinator state
- Call pure reducer
- Execute commands with side effects (catalog fetch, execution, logging)
- Turn adapter completions back into events
- Notify subscribers after every state change

Non-responsibilities:
- Selection rules, run gating, stale filtering (reducer)
- Rendering output text (presenter)
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any, Callable, Coroutine

from adapters.piston.base import PistonError
from orchestrator.commands import (
    Command,
    FetchCatalog,
    LogEvent,
    StartExecution,
)
from orchestrator.events import (
    CatalogFailed,
    CatalogLoaded,
    Event,
    EventType,
    RunFinished,
)
from orchestrator.outcome import ExecutionOutcome, TransportFailure
from orchestrator.reducer import reduce
from orchestrator.state_dataclass import CoordinatorState

from observability.logger import log_event


if TYPE_CHECKING:
    from orchestrator.runtime_context import RuntimeExecutionContext
    from protocol.execution import ExecutionRequest


StateListener = Callable[[CoordinatorState], None]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class Runtime:
    """
    Runtime execution boundary for a single editor session.

    Responsibilities:
    - Own the authoritative coordinator state
    - Act as the universal event sink for the session
      (gateway events and adapter completions)
    - Invoke the pure reducer deterministically
    - Execute emitted commands with side effects
    - Publish state changes to subscribers

    Guarantees:
    - Reducer is always called exactly once per incoming event
    - State transitions are serialized and deterministic
    - Subscribers see the new state before any command runs
    - Network calls run as tasks; handle_event never waits on the service
    """

    def __init__(
        self,
        *,
        initial_state: CoordinatorState,
        context: RuntimeExecutionContext,
    ) -> None:
        self._state = initial_state
        self._ctx = context
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> CoordinatorState:
        """
        Return the current immutable coordinator state.

        The returned object must be treated as read-only; state only
        changes through handle_event.
        """
        return self._state

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with the new state after each change.

        Returns a callable that removes the listener. Calling it twice
        is harmless.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Event entry point
    # ------------------------------------------------------------------

    async def handle_event(self, event: Event) -> None:
        """
        Process a single event through the coordinator pipeline.

        Processing steps:
        1. Pass the current state and event to the pure reducer
        2. Swap in the new state
        3. Notify subscribers if the state changed
        4. Execute all emitted commands in order

        All event sources converge here: gateway messages,
        catalog fetch results and execution results.
        """
        prev = self._state
        new_state, commands = reduce(prev, event)
        self._state = new_state

        if new_state != prev:
            for listener in list(self._listeners):
                listener(new_state)

        for cmd in commands:
            await self._execute_command(cmd)

    async def wait_idle(self) -> None:
        """Wait until no fetch or execution task is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def shutdown(self) -> None:
        """
        Clean shutdown of runtime.

        Cancels in-flight fetches/executions and waits for them to finish.
        No request is cancelled at any other time.
        """
        self._listeners.clear()

        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()

        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    # ------------------------------------------------------------------
    # Command execution (side effects)
    # ------------------------------------------------------------------

    async def _execute_command(self, cmd: Command) -> None:
        """Execute a single command with side effects."""

        if isinstance(cmd, LogEvent):
            log_event({**cmd.event, **self._ctx.log_context()})

        elif isinstance(cmd, FetchCatalog):
            self._spawn(f"catalog:{cmd.fetch_id}", self._fetch_catalog(cmd.fetch_id))

        elif isinstance(cmd, StartExecution):
            self._spawn(f"execute:{cmd.run_id}", self._execute(cmd.run_id, cmd.request))

        else:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "UNKNOWN_COMMAND",
                "session_id": self._ctx.session_id,
                "command_type": getattr(cmd, "command_type", None),
            })

    def _spawn(self, key: str, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks[key] = task

        def _cleanup(_: asyncio.Task[None]) -> None:
            self._tasks.pop(key, None)

        task.add_done_callback(_cleanup)

    async def _fetch_catalog(self, fetch_id: int) -> None:
        adapter = self._ctx.execution_adapter
        assert adapter is not None, "Execution adapter missing"

        try:
            entries = await adapter.fetch_runtimes()
        except PistonError as exc:
            await self.handle_event(
                CatalogFailed(
                    event_type=EventType.CATALOG_FAILED,
                    ts_ms=_now_ms(),
                    fetch_id=fetch_id,
                    reason=str(exc),
                )
            )
            return
        except Exception as exc:  # pylint: disable=broad-exception-caught
            await self.handle_event(
                CatalogFailed(
                    event_type=EventType.CATALOG_FAILED,
                    ts_ms=_now_ms(),
                    fetch_id=fetch_id,
                    reason=f"{type(exc).__name__}: {exc}",
                )
            )
            return

        await self.handle_event(
            CatalogLoaded(
                event_type=EventType.CATALOG_LOADED,
                ts_ms=_now_ms(),
                fetch_id=fetch_id,
                entries=tuple(entries),
            )
        )

    async def _execute(self, run_id: int, request: ExecutionRequest) -> None:
        adapter = self._ctx.execution_adapter
        assert adapter is not None, "Execution adapter missing"

        outcome: ExecutionOutcome
        try:
            outcome = await adapter.execute(request)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            # Adapter contract says it never raises; a run must still finish
            outcome = TransportFailure(message=f"{type(exc).__name__}: {exc}")

        await self.handle_event(
            RunFinished(
                event_type=EventType.RUN_FINISHED,
                ts_ms=_now_ms(),
                run_id=run_id,
                outcome=outcome,
            )
        )
