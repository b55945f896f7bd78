# pylint: disable=missing-module-docstring,missing-function-docstring

import asyncio
from typing import Any

import pytest

import orchestrator.runtime as runtime_mod
from adapters.piston.base import PistonTransportError
from orchestrator.enums.catalog_status import CatalogStatus
from orchestrator.enums.state import RunState
from orchestrator.events import (
    CatalogRefreshRequested,
    EventType,
    RunRequested,
    SessionStarted,
)
from orchestrator.outcome import ExecutionOutcome, Success, TransportFailure
from orchestrator.runtime import Runtime
from orchestrator.runtime_context import ExecutionAdapterProtocol, RuntimeExecutionContext
from orchestrator.state_dataclass import CoordinatorState
from protocol.execution import ExecutionRequest
from session.connection_status import ConnectionStatus
from session.editor_session import EditorSession


RUNTIMES = [
    {"language": "javascript", "version": "18.15.0", "aliases": ["node-javascript", "js"]},
    {"language": "php", "version": "8.2.3", "aliases": []},
]


class FakeAdapter:
    def __init__(
        self,
        *,
        runtimes: list[Any] | None = None,
        catalog_error: Exception | None = None,
        outcome: ExecutionOutcome | None = None,
        execute_error: Exception | None = None,
    ) -> None:
        self.runtimes = RUNTIMES if runtimes is None else runtimes
        self.catalog_error = catalog_error
        self.outcome = outcome or Success("hi\n", "")
        self.execute_error = execute_error
        self.requests: list[ExecutionRequest] = []
        self.fetches = 0

    async def fetch_runtimes(self) -> list[Any]:
        self.fetches += 1
        if self.catalog_error is not None:
            raise self.catalog_error
        return list(self.runtimes)

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        self.requests.append(request)
        if self.execute_error is not None:
            raise self.execute_error
        return self.outcome

    async def aclose(self) -> None:
        pass


@pytest.fixture(autouse=True)
def emitted(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    captured: list[dict[str, Any]] = []
    monkeypatch.setattr(runtime_mod, "log_event", captured.append)
    return captured


def make_runtime(adapter: FakeAdapter) -> Runtime:
    session = EditorSession(session_id="sess_test")
    session.attach_execution_adapter(adapter)
    runtime = Runtime(
        initial_state=CoordinatorState(),
        context=RuntimeExecutionContext(session=session),
    )
    session.attach_runtime(runtime)
    return runtime


def started() -> SessionStarted:
    return SessionStarted(event_type=EventType.SESSION_STARTED, ts_ms=0, session_id="sess_test")


def run(source: str | None = None) -> RunRequested:
    return RunRequested(event_type=EventType.RUN_REQUESTED, ts_ms=0, source=source)


# ---------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------

def test_fake_adapter_satisfies_protocol():
    assert isinstance(FakeAdapter(), ExecutionAdapterProtocol)


# ---------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------

def test_session_start_loads_catalog():
    adapter = FakeAdapter()
    runtime = make_runtime(adapter)

    async def scenario() -> None:
        await runtime.handle_event(started())
        await runtime.wait_idle()

    asyncio.run(scenario())

    state = runtime.state
    assert adapter.fetches == 1
    assert state.catalog_status is CatalogStatus.READY
    assert state.catalog.distinct_languages() == ("javascript", "php")
    assert state.selection.version == "18.15.0"


def test_catalog_failure_reports_reason():
    adapter = FakeAdapter(catalog_error=PistonTransportError("Connection refused"))
    runtime = make_runtime(adapter)

    async def scenario() -> None:
        await runtime.handle_event(started())
        await runtime.wait_idle()

    asyncio.run(scenario())

    state = runtime.state
    assert state.catalog_status is CatalogStatus.FAILED
    assert state.catalog_error == "Connection refused"
    assert len(state.catalog) == 0
    assert state.catalog.language_options() == ("javascript", "php")


def test_unexpected_catalog_exception_still_fails_cleanly():
    runtime = make_runtime(FakeAdapter(catalog_error=KeyError("boom")))

    async def scenario() -> None:
        await runtime.handle_event(started())
        await runtime.wait_idle()

    asyncio.run(scenario())

    assert runtime.state.catalog_status is CatalogStatus.FAILED
    assert runtime.state.catalog_error.startswith("KeyError")


def test_refresh_fetches_again():
    adapter = FakeAdapter()
    runtime = make_runtime(adapter)

    async def scenario() -> None:
        await runtime.handle_event(started())
        await runtime.wait_idle()
        adapter.runtimes = [{"language": "php", "version": "8.3.0"}]
        await runtime.handle_event(
            CatalogRefreshRequested(event_type=EventType.CATALOG_REFRESH_REQUESTED, ts_ms=0)
        )
        await runtime.wait_idle()

    asyncio.run(scenario())

    assert adapter.fetches == 2
    assert runtime.state.selection.language == "php"
    assert runtime.state.selection.version == "8.3.0"


# ---------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------

def test_run_completes_with_adapter_outcome():
    adapter = FakeAdapter()
    runtime = make_runtime(adapter)
    seen: list[RunState] = []
    runtime.subscribe(lambda state: seen.append(state.run_state))

    async def scenario() -> None:
        await runtime.handle_event(started())
        await runtime.wait_idle()
        await runtime.handle_event(run("console.log('hi')"))
        assert runtime.state.run_state is RunState.RUNNING
        await runtime.wait_idle()

    asyncio.run(scenario())

    assert runtime.state.run_state is RunState.COMPLETED
    assert runtime.state.outcome == Success("hi\n", "")
    assert RunState.RUNNING in seen
    assert seen[-1] is RunState.COMPLETED

    request = adapter.requests[0]
    assert request.language == "javascript"
    assert request.version == "18.15.0"
    assert request.files[0].content == "console.log('hi')"


def test_identical_runs_do_not_accumulate_output():
    runtime = make_runtime(FakeAdapter())
    outcomes: list[ExecutionOutcome | None] = []

    async def scenario() -> None:
        for _ in range(2):
            await runtime.handle_event(run("x"))
            await runtime.wait_idle()
            outcomes.append(runtime.state.outcome)

    asyncio.run(scenario())

    assert outcomes == [Success("hi\n", ""), Success("hi\n", "")]


def test_second_run_while_running_is_not_sent():
    adapter = FakeAdapter()
    runtime = make_runtime(adapter)

    async def scenario() -> None:
        await runtime.handle_event(run("a"))
        await runtime.handle_event(run("b"))
        await runtime.wait_idle()

    asyncio.run(scenario())

    assert [r.files[0].content for r in adapter.requests] == ["a"]


def test_adapter_exception_becomes_transport_failure():
    runtime = make_runtime(FakeAdapter(execute_error=RuntimeError("socket closed")))

    async def scenario() -> None:
        await runtime.handle_event(run("a"))
        await runtime.wait_idle()

    asyncio.run(scenario())

    assert runtime.state.run_state is RunState.COMPLETED
    assert runtime.state.outcome == TransportFailure("RuntimeError: socket closed")


# ---------------------------------------------------------------------
# Subscription / logging / shutdown
# ---------------------------------------------------------------------

def test_unsubscribe_stops_notifications():
    runtime = make_runtime(FakeAdapter())
    seen: list[CoordinatorState] = []
    unsubscribe = runtime.subscribe(seen.append)

    async def scenario() -> None:
        await runtime.handle_event(run("a"))
        unsubscribe()
        unsubscribe()
        await runtime.wait_idle()

    asyncio.run(scenario())

    assert len(seen) == 1
    assert seen[0].run_state is RunState.RUNNING


def test_log_events_carry_session_context(emitted: list[dict[str, Any]]):
    runtime = make_runtime(FakeAdapter())

    asyncio.run(runtime.handle_event(run("a")))

    assert emitted
    assert all(e["session_id"] == "sess_test" for e in emitted)
    assert all(e["connection_status"] == "DOWN" for e in emitted)
    assert any(e["decision"] == "run_started" for e in emitted)


def test_shutdown_cancels_in_flight_run():
    class SlowAdapter(FakeAdapter):
        async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
            await asyncio.sleep(10)
            return await super().execute(request)

    runtime = make_runtime(SlowAdapter())

    async def scenario() -> None:
        await runtime.handle_event(run("a"))
        await asyncio.sleep(0)
        await runtime.shutdown()

    asyncio.run(scenario())

    assert runtime.state.run_state is RunState.RUNNING
    assert runtime.state.outcome is None


def test_log_context_follows_connection_status(emitted: list[dict[str, Any]]):
    session = EditorSession(session_id="sess_ctx")
    session.attach_execution_adapter(FakeAdapter())
    runtime = Runtime(
        initial_state=CoordinatorState(),
        context=RuntimeExecutionContext(session=session),
    )
    session.connection_status = ConnectionStatus.UP

    asyncio.run(runtime.handle_event(run("a")))

    assert session.log_context() == {"session_id": "sess_ctx", "connection_status": "UP"}
    assert all(e["connection_status"] == "UP" for e in emitted)
