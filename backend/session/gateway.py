"""
Session gateway.

Responsibilities:
- Owns EditorSession lifecycle
- Tracks connection_status independently of coordinator state
- Routes inbound JSON control messages -> coordinator events
- Wires the execution adapter and runtime for the session
- Publishes a STATE view to the client after every state change

NOT responsible for:
- Selection rules or run gating (reducer)
- Talking to the execution service (adapter)
- Rendering rules (presenter)
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, TYPE_CHECKING

from uuid import uuid4

import httpx

from adapters.piston.client import PistonClient
from orchestrator.events import (
    CatalogRefreshRequested,
    Event,
    EventType,
    LanguageChanged,
    RunRequested,
    SessionEnded,
    SessionStarted,
    SourceChanged,
    SourceReset,
    VersionChanged,
)
from orchestrator.runtime import Runtime
from orchestrator.runtime_context import RuntimeExecutionContext
from orchestrator.state_dataclass import CoordinatorState

from session.connection_status import ConnectionStatus
from session.editor_session import EditorSession
from session.presenter import present

from observability.logger import log_event

if TYPE_CHECKING:
    from config import AppConfig


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _new_session_id() -> str:
    return f"sess_{uuid4().hex[:12]}"


def _text_field(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) else None


# ------------------------------------------------------------------
# Gateway result
# ------------------------------------------------------------------

@dataclass(frozen=True)
class GatewayResult:
    """
    Return value for gateway boundary methods.

    outbound_json:
        JSON messages to send to client
    """
    outbound_json: tuple[dict[str, Any], ...] = ()


# ------------------------------------------------------------------
# SessionGateway
# ------------------------------------------------------------------

class SessionGateway:
    """One gateway == one editor session == one coordinator."""

    def __init__(
        self,
        *,
        config: AppConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self.session: EditorSession | None = None

        # Shared per-process client (injected dependency, not global)
        self._http_client = http_client
        self._unsubscribe: Callable[[], None] | None = None

    async def on_ws_connect(self) -> GatewayResult:
        """Called when a WebSocket connection is established."""
        session_id = _new_session_id()

        self.session = EditorSession(session_id=session_id)
        self.session.connection_status = ConnectionStatus.UP

        adapter = PistonClient(
            base_url=self._config.service_base_url,
            timeout_s=self._config.request_timeout_s,
            session_id=session_id,
            http_client=self._http_client,
        )
        self.session.attach_execution_adapter(adapter)

        runtime = Runtime(
            initial_state=CoordinatorState(
                allowed_languages=self._config.allowed_languages,
            ),
            context=RuntimeExecutionContext(session=self.session),
        )
        self._unsubscribe = runtime.subscribe(self._publish_state)

        # Attach runtime (must be AFTER adapter)
        self.session.attach_runtime(runtime)

        init_msg: dict[str, Any] = {
            "type": "SESSION_INIT",
            "session_id": session_id,
            "service_base": self._config.service_base_url,
            "state": present(runtime.state),
        }

        # Starts the one-time catalog fetch
        await self._dispatch(
            SessionStarted(
                event_type=EventType.SESSION_STARTED,
                ts_ms=_now_ms(),
                session_id=session_id,
            )
        )

        return GatewayResult(outbound_json=(init_msg,) + self._drain_control_out())

    async def on_ws_disconnect(self, reason: str | None = None) -> GatewayResult:
        """Called when the WebSocket disconnects."""
        if self.session is None:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "WS_DISCONNECT_WITHOUT_SESSION",
                "reason": reason,
            })
            return GatewayResult()

        session_id = self.session.session_id
        self.session.connection_status = ConnectionStatus.DOWN

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        runtime = self.session.runtime
        if runtime is not None:
            await runtime.shutdown()

        await self._dispatch(
            SessionEnded(
                event_type=EventType.SESSION_ENDED,
                ts_ms=_now_ms(),
                session_id=session_id,
                reason=reason,
            )
        )

        adapter = self.session.execution_adapter
        if adapter is not None:
            await adapter.aclose()

        return GatewayResult(outbound_json=self._drain_control_out())

    async def on_json_message(self, payload: str) -> GatewayResult:
        """Route inbound JSON to coordinator events."""
        if self.session is None:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "MESSAGE_WITHOUT_SESSION",
                "payload_preview": payload[:100],
            })
            return GatewayResult()

        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "JSON_DECODE_ERROR",
                "session_id": self.session.session_id,
                "error": str(e),
                "payload_preview": payload[:100],
            })
            return GatewayResult()

        if not isinstance(data, dict):
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "JSON_NOT_OBJECT",
                "session_id": self.session.session_id,
                "payload_preview": payload[:100],
            })
            return GatewayResult()

        event = self._to_event(data)
        if event is None:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "UNKNOWN_MESSAGE_TYPE",
                "msg_type": data.get("type"),
                "session_id": self.session.session_id,
            })
            return GatewayResult()

        await self._dispatch(event)
        return GatewayResult(outbound_json=self._drain_control_out())

    async def next_outbound(self) -> GatewayResult:
        """
        Wait for messages produced outside an inbound request
        (catalog loaded, run finished) and return them.
        """
        assert self.session is not None, "Session must exist before pumping"
        return GatewayResult(outbound_json=await self.session.wait_control())

    # ------------------------------------------------------------------
    # Inbound mapping
    # ------------------------------------------------------------------

    def _to_event(self, data: dict[str, Any]) -> Event | None:
        msg_type = data.get("type")
        ts_ms = data.get("ts_ms")
        if not isinstance(ts_ms, int):
            ts_ms = _now_ms()

        if msg_type == "SET_LANGUAGE":
            language = _text_field(data, "language")
            if language is None:
                return None
            return LanguageChanged(
                event_type=EventType.LANGUAGE_CHANGED, ts_ms=ts_ms, language=language
            )
        if msg_type == "SET_VERSION":
            version = _text_field(data, "version")
            if version is None:
                return None
            return VersionChanged(
                event_type=EventType.VERSION_CHANGED, ts_ms=ts_ms, version=version
            )
        if msg_type == "SET_SOURCE":
            source = _text_field(data, "source")
            if source is None:
                return None
            return SourceChanged(
                event_type=EventType.SOURCE_CHANGED, ts_ms=ts_ms, source=source
            )
        if msg_type == "RESET_SOURCE":
            return SourceReset(event_type=EventType.SOURCE_RESET, ts_ms=ts_ms)
        if msg_type == "RUN":
            return RunRequested(
                event_type=EventType.RUN_REQUESTED,
                ts_ms=ts_ms,
                source=_text_field(data, "source"),
            )
        if msg_type == "REFRESH_RUNTIMES":
            return CatalogRefreshRequested(
                event_type=EventType.CATALOG_REFRESH_REQUESTED, ts_ms=ts_ms
            )
        return None

    # ------------------------------------------------------------------
    # Runtime dispatch / outbound
    # ------------------------------------------------------------------

    async def _dispatch(self, event: Event) -> None:
        """Forward event into runtime. Runtime owns all orchestration."""
        if self.session is None:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "DISPATCH_WITHOUT_SESSION",
                "dropped_event": event.event_type.value,
            })
            return

        runtime = self.session.runtime
        assert runtime is not None, "Runtime must exist before dispatch"

        await runtime.handle_event(event)

    def _publish_state(self, state: CoordinatorState) -> None:
        if self.session is None:
            return
        self.session.enqueue_control({"type": "STATE", "state": present(state)})

    def _drain_control_out(self) -> tuple[dict[str, Any], ...]:
        if self.session is None:
            return ()
        return self.session.drain_control()
