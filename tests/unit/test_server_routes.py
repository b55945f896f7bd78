# pylint: disable=missing-module-docstring,missing-function-docstring,protected-access

import asyncio
import json
from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from config import AppConfig
from observability import logger
import server.routes as routes_mod
from server.app import create_app
from session.gateway import SessionGateway


CONFIG = AppConfig(service_base_url="http://piston.test/api/v2/piston", enable_json_logs=True)


def piston_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/runtimes"):
        return httpx.Response(200, json=[{"language": "javascript", "version": "18.15.0"}])
    body = json.loads(request.content)
    return httpx.Response(200, json={"run": {"stdout": body["files"][0]["content"], "stderr": ""}})


@pytest.fixture(autouse=True)
def quiet_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logger, "_print", lambda _line: None)
    monkeypatch.setattr(logger, "_min_level", logger._min_level)
    monkeypatch.setattr(logger, "_json_lines", logger._json_lines)


@pytest.fixture(name="client")
def fixture_client() -> TestClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(piston_handler))
    return TestClient(create_app(CONFIG, http_client=http))


def receive_until(
    ws: Any,
    predicate: Callable[[dict[str, Any]], bool],
    limit: int = 10,
) -> dict[str, Any]:
    for _ in range(limit):
        msg = ws.receive_json()
        if predicate(msg):
            return msg
    raise AssertionError("expected message never arrived")


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_index_serves_page(client: TestClient):
    response = client.get("/")

    assert response.status_code == 200
    assert "Piston Playground" in response.text


def test_websocket_session_runs_code(client: TestClient):
    with client.websocket_connect("/ws") as ws:
        init = ws.receive_json()
        assert init["type"] == "SESSION_INIT"
        assert init["service_base"] == "http://piston.test/api/v2/piston"

        ready = receive_until(ws, lambda m: m["state"]["catalog"]["status"] == "READY")
        assert ready["state"]["languages"] == ["javascript"]

        ws.send_json({"type": "RUN", "source": "echo me"})
        done = receive_until(ws, lambda m: m["state"]["run_state"] == "COMPLETED")

        assert done["state"]["output"] == "echo me"
        assert done["state"]["run_enabled"] is True


def test_index_has_theme_toggle(client: TestClient):
    response = client.get("/")

    assert 'id="theme"' in response.text
    assert "localStorage" in response.text


# ---------------------------------------------------------------------
# Outbound pump shutdown
# ---------------------------------------------------------------------

class DeadSocketError(OSError):
    pass


def test_stop_pump_absorbs_pump_failure(monkeypatch: pytest.MonkeyPatch):
    emitted: list[dict[str, Any]] = []
    monkeypatch.setattr(routes_mod, "log_event", emitted.append)

    async def broken_pump() -> None:
        raise DeadSocketError("client gone")

    async def scenario() -> None:
        pump = asyncio.create_task(broken_pump())
        await asyncio.sleep(0)
        await routes_mod._stop_pump(pump)

    asyncio.run(scenario())

    assert emitted[-1]["event_type"] == "WS_PUMP_ERROR"
    assert emitted[-1]["exception"] == "DeadSocketError"


def test_disconnect_runs_even_when_pump_failed(
    monkeypatch: pytest.MonkeyPatch, client: TestClient
):
    ended: list[str | None] = []
    real_disconnect = SessionGateway.on_ws_disconnect

    async def record_disconnect(self: SessionGateway, reason: str | None = None) -> Any:
        ended.append(reason)
        return await real_disconnect(self, reason=reason)

    async def broken_pump(_ws: Any, _gateway: Any) -> None:
        raise DeadSocketError("client gone")

    monkeypatch.setattr(SessionGateway, "on_ws_disconnect", record_disconnect)
    monkeypatch.setattr(routes_mod, "_pump_outbound", broken_pump)

    with client.websocket_connect("/ws") as ws:
        assert ws.receive_json()["type"] == "SESSION_INIT"

    assert ended == ["client_disconnect"]
