"""
Route registration for the playground API.

Responsibilities:
- Define HTTP and WebSocket endpoints
- Wire gateway to WebSocket lifecycle
- Pull dependencies from app.state
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from fastapi import WebSocket, WebSocketDisconnect, FastAPI
from fastapi.responses import HTMLResponse

from observability.logger import log_event
from session.gateway import SessionGateway, GatewayResult


STATIC_DIR = Path(__file__).parent / "static"


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""
    @app.get("/health")
    async def health() -> dict[str, str]: # pyright: ignore[reportUnusedFunction]
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse: # pyright: ignore[reportUnusedFunction]
        return HTMLResponse((STATIC_DIR / "index.html").read_text(encoding="utf-8"))

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket) -> None: # pyright: ignore[reportUnusedFunction]
        await ws.accept()

        gateway = SessionGateway(
            config=app.state.config,
            http_client=app.state.http_client,
        )
        pump: asyncio.Task[None] | None = None
        reason = "client_disconnect"

        try:
            result = await gateway.on_ws_connect()
            await _flush_gateway_result(ws, result)

            # Results that arrive later (catalog, run output) go out here
            pump = asyncio.create_task(_pump_outbound(ws, gateway))

            while True:
                text = await ws.receive_text()
                result = await gateway.on_json_message(text)
                await _flush_gateway_result(ws, result)

        except WebSocketDisconnect:
            reason = "client_disconnect"

        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "level": "ERROR",
                "event_type": "WS_FATAL_ERROR",
                "session_id": gateway.session.session_id if gateway.session else None,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            reason = "server_error"

        finally:
            await _stop_pump(pump)
            await gateway.on_ws_disconnect(reason=reason)


async def _pump_outbound(ws: WebSocket, gateway: SessionGateway) -> None:
    while True:
        result = await gateway.next_outbound()
        await _flush_gateway_result(ws, result)


async def _stop_pump(pump: asyncio.Task[None] | None) -> None:
    if pump is None:
        return
    pump.cancel()
    try:
        await pump
    except asyncio.CancelledError:
        pass
    except Exception as exc:  # pylint: disable=broad-exception-caught
        log_event({
            "level": "WARNING",
            "event_type": "WS_PUMP_ERROR",
            "exception": type(exc).__name__,
            "message": str(exc),
        })


async def _flush_gateway_result(
    ws: WebSocket,
    result: GatewayResult,
) -> None:
    for msg in result.outbound_json:
        await ws.send_text(json.dumps(msg))
