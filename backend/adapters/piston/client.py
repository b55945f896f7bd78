"""Piston HTTP adapter"""
from __future__ import annotations

from typing import Any

import httpx

from adapters.piston.base import (
    ExecutionAdapter,
    PistonProtocolError,
    PistonTransportError,
)
from constants import DEFAULT_REQUEST_TIMEOUT_S, EXECUTE_PATH, RUNTIMES_PATH
from observability.logger import log_event
from observability.metrics import METRIC_EXECUTE_MS, METRIC_RUNTIMES_MS, timed
from orchestrator.outcome import ExecutionOutcome, ProtocolFailure, TransportFailure
from protocol.execution import ExecutionRequest, normalize_response, to_payload


def _status_message(status_code: int) -> str:
    return f"server returned {status_code}"


class PistonClient(ExecutionAdapter):
    """
    Concrete adapter for the Piston execution API.

    Design notes:
    - One client per session; safe for sequential runs.
    - base_url is injected so tests can point at a fake service.
    - Owns its httpx.AsyncClient unless one is supplied.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S,
        session_id: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            base_url:
                Service root, e.g. https://emkc.org/api/v2/piston
            timeout_s:
                Transport timeout; the only timeout applied to a run.
            session_id:
                Session identifier for logging/correlation.
            http_client:
                Pre-built client (tests pass one with httpx.MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._session_id = session_id
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout_s,
            headers={"Content-Type": "application/json"},
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_runtimes(self) -> list[Any]:
        try:
            with timed(METRIC_RUNTIMES_MS, session_id=self._session_id):
                response = await self._client.get(self._url(RUNTIMES_PATH))
        except httpx.RequestError as exc:
            raise PistonTransportError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise PistonTransportError(_status_message(response.status_code))

        try:
            data = response.json()
        except ValueError as exc:
            raise PistonProtocolError(str(exc)) from exc

        if not isinstance(data, list):
            raise PistonProtocolError(
                f"expected a list of runtimes, got {type(data).__name__}"
            )

        log_event({
            "event_type": "piston_runtimes_fetched",
            "session_id": self._session_id,
            "count": len(data),
        })
        return data

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        payload = to_payload(request)

        try:
            with timed(
                METRIC_EXECUTE_MS,
                session_id=self._session_id,
                details={"language": request.language, "version": request.version},
            ):
                response = await self._client.post(self._url(EXECUTE_PATH), json=payload)
        except httpx.RequestError as exc:
            message = str(exc) or type(exc).__name__
            self._log_failure("transport_failure", message)
            return TransportFailure(message=message)

        if not response.is_success:
            message = _status_message(response.status_code)
            self._log_failure("transport_failure", message)
            return TransportFailure(message=message)

        try:
            body = response.json()
        except ValueError as exc:
            self._log_failure("protocol_failure", str(exc))
            return ProtocolFailure(message=str(exc))

        return normalize_response(body)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _log_failure(self, kind: str, message: str) -> None:
        log_event({
            "level": "WARNING",
            "event_type": "piston_execute_failed",
            "session_id": self._session_id,
            "kind": kind,
            "message": message,
        })
