"""
FastAPI app factory.

Responsibilities:
- Create and configure FastAPI app
- Set up middleware
- Initialize shared resources (HTTP client for the execution service)
- Register routes
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppConfig
from observability import logger

from server.routes import register_routes


def create_app(
    config: AppConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    This is the app factory pattern that allows:
    - Testing with different configurations (fake service base, mock transport)
    - Environment-specific setup
    - ASGI server compatibility
    """
    config = config or AppConfig.load_from_env()
    logger.configure(log_level=config.log_level, json_lines=config.enable_json_logs)

    owns_client = http_client is None
    # Create the service client ONCE per process
    client = http_client or build_http_client(config)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            if owns_client:
                await client.aclose()

    app = FastAPI(title="Piston Playground", lifespan=lifespan)

    app.state.config = config
    app.state.http_client = client

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten later
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    register_routes(app)

    return app


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Build the shared client for the execution service."""
    return httpx.AsyncClient(
        base_url=config.service_base_url,
        timeout=config.request_timeout_s,
        headers={"Content-Type": "application/json"},
    )
