"""
Side-effect command definitions for the coordinator.

Rules:
- Commands are declarative requests for side effects.
- Commands are emitted by the reducer and executed by the runtime.
- No behavior, no async, no I/O, no clocks.
- Reducer logic remains pure and deterministic.
Invariant:
    - All concrete Command subclasses MUST be frozen dataclasses.
    - Commands are immutable value objects emitted by the reducer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from protocol.execution import ExecutionRequest

# =============================================================================
# Command Type Enumeration
# =============================================================================

class CommandType(str, Enum):
    """
    Canonical command types emitted by the reducer.

    These are stable discriminants used for logging and runtime dispatch.
    """

    # Catalog
    FETCH_CATALOG = "FETCH_CATALOG"

    # Execution
    START_EXECUTION = "START_EXECUTION"

    # Observability
    LOG_EVENT = "LOG_EVENT"


# =============================================================================
# Base Command
# =============================================================================

class Command:
    """
    Base command type.

    command_type is an explicit discriminant and must never be inferred
    from Python type identity.
    """

    command_type: CommandType


# =============================================================================
# Catalog Commands
# =============================================================================

@dataclass(frozen=True)
class FetchCatalog(Command):
    """Request a single GET of the runtime list."""
    fetch_id: int
    command_type: CommandType = CommandType.FETCH_CATALOG


# =============================================================================
# Execution Commands
# =============================================================================

@dataclass(frozen=True)
class StartExecution(Command):
    """
    Request one execution round trip.

    request is fully built by the reducer; the runtime only transports it.
    """
    run_id: int
    request: ExecutionRequest
    command_type: CommandType = CommandType.START_EXECUTION


# =============================================================================
# Observability Commands
# =============================================================================

@dataclass(frozen=True)
class LogEvent(Command):
    """Structured log record describing a reducer decision."""
    event: dict[str, Any]
    command_type: CommandType = CommandType.LOG_EVENT
