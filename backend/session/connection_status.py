"""
Connection status tracking for editor sessions.

Connection lifecycle is tracked separately from the run state machine.
connection_status: DOWN | UP

This is pure data owned by SessionGateway, not by coordinator state.
"""
from enum import Enum

class ConnectionStatus(Enum):
    """
    WebSocket connection lifecycle status.

    Separate from and independent of RunState.
    A run may finish after the connection went DOWN; its result is dropped.
    """
    DOWN = "DOWN"  # Not connected
    UP = "UP"      # Active WebSocket connection
