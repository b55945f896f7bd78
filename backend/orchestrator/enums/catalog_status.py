"""
Catalog fetch status enumeration.

Rules:
- Tracks discovery only; independent of RunState.
- Transitions are defined exclusively in the reducer.
"""

from __future__ import annotations

from enum import Enum


class CatalogStatus(str, Enum):
    """Where the runtime catalog stands for this session."""

    LOADING = "LOADING"
    READY = "READY"
    FAILED = "FAILED"
