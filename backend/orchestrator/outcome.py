"""
Execution outcome variants.

Exactly one variant describes a finished run:
- Success: the service ran the code (stdout/stderr may still hold errors)
- TransportFailure: no usable response (network error or non-2xx status)
- ProtocolFailure: a response arrived but its body could not be decoded
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Success:
    stdout: str
    stderr: str = ""

    kind: str = "success"


@dataclass(frozen=True)
class TransportFailure:
    message: str

    kind: str = "transport_failure"


@dataclass(frozen=True)
class ProtocolFailure:
    message: str

    kind: str = "protocol_failure"


ExecutionOutcome = Union[Success, TransportFailure, ProtocolFailure]


def outcome_to_dict(outcome: ExecutionOutcome | None) -> dict[str, Any] | None:
    """Structured form for logs and the client view."""
    if outcome is None:
        return None
    if isinstance(outcome, Success):
        return {"kind": outcome.kind, "stdout": outcome.stdout, "stderr": outcome.stderr}
    return {"kind": outcome.kind, "message": outcome.message}
