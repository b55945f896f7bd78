"""
Wire helpers for the remote execution service.

Request (POST <base>/execute, JSON):
    {
        "language": str,
        "version": str,            # omitted -> service default
        "files": [{"name": str, "content": str}],
        "stdin": str,
        "args": [str],
    }

Success body (service-defined, treated as a union):
    {"run": {"stdout": str?, "stderr": str?}?, "stdout": str?, "stderr": str?}

Usage example:

    request = build_request(selection, source_text)
    response = await client.post(EXECUTE_PATH, json=to_payload(request))
    outcome = normalize_response(response.json())
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from constants import (
    FALLBACK_EXTENSION,
    LANGUAGE_EXTENSIONS,
    OPAQUE_BODY_INDENT,
    SOURCE_FILE_STEM,
)
from orchestrator.outcome import Success
from orchestrator.selection import Selection


# -------------------------
# Request model
# -------------------------

@dataclass(frozen=True)
class SourceFile:
    name: str
    content: str


@dataclass(frozen=True)
class ExecutionRequest:
    """
    One execution submission. Built fresh per run, never mutated.

    stdin/args are always empty: the page has no input for them.
    """

    language: str
    version: str | None
    files: tuple[SourceFile, ...]
    stdin: str = ""
    args: tuple[str, ...] = ()


def source_file_name(language: str) -> str:
    """main.<ext> by table lookup, generic extension when unknown."""
    ext = LANGUAGE_EXTENSIONS.get(language, FALLBACK_EXTENSION)
    return f"{SOURCE_FILE_STEM}.{ext}"


def build_request(selection: Selection, source_text: str) -> ExecutionRequest:
    """Pure: same (selection, source_text) always yields an equal request."""
    version = selection.version.strip()
    return ExecutionRequest(
        language=selection.language,
        version=version or None,
        files=(
            SourceFile(
                name=source_file_name(selection.language),
                content=source_text,
            ),
        ),
    )


def to_payload(request: ExecutionRequest) -> dict[str, Any]:
    """Serialize for the wire; "version" is absent when unset."""
    payload: dict[str, Any] = {"language": request.language}
    if request.version is not None:
        payload["version"] = request.version
    payload["files"] = [{"name": f.name, "content": f.content} for f in request.files]
    payload["stdin"] = request.stdin
    payload["args"] = list(request.args)
    return payload


# -------------------------
# Response normalization
# -------------------------

def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _pretty(body: Any) -> str:
    return json.dumps(body, indent=OPAQUE_BODY_INDENT, ensure_ascii=False)


def _first_present(sources: tuple[Any, ...], field: str) -> Any:
    """First non-null `field` across the ordered candidate objects."""
    for source in sources:
        if isinstance(source, dict) and source.get(field) is not None:
            return source[field]
    return None


def normalize_response(body: Any) -> Success:
    """
    Resolve stdout/stderr from a decoded success body.

    Compatibility shim: backends disagree on where output lives.
    Lookup order per field is run.<field>, then top-level <field>.
    With no stdout anywhere, the whole body is shown pretty-printed
    rather than reported as a protocol failure.
    """
    if not isinstance(body, dict):
        return Success(stdout=_pretty(body), stderr="")

    sources = (body.get("run"), body)

    stdout = _first_present(sources, "stdout")
    stderr = _first_present(sources, "stderr")

    if stdout is None:
        stdout_text = _pretty(body)
    else:
        stdout_text = _as_text(stdout)

    return Success(
        stdout=stdout_text,
        stderr="" if stderr is None else _as_text(stderr),
    )
