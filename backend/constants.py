"""
BEHAVIOR-AS-CONSTANTS
---------------------
Single source of truth for the values that shape coordinator behavior.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic strings elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final, Mapping

# =============================================================================
# Remote execution service
# =============================================================================

DEFAULT_SERVICE_BASE_URL: Final[str] = "https://emkc.org/api/v2/piston"
DEFAULT_REQUEST_TIMEOUT_S: Final[float] = 30.0

RUNTIMES_PATH: Final[str] = "/runtimes"
EXECUTE_PATH: Final[str] = "/execute"

# =============================================================================
# Languages
# =============================================================================

# Languages the page offers out of the catalog. Extend via ALLOWED_LANGUAGES.
DEFAULT_ALLOWED_LANGUAGES: Final[tuple[str, ...]] = ("javascript", "php")

# Shown in the language selector while the catalog is empty (or failed).
FALLBACK_LANGUAGES: Final[tuple[str, ...]] = ("javascript", "php")

# Provisional selection before the catalog resolves.
DEFAULT_LANGUAGE: Final[str] = "javascript"

# =============================================================================
# Execution request shape
# =============================================================================

SOURCE_FILE_STEM: Final[str] = "main"

# language -> source file extension. First entry is the default language.
LANGUAGE_EXTENSIONS: Final[Mapping[str, str]] = {
    "javascript": "js",
    "php": "php",
    "python": "py",
    "typescript": "ts",
    "ruby": "rb",
    "go": "go",
    "rust": "rs",
    "java": "java",
    "c": "c",
    "c++": "cpp",
}

FALLBACK_EXTENSION: Final[str] = "txt"

# =============================================================================
# Editor starter snippets (Reset)
# =============================================================================

STARTER_SNIPPETS: Final[Mapping[str, str]] = {
    "javascript": "console.log('hello from piston')",
    "php": "<?php\necho 'hello from php';\n",
}

# =============================================================================
# Presentation
# =============================================================================

ERROR_PREFIX: Final[str] = "Error: "
NO_OUTPUT_PLACEHOLDER: Final[str] = "No output yet."
LOADING_LABEL: Final[str] = "Running..."
RUN_LABEL: Final[str] = "Run"

# Indentation used when an unrecognized response body is shown verbatim.
OPAQUE_BODY_INDENT: Final[int] = 2
