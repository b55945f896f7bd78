"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No orchestration logic
- No behavioral constants (see constants.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from constants import (
    DEFAULT_ALLOWED_LANGUAGES,
    DEFAULT_REQUEST_TIMEOUT_S,
    DEFAULT_SERVICE_BASE_URL,
)


def _parse_languages(raw: str | None) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_ALLOWED_LANGUAGES

    languages: list[str] = []
    for part in raw.split(","):
        lang = part.strip().lower()
        if lang and lang not in languages:
            languages.append(lang)

    return tuple(languages) or DEFAULT_ALLOWED_LANGUAGES


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the session gateway and the execution client.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str = "dev"
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Remote execution service
    # ------------------------------------------------------------------

    service_base_url: str = DEFAULT_SERVICE_BASE_URL
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    allowed_languages: tuple[str, ...] = DEFAULT_ALLOWED_LANGUAGES

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool = True

    def __post_init__(self) -> None:
        if not self.service_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"service_base_url must be an http(s) URL, got {self.service_base_url!r}"
            )
        if self.request_timeout_s <= 0:
            raise ValueError("request_timeout_s must be positive")

        # Paths are appended as "/runtimes", "/execute"
        object.__setattr__(self, "service_base_url", self.service_base_url.rstrip("/"))

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Raises:
            ValueError if a variable holds an unusable value.
        """
        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),

            service_base_url=os.environ.get("PISTON_BASE_URL", DEFAULT_SERVICE_BASE_URL),
            request_timeout_s=float(
                os.environ.get("PISTON_TIMEOUT_S", str(DEFAULT_REQUEST_TIMEOUT_S))
            ),
            allowed_languages=_parse_languages(os.environ.get("ALLOWED_LANGUAGES")),

            enable_json_logs=os.environ.get("ENABLE_JSON_LOGS", "1") == "1",
        )
