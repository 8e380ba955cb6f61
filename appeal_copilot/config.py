"""Runtime configuration read from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_API_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_API_VERSION = "2023-06-01"


@dataclass(frozen=True)
class Settings:
    """Completion service settings.

    Attributes:
        api_key: Credential sent in the ``x-api-key`` header.
        api_url: Endpoint receiving every completion request.
        model: Model identifier placed in each request body.
        api_version: Value of the ``anthropic-version`` header.
        extraction_max_tokens: Output budget for extraction requests.
        generation_max_tokens: Output budget for appeal generation requests.
        timeout_seconds: Transport timeout; the workflow sets no timeout itself.
        port: Port the HTTP API listens on.
    """

    api_key: str = ""
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    api_version: str = DEFAULT_API_VERSION
    extraction_max_tokens: int = 2000
    generation_max_tokens: int = 3000
    timeout_seconds: float = 60.0
    port: int = 8000


def load_settings() -> Settings:
    """Build ``Settings`` from the current environment."""
    return Settings(
        api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        api_url=os.getenv("COMPLETION_API_URL", DEFAULT_API_URL),
        model=os.getenv("COMPLETION_MODEL", DEFAULT_MODEL),
        api_version=os.getenv("COMPLETION_API_VERSION", DEFAULT_API_VERSION),
        extraction_max_tokens=int(os.getenv("EXTRACTION_MAX_TOKENS", "2000")),
        generation_max_tokens=int(os.getenv("GENERATION_MAX_TOKENS", "3000")),
        timeout_seconds=float(os.getenv("COMPLETION_TIMEOUT_SECONDS", "60")),
        port=int(os.getenv("PORT", "8000")),
    )
