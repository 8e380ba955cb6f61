"""Shared completion-service client for the extraction and appeal nodes."""

import logging
from typing import Any

import httpx

from appeal_copilot.config import Settings, load_settings
from appeal_copilot.errors import HttpStatusError, MalformedResponseJSON, NetworkFailure

logger = logging.getLogger(__name__)

_client: "CompletionClient | None" = None


class CompletionClient:
    """Posts message requests to the completion service and returns raw text.

    Args:
        settings: Endpoint, credential and timeout configuration.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``
            in tests. Defaults to the real network transport.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self.settings.api_key,
            "anthropic-version": self.settings.api_version,
        }

    async def complete(self, body: dict[str, Any]) -> str:
        """Send one request and return the model's raw text output.

        Args:
            body: The JSON request body (model, max_tokens, messages).

        Returns:
            The ``text`` of the first content block in the response.

        Raises:
            NetworkFailure: If the service cannot be reached.
            HttpStatusError: If the service returns a non-2xx status.
            MalformedResponseJSON: If the response body lacks a text block.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.settings.api_url, json=body, headers=self._headers()
                )
        except httpx.HTTPError as exc:
            logger.error("Completion request failed: %s", exc)
            raise NetworkFailure(f"Completion service unreachable: {exc}") from exc
        except Exception as exc:
            logger.exception("Unexpected transport failure")
            raise NetworkFailure(f"Unexpected transport failure: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "Completion service returned status %d: %s",
                response.status_code,
                response.text[:500],
            )
            raise HttpStatusError(response.status_code)

        return _first_text_block(response)


def _first_text_block(response: httpx.Response) -> str:
    try:
        text = response.json()["content"][0]["text"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        logger.warning("Completion response has no text content: %s", exc)
        raise MalformedResponseJSON("response has no text content", response.text) from exc
    if not isinstance(text, str):
        raise MalformedResponseJSON("response text is not a string", response.text)
    return text


def get_completion_client() -> CompletionClient:
    """Return a cached completion client, initialised on first call.

    Raises:
        RuntimeError: If ANTHROPIC_API_KEY is not set.
    """
    global _client
    if _client is None:
        settings = load_settings()
        if not settings.api_key:
            raise RuntimeError("ANTHROPIC_API_KEY environment variable is not set.")
        _client = CompletionClient(settings)
    return _client
