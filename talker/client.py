"""talker/client.py

HTTP transport for OpenAI-compatible chat-completion endpoints.
Every failure in the round-trip surfaces as RemoteCallError with the
original exception chained.
"""

from __future__ import annotations

# Standard Library
import logging
from collections.abc import Sequence
from typing import Any

# Third-Party Libraries
import httpx

# Local Modules
from talker.errors import RemoteCallError
from talker.messages import Message

logger = logging.getLogger(__name__)

DEFAULT_API_URL: str = "https://api.openai.com/v1/chat/completions"


class CompletionClient:
    """Posts a conversation to a chat-completions URL and returns the reply."""

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
    ) -> None:
        self.api_url = api_url
        self.timeout = timeout
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    def complete(self, model: str, messages: Sequence[Message]) -> str:
        """Request a completion and return the reply text.

        Args:
            model: Model identifier sent in the payload.
            messages: Conversation to transmit, oldest first.

        Returns:
            The content of the first choice's message.

        Raises:
            RemoteCallError: On network errors, non-2xx responses, or a
                payload without a usable ``choices[0].message.content``.
        """
        payload: dict[str, Any] = {
            "model": model,
            "messages": [message.to_dict() for message in messages],
        }
        logger.info(
            "[completion] model=%s url=%s messages=%d",
            model,
            self.api_url,
            len(messages),
        )
        try:
            response = httpx.post(
                self.api_url, json=payload, headers=self._headers, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise RemoteCallError(
                f"Completion request failed with HTTP {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteCallError(f"Completion request failed: {exc}") from exc
        except ValueError as exc:
            raise RemoteCallError("Completion response is not valid JSON") from exc

        return _extract_reply(data)


def _extract_reply(data: Any) -> str:
    """Pull ``choices[0].message.content`` out of a decoded response body."""
    try:
        reply = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise RemoteCallError("Completion response has no reply content") from exc
    if not isinstance(reply, str) or not reply:
        raise RemoteCallError("Completion response has an empty reply")
    return reply
