"""talker/tokens.py

Approximate token accounting for chat messages.
Raw tokenization is delegated to a model-keyed counter; by default this is
the tiktoken encoding registered for the model.
"""

from __future__ import annotations

# Standard Library
import logging
from collections.abc import Iterable
from typing import Protocol

# Third-Party Libraries
import tiktoken

# Local Modules
from talker.errors import UnsupportedModelError
from talker.messages import Message

logger = logging.getLogger(__name__)

# Wire-format framing cost charged once per message.
MESSAGE_OVERHEAD_TOKENS: int = 4


class TokenCounter(Protocol):
    """Anything that can count the tokens of a piece of text."""

    def count(self, text: str) -> int: ...


class TiktokenCounter:
    """Token counter backed by the tiktoken encoding of a model."""

    def __init__(self, model: str) -> None:
        """Load the encoding for ``model``.

        Raises:
            UnsupportedModelError: If tiktoken does not know the model.
        """
        try:
            self._encoding = tiktoken.encoding_for_model(model)
        except KeyError as exc:
            raise UnsupportedModelError(model) from exc
        self.model = model
        logger.debug("Loaded tiktoken encoding for model=%s", model)

    def count(self, text: str) -> int:
        return len(self._encoding.encode(text))


def message_token_cost(message: Message, counter: TokenCounter) -> int:
    """Tokens for role + content plus the fixed per-message overhead."""
    return (
        counter.count(str(message.role))
        + counter.count(message.content)
        + MESSAGE_OVERHEAD_TOKENS
    )


def total_token_cost(messages: Iterable[Message], counter: TokenCounter) -> int:
    """Sum of :func:`message_token_cost` over ``messages``."""
    return sum(message_token_cost(message, counter) for message in messages)
