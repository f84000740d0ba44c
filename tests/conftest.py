"""tests/conftest.py

Pytest configuration and shared fixtures for the llm-talker test suite.
"""

from __future__ import annotations

# Standard Library
from unittest.mock import Mock

# Third-Party Libraries
import pytest

# Local Modules
from talker.chat import LLMTalker
from talker.messages import Message, Role, create_message
from talker.tokens import MESSAGE_OVERHEAD_TOKENS, message_token_cost


class WordCounter:
    """Deterministic token counter: one token per whitespace-separated word."""

    def count(self, text: str) -> int:
        return len(text.split())


def _message_costing(tokens: int, role: Role = Role.USER, tag: str = "w") -> Message:
    """Build a message whose WordCounter cost is exactly ``tokens``.

    The role name counts as one word, plus the fixed overhead.
    """
    words = tokens - 1 - MESSAGE_OVERHEAD_TOKENS
    assert words >= 1, "cost too small for a non-empty message"
    return create_message(" ".join([tag] * words), role)


@pytest.fixture
def word_counter() -> WordCounter:
    """Token counter used in place of tiktoken."""
    return WordCounter()


@pytest.fixture
def cost(word_counter: WordCounter):
    """Per-message cost function based on the word counter."""
    return lambda message: message_token_cost(message, word_counter)


@pytest.fixture
def mock_completion_client() -> Mock:
    """Create a mock completion client that always replies.

    Returns:
        Mock with ``complete`` returning a fixed reply.
    """
    client = Mock()
    client.complete.return_value = "This is a test response from the mock LLM."
    return client


@pytest.fixture
def sample_messages() -> list[Message]:
    """Create sample message history for testing."""
    return [
        create_message("Hello!", Role.USER),
        create_message("Hi there! How can I help you?", Role.ASSISTANT),
        create_message("What's the weather like?", Role.USER),
        create_message(
            "I don't have real-time weather data, but I can help you find it!",
            Role.ASSISTANT,
        ),
    ]


@pytest.fixture
def system_prompt() -> str:
    """Create a sample system prompt."""
    return "You are a helpful AI assistant for testing purposes."


@pytest.fixture
def make_talker(word_counter: WordCounter, mock_completion_client: Mock):
    """Factory for talkers wired to the fake counter and mock client."""

    def _make(**kwargs) -> LLMTalker:
        kwargs.setdefault("api_key", "test-key")
        kwargs.setdefault("token_counter", word_counter)
        kwargs.setdefault("completion_client", mock_completion_client)
        return LLMTalker(**kwargs)

    return _make


@pytest.fixture
def message_costing():
    """Builder for messages with an exact WordCounter cost."""
    return _message_costing
