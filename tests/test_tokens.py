"""tests/test_tokens.py

Unit tests for token accounting (talker/tokens.py).
tiktoken is mocked so no encoding files are downloaded.
"""

from __future__ import annotations

# Standard Library
from unittest.mock import Mock, patch

# Third-Party Libraries
import pytest

# Local Modules
from talker.errors import UnsupportedModelError
from talker.messages import Role, create_message
from talker.tokens import (
    MESSAGE_OVERHEAD_TOKENS,
    TiktokenCounter,
    message_token_cost,
    total_token_cost,
)


class TestTiktokenCounter:
    """Test suite for TiktokenCounter."""

    @patch("talker.tokens.tiktoken.encoding_for_model")
    def test_counts_encoded_tokens(self, mock_encoding_for_model: Mock) -> None:
        """Test that count() returns the length of the encoded sequence."""
        encoding = Mock()
        encoding.encode.return_value = [101, 102, 103]
        mock_encoding_for_model.return_value = encoding

        counter = TiktokenCounter("gpt-4o")

        assert counter.count("some text") == 3
        encoding.encode.assert_called_once_with("some text")
        mock_encoding_for_model.assert_called_once_with("gpt-4o")

    @patch("talker.tokens.tiktoken.encoding_for_model")
    def test_unknown_model_raises(self, mock_encoding_for_model: Mock) -> None:
        """Test that a model without an encoding raises UnsupportedModelError."""
        mock_encoding_for_model.side_effect = KeyError("no-such-model")

        with pytest.raises(UnsupportedModelError) as exc_info:
            TiktokenCounter("no-such-model")

        assert exc_info.value.model == "no-such-model"
        assert isinstance(exc_info.value.__cause__, KeyError)


class TestMessageTokenCost:
    """Test suite for message_token_cost and total_token_cost."""

    def test_role_content_and_overhead(self, word_counter) -> None:
        """Test cost = role tokens + content tokens + overhead."""
        message = create_message("one two three", Role.USER)
        assert message_token_cost(message, word_counter) == 1 + 3 + MESSAGE_OVERHEAD_TOKENS

    def test_overhead_constant(self) -> None:
        assert MESSAGE_OVERHEAD_TOKENS == 4

    def test_deterministic(self, word_counter) -> None:
        """Test the same message always costs the same."""
        message = create_message("repeat me please", Role.ASSISTANT)
        assert message_token_cost(message, word_counter) == message_token_cost(
            message, word_counter
        )

    def test_role_is_counted(self) -> None:
        """Test that the role text is passed to the counter."""
        counter = Mock()
        counter.count.side_effect = lambda text: 2 if text == "system" else 5
        message = create_message("prompt", Role.SYSTEM)

        assert message_token_cost(message, counter) == 2 + 5 + MESSAGE_OVERHEAD_TOKENS

    def test_total(self, word_counter, sample_messages) -> None:
        """Test that total_token_cost sums the per-message costs."""
        expected = sum(message_token_cost(m, word_counter) for m in sample_messages)
        assert total_token_cost(sample_messages, word_counter) == expected
        assert total_token_cost([], word_counter) == 0
