"""talker/chat.py

Stateful chat-completion client with a per-request token/message budget.
Keeps the full conversation, trims a transmitted view down to the budget
before each request and appends the model's reply to the stored history.
"""

from __future__ import annotations

# Standard Library
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

# Local Modules
from talker.budget import select_within_budget
from talker.client import DEFAULT_API_URL, CompletionClient
from talker.errors import ConfigError, RemoteCallError
from talker.memory import ConversationHistory
from talker.messages import Message, Role, create_message
from talker.settings import (
    DEFAULT_MAX_MESSAGES,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_SYSTEM_PROMPT,
    TalkerSettings,
)
from talker.tokens import (
    TiktokenCounter,
    TokenCounter,
    message_token_cost,
    total_token_cost,
)

logger = logging.getLogger(__name__)


class LLMTalker:
    """Conversation manager that talks to a remote chat-completion API.

    Not safe for overlapping :meth:`send` calls on the same instance; each
    call appends to the shared history.
    """

    def __init__(
        self,
        api_key: str,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        messages: Iterable[Message | Mapping[str, Any]] | None = None,
        api_url: str = DEFAULT_API_URL,
        model: str = DEFAULT_MODEL,
        max_messages: int = DEFAULT_MAX_MESSAGES,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = 60.0,
        token_counter: TokenCounter | None = None,
        completion_client: CompletionClient | None = None,
    ) -> None:
        """Initialize the talker.

        Args:
            api_key: Bearer token for the completion API. Required.
            system_prompt: Text of the system message pinned to every
                budgeted request.
            messages: Initial conversation, oldest first. Copied.
            api_url: Chat-completions URL.
            model: Model identifier; also selects the tokenizer.
            max_messages: Maximum messages per transmitted view.
            max_tokens: Maximum estimated tokens per transmitted view.
            timeout: HTTP timeout in seconds for the default client.
            token_counter: Tokenizer override. Defaults to the tiktoken
                encoding for ``model``.
            completion_client: Transport override. Defaults to a
                :class:`CompletionClient` for ``api_url``.

        Raises:
            ConfigError: If the API key is empty or a limit is invalid.
            UnsupportedModelError: If no tokenizer exists for ``model``.
            ValidationError: If an initial message is malformed.
        """
        if not api_key:
            raise ConfigError("API key is required.")
        if max_messages < 0 or max_tokens < 0:
            raise ConfigError(
                f"Limits must be non-negative (max_messages={max_messages}, "
                f"max_tokens={max_tokens})."
            )
        if timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {timeout}.")

        self.system_prompt = system_prompt
        self.api_url = api_url
        self.model = model
        self.max_messages = max_messages
        self.max_tokens = max_tokens
        self.history = ConversationHistory(messages)
        self.token_counter = (
            token_counter if token_counter is not None else TiktokenCounter(model)
        )
        self.client = (
            completion_client
            if completion_client is not None
            else CompletionClient(api_key=api_key, api_url=api_url, timeout=timeout)
        )

        logger.info(
            "LLMTalker initialized: model=%s, url=%s, max_messages=%d, "
            "max_tokens=%d, history=%d",
            self.model,
            self.api_url,
            self.max_messages,
            self.max_tokens,
            len(self.history),
        )

    @classmethod
    def from_settings(cls, settings: TalkerSettings, **kwargs: Any) -> LLMTalker:
        """Build a talker from :class:`TalkerSettings`.

        Extra keyword arguments (``messages``, ``token_counter``, ...) are
        passed to the constructor.
        """
        return cls(
            api_key=settings.api_key,
            system_prompt=settings.system_prompt,
            api_url=settings.api_url,
            model=settings.model,
            max_messages=settings.max_messages,
            max_tokens=settings.max_tokens,
            timeout=settings.request_timeout,
            **kwargs,
        )

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the stored (untrimmed) conversation."""
        return self.history.messages

    def system_message(self) -> Message:
        """The pinned system message built from the configured prompt."""
        return create_message(self.system_prompt, Role.SYSTEM)

    def calculate_tokens(self, message: Message) -> int:
        """Estimated token cost of ``message`` including framing overhead."""
        return message_token_cost(message, self.token_counter)

    def count_tokens(self, messages: Iterable[Message]) -> int:
        """Estimated token cost of a sequence of messages."""
        return total_token_cost(messages, self.token_counter)

    def get_messages_within_budget(
        self,
        pinned_prefix: Sequence[Message] = (),
        include_pinned: bool = True,
        token_deduction: int = 0,
        message_deduction: int = 0,
    ) -> list[Message]:
        """Select the newest stored messages that fit this talker's limits.

        Args:
            pinned_prefix: Messages placed in front of the selection,
                subject to the same budget.
            include_pinned: When False the pinned prefix consumes budget
                but is not returned.
            token_deduction: Tokens to hold back from ``max_tokens``.
            message_deduction: Slots to hold back from ``max_messages``.

        Returns:
            Fitting pinned messages followed by the fitting history suffix.
        """
        return select_within_budget(
            self.history.messages,
            pinned_prefix,
            self.max_tokens,
            self.max_messages,
            self.calculate_tokens,
            token_deduction=token_deduction,
            message_deduction=message_deduction,
            include_pinned=include_pinned,
        )

    def transmitted_view(self, require_preprocessing: bool = True) -> list[Message]:
        """Messages that :meth:`send` would transmit right now."""
        if require_preprocessing:
            # An empty prompt pins nothing.
            pinned = [self.system_message()] if self.system_prompt else []
            return self.get_messages_within_budget(pinned_prefix=pinned)
        return list(self.history.messages)

    def send(
        self,
        new_message: Message | Mapping[str, Any] | None = None,
        require_preprocessing: bool = True,
    ) -> Message:
        """Send the conversation to the model and store its reply.

        Args:
            new_message: Message appended to the history before sending. A
                ``{"role", "content"}`` mapping is converted first.
                Omit it when the history already ends with the message to
                answer.
            require_preprocessing: When True, transmit the system prompt plus
                the newest history that fits the budget. When False, transmit
                the stored history verbatim.

        Returns:
            The assistant reply, already appended to the history.

        Raises:
            ValidationError: If ``new_message`` is malformed. The history is
                left unchanged and nothing is sent.
            RemoteCallError: If the completion round-trip fails. A supplied
                ``new_message`` stays in the history; no reply is stored.
        """
        if new_message is not None:
            self.history.append(new_message)

        logger.info("Sending: require_preprocessing=%s", require_preprocessing)
        sending = self.transmitted_view(require_preprocessing)
        logger.debug(
            "Transmitting %d of %d stored messages", len(sending), len(self.history)
        )

        try:
            reply = self.client.complete(self.model, sending)
        except RemoteCallError as exc:
            logger.error("Error communicating with LLM: %s", exc, exc_info=True)
            raise
        except Exception as exc:
            # Injected transports may raise their own error types.
            logger.error("Error communicating with LLM: %s", exc, exc_info=True)
            raise RemoteCallError(f"Failed to communicate with LLM: {exc}") from exc

        if not isinstance(reply, str) or not reply:
            logger.warning("Empty response from LLM")
            raise RemoteCallError("LLM returned an empty reply.")

        assistant_message = create_message(reply, Role.ASSISTANT)
        self.history.append(assistant_message)
        logger.debug("Received reply: %d chars", len(reply))
        return assistant_message

    def send_text(self, text: str, require_preprocessing: bool = True) -> Message:
        """Wrap ``text`` as a user message and :meth:`send` it."""
        return self.send(create_message(text, Role.USER), require_preprocessing)

    def remove_all_system_prompts(self) -> int:
        """Strip system messages from the head of the stored history.

        Returns:
            Number of messages removed.
        """
        removed = self.history.strip_leading_system_messages()
        if removed:
            logger.info("Removed %d leading system message(s) from history", removed)
        return removed

    def get_message_count(self) -> int:
        """Number of messages in the stored history."""
        return len(self.history)
