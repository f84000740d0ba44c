"""talker/memory.py

Append-only conversation store.
The stored history is never trimmed; budget enforcement builds a separate
view at send time (see talker/budget.py).
"""

from __future__ import annotations

# Standard Library
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

# Local Modules
from talker.messages import Message, Role, coerce_message


class ConversationHistory:
    """Ordered list of messages, oldest first.

    Grows by append only. The one exception is
    :meth:`strip_leading_system_messages`, an explicit maintenance operation.
    """

    def __init__(
        self, messages: Iterable[Message | Mapping[str, Any]] | None = None
    ) -> None:
        """Initialize the store with a copy of ``messages``.

        Args:
            messages: Initial conversation. Mappings with ``role`` and
                ``content`` keys are converted to :class:`Message`.

        Raises:
            ValidationError: If any initial entry is not a valid message.
        """
        self._messages: list[Message] = [coerce_message(m) for m in messages or []]

    def append(self, message: Message | Mapping[str, Any]) -> Message:
        """Add ``message`` at the newest end of the conversation.

        Returns:
            The stored :class:`Message`.

        Raises:
            ValidationError: If ``message`` is not a valid message. Nothing
                is stored in that case.
        """
        stored = coerce_message(message)
        self._messages.append(stored)
        return stored

    def strip_leading_system_messages(self) -> int:
        """Remove any system messages at the start of the conversation.

        The system prompt is pinned separately at send time, so copies stored
        at the head of the history would otherwise be transmitted twice.

        Returns:
            Number of messages removed.
        """
        removed = 0
        while self._messages and self._messages[0].role is Role.SYSTEM:
            self._messages.pop(0)
            removed += 1
        return removed

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the stored conversation."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
