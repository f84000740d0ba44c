"""talker/messages.py

Role-tagged conversation messages.
Messages are immutable once created; the factory below is the only place
where role and content are validated.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# Local Modules
from talker.errors import ValidationError


class Role(StrEnum):
    """Speaker of a message, as understood by chat-completion APIs."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single utterance in a conversation.

    Build instances through :func:`create_message` so empty values are
    rejected.
    """

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        """Return the wire representation ``{"role": ..., "content": ...}``."""
        return {"role": str(self.role), "content": self.content}


def create_message(content: str, role: Role | str) -> Message:
    """Create a message from its content and role.

    Args:
        content: The message text. Must be non-empty.
        role: A :class:`Role` or its string value (``"user"``, ...).

    Returns:
        The new :class:`Message`.

    Raises:
        ValidationError: If content or role is empty, or the role is unknown.
    """
    if not content or not role:
        raise ValidationError(
            "Both content and role are required to create a message."
        )
    if not isinstance(content, str):
        raise ValidationError(
            f"Message content must be a string, got {type(content).__name__}."
        )
    try:
        parsed_role = Role(role)
    except ValueError as exc:
        raise ValidationError(f"Unknown message role: {role!r}") from exc
    return Message(role=parsed_role, content=content)


def coerce_message(value: Message | Mapping[str, Any]) -> Message:
    """Accept either a Message or a ``{"role", "content"}`` mapping."""
    if isinstance(value, Message):
        return value
    if isinstance(value, Mapping):
        return create_message(value.get("content", ""), value.get("role", ""))
    raise ValidationError(f"Cannot build a message from {type(value).__name__}.")
