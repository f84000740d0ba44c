"""talker/budget.py

Budget selection: pick the most recent run of messages that fits both a
token limit and a message-count limit.

The selection is greedy and order preserving. The pinned prefix (usually a
single system prompt) is measured first, from its end towards its start,
then the history is walked from the newest message backwards using what is
left of the budget. Each walk stops at the first message that does not fit,
so the history part of the result is always a contiguous suffix. A message
is either included whole or not at all.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Callable, Sequence

# Local Modules
from talker.messages import Message


def _fitting_suffix_length(
    messages: Sequence[Message],
    cost: Callable[[Message], int],
    token_limit: int,
    message_limit: int,
    used_tokens: int,
    used_messages: int,
) -> tuple[int, int, int]:
    """Walk ``messages`` newest-first and count how many fit.

    Returns:
        ``(count, used_tokens, used_messages)`` after the walk.
    """
    count = 0
    for message in reversed(messages):
        tokens = cost(message)
        if used_tokens + tokens > token_limit or used_messages >= message_limit:
            break
        used_tokens += tokens
        used_messages += 1
        count += 1
    return count, used_tokens, used_messages


def select_within_budget(
    history: Sequence[Message],
    pinned_prefix: Sequence[Message],
    max_tokens: int,
    max_messages: int,
    cost: Callable[[Message], int],
    token_deduction: int = 0,
    message_deduction: int = 0,
    include_pinned: bool = True,
) -> list[Message]:
    """Select the pinned prefix and the newest history that fit the budget.

    Args:
        history: Stored conversation, oldest first.
        pinned_prefix: Messages always placed in front of the result.
        max_tokens: Token budget before deductions.
        max_messages: Message-count budget before deductions.
        cost: Token cost of a single message.
        token_deduction: Tokens reserved for something else (e.g. the reply).
        message_deduction: Message slots reserved for something else.
        include_pinned: When False the pinned prefix still consumes budget
            but is left out of the result, so the caller can add it later.

    Returns:
        The fitting pinned messages followed by the fitting history suffix,
        both in their original order. Inputs are never modified.
    """
    token_limit = max_tokens - token_deduction
    message_limit = max_messages - message_deduction

    pinned_count, used_tokens, used_messages = _fitting_suffix_length(
        pinned_prefix, cost, token_limit, message_limit, 0, 0
    )
    history_count, _, _ = _fitting_suffix_length(
        history, cost, token_limit, message_limit, used_tokens, used_messages
    )

    selected: list[Message] = []
    if include_pinned and pinned_count:
        selected.extend(pinned_prefix[len(pinned_prefix) - pinned_count :])
    if history_count:
        selected.extend(history[len(history) - history_count :])
    return selected
