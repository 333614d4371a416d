"""Conversation history adapter.

Turns caller-supplied ``(question, answer)`` pairs into role-tagged
messages and builds the message sequence sent ahead of the prompt.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from .models import HistoryFormatError, Message

TURN_ARITY = 2


def _validate_turn(index: int, turn: Any) -> tuple[str, str]:
    if isinstance(turn, (str, bytes)) or not isinstance(turn, Sequence):
        raise HistoryFormatError(
            f"History turn {index} must be a (user, assistant) pair, "
            f"got {type(turn).__name__}",
            index=index,
        )
    if len(turn) != TURN_ARITY:
        raise HistoryFormatError(
            f"History turn {index} has {len(turn)} element(s), expected {TURN_ARITY}",
            index=index,
        )
    user_text, assistant_text = turn
    if not isinstance(user_text, str) or not isinstance(assistant_text, str):
        raise HistoryFormatError(
            f"History turn {index} must contain two strings", index=index
        )
    return user_text, assistant_text


def expand(history: Iterable[Sequence[str]]) -> list[Message]:
    """Expand turns into alternating user/assistant messages.

    The whole history is validated first; one malformed turn fails the
    request rather than being dropped.

    Raises:
        HistoryFormatError: a turn is not a pair of strings.
    """
    turns = [_validate_turn(i, turn) for i, turn in enumerate(history)]
    messages: list[Message] = []
    for user_text, assistant_text in turns:
        messages.append(Message.user(user_text))
        messages.append(Message.assistant(assistant_text))
    return messages


def build_message_sequence(
    system_message: str,
    history_messages: Iterable[Message],
    greeting: str,
) -> list[Message]:
    """``[system, greeting, *history]`` in that exact order."""
    return [
        Message.system(system_message),
        Message.assistant(greeting),
        *history_messages,
    ]
