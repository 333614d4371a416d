"""Role-tagged chat messages and conversation turns."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

__all__ = ["Role", "Message", "ConversationTurn", "to_langchain_message"]


class Role(str, Enum):
    SYSTEM = "system"
    ASSISTANT = "assistant"
    USER = "user"


@dataclass(frozen=True)
class Message:
    """A single message of the sequence sent to the completion endpoint.

    ``role`` accepts a ``Role`` or its string value; anything outside the
    enumeration raises ``ValueError`` at construction.
    """

    role: Role
    content: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", Role(self.role))
        if not isinstance(self.content, str):
            raise TypeError(
                f"Message content must be str, got {type(self.content).__name__}"
            )

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(Role.SYSTEM, content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(Role.ASSISTANT, content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(Role.USER, content)


class ConversationTurn(NamedTuple):
    """One prior (question, answer) exchange."""

    user_text: str
    assistant_text: str


_LANGCHAIN_MESSAGE_CLASSES: dict[Role, type[BaseMessage]] = {
    Role.SYSTEM: SystemMessage,
    Role.ASSISTANT: AIMessage,
    Role.USER: HumanMessage,
}


def to_langchain_message(message: Message) -> BaseMessage:
    return _LANGCHAIN_MESSAGE_CLASSES[message.role](content=message.content)
