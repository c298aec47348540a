from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ChatMessage(BaseModel):
    role: MessageRole = MessageRole.USER
    content: str = ""
    extra_args: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.ASSISTANT, content=content)

    def render(self) -> str:
        """`"<role>: <content>"`, the line format used when a prompt is flattened to a string."""
        return f"{self.role.value}: {self.content}"


def parse_role(value: Any, default: Optional[MessageRole] = None) -> MessageRole:
    if isinstance(value, MessageRole):
        return value
    raw = getattr(value, "value", value)
    if isinstance(raw, str):
        try:
            return MessageRole(raw.lower())
        except ValueError:
            pass
    if default is not None:
        return default
    raise ValueError(f"Unknown message role: {value!r}")
