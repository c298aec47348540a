"""
Bridge to resources implemented in another runtime.

A foreign resource is reachable only through an opaque handle. All calls go
through one `ForeignResourceAdapter`, which invokes a named method on the
handle with keyword arguments and converts what comes back (lists, chat
messages, tool responses) into this package's types. Errors raised on the
foreign side propagate unchanged.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from agentmcp.chat.messages import ChatMessage, MessageRole, parse_role
from agentmcp.tools.tool import ToolResponse
from agentmcp.util.async_bridge import run_sync
import agentmcp.util.agentmcp_logger as _agentmcp_logger

logger = _agentmcp_logger.getLogger(__name__)


class ForeignResourceAdapter(ABC):

    @abstractmethod
    def call_method(self, handle: Any, method_name: str, kwargs: Optional[Mapping[str, Any]] = None) -> Any:
        ...

    @abstractmethod
    def from_foreign_chat_message(self, message: Any) -> ChatMessage:
        ...

    # ----- shared conversions ----------------------------------------------
    @staticmethod
    def to_list(value: Any) -> List[Any]:
        if isinstance(value, (list, tuple)):
            return list(value)
        return []

    def to_chat_messages(self, value: Any) -> List[ChatMessage]:
        return [self.from_foreign_chat_message(m) for m in self.to_list(value)]

    @staticmethod
    def to_tool_response(value: Any) -> ToolResponse:
        if isinstance(value, ToolResponse):
            return value
        return ToolResponse.ok(value)


class ReflectiveResourceAdapter(ForeignResourceAdapter):
    """
    Adapter for handles that expose their methods as attributes, e.g. proxies
    handed out by an embedded interpreter or an RPC bridge. Coroutine results
    are run to completion so callers always see a plain value.
    """

    def call_method(self, handle: Any, method_name: str, kwargs: Optional[Mapping[str, Any]] = None) -> Any:
        method = getattr(handle, method_name)
        logger.trace("Foreign call %s.%s(%s)", type(handle).__name__, method_name, ", ".join(kwargs or {}))
        result = method(**dict(kwargs or {}))
        if inspect.isawaitable(result):
            result = run_sync(result)
        return result

    def from_foreign_chat_message(self, message: Any) -> ChatMessage:
        if isinstance(message, ChatMessage):
            return message
        if isinstance(message, Mapping):
            role, content = message.get("role"), message.get("content")
            extra = message.get("extra_args") or {}
        else:
            role, content = getattr(message, "role", None), getattr(message, "content", None)
            extra = getattr(message, "extra_args", None) or {}
        text = getattr(content, "text", content)
        return ChatMessage(
            role=parse_role(role) if role is not None else MessageRole.USER,
            content="" if text is None else str(text),
            extra_args=dict(extra),
        )


class ForeignResourceWrapper:
    """Mixin for resources that front a foreign handle through an adapter."""

    def __init__(self, adapter: ForeignResourceAdapter, foreign_resource: Any):
        if adapter is None:
            raise ValueError("adapter cannot be None")
        if foreign_resource is None:
            raise ValueError("foreign_resource cannot be None")
        self._adapter = adapter
        self._foreign_resource = foreign_resource

    @property
    def adapter(self) -> ForeignResourceAdapter:
        return self._adapter

    @property
    def foreign_resource(self) -> Any:
        return self._foreign_resource

    def _call(self, method_name: str, **kwargs: Any) -> Any:
        return self._adapter.call_method(self._foreign_resource, method_name, kwargs)

    def _same_foreign_resource(self, other: Any) -> bool:
        if type(self) is not type(other):
            return False
        mine, theirs = self._foreign_resource, other._foreign_resource
        return mine is theirs or bool(mine == theirs)

    def _foreign_resource_hash(self) -> int:
        # unhashable handles share one bucket per wrapper type
        try:
            return hash((type(self), self._foreign_resource))
        except TypeError:
            return hash(type(self))
