"""
MCP resources whose implementation lives in a foreign runtime.

Each wrapper holds one adapter and one opaque handle and forwards every
operation to the handle's method of the same purpose. No validation happens
here; the foreign object applies its own. Conversion happens only at the
boundary, in the adapter.
"""

from typing import Any, Dict, List, Optional

from agentmcp.chat.messages import ChatMessage, MessageRole
from agentmcp.mcp.base_prompt import BaseMCPPrompt
from agentmcp.mcp.base_server import BaseMCPServer
from agentmcp.mcp.base_tool import BaseMCPTool
from agentmcp.resource.foreign_adapter import ForeignResourceAdapter, ForeignResourceWrapper
from agentmcp.tools.tool import ToolParameters, ToolResponse


class ForeignMCPServer(ForeignResourceWrapper, BaseMCPServer):
    """Descriptor fields stay unconfigured; the foreign object owns the real endpoint state."""

    def __init__(self, adapter: ForeignResourceAdapter, foreign_resource: Any):
        ForeignResourceWrapper.__init__(self, adapter, foreign_resource)
        BaseMCPServer.__init__(self)

    def list_tools(self) -> List["ForeignMCPTool"]:
        return [ForeignMCPTool(self._adapter, t) for t in self._adapter.to_list(self._call("list_tools"))]

    def get_tool(self, name: str) -> Optional["ForeignMCPTool"]:
        foreign_tool = self._call("get_tool", name=name)
        if foreign_tool is None:
            return None
        return ForeignMCPTool(self._adapter, foreign_tool)

    def list_prompts(self) -> List["ForeignMCPPrompt"]:
        return [ForeignMCPPrompt(self._adapter, p) for p in self._adapter.to_list(self._call("list_prompts"))]

    def get_prompt(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> List[ChatMessage]:
        result = self._call("get_prompt", name=name, arguments=dict(arguments or {}))
        return self._adapter.to_chat_messages(result)

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> List[Any]:
        result = self._call("call_tool_async", tool_name=name, kwargs=dict(arguments or {}))
        return self._adapter.to_list(result)

    def close(self) -> None:
        self._call("close")

    def __eq__(self, other):
        return self is other or self._same_foreign_resource(other)

    def __hash__(self):
        return self._foreign_resource_hash()


class ForeignMCPTool(ForeignResourceWrapper, BaseMCPTool):

    def __init__(self, adapter: ForeignResourceAdapter, foreign_resource: Any):
        ForeignResourceWrapper.__init__(self, adapter, foreign_resource)
        BaseMCPTool.__init__(self)

    def get_mcp_server(self) -> Optional[ForeignMCPServer]:
        foreign_server = self._call("mcp_server")
        if foreign_server is None:
            return None
        return ForeignMCPServer(self._adapter, foreign_server)

    def call(self, parameters: Optional[ToolParameters] = None) -> ToolResponse:
        result = self._call("call", kwargs=self.prepare_arguments(parameters))
        return self._adapter.to_tool_response(result)

    def close(self) -> None:
        self._call("close")

    def __eq__(self, other):
        return self is other or self._same_foreign_resource(other)

    def __hash__(self):
        return self._foreign_resource_hash()

    def __repr__(self):
        return f"{type(self).__name__}(foreign_resource={self._foreign_resource!r})"


class ForeignMCPPrompt(ForeignResourceWrapper, BaseMCPPrompt):

    def __init__(self, adapter: ForeignResourceAdapter, foreign_resource: Any):
        ForeignResourceWrapper.__init__(self, adapter, foreign_resource)
        BaseMCPPrompt.__init__(self)

    def get_mcp_server(self) -> Optional[ForeignMCPServer]:
        foreign_server = self._call("mcp_server")
        if foreign_server is None:
            return None
        return ForeignMCPServer(self._adapter, foreign_server)

    def format_string(self, arguments: Optional[Dict[str, str]] = None) -> str:
        result = self._call("format_string", arguments=dict(arguments or {}))
        return "" if result is None else str(result)

    def format_messages(
        self, role: MessageRole = MessageRole.SYSTEM, arguments: Optional[Dict[str, str]] = None
    ) -> List[ChatMessage]:
        result = self._call("format_messages", role=role, arguments=dict(arguments or {}))
        return self._adapter.to_chat_messages(result)

    def close(self) -> None:
        self._call("close")

    def __eq__(self, other):
        return self is other or self._same_foreign_resource(other)

    def __hash__(self):
        return self._foreign_resource_hash()

    def __repr__(self):
        return f"{type(self).__name__}(foreign_resource={self._foreign_resource!r})"
