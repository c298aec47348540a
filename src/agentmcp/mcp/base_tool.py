from abc import abstractmethod
from typing import Any, Dict, Optional

from agentmcp.mcp.base_server import BaseMCPServer
from agentmcp.tools.tool import Tool, ToolMetadata, ToolParameters, ToolType


class BaseMCPTool(Tool):
    """A tool whose implementation lives on an MCP server."""

    def __init__(self, metadata: Optional[ToolMetadata] = None):
        super().__init__(metadata if metadata is not None else ToolMetadata(name="", description=""))

    @property
    def tool_type(self) -> ToolType:
        return ToolType.MCP

    @abstractmethod
    def get_mcp_server(self) -> Optional[BaseMCPServer]:
        """The server this tool is bound to, or `None` if the binding is gone."""
        ...

    @staticmethod
    def prepare_arguments(parameters: Optional[ToolParameters]) -> Dict[str, Any]:
        """Flatten the caller's parameters into the keyed bundle sent to the server. No renaming, no coercion."""
        if parameters is None:
            return {}
        return {name: parameters.get_parameter(name) for name in parameters.parameter_names()}

    def __eq__(self, other):
        if self is other:
            return True
        if other is None or type(self) is not type(other):
            return False
        return self.metadata == other.metadata and self.get_mcp_server() == other.get_mcp_server()

    def __hash__(self):
        return hash((self.metadata, self.get_mcp_server()))

    def __repr__(self):
        return f"{type(self).__name__}(name={self.metadata.name!r}, server={self.get_mcp_server()!r})"
