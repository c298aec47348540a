import time
from typing import Optional

from agentmcp.mcp.base_server import BaseMCPServer
from agentmcp.mcp.base_tool import BaseMCPTool
from agentmcp.mcp.errors import MCPConfigurationError
from agentmcp.tools.tool import ToolMetadata, ToolParameters, ToolResponse
import agentmcp.util.agentmcp_logger as _agentmcp_logger

logger = _agentmcp_logger.getLogger(__name__)


class MCPTool(BaseMCPTool):
    """
    A tool hosted on an MCP server.

    The server is a back-reference, not owned: closing the tool leaves the
    server (and every other tool bound to it) usable.
    """

    def __init__(self, metadata: ToolMetadata, mcp_server: BaseMCPServer):
        if mcp_server is None:
            raise MCPConfigurationError("mcp_server cannot be None")
        if metadata is None or not metadata.name:
            raise MCPConfigurationError("MCPTool requires metadata with a name")
        super().__init__(metadata)
        self._mcp_server = mcp_server
        self._closed = False

    def get_mcp_server(self) -> Optional[BaseMCPServer]:
        return self._mcp_server

    def call(self, parameters: Optional[ToolParameters] = None) -> ToolResponse:
        if self._closed:
            raise MCPConfigurationError(f"{self!r} is closed")
        arguments = self.prepare_arguments(parameters)
        logger.debug("Calling MCP tool '%s' with args=%s", self.name, arguments)
        start = time.monotonic()
        values = self._mcp_server.call_tool(self.name, arguments)
        return ToolResponse.ok(values, elapsed_ms=int((time.monotonic() - start) * 1000))

    def close(self) -> None:
        self._closed = True
