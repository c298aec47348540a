from typing import Dict, List, Optional

from agentmcp.mcp.base_server import BaseMCPServer
from agentmcp.mcp.mcp_prompt import MCPPrompt
from agentmcp.mcp.mcp_tool import MCPTool
import agentmcp.util.agentmcp_logger as _agentmcp_logger

logger = _agentmcp_logger.getLogger(__name__)


class MCPServerManager:
    """
    Host-managed table of MCP servers keyed by id.

    The manager owns the servers it holds: `close()` releases all of them.
    Tools and prompts handed out by a server only refer back to it.
    """

    def __init__(self):
        self._servers: Dict[str, BaseMCPServer] = {}
        self._closed = False

    def add_server(self, server_id: str, server: BaseMCPServer) -> None:
        if self._closed:
            raise RuntimeError("MCPServerManager is closed")
        if server_id in self._servers:
            raise ValueError(f"MCP server '{server_id}' already registered")
        logger.debug("Adding MCP server '%s' at %s", server_id, server.endpoint)
        self._servers[server_id] = server

    def has_server(self, server_id: str) -> bool:
        return server_id in self._servers

    def get_server(self, server_id: str) -> Optional[BaseMCPServer]:
        return self._servers.get(server_id)

    def server_ids(self) -> List[str]:
        return list(self._servers.keys())

    def list_tools(self, server_id: str) -> List[MCPTool]:
        return self._servers[server_id].list_tools()

    def list_prompts(self, server_id: str) -> List[MCPPrompt]:
        return self._servers[server_id].list_prompts()

    def close(self) -> None:
        if self._closed:
            return
        logger.debug("MCPServerManager closing...")
        self._closed = True
        first_error: Optional[Exception] = None
        for sid, server in self._servers.items():
            try:
                server.close()
            except Exception as e:
                logger.warning("Closing MCP server '%s' failed: %s", sid, e)
                if first_error is None:
                    first_error = e
        self._servers.clear()
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "MCPServerManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._servers)
