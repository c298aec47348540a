import time
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, TypeVar, Union

import jsonschema
from mcp.shared.exceptions import McpError

from agentmcp.chat.messages import ChatMessage, MessageRole, parse_role
from agentmcp.mcp.base_prompt import PromptArgument
from agentmcp.mcp.base_server import BaseMCPServer
from agentmcp.mcp.errors import MCPConfigurationError, MCPRemoteError
from agentmcp.mcp.mcp_prompt import MCPPrompt
from agentmcp.mcp.mcp_tool import MCPTool
from agentmcp.mcp.mcp_types import MCPPromptInfo, MCPToolInfo
from agentmcp.mcp.records import MCPServerRecord
from agentmcp.mcp.session import MCPClientSession, MCPHTTPClientSession
from agentmcp.tools.tool import ToolMetadata
from agentmcp.util.async_bridge import run_sync
import agentmcp.util.config as config
import agentmcp.util.agentmcp_logger as _agentmcp_logger

logger = _agentmcp_logger.getLogger(__name__)

T = TypeVar("T")

SessionFactory = Callable[[str, Dict[str, str], int], MCPClientSession]


class MCPServer(BaseMCPServer):
    """
    An MCP server reached over HTTP.

    Every operation opens its own session, runs to completion within a single
    `timeout_seconds` budget covering the connect and any follow-up lookup,
    and closes the session again. Nothing is shared between calls, so a
    server may be used from several threads at once.
    """

    def __init__(
        self,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout_seconds: Optional[int] = None,
        session_factory: Optional[SessionFactory] = None,
    ):
        if not endpoint:
            raise MCPConfigurationError("MCPServer endpoint cannot be empty")
        if timeout_seconds is None:
            timeout_seconds = config.default_timeout_seconds()
        super().__init__(endpoint, headers, timeout_seconds)
        self._session_factory: SessionFactory = session_factory or MCPHTTPClientSession
        self._closed = False

    # ----- plumbing ---------------------------------------------------------
    def _run(self, op: Callable[[MCPClientSession], Awaitable[T]]) -> T:
        if self._closed:
            raise MCPConfigurationError(f"{self!r} is closed")

        async def _with_session() -> T:
            async with self._session_factory(self.endpoint, self.headers, self.timeout_seconds) as session:
                return await op(session)

        return run_sync(_with_session())

    def _build_tool(self, info: MCPToolInfo) -> Optional[MCPTool]:
        try:
            metadata = ToolMetadata(name=info.name, description=info.description or "", input_schema=info.input_schema)
        except jsonschema.SchemaError as e:
            logger.warning("Skipping tool '%s' from %s: invalid input schema (%s)", info.name, self.endpoint, e.message)
            return None
        return MCPTool(metadata, self)

    def _build_prompt(self, info: MCPPromptInfo) -> MCPPrompt:
        args = [PromptArgument(a.name, a.description, a.required) for a in info.arguments]
        return MCPPrompt(info.name, info.description, args, self)

    # ----- remote operations ------------------------------------------------
    def list_tools(self) -> List[MCPTool]:
        infos = self._run(lambda session: session.list_tools())
        return [tool for tool in (self._build_tool(i) for i in infos) if tool is not None]

    def get_tool(self, name: str) -> Optional[MCPTool]:
        for tool in self.list_tools():
            if tool.name == name:
                return tool
        logger.debug("Tool '%s' not found on %s", name, self.endpoint)
        return None

    def list_prompts(self) -> List[MCPPrompt]:
        infos = self._run(lambda session: session.list_prompts())
        return [self._build_prompt(i) for i in infos]

    def get_prompt(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> List[ChatMessage]:
        async def op(session: MCPClientSession):
            try:
                return await session.get_prompt(name, arguments)
            except McpError:
                if name not in [p.name for p in await session.list_prompts()]:
                    return None
                raise

        messages = self._run(op)
        if messages is None:
            logger.debug("Prompt '%s' not found on %s", name, self.endpoint)
            return []
        return [
            ChatMessage(role=parse_role(m.role, default=MessageRole.USER), content=m.text)
            for m in messages
        ]

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> List[Any]:
        async def op(session: MCPClientSession):
            try:
                is_error, values = await session.call_tool(name, arguments)
            except McpError:
                if name not in [t.name for t in await session.list_tools()]:
                    return None
                raise
            if is_error:
                if name not in [t.name for t in await session.list_tools()]:
                    return None
                raise MCPRemoteError(name, "; ".join(str(v) for v in values) or "unknown error")
            return values

        t0 = time.perf_counter()
        values = self._run(op)
        logger.debug("Call to MCP tool '%s' on %s finished in %.1f ms", name, self.endpoint, (time.perf_counter() - t0) * 1000)
        if values is None:
            logger.debug("Tool '%s' not found on %s", name, self.endpoint)
            return []
        return values

    # ----- lifecycle --------------------------------------------------------
    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        logger.debug("Closing %r", self)
        self._closed = True

    # ----- serialization ----------------------------------------------------
    def to_record(self) -> MCPServerRecord:
        return MCPServerRecord(endpoint=self.endpoint, headers=self.headers, timeout_seconds=self.timeout_seconds)

    def to_dict(self) -> Dict[str, Any]:
        return self.to_record().model_dump(by_alias=True)

    @classmethod
    def from_record(
        cls,
        record: Union[MCPServerRecord, Mapping[str, Any]],
        session_factory: Optional[SessionFactory] = None,
    ) -> "MCPServer":
        if not isinstance(record, MCPServerRecord):
            record = MCPServerRecord.model_validate(dict(record))
        return cls(record.endpoint, record.headers, record.timeout_seconds, session_factory=session_factory)
