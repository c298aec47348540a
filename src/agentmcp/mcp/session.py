import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Dict, List, Mapping, Optional, Tuple, TypeVar

import httpx
from fastmcp import Client as FastMCPClient
from fastmcp.client.transports import SSETransport, StreamableHttpTransport

from agentmcp.mcp.errors import MCPServerUnreachableError, MCPTimeoutError
from agentmcp.mcp.mcp_types import MCPPromptArgumentInfo, MCPPromptInfo, MCPPromptMessageInfo, MCPToolInfo
import agentmcp.util.agentmcp_logger as _agentmcp_logger

logger = _agentmcp_logger.getLogger(__name__)

T = TypeVar("T")

_TRANSPORT_ERRORS = (httpx.TransportError, ConnectionError, OSError)


def _find_cause(exc: BaseException, types: tuple) -> Optional[BaseException]:
    """Search an exception, its exception-group members and its explicit cause chain for one of `types`."""
    seen = set()
    stack = [exc]
    while stack:
        e = stack.pop()
        if e is None or id(e) in seen:
            continue
        seen.add(id(e))
        if isinstance(e, types):
            return e
        stack.extend(getattr(e, "exceptions", None) or [])
        stack.append(e.__cause__)
    return None


class MCPClientSession(ABC):
    """
    One short-lived connection to an MCP server, built on FastMCPClient.

    Subclasses choose the transport in `_make_client`. Every request made
    through the session, the connect handshake included, shares a single
    deadline of `timeout_s` seconds that starts with the first request. Running
    past it raises MCPTimeoutError; losing the connection raises
    MCPServerUnreachableError. Responses are normalized into the mcp_types
    dataclasses.
    """

    def __init__(self, endpoint: str, headers: Optional[Mapping[str, str]] = None, timeout_s: Optional[float] = None) -> None:
        self.endpoint = endpoint
        self.headers: Dict[str, str] = dict(headers or {})
        self.timeout_s = timeout_s
        self._client: Optional[FastMCPClient] = None
        self._deadline: Optional[float] = None

    # ----- lifecycle --------------------------------------------------------
    @abstractmethod
    def _make_client(self) -> FastMCPClient:
        ...

    async def connect(self) -> None:
        client = self._make_client()
        await self._guard(client.__aenter__())
        self._client = client

    async def aclose(self) -> None:
        self._deadline = None
        if self._client:
            try:
                await self._client.__aexit__(None, None, None)
            finally:
                self._client = None

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    def _ensure_connected(self) -> FastMCPClient:
        if self._client is None:
            raise RuntimeError("MCP client not initialized. Call connect() first.")
        return self._client

    def _remaining(self) -> Optional[float]:
        """Seconds left before the session deadline, or None when unbounded."""
        if not (self.timeout_s and self.timeout_s > 0):
            return None
        now = time.monotonic()
        if self._deadline is None:
            self._deadline = now + self.timeout_s
        return max(self._deadline - now, 0.0)

    async def _guard(self, coro: Awaitable[T]) -> T:
        remaining = self._remaining()
        try:
            if remaining is not None:
                return await asyncio.wait_for(coro, timeout=remaining)
            return await coro
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning("MCP server %s timed out after %ss", self.endpoint, self.timeout_s)
            raise MCPTimeoutError(self.endpoint, self.timeout_s) from e
        except MCPServerUnreachableError:
            raise
        except Exception as e:
            cause = _find_cause(e, (asyncio.TimeoutError, httpx.TimeoutException))
            if cause is not None:
                logger.warning("MCP server %s timed out: %s", self.endpoint, cause)
                raise MCPTimeoutError(self.endpoint, self.timeout_s) from e
            cause = _find_cause(e, _TRANSPORT_ERRORS)
            if cause is not None:
                logger.warning("MCP server %s unreachable: %s", self.endpoint, cause)
                raise MCPServerUnreachableError(self.endpoint, str(cause) or type(cause).__name__) from e
            raise

    # ----- low-level RPCs ---------------------------------------------------
    async def _rpc_list_tools(self) -> List[Any]:
        client = self._ensure_connected()
        return await self._guard(client.list_tools())

    async def _rpc_list_prompts(self) -> List[Any]:
        client = self._ensure_connected()
        return await self._guard(client.list_prompts())

    async def _rpc_get_prompt(self, name: str, args: Dict[str, Any]) -> Any:
        client = self._ensure_connected()
        return await self._guard(client.get_prompt(name, args))

    async def _rpc_call_tool(self, name: str, args: Dict[str, Any]) -> Any:
        client = self._ensure_connected()
        # raw CallToolResult: the isError flag is inspected by the caller
        return await self._guard(client.call_tool_mcp(name, args))

    # ----- normalization helpers -------------------------------------------
    @staticmethod
    def _field(obj: Any, *names: str) -> Any:
        for n in names:
            value = obj.get(n) if isinstance(obj, dict) else getattr(obj, n, None)
            if value is not None:
                return value
        return None

    @classmethod
    def _norm_tools(cls, raw: List[Any]) -> List[MCPToolInfo]:
        out: List[MCPToolInfo] = []
        for t in raw or []:
            name = cls._field(t, "name")
            if not name:
                continue
            out.append(MCPToolInfo(
                name=name,
                description=cls._field(t, "description"),
                input_schema=cls._field(t, "inputSchema", "input_schema"),
            ))
        return out

    @classmethod
    def _norm_prompts(cls, raw: List[Any]) -> List[MCPPromptInfo]:
        out: List[MCPPromptInfo] = []
        for p in raw or []:
            name = cls._field(p, "name")
            if not name:
                continue
            args = [
                MCPPromptArgumentInfo(
                    name=cls._field(a, "name"),
                    description=cls._field(a, "description"),
                    required=bool(cls._field(a, "required")),
                )
                for a in (cls._field(p, "arguments") or [])
                if cls._field(a, "name")
            ]
            out.append(MCPPromptInfo(name=name, description=cls._field(p, "description"), arguments=args))
        return out

    @classmethod
    def _norm_text(cls, content: Any) -> str:
        text = cls._field(content, "text")
        if text is not None:
            return text
        resource = cls._field(content, "resource")
        if resource is not None and cls._field(resource, "text") is not None:
            return cls._field(resource, "text")
        return "" if content is None else str(content)

    @classmethod
    def _norm_messages(cls, result: Any) -> List[MCPPromptMessageInfo]:
        messages = cls._field(result, "messages") or []
        out: List[MCPPromptMessageInfo] = []
        for m in messages:
            role = cls._field(m, "role") or "user"
            out.append(MCPPromptMessageInfo(role=getattr(role, "value", role), text=cls._norm_text(cls._field(m, "content"))))
        return out

    @classmethod
    def _norm_parts(cls, parts: List[Any]) -> List[Any]:
        payloads: List[Any] = []
        for p in parts or []:
            ptype = cls._field(p, "type") or "text"
            if ptype == "text":
                payloads.append(cls._field(p, "text") or "")
            elif ptype == "image":
                payloads.append({
                    "type": "image",
                    "mimeType": cls._field(p, "mimeType", "mime_type"),
                    "data": cls._field(p, "data"),
                })
            elif hasattr(p, "model_dump"):
                payloads.append(p.model_dump(by_alias=True, exclude_none=True))
            else:
                payloads.append(p)
        return payloads

    # ----- public API -------------------------------------------------------
    async def list_tools(self) -> List[MCPToolInfo]:
        return self._norm_tools(await self._rpc_list_tools())

    async def list_prompts(self) -> List[MCPPromptInfo]:
        return self._norm_prompts(await self._rpc_list_prompts())

    async def get_prompt(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> List[MCPPromptMessageInfo]:
        logger.debug("Getting prompt '%s' (timeout=%s) args=%s", name, self.timeout_s, arguments)
        return self._norm_messages(await self._rpc_get_prompt(name, arguments or {}))

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Tuple[bool, List[Any]]:
        """Returns `(is_error, values)`; the server's own error flag is passed through, never raised here."""
        start = time.monotonic()
        logger.debug("Calling tool '%s' (timeout=%s) args=%s", name, self.timeout_s, arguments)
        result = await self._rpc_call_tool(name, arguments or {})
        is_error = bool(self._field(result, "isError", "is_error"))
        values = self._norm_parts(self._field(result, "content") or [])
        logger.debug("Tool '%s' answered in %d ms (error=%s)", name, int((time.monotonic() - start) * 1000), is_error)
        return is_error, values


class MCPHTTPClientSession(MCPClientSession):
    """
    HTTP-backed session using FastMCPClient over Streamable HTTP, or SSE when the endpoint ends in /sse.
    """

    def _make_client(self) -> FastMCPClient:
        if self.endpoint.rstrip("/").endswith("/sse"):
            transport = SSETransport(self.endpoint, headers=self.headers)
        else:
            transport = StreamableHttpTransport(self.endpoint, headers=self.headers)
        return FastMCPClient(transport, timeout=self.timeout_s or None)
