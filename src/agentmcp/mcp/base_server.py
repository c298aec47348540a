from abc import abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from agentmcp.chat.messages import ChatMessage
from agentmcp.mcp.errors import MCPConfigurationError
from agentmcp.resource.resource import Resource
from agentmcp.resource.resource_type import ResourceType

DEFAULT_TIMEOUT_SECONDS = 30


class BaseMCPServer(Resource):
    """
    A single remote MCP endpoint: address, auxiliary headers and a response timeout.

    The descriptor itself is plain data. Subclasses decide how the five remote
    operations below reach the endpoint; each may block for up to
    `timeout_seconds` and must raise `MCPServerUnreachableError` for
    connectivity problems. An unknown tool or prompt is not an error: lookups
    return `None` and calls return `[]`.

    Constructing with no arguments yields an unconfigured descriptor
    (endpoint `None`, no headers, 30s timeout), used by wrappers whose real
    state lives elsewhere.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ):
        if timeout_seconds is None or int(timeout_seconds) < 0:
            raise MCPConfigurationError(f"timeout_seconds must be >= 0, got {timeout_seconds!r}")
        self._endpoint = endpoint
        self._headers: Dict[str, str] = dict(headers) if headers else {}
        self._timeout_seconds = int(timeout_seconds)

    @property
    def resource_type(self) -> ResourceType:
        return ResourceType.MCP_SERVER

    @property
    def endpoint(self) -> Optional[str]:
        return self._endpoint

    @property
    def headers(self) -> Dict[str, str]:
        # copy on every read; callers may mutate what they get back
        return dict(self._headers)

    @property
    def timeout_seconds(self) -> int:
        return self._timeout_seconds

    # ----- remote operations ------------------------------------------------
    @abstractmethod
    def list_tools(self) -> List[Any]:
        ...

    @abstractmethod
    def get_tool(self, name: str) -> Optional[Any]:
        ...

    @abstractmethod
    def list_prompts(self) -> List[Any]:
        ...

    @abstractmethod
    def get_prompt(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> List[ChatMessage]:
        ...

    @abstractmethod
    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> List[Any]:
        ...

    # ----- identity ---------------------------------------------------------
    def __eq__(self, other):
        if self is other:
            return True
        if other is None or type(self) is not type(other):
            return False
        return (
            self.resource_type == other.resource_type
            and self._endpoint == other._endpoint
            and self._headers == other._headers
            and self._timeout_seconds == other._timeout_seconds
        )

    def __hash__(self):
        return hash((self.resource_type, self._endpoint, frozenset(self._headers.items()), self._timeout_seconds))

    def __repr__(self):
        return f"{type(self).__name__}(endpoint={self._endpoint!r})"
