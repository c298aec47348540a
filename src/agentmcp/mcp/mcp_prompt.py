from typing import Any, Dict, List, Mapping, Optional, Union

from agentmcp.chat.messages import ChatMessage, MessageRole
from agentmcp.mcp.base_prompt import BaseMCPPrompt, PromptArgument, PromptArguments
from agentmcp.mcp.base_server import BaseMCPServer
from agentmcp.mcp.errors import MCPConfigurationError
from agentmcp.mcp.records import MCPPromptRecord, PromptArgumentRecord
import agentmcp.util.agentmcp_logger as _agentmcp_logger

logger = _agentmcp_logger.getLogger(__name__)


class MCPPrompt(BaseMCPPrompt):
    """A prompt rendered by its MCP server."""

    def __init__(
        self,
        name: str,
        description: Optional[str] = None,
        prompt_arguments: Optional[PromptArguments] = None,
        mcp_server: Optional[BaseMCPServer] = None,
    ):
        if not name:
            raise MCPConfigurationError("MCPPrompt name cannot be empty")
        if mcp_server is None:
            raise MCPConfigurationError("mcp_server cannot be None")
        super().__init__(name, description, prompt_arguments)
        self._mcp_server = mcp_server
        self._closed = False

    def get_mcp_server(self) -> Optional[BaseMCPServer]:
        return self._mcp_server

    def format_messages(
        self, role: MessageRole = MessageRole.SYSTEM, arguments: Optional[Dict[str, str]] = None
    ) -> List[ChatMessage]:
        # Roles come from the server's own messages; `role` is kept for the Prompt contract.
        object_args: Optional[Dict[str, Any]] = dict(arguments) if arguments is not None else None
        return self._format_messages(object_args)

    def _format_messages(self, arguments: Optional[Dict[str, Any]]) -> List[ChatMessage]:
        if self._closed:
            raise MCPConfigurationError(f"{self!r} is closed")
        validated = self.validate_and_prepare_arguments(arguments)
        logger.debug("Rendering MCP prompt '%s' with args=%s", self.name, validated)
        return self._mcp_server.get_prompt(self.name, validated)

    def close(self) -> None:
        self._closed = True

    # ----- serialization ----------------------------------------------------
    def to_record(self) -> MCPPromptRecord:
        to_server_record = getattr(self._mcp_server, "to_record", None)
        if to_server_record is None:
            raise MCPConfigurationError(f"{self._mcp_server!r} cannot be serialized")
        return MCPPromptRecord(
            name=self.name,
            description=self.description,
            arguments={
                n: PromptArgumentRecord(name=a.name, description=a.description, required=a.required)
                for n, a in self._prompt_arguments.items()
            },
            mcp_server=to_server_record(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.to_record().model_dump(by_alias=True)

    @classmethod
    def from_record(cls, record: Union[MCPPromptRecord, Mapping[str, Any]], session_factory=None) -> "MCPPrompt":
        from agentmcp.mcp.mcp_server import MCPServer

        if not isinstance(record, MCPPromptRecord):
            record = MCPPromptRecord.model_validate(dict(record))
        arguments = {
            n: PromptArgument(a.name, a.description, a.required) for n, a in record.arguments.items()
        }
        server = MCPServer.from_record(record.mcp_server, session_factory=session_factory)
        return cls(record.name, record.description, arguments, server)
