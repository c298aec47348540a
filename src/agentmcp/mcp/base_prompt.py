from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from agentmcp.chat.messages import MessageRole
from agentmcp.mcp.base_server import BaseMCPServer
from agentmcp.mcp.errors import MCPConfigurationError, MCPInvalidArgumentError
from agentmcp.prompt.prompt import Prompt
from agentmcp.resource.resource_type import ResourceType


@dataclass(frozen=True)
class PromptArgument:
    """An argument an MCP prompt accepts."""

    name: str
    description: Optional[str] = None
    required: bool = False

    def __post_init__(self):
        if not self.name:
            raise MCPConfigurationError("PromptArgument name cannot be empty")


PromptArguments = Union[Mapping[str, PromptArgument], Iterable[PromptArgument]]


def _as_argument_map(prompt_arguments: Optional[PromptArguments]) -> Dict[str, PromptArgument]:
    if not prompt_arguments:
        return {}
    if isinstance(prompt_arguments, Mapping):
        out: Dict[str, PromptArgument] = {}
        for key, arg in prompt_arguments.items():
            if key != arg.name:
                raise MCPConfigurationError(f"Prompt argument keyed as '{key}' is named '{arg.name}'")
            out[key] = arg
        return out
    out = {}
    for arg in prompt_arguments:
        if arg.name in out:
            raise MCPConfigurationError(f"Duplicate prompt argument: {arg.name}")
        out[arg.name] = arg
    return out


class BaseMCPPrompt(Prompt):
    """
    A parameterized prompt template hosted on an MCP server.

    Declared arguments act as an allow-list: `validate_and_prepare_arguments`
    fails fast on a missing required argument, forwards declared arguments the
    caller supplied, and drops everything else.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        prompt_arguments: Optional[PromptArguments] = None,
    ):
        self._name = name
        self._description = description
        self._prompt_arguments = _as_argument_map(prompt_arguments)

    @property
    def resource_type(self) -> ResourceType:
        return ResourceType.MCP_PROMPT

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def prompt_arguments(self) -> Dict[str, PromptArgument]:
        return dict(self._prompt_arguments)

    @abstractmethod
    def get_mcp_server(self) -> Optional[BaseMCPServer]:
        ...

    def validate_and_prepare_arguments(self, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        missing: List[str] = []
        for arg in self._prompt_arguments.values():
            if arguments is not None and arg.name in arguments:
                result[arg.name] = arguments[arg.name]
            elif arg.required:
                missing.append(arg.name)
        if missing:
            raise MCPInvalidArgumentError(missing[0], missing=missing)
        return result

    def format_string(self, arguments: Optional[Dict[str, str]] = None) -> str:
        messages = self.format_messages(MessageRole.SYSTEM, arguments)
        return "\n".join(msg.render() for msg in messages)

    def __eq__(self, other):
        if self is other:
            return True
        if other is None or type(self) is not type(other):
            return False
        return (
            self._name == other._name
            and self._description == other._description
            and self._prompt_arguments == other._prompt_arguments
            and self.get_mcp_server() == other.get_mcp_server()
        )

    def __hash__(self):
        return hash((self._name, self._description, frozenset(self._prompt_arguments.items()), self.get_mcp_server()))

    def __repr__(self):
        return f"{type(self).__name__}(name={self._name!r}, server={self.get_mcp_server()!r})"
