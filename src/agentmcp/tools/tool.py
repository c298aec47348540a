import json
from abc import abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

import jsonschema

from agentmcp.resource.resource import Resource
from agentmcp.resource.resource_type import ResourceType


class ToolType(str, Enum):
    FUNCTION = "function"
    REMOTE_FUNCTION = "remote_function"
    MCP = "mcp"


_EMPTY_SCHEMA: Dict[str, Any] = {"type": "object", "properties": {}}


@dataclass
class ToolMetadata:
    name: str
    description: str = ""
    input_schema: Dict[str, Any] = field(default_factory=lambda: dict(_EMPTY_SCHEMA))

    def __post_init__(self):
        if self.input_schema is None:
            self.input_schema = dict(_EMPTY_SCHEMA)
        elif isinstance(self.input_schema, str):
            self.input_schema = json.loads(self.input_schema) if self.input_schema.strip() else dict(_EMPTY_SCHEMA)
        # raises jsonschema.SchemaError for a malformed schema
        jsonschema.Draft202012Validator.check_schema(self.input_schema)

    def parameter_names(self) -> List[str]:
        return list((self.input_schema.get("properties") or {}).keys())

    def get_parameter(self, name: str) -> Optional[Dict[str, Any]]:
        return (self.input_schema.get("properties") or {}).get(name)

    def required_parameters(self) -> List[str]:
        return list(self.input_schema.get("required") or [])

    def __hash__(self):
        return hash((self.name, self.description, json.dumps(self.input_schema, sort_keys=True, default=repr)))


class ToolParameters:
    """The caller's actual argument bundle for one tool call, queryable by parameter name."""

    def __init__(self, parameters: Optional[Dict[str, Any]] = None, **kwargs: Any):
        self._parameters: Dict[str, Any] = dict(parameters or {})
        self._parameters.update(kwargs)

    def parameter_names(self) -> List[str]:
        return list(self._parameters.keys())

    def get_parameter(self, name: str, default: Any = None) -> Any:
        return self._parameters.get(name, default)

    def has_parameter(self, name: str) -> bool:
        return name in self._parameters

    def add_parameter(self, name: str, value: Any) -> None:
        self._parameters[name] = value

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._parameters)

    def __contains__(self, name: object) -> bool:
        return name in self._parameters

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._parameters))

    def __len__(self) -> int:
        return len(self._parameters)

    def __eq__(self, other):
        if not isinstance(other, ToolParameters):
            return NotImplemented
        return self._parameters == other._parameters

    __hash__ = None

    def __repr__(self):
        return f"ToolParameters({self._parameters!r})"


@dataclass
class ToolResponse:
    success: bool
    result: Any = None
    error: Optional[str] = None
    elapsed_ms: Optional[int] = None

    @classmethod
    def ok(cls, result: Any, elapsed_ms: Optional[int] = None) -> "ToolResponse":
        return cls(success=True, result=result, elapsed_ms=elapsed_ms)

    @classmethod
    def failed(cls, error: str, elapsed_ms: Optional[int] = None) -> "ToolResponse":
        return cls(success=False, error=error, elapsed_ms=elapsed_ms)


class Tool(Resource):
    """A resource exposing one invocable operation described by `metadata`."""

    def __init__(self, metadata: ToolMetadata):
        self.metadata = metadata

    @property
    def resource_type(self) -> ResourceType:
        return ResourceType.TOOL

    @property
    @abstractmethod
    def tool_type(self) -> ToolType:
        ...

    @property
    def name(self) -> str:
        return self.metadata.name

    @abstractmethod
    def call(self, parameters: ToolParameters) -> ToolResponse:
        ...
