from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

@dataclass
class MCPToolInfo:
    name: str
    description: str | None = None
    input_schema: Dict[str, Any] | None = None

@dataclass
class MCPPromptArgumentInfo:
    name: str
    description: str | None = None
    required: bool = False

@dataclass
class MCPPromptInfo:
    name: str
    description: str | None = None
    arguments: List[MCPPromptArgumentInfo] = field(default_factory=list)

@dataclass
class MCPPromptMessageInfo:
    role: str
    text: str

@dataclass
class MCPServerEntry:
    id: str
    endpoint: str
    headers: Dict[str, str] = field(default_factory=dict)
    timeout_seconds: Optional[int] = None
