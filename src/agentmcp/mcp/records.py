"""Persisted form of MCP servers and prompts. Field names are stable keys."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class MCPServerRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    endpoint: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout_seconds: int = Field(default=30, ge=0, alias="timeoutSeconds")


class PromptArgumentRecord(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    required: bool = False


class MCPPromptRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: Optional[str] = None
    arguments: Dict[str, PromptArgumentRecord] = Field(default_factory=dict)
    mcp_server: MCPServerRecord = Field(alias="mcpServer")
