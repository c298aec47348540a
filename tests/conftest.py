"""Shared fakes: an in-memory MCP backend standing in for the HTTP session."""

from typing import Any, Dict, List

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData

from agentmcp.mcp.errors import MCPServerUnreachableError
from agentmcp.mcp.mcp_server import MCPServer
from agentmcp.mcp.mcp_types import (
    MCPPromptArgumentInfo,
    MCPPromptInfo,
    MCPPromptMessageInfo,
    MCPToolInfo,
)


class FakeBackend:
    def __init__(self):
        self.tools: List[MCPToolInfo] = []
        self.tool_results: Dict[str, List[Any]] = {}
        self.tool_errors: Dict[str, str] = {}
        self.prompts: List[MCPPromptInfo] = []
        self.prompt_messages: Dict[str, List[MCPPromptMessageInfo]] = {}
        self.prompt_failures: Dict[str, Exception] = {}
        self.unreachable = False
        self.calls: List[tuple] = []
        self.sessions_opened = 0
        self.sessions_closed = 0
        self.seen_headers: List[Dict[str, str]] = []
        self.seen_timeouts: List[Any] = []

    def session_factory(self, endpoint, headers, timeout_s):
        return FakeSession(self, endpoint, headers, timeout_s)


class FakeSession:
    def __init__(self, backend: FakeBackend, endpoint, headers, timeout_s):
        self.backend = backend
        self.endpoint = endpoint
        backend.seen_headers.append(headers)
        backend.seen_timeouts.append(timeout_s)

    async def __aenter__(self):
        if self.backend.unreachable:
            raise MCPServerUnreachableError(self.endpoint, "connection refused")
        self.backend.sessions_opened += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.backend.sessions_closed += 1

    async def list_tools(self):
        self.backend.calls.append(("list_tools",))
        return list(self.backend.tools)

    async def list_prompts(self):
        self.backend.calls.append(("list_prompts",))
        return list(self.backend.prompts)

    async def get_prompt(self, name, arguments=None):
        self.backend.calls.append(("get_prompt", name, dict(arguments or {})))
        if name in self.backend.prompt_failures:
            raise self.backend.prompt_failures[name]
        if name not in self.backend.prompt_messages:
            raise McpError(ErrorData(code=-32602, message=f"Unknown prompt: {name}"))
        return list(self.backend.prompt_messages[name])

    async def call_tool(self, name, arguments=None):
        self.backend.calls.append(("call_tool", name, dict(arguments or {})))
        if name in self.backend.tool_errors:
            return True, [self.backend.tool_errors[name]]
        if name not in self.backend.tool_results:
            return True, [f"Unknown tool: {name}"]
        return False, list(self.backend.tool_results[name])


@pytest.fixture
def backend():
    b = FakeBackend()
    b.tools = [
        MCPToolInfo(
            name="search",
            description="Search the web",
            input_schema={
                "type": "object",
                "properties": {"query": {"type": "string"}, "limit": {"type": "integer"}},
                "required": ["query"],
            },
        ),
        MCPToolInfo(name="ping", description=None, input_schema=None),
    ]
    b.tool_results = {"search": ["result for rust"], "ping": ["pong"]}
    b.prompts = [
        MCPPromptInfo(
            name="greet",
            description="Greets someone",
            arguments=[
                MCPPromptArgumentInfo(name="name", description="Who to greet", required=True),
                MCPPromptArgumentInfo(name="title", description=None, required=False),
            ],
        )
    ]
    b.prompt_messages = {
        "greet": [
            MCPPromptMessageInfo(role="user", text="Say hello to Ada"),
            MCPPromptMessageInfo(role="assistant", text="Hello, Ada!"),
        ]
    }
    return b


@pytest.fixture
def server(backend):
    return MCPServer(
        "http://localhost:8000/mcp",
        headers={"Authorization": "Bearer token"},
        timeout_seconds=5,
        session_factory=backend.session_factory,
    )
