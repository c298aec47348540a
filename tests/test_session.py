"""Tests for the FastMCP-backed session: failure mapping and response normalization."""

import asyncio
import time
from types import SimpleNamespace

import httpx
import pytest
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData

from agentmcp.mcp.errors import MCPServerUnreachableError, MCPTimeoutError
from agentmcp.mcp.mcp_server import MCPServer
from agentmcp.mcp.session import MCPClientSession, MCPHTTPClientSession


class FakeClient:
    """Quacks like fastmcp.Client for the calls the session makes."""

    def __init__(self, connect_error=None, delay=0.0, connect_delay=0.0, **responses):
        self.connect_error = connect_error
        self.connect_delay = connect_delay
        self.delay = delay
        self.responses = responses
        self.entered = False
        self.exited = False

    async def __aenter__(self):
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.connect_error is not None:
            raise self.connect_error
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True

    async def _answer(self, key):
        if self.delay:
            await asyncio.sleep(self.delay)
        value = self.responses[key]
        if isinstance(value, Exception):
            raise value
        return value

    async def list_tools(self):
        return await self._answer("tools")

    async def list_prompts(self):
        return await self._answer("prompts")

    async def get_prompt(self, name, arguments):
        return await self._answer("prompt")

    async def call_tool_mcp(self, name, arguments):
        return await self._answer("call")


class FakeClientSession(MCPClientSession):
    def __init__(self, client, timeout_s=None):
        super().__init__("http://localhost:8000/mcp", {"X-Key": "abc"}, timeout_s)
        self.client = client

    def _make_client(self):
        return self.client


def run(coro):
    return asyncio.run(coro)


async def _use(session, op):
    async with session:
        return await op(session)


class TestFailureMapping:

    def test_connect_error_is_unreachable(self):
        session = FakeClientSession(FakeClient(connect_error=httpx.ConnectError("refused")))
        with pytest.raises(MCPServerUnreachableError) as exc_info:
            run(_use(session, lambda s: s.list_tools()))
        assert exc_info.value.endpoint == "http://localhost:8000/mcp"
        assert not isinstance(exc_info.value, MCPTimeoutError)

    def test_wrapped_connect_error_is_unreachable(self):
        try:
            raise httpx.ConnectError("refused")
        except httpx.ConnectError as cause:
            wrapped = RuntimeError("Client failed to connect")
            wrapped.__cause__ = cause
        session = FakeClientSession(FakeClient(connect_error=wrapped))
        with pytest.raises(MCPServerUnreachableError):
            run(_use(session, lambda s: s.list_tools()))

    def test_slow_call_times_out(self):
        session = FakeClientSession(FakeClient(delay=0.5, tools=[]), timeout_s=0.05)
        with pytest.raises(MCPTimeoutError) as exc_info:
            run(_use(session, lambda s: s.list_tools()))
        assert exc_info.value.retryable is True
        assert exc_info.value.timeout_seconds == 0.05

    def test_connect_and_request_share_one_deadline(self):
        """Neither step alone exceeds the timeout, together they do."""
        session = FakeClientSession(FakeClient(connect_delay=0.35, delay=0.35, tools=[]), timeout_s=0.5)
        start = time.monotonic()
        with pytest.raises(MCPTimeoutError):
            run(_use(session, lambda s: s.list_tools()))
        assert time.monotonic() - start < 0.65

    def test_deadline_restarts_for_a_reopened_session(self):
        client = FakeClient(delay=0.2, tools=[])
        session = FakeClientSession(client, timeout_s=0.3)
        assert run(_use(session, lambda s: s.list_tools())) == []
        assert run(_use(session, lambda s: s.list_tools())) == []

    def test_zero_timeout_does_not_bound_calls(self):
        session = FakeClientSession(FakeClient(delay=0.01, tools=[]), timeout_s=0)
        assert run(_use(session, lambda s: s.list_tools())) == []

    def test_protocol_errors_propagate_unchanged(self):
        error = McpError(ErrorData(code=-32602, message="Unknown prompt: nope"))
        session = FakeClientSession(FakeClient(prompt=error))
        with pytest.raises(McpError) as exc_info:
            run(_use(session, lambda s: s.get_prompt("nope", {})))
        assert exc_info.value is error

    def test_client_is_closed_after_use(self):
        client = FakeClient(tools=[])
        run(_use(FakeClientSession(client), lambda s: s.list_tools()))
        assert client.entered and client.exited

    def test_rpc_without_connect_fails(self):
        session = FakeClientSession(FakeClient(tools=[]))
        with pytest.raises(RuntimeError):
            run(session.list_tools())


class TestOperationBudget:
    """A server operation, including its not-found lookup, stays within timeout_seconds."""

    @staticmethod
    def _server(client, timeout_seconds):
        return MCPServer(
            "http://localhost:8000/mcp",
            timeout_seconds=timeout_seconds,
            session_factory=lambda endpoint, headers, timeout_s: FakeClientSession(client, timeout_s),
        )

    def test_get_prompt_lookup_counts_against_the_timeout(self):
        error = McpError(ErrorData(code=-32602, message="Unknown prompt: nope"))
        client = FakeClient(connect_delay=0.4, delay=0.4, prompt=error, prompts=[])
        server = self._server(client, 1)
        start = time.monotonic()
        with pytest.raises(MCPTimeoutError):
            server.get_prompt("nope", {})
        assert time.monotonic() - start < 1.15

    def test_call_tool_lookup_counts_against_the_timeout(self):
        failed = SimpleNamespace(isError=True, content=[SimpleNamespace(type="text", text="boom")])
        client = FakeClient(connect_delay=0.4, delay=0.4, call=failed, tools=[])
        server = self._server(client, 1)
        start = time.monotonic()
        with pytest.raises(MCPTimeoutError):
            server.call_tool("t", {})
        assert time.monotonic() - start < 1.15

    def test_operation_within_budget_succeeds(self):
        client = FakeClient(connect_delay=0.1, delay=0.1, tools=[])
        assert self._server(client, 1).list_tools() == []


class TestNormalization:

    def test_tools_from_objects_and_dicts(self):
        raw = [
            SimpleNamespace(name="search", description="Search", inputSchema={"type": "object"}),
            {"name": "ping", "input_schema": {"type": "object", "properties": {}}},
            {"description": "nameless"},
        ]
        tools = run(_use(FakeClientSession(FakeClient(tools=raw)), lambda s: s.list_tools()))
        assert [(t.name, t.description, t.input_schema) for t in tools] == [
            ("search", "Search", {"type": "object"}),
            ("ping", None, {"type": "object", "properties": {}}),
        ]

    def test_prompts_with_arguments(self):
        raw = [SimpleNamespace(
            name="greet",
            description=None,
            arguments=[SimpleNamespace(name="name", description="who", required=True), {"name": "title"}],
        )]
        prompts = run(_use(FakeClientSession(FakeClient(prompts=raw)), lambda s: s.list_prompts()))
        assert prompts[0].name == "greet"
        assert [(a.name, a.required) for a in prompts[0].arguments] == [("name", True), ("title", False)]

    def test_prompt_messages(self):
        raw = SimpleNamespace(messages=[
            SimpleNamespace(role="user", content=SimpleNamespace(type="text", text="hi")),
            {"role": "assistant", "content": {"type": "resource", "resource": {"text": "doc"}}},
        ])
        messages = run(_use(FakeClientSession(FakeClient(prompt=raw)), lambda s: s.get_prompt("greet", {})))
        assert [(m.role, m.text) for m in messages] == [("user", "hi"), ("assistant", "doc")]

    def test_call_tool_content(self):
        raw = SimpleNamespace(isError=False, content=[
            SimpleNamespace(type="text", text="first"),
            {"type": "image", "mimeType": "image/png", "data": "AAAA"},
        ])
        is_error, values = run(_use(FakeClientSession(FakeClient(call=raw)), lambda s: s.call_tool("t", {"a": 1})))
        assert is_error is False
        assert values == ["first", {"type": "image", "mimeType": "image/png", "data": "AAAA"}]

    def test_call_tool_error_flag_is_returned(self):
        raw = SimpleNamespace(isError=True, content=[SimpleNamespace(type="text", text="boom")])
        is_error, values = run(_use(FakeClientSession(FakeClient(call=raw)), lambda s: s.call_tool("t", {})))
        assert is_error is True
        assert values == ["boom"]


class TestHTTPSession:

    def test_streamable_http_transport(self):
        from fastmcp.client.transports import StreamableHttpTransport

        session = MCPHTTPClientSession("http://localhost:8000/mcp", {"X-Key": "abc"}, 5)
        client = session._make_client()
        assert isinstance(client.transport, StreamableHttpTransport)

    def test_sse_transport_for_sse_endpoints(self):
        from fastmcp.client.transports import SSETransport

        session = MCPHTTPClientSession("http://localhost:8000/sse", None, 5)
        client = session._make_client()
        assert isinstance(client.transport, SSETransport)
