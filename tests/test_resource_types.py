"""Every resource reports exactly one fixed kind."""

import pytest

from agentmcp.chat.messages import MessageRole, parse_role
from agentmcp.resource.resource import Resource
from agentmcp.resource.resource_type import ResourceType


class Counter(Resource):
    def __init__(self):
        self.closed = 0

    @property
    def resource_type(self):
        return ResourceType.TOOL

    def close(self):
        self.closed += 1


class TestResource:

    def test_context_manager_closes_on_error(self):
        counter = Counter()
        with pytest.raises(RuntimeError):
            with counter:
                raise RuntimeError("boom")
        assert counter.closed == 1

    def test_resource_type_is_abstract(self):
        with pytest.raises(TypeError):
            Resource()

    def test_kind_values(self):
        assert ResourceType("mcp_server") is ResourceType.MCP_SERVER
        assert ResourceType.PROMPT.value == "prompt"


class TestMessageRole:

    def test_parse_role(self):
        assert parse_role("ASSISTANT") is MessageRole.ASSISTANT
        assert parse_role(MessageRole.TOOL) is MessageRole.TOOL
        assert parse_role("narrator", default=MessageRole.USER) is MessageRole.USER
        with pytest.raises(ValueError):
            parse_role("narrator")
