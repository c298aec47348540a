from abc import abstractmethod
from typing import Dict, List, Optional

from agentmcp.chat.messages import ChatMessage, MessageRole
from agentmcp.resource.resource import Resource
from agentmcp.resource.resource_type import ResourceType


class Prompt(Resource):
    """A renderable prompt template."""

    @property
    def resource_type(self) -> ResourceType:
        return ResourceType.PROMPT

    @abstractmethod
    def format_string(self, arguments: Optional[Dict[str, str]] = None) -> str:
        ...

    @abstractmethod
    def format_messages(
        self, role: MessageRole = MessageRole.SYSTEM, arguments: Optional[Dict[str, str]] = None
    ) -> List[ChatMessage]:
        ...
