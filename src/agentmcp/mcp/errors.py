from typing import List, Optional


class MCPError(Exception):
    """Base class for errors raised by the MCP resource layer."""


class MCPConfigurationError(MCPError, ValueError):
    """A resource was built without a mandatory binding, or used after it was closed."""


class MCPInvalidArgumentError(MCPError, ValueError):
    def __init__(self, argument_name: str, missing: Optional[List[str]] = None):
        self.argument_name = argument_name
        self.missing = list(missing) if missing else [argument_name]
        if len(self.missing) == 1:
            message = f"Missing required argument: {argument_name}"
        else:
            message = f"Missing required arguments: {', '.join(self.missing)}"
        super().__init__(message)


class MCPServerUnreachableError(MCPError):
    """The endpoint could not be reached. Retrying later may succeed."""

    retryable = True

    def __init__(self, endpoint: Optional[str], message: str):
        self.endpoint = endpoint
        super().__init__(f"MCP server {endpoint!r} unreachable: {message}")


class MCPTimeoutError(MCPServerUnreachableError):
    def __init__(self, endpoint: Optional[str], timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(endpoint, f"timed out after {timeout_seconds}s")


class MCPRemoteError(MCPError):
    """The server answered, but reported the operation itself as failed."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"MCP tool '{name}' failed: {message}")
