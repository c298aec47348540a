from abc import ABC, abstractmethod

from agentmcp.resource.resource_type import ResourceType


class Resource(ABC):
    """
    Root of every runtime resource.

      - `resource_type` is fixed by the concrete class and never changes.
      - `close()` releases whatever the resource holds. It must be safe to call
        more than once. Callers must not close a resource while one of its own
        calls is still in flight on another thread.

    Resources are context managers, so `with server: ...` releases on every exit path.
    """

    @property
    @abstractmethod
    def resource_type(self) -> ResourceType:
        ...

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
