"""Parent scopes (project, region, zone) that resources and operations hang off."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from .operation import Operation

if TYPE_CHECKING:
    from pdum.compute._transport import Transport


class Scope(ABC):
    """Abstract base for anything that owns resources or operations.

    A scope knows its API path, the transport used to reach it and the
    poll interval its operations default to.
    """

    @property
    @abstractmethod
    def path(self) -> str:
        """Absolute API path of the scope (``/projects/{p}/zones/{z}``)."""

    @property
    @abstractmethod
    def transport(self) -> "Transport":
        """Transport every request of this scope goes through."""

    @property
    @abstractmethod
    def poll_interval_ms(self) -> int:
        """Default interval between two operation polls."""

    @property
    def operations_path(self) -> str:
        return f"{self.path}/operations"

    async def request(
        self,
        method: str,
        uri: str = "",
        *,
        query: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
    ) -> dict:
        """Send a request relative to this scope's path."""
        return await self.transport.request(method, f"{self.path}{uri}", query=query, body=body)

    def operation(self, name: str) -> Operation:
        """Return a handle for an existing operation of this scope (no I/O)."""
        return Operation(parent=self, name=name)

    async def paginate(
        self,
        uri: str,
        *,
        method: str = "GET",
        query: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
    ) -> list[dict]:
        """Collect ``items`` across every page of a list call."""
        query = dict(query or {})
        items: list[dict] = []
        while True:
            response = await self.request(method, uri, query=query, body=body)
            items.extend(response.get("items", []))
            token = response.get("nextPageToken")
            if not token:
                return items
            query["pageToken"] = token


class ChildScope(Scope):
    """A scope nested under a project (zones and regions)."""

    collection: str = ""

    def __init__(self, compute, name: str, *, poll_interval_ms: Optional[int] = None) -> None:
        self.compute = compute
        self.name = name
        self._poll_interval_ms = poll_interval_ms

    def __repr__(self) -> str:
        return f"{type(self).__name__}(project={self.compute.project!r}, name={self.name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChildScope):
            return NotImplemented
        return type(self) is type(other) and self.path == other.path

    def __hash__(self) -> int:
        return hash((type(self), self.path))

    @property
    def path(self) -> str:
        return f"{self.compute.path}/{self.collection}/{self.name}"

    @property
    def transport(self) -> "Transport":
        return self.compute.transport

    @property
    def poll_interval_ms(self) -> int:
        if self._poll_interval_ms is not None:
            return self._poll_interval_ms
        return self.compute.poll_interval_ms


__all__ = ["ChildScope", "Scope"]
