"""Operation handle for long-running Compute mutations."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .polling import poll_operation

if TYPE_CHECKING:
    from .scope import Scope


class OperationStatus(str, Enum):
    """Lifecycle states reported by the API for an operation."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    DONE = "DONE"


@dataclass
class Operation:
    """Client-side reference to an in-flight provider-side mutation.

    The handle only caches what the API last reported; transitions happen
    exclusively through :meth:`refresh`. Once the status is ``DONE`` the
    cached metadata is final and no further requests are made. Reaching
    ``DONE`` does not mean success: inspect :attr:`errors` or use
    :meth:`wait`, which raises :class:`OperationError` for failed
    operations.

    Attributes
    ----------
    parent : Scope
        Scope the operation lives in (global, regional or zonal).
    name : str
        Provider-assigned operation name.
    metadata : dict
        Last operation resource returned by the API.
    """

    parent: "Scope"
    name: str
    metadata: dict = field(default_factory=dict, repr=False)
    _lock: Optional[asyncio.Lock] = field(default=None, init=False, repr=False, compare=False)
    _lock_loop: Optional[asyncio.AbstractEventLoop] = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def from_response(cls, parent: "Scope", response: dict) -> "Operation":
        """Build an operation from the body a mutating call returned."""
        name = response.get("name")
        if not name:
            raise ValueError("Response does not describe an operation (missing 'name')")
        return cls(parent=parent, name=name, metadata=dict(response))

    @property
    def path(self) -> str:
        return f"{self.parent.operations_path}/{self.name}"

    @property
    def status(self) -> OperationStatus:
        return OperationStatus(self.metadata.get("status", OperationStatus.PENDING.value))

    @property
    def done(self) -> bool:
        return self.status is OperationStatus.DONE

    @property
    def errors(self) -> list[dict]:
        """Per-item failures; authoritative only once the operation is done."""
        return list((self.metadata.get("error") or {}).get("errors", []))

    @property
    def id(self) -> Optional[str]:
        """Numeric id assigned by the API, once known."""
        return self.metadata.get("id")

    @property
    def target_link(self) -> Optional[str]:
        return self.metadata.get("targetLink")

    @property
    def progress(self) -> int:
        return int(self.metadata.get("progress", 0))

    def _loop_lock(self) -> asyncio.Lock:
        # asyncio locks are bound to one event loop; a handle may outlive it.
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def refresh(self) -> dict:
        """Fetch the current status from the API and cache it.

        Concurrent callers are serialized so the cached status has a single
        writer at a time. A terminal operation returns its cache untouched.
        """
        async with self._loop_lock():
            if not self.done:
                self.metadata = await self.parent.transport.request("GET", self.path)
        return self.metadata

    async def wait(
        self,
        *,
        timeout: Optional[float] = None,
        poll_interval_ms: Optional[int] = None,
        verbose: bool = False,
    ) -> dict:
        """Wait for the operation to finish.

        ``poll_interval_ms`` defaults to the parent scope's interval.
        Abandoning the wait (timeout or task cancellation) never cancels the
        provider-side work.
        """
        interval = self.parent.poll_interval_ms if poll_interval_ms is None else poll_interval_ms
        return await poll_operation(self, poll_interval_ms=interval, timeout=timeout, verbose=verbose)


__all__ = ["Operation", "OperationStatus"]
