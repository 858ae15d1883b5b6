"""Shared resource base classes."""

from __future__ import annotations

import random
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Optional

import coolname

from .exceptions import ConflictError, NotFoundError
from .operation import Operation

if TYPE_CHECKING:
    from .scope import Scope
    from .zone import Zone

NAME_PATTERN = re.compile(r"^[a-z]([-a-z0-9]*[a-z0-9])?$")
MAX_NAME_LENGTH = 63


class Resource(ABC):
    """Abstract base for named resources that live in a scope.

    A resource object is only a reference: constructing one performs no I/O
    and :attr:`metadata` is a cache of the last ``GET``. Mutating calls
    return an :class:`Operation` immediately; call :meth:`Operation.wait`
    for synchronous semantics.

    Concrete types provide :attr:`base_url`, :attr:`parent` and
    :meth:`_create`, which delegates to the parent scope's creation method.
    """

    base_url: ClassVar[str]

    name: str
    metadata: dict

    @property
    @abstractmethod
    def parent(self) -> "Scope":
        """Scope owning this resource."""

    @abstractmethod
    async def _create(self, config: dict) -> tuple["Resource", Operation]:
        """Create the resource through the parent scope."""

    @property
    def path(self) -> str:
        return f"{self.parent.path}{self.base_url}/{self.name}"

    async def request(
        self,
        method: str,
        uri: str = "",
        *,
        query: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
    ) -> dict:
        """Send a request relative to this resource's path."""
        return await self.parent.transport.request(method, f"{self.path}{uri}", query=query, body=body)

    def _identity(self) -> dict:
        """Fields merged into every update payload."""
        return {"name": self.name}

    async def _patch(self, body: dict) -> dict:
        return await self.request("PATCH", body=body)

    async def create(self, config: Optional[dict] = None) -> tuple["Resource", Operation]:
        """Create the resource.

        Raises
        ------
        ConflictError
            If a resource with this name already exists.
        RequestError
            If the request fails for any other reason.
        """
        return await self._create(dict(config or {}))

    async def exists(self) -> bool:
        """Return whether the resource exists; only not-found maps to ``False``."""
        try:
            await self.get_metadata()
        except NotFoundError:
            return False
        return True

    async def get(self, *, auto_create: bool = False, config: Optional[dict] = None) -> "Resource":
        """Fetch the resource, optionally creating it when it is missing.

        With ``auto_create`` a missing resource is created once with
        ``config``. If another client wins the creation race the resource is
        simply fetched again.
        """
        try:
            await self.get_metadata()
        except NotFoundError:
            if not auto_create:
                raise
            try:
                resource, _ = await self.create(config)
            except ConflictError:
                return await self.get()
            return resource
        return self

    async def get_metadata(self) -> dict:
        """Fetch the raw resource representation and cache it."""
        self.metadata = await self.request("GET")
        return self.metadata

    async def delete(self) -> Operation:
        """Delete the resource; returns without waiting for completion."""
        response = await self.request("DELETE")
        return Operation.from_response(self.parent, response)

    async def set_metadata(self, patch: Optional[dict] = None) -> Operation:
        """Partially update the resource.

        The resource's own identifiers are merged into ``patch`` so callers
        never have to repeat them.
        """
        body = {**(patch or {}), **self._identity()}
        response = await self._patch(body)
        return Operation.from_response(self.parent, response)

    @classmethod
    def suggest_name(cls, *, prefix: Optional[str] = None, random_digits: int = 4) -> str:
        """Suggest a valid resource name using an optional prefix."""
        if not 0 <= random_digits <= 10:
            raise ValueError("random_digits must be between 0 and 10")

        if prefix is None:
            prefix = coolname.generate_slug(2)
        elif not prefix or not prefix[0].islower() or not prefix[0].isalpha():
            raise ValueError("prefix must start with a lowercase letter")

        if random_digits > 0:
            digits = "".join(str(random.randint(0, 9)) for _ in range(random_digits))
            name = f"{prefix}-{digits}"
        else:
            name = prefix

        if len(name) > MAX_NAME_LENGTH or not NAME_PATTERN.match(name):
            raise ValueError(
                f"Generated name '{name}' is not a valid resource name "
                f"(lowercase letters, digits and hyphens, at most {MAX_NAME_LENGTH} characters)"
            )

        return name


@dataclass
class ZonalResource(Resource):
    """A resource scoped to a single zone."""

    zone: "Zone"
    name: str
    metadata: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def parent(self) -> "Zone":
        return self.zone

    def _identity(self) -> dict:
        return {"name": self.name, "zone": self.zone.name}


__all__ = ["NAME_PATTERN", "Resource", "ZonalResource"]
