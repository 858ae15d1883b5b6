"""Project-level entry point."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from google.auth.credentials import Credentials

from .constants import DEFAULT_API_ENDPOINT, DEFAULT_POLL_INTERVAL_MS
from .network_endpoint_group import NetworkEndpointGroup
from .region import Region
from .scope import Scope
from .zone import Zone

if TYPE_CHECKING:
    from pdum.compute._transport import Transport
    from pdum.compute.config import ComputeConfig


class Compute(Scope):
    """Compute Engine resources of a single project.

    Parameters
    ----------
    project : str, optional
        Project id. Defaults to the project of Application Default
        Credentials.
    transport : Transport, optional
        Transport to use. Built from ``credentials`` (or ADC) when omitted.
    credentials : Credentials, optional
        Explicit credentials for the default transport.
    poll_interval_ms : int, default 500
        Interval between operation polls, inherited by every zone and
        region of this project unless they override it.
    api_endpoint : str, optional
        Base URL for the default transport.
    """

    def __init__(
        self,
        project: Optional[str] = None,
        *,
        transport: Optional["Transport"] = None,
        credentials: Optional[Credentials] = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        api_endpoint: str = DEFAULT_API_ENDPOINT,
    ) -> None:
        from pdum.compute._clients import compute_v1, default_credentials

        if poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")

        if project is None or (transport is None and credentials is None):
            adc_credentials, adc_project = default_credentials()
            credentials = credentials or adc_credentials
            project = project or adc_project
        if not project:
            raise ValueError("No project given and Application Default Credentials do not name one")

        self.project = project
        self._transport = transport or compute_v1(credentials, api_endpoint=api_endpoint)
        self._poll_interval_ms = poll_interval_ms

    @classmethod
    def from_config(
        cls,
        config: "ComputeConfig",
        *,
        transport: Optional["Transport"] = None,
        credentials: Optional[Credentials] = None,
    ) -> "Compute":
        """Build a client from a loaded :class:`ComputeConfig`."""
        return cls(
            config.project,
            transport=transport,
            credentials=credentials,
            poll_interval_ms=config.poll_interval_ms,
            api_endpoint=config.api_endpoint,
        )

    def __repr__(self) -> str:
        return f"Compute(project={self.project!r})"

    @property
    def path(self) -> str:
        return f"/projects/{self.project}"

    @property
    def operations_path(self) -> str:
        return f"{self.path}/global/operations"

    @property
    def transport(self) -> "Transport":
        return self._transport

    @property
    def poll_interval_ms(self) -> int:
        return self._poll_interval_ms

    def zone(self, name: str, *, poll_interval_ms: Optional[int] = None) -> Zone:
        return Zone(self, name, poll_interval_ms=poll_interval_ms)

    def region(self, name: str, *, poll_interval_ms: Optional[int] = None) -> Region:
        return Region(self, name, poll_interval_ms=poll_interval_ms)

    async def zones(self, *, filter: Optional[str] = None) -> list[dict]:
        """List the zones available to the project."""
        return await self.paginate("/zones", query={"filter": filter})

    async def network_endpoint_groups(
        self, *, filter: Optional[str] = None
    ) -> dict[str, list[NetworkEndpointGroup]]:
        """Aggregated list of zonal network endpoint groups, keyed by scope.

        Scopes without groups (which the API reports with a warning) are
        omitted, as are non-zonal scopes.
        """
        query: dict = {"filter": filter}
        groups: dict[str, list[NetworkEndpointGroup]] = {}
        while True:
            response = await self.request("GET", "/aggregated/networkEndpointGroups", query=query)
            for scope_name, scoped in response.get("items", {}).items():
                items = scoped.get("networkEndpointGroups", [])
                if not items or not scope_name.startswith("zones/"):
                    continue
                zone = self.zone(scope_name.split("/", 1)[1])
                groups.setdefault(scope_name, []).extend(
                    NetworkEndpointGroup(zone=zone, name=item["name"], metadata=item) for item in items
                )
            token = response.get("nextPageToken")
            if not token:
                return groups
            query["pageToken"] = token


__all__ = ["Compute"]
