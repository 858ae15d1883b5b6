"""Zone scope implementation."""

from __future__ import annotations

from typing import Optional

from .autoscaler import Autoscaler, autoscaler_body
from .network_endpoint_group import NetworkEndpointGroup, network_endpoint_group_body
from .operation import Operation
from .scope import ChildScope


class Zone(ChildScope):
    """A Compute Engine zone within a project.

    Handles for resources in the zone are created with :meth:`autoscaler`
    and :meth:`network_endpoint_group`; neither performs any I/O.
    """

    collection = "zones"

    @property
    def region_name(self) -> str:
        """Region the zone belongs to (``us-central1`` for ``us-central1-a``)."""
        return self.name.rsplit("-", 1)[0]

    def autoscaler(self, name: str) -> Autoscaler:
        return Autoscaler(zone=self, name=name)

    def network_endpoint_group(self, name: str) -> NetworkEndpointGroup:
        return NetworkEndpointGroup(zone=self, name=name)

    async def create_autoscaler(self, name: str, config: dict) -> tuple[Autoscaler, Operation]:
        """Create an autoscaler from a friendly config (see :func:`autoscaler_body`).

        Returns
        -------
        tuple[Autoscaler, Operation]
            The new handle and the insert operation. The operation is not
            awaited.
        """
        body = autoscaler_body(self, name, config)
        response = await self.request("POST", Autoscaler.base_url, body=body)
        return self.autoscaler(name), Operation.from_response(self, response)

    async def create_network_endpoint_group(
        self, name: str, config: dict
    ) -> tuple[NetworkEndpointGroup, Operation]:
        """Create a zonal network endpoint group."""
        body = network_endpoint_group_body(self, name, config)
        response = await self.request("POST", NetworkEndpointGroup.base_url, body=body)
        return self.network_endpoint_group(name), Operation.from_response(self, response)

    async def autoscalers(self, *, filter: Optional[str] = None) -> list[Autoscaler]:
        """List autoscalers in this zone."""
        items = await self.paginate(Autoscaler.base_url, query={"filter": filter})
        return [Autoscaler(zone=self, name=item["name"], metadata=item) for item in items]

    async def network_endpoint_groups(self, *, filter: Optional[str] = None) -> list[NetworkEndpointGroup]:
        """List network endpoint groups in this zone."""
        items = await self.paginate(NetworkEndpointGroup.base_url, query={"filter": filter})
        return [NetworkEndpointGroup(zone=self, name=item["name"], metadata=item) for item in items]


__all__ = ["Zone"]
