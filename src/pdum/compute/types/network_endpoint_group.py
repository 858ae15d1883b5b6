"""Network endpoint group resource implementation."""

from __future__ import annotations

import copy
import re
from typing import TYPE_CHECKING, Iterable, Optional

from .exceptions import UnsupportedOperationError
from .operation import Operation
from .resource import ZonalResource

if TYPE_CHECKING:
    from .zone import Zone

DEFAULT_ENDPOINT_TYPE = "GCE_VM_IP_PORT"
_URL_RE = re.compile(r"^(https?:|projects/|global/|regions/)", re.IGNORECASE)


class NetworkEndpointGroup(ZonalResource):
    """Zonal network endpoint group (NEG).

    NEGs are immutable once created: endpoints are attached and detached
    with dedicated calls and :meth:`set_metadata` is not supported.
    """

    base_url = "/networkEndpointGroups"

    async def _create(self, config: dict) -> tuple["NetworkEndpointGroup", Operation]:
        return await self.zone.create_network_endpoint_group(self.name, config)

    async def set_metadata(self, patch: Optional[dict] = None) -> Operation:
        raise UnsupportedOperationError("Network endpoint groups cannot be updated in place")

    async def attach_network_endpoints(self, endpoints: Iterable[dict]) -> Operation:
        """Attach endpoints (``{"instance": ..., "ipAddress": ..., "port": ...}``)."""
        return await self._endpoints_call("attachNetworkEndpoints", endpoints)

    async def detach_network_endpoints(self, endpoints: Iterable[dict]) -> Operation:
        """Detach previously attached endpoints."""
        return await self._endpoints_call("detachNetworkEndpoints", endpoints)

    async def _endpoints_call(self, verb: str, endpoints: Iterable[dict]) -> Operation:
        endpoints = list(endpoints)
        if not endpoints:
            raise ValueError("At least one network endpoint is required")
        response = await self.request("POST", f"/{verb}", body={"networkEndpoints": endpoints})
        return Operation.from_response(self.zone, response)

    async def list_network_endpoints(self, *, health_status: Optional[str] = None) -> list[dict]:
        """List the endpoints of this group.

        Parameters
        ----------
        health_status : str, optional
            ``"SHOW"`` to include health information, ``"SKIP"`` (API
            default) to omit it.
        """
        body = {"healthStatus": health_status} if health_status else {}
        return await self.zone.paginate(
            f"{self.base_url}/{self.name}/listNetworkEndpoints",
            method="POST",
            body=body,
        )

    async def test_iam_permissions(self, permissions: Iterable[str]) -> list[str]:
        """Return the subset of ``permissions`` the caller holds on this group."""
        response = await self.request("POST", "/testIamPermissions", body={"permissions": list(permissions)})
        return response.get("permissions", [])


def network_endpoint_group_body(zone: "Zone", name: str, config: dict) -> dict:
    """Build the insert payload for a zonal network endpoint group.

    Bare ``network`` and ``subnetwork`` names are expanded to full resource
    URLs in the zone's project and region.
    """
    body = copy.deepcopy(config)
    base = f"{zone.transport.api_endpoint}/projects/{zone.compute.project}"

    network = body.get("network")
    if network and not _URL_RE.match(network):
        body["network"] = f"{base}/global/networks/{network}"

    subnetwork = body.get("subnetwork")
    if subnetwork and not _URL_RE.match(subnetwork):
        body["subnetwork"] = f"{base}/regions/{zone.region_name}/subnetworks/{subnetwork}"

    body.setdefault("networkEndpointType", DEFAULT_ENDPOINT_TYPE)
    body["name"] = name
    return body


__all__ = ["DEFAULT_ENDPOINT_TYPE", "NetworkEndpointGroup", "network_endpoint_group_body"]
