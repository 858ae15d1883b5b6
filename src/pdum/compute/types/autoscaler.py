"""Autoscaler resource implementation."""

from __future__ import annotations

import copy
import re
from typing import TYPE_CHECKING

from .operation import Operation
from .resource import ZonalResource

if TYPE_CHECKING:
    from .zone import Zone

_URL_RE = re.compile(r"^https?:", re.IGNORECASE)

# Friendly config key -> autoscalingPolicy field.
_POLICY_KEYS = {
    "coolDown": "coolDownPeriodSec",
    "maxReplicas": "maxNumReplicas",
    "minReplicas": "minNumReplicas",
}
_UTILIZATION_KEYS = {
    "cpu": "cpuUtilization",
    "loadBalance": "loadBalancingUtilization",
}


class Autoscaler(ZonalResource):
    """Autoscaler for a managed instance group in a zone.

    Example
    -------
    >>> zone = Compute("my-project").zone("us-central1-a")
    >>> autoscaler = zone.autoscaler("web-autoscaler")
    >>> autoscaler, op = await autoscaler.create({"target": "web-group", "cpu": 80, "maxReplicas": 5})
    >>> await op.wait()
    """

    base_url = "/autoscalers"

    async def _create(self, config: dict) -> tuple["Autoscaler", Operation]:
        return await self.zone.create_autoscaler(self.name, config)

    async def _patch(self, body: dict) -> dict:
        return await self.zone.request("PATCH", self.base_url, query={"autoscaler": self.name}, body=body)


def autoscaler_body(zone: "Zone", name: str, config: dict) -> dict:
    """Translate a friendly autoscaler config into the API representation.

    Recognized keys are ``target``, ``coolDown``, ``cpu`` and
    ``loadBalance`` (percentages), ``maxReplicas`` and ``minReplicas``.
    An explicit ``autoscalingPolicy`` is kept and the friendly keys are
    applied on top of it; every other key is passed through untouched.

    Raises
    ------
    ValueError
        If ``target`` is missing.
    """
    body = copy.deepcopy(config)
    target = body.pop("target", None)
    if not target:
        raise ValueError("Cannot create an autoscaler without a target.")

    if not _URL_RE.match(target):
        target = (
            f"{zone.transport.api_endpoint}/projects/{zone.compute.project}"
            f"/zones/{zone.name}/instanceGroupManagers/{target}"
        )

    policy = body.pop("autoscalingPolicy", None) or {}

    for key, policy_key in _POLICY_KEYS.items():
        value = body.pop(key, None)
        if value is not None:
            policy[policy_key] = value

    for key, policy_key in _UTILIZATION_KEYS.items():
        value = body.pop(key, None)
        if value is not None:
            policy[policy_key] = {**policy.get(policy_key, {}), "utilizationTarget": value / 100}

    body.update(name=name, target=target, autoscalingPolicy=policy)
    return body


__all__ = ["Autoscaler", "autoscaler_body"]
