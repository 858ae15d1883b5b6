"""Public exports for pdum.compute types."""

from __future__ import annotations

from .autoscaler import Autoscaler
from .compute import Compute
from .exceptions import (
    ComputeError,
    ConflictError,
    NotFoundError,
    OperationError,
    OperationTimeoutError,
    RequestError,
    UnsupportedOperationError,
)
from .network_endpoint_group import NetworkEndpointGroup
from .operation import Operation, OperationStatus
from .polling import poll_operation
from .region import Region
from .resource import Resource, ZonalResource
from .scope import Scope
from .zone import Zone

__all__ = [
    "Autoscaler",
    "Compute",
    "ComputeError",
    "ConflictError",
    "NetworkEndpointGroup",
    "NotFoundError",
    "Operation",
    "OperationError",
    "OperationStatus",
    "OperationTimeoutError",
    "Region",
    "RequestError",
    "Resource",
    "Scope",
    "UnsupportedOperationError",
    "ZonalResource",
    "Zone",
    "poll_operation",
]
