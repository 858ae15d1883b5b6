"""Asynchronous resource and operation handles for Compute Engine"""

from pdum.compute._transport import HttpTransport, Transport
from pdum.compute.config import ComputeConfig, load_config
from pdum.compute.types import (
    Autoscaler,
    Compute,
    ComputeError,
    ConflictError,
    NetworkEndpointGroup,
    NotFoundError,
    Operation,
    OperationError,
    OperationStatus,
    OperationTimeoutError,
    Region,
    RequestError,
    Resource,
    UnsupportedOperationError,
    Zone,
)

__version__ = "0.1.0-alpha"


__all__ = [
    "__version__",
    "load_config",
    "Autoscaler",
    "Compute",
    "ComputeConfig",
    "ComputeError",
    "ConflictError",
    "HttpTransport",
    "NetworkEndpointGroup",
    "NotFoundError",
    "Operation",
    "OperationError",
    "OperationStatus",
    "OperationTimeoutError",
    "Region",
    "RequestError",
    "Resource",
    "Transport",
    "UnsupportedOperationError",
    "Zone",
]
