"""Custom exceptions for pdum.compute types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .operation import Operation


class ComputeError(Exception):
    """Base class for every error raised by pdum.compute."""


class RequestError(ComputeError):
    """Raised when the transport fails to complete a request.

    Attributes
    ----------
    status_code : int | None
        HTTP status returned by the API, ``None`` for connection failures.
    reason : str
        Human-readable reason extracted from the error payload.
    details : Any
        Structured error details from the payload, if any.
    """

    def __init__(
        self,
        reason: str,
        *,
        status_code: Optional[int] = None,
        details: Any = None,
    ) -> None:
        super().__init__(reason if status_code is None else f"{status_code}: {reason}")
        self.reason = reason
        self.status_code = status_code
        self.details = details


class NotFoundError(RequestError):
    """Raised when the API answers 404 for the requested resource."""


class ConflictError(RequestError):
    """Raised when creating a resource whose name is already taken (409)."""


class UnsupportedOperationError(ComputeError):
    """Raised when a resource type does not support the requested method."""


class OperationError(ComputeError):
    """Raised when an operation reaches ``DONE`` carrying per-item errors."""

    def __init__(self, operation: "Operation", errors: list[dict]) -> None:
        messages = "; ".join(e.get("message", e.get("code", "unknown error")) for e in errors)
        super().__init__(f"Operation {operation.name} failed: {messages}")
        self.operation = operation
        self.errors = errors


class OperationTimeoutError(ComputeError, TimeoutError):
    """Raised when waiting on an operation exceeds the allowed time.

    The provider-side operation is left untouched and may still complete.
    """

    def __init__(self, operation: "Operation", timeout: float) -> None:
        super().__init__(f"Operation {operation.name} did not finish within {timeout} seconds")
        self.operation = operation
        self.timeout = timeout


__all__ = [
    "ComputeError",
    "ConflictError",
    "NotFoundError",
    "OperationError",
    "OperationTimeoutError",
    "RequestError",
    "UnsupportedOperationError",
]
