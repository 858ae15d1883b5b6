"""Polling loop that drives an operation to its terminal state."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional

from rich.console import Console

from .exceptions import OperationError, OperationTimeoutError

if TYPE_CHECKING:
    from .operation import Operation

console = Console()


async def poll_operation(
    operation: "Operation",
    *,
    poll_interval_ms: int,
    timeout: Optional[float] = None,
    verbose: bool = False,
) -> dict:
    """Poll ``operation`` until it reaches ``DONE``.

    Parameters
    ----------
    operation : Operation
        The handle to drive. Its cached status is refreshed in place.
    poll_interval_ms : int
        Milliseconds to sleep between two status fetches.
    timeout : float, optional
        Maximum number of seconds to wait. ``None`` waits forever.
    verbose : bool, default False
        Print a dot per poll on the console.

    Returns
    -------
    dict
        The terminal operation metadata.

    Raises
    ------
    OperationError
        If the operation finished with a non-empty error list.
    OperationTimeoutError
        If ``timeout`` elapsed first. The provider-side operation is not
        cancelled.
    RequestError
        If a status fetch fails. Nothing is retried here.
    """
    if poll_interval_ms <= 0:
        raise ValueError("poll_interval_ms must be positive")
    if timeout is not None and timeout < 0:
        raise ValueError("timeout must not be negative")

    loop = asyncio.get_running_loop()
    interval = poll_interval_ms / 1000.0
    deadline = None if timeout is None else loop.time() + timeout

    announced = verbose and not operation.done
    if announced:
        console.print(f"Waiting for operation {operation.name}... ", end="")

    try:
        while not operation.done:
            delay = interval
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise OperationTimeoutError(operation, timeout)
                delay = min(interval, remaining)

            await asyncio.sleep(delay)
            await operation.refresh()

            if verbose and not operation.done:
                console.print(".", end="")
    finally:
        if announced:
            console.print()

    errors = operation.errors
    if errors:
        raise OperationError(operation, list(errors))
    return operation.metadata


__all__ = ["poll_operation"]
