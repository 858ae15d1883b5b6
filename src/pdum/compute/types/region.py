"""Region scope implementation."""

from __future__ import annotations

from .scope import ChildScope


class Region(ChildScope):
    """A Compute Engine region; owns regional operations."""

    collection = "regions"


__all__ = ["Region"]
