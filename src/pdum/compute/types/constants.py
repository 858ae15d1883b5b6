"""Shared constants for pdum.compute types."""

from __future__ import annotations

DEFAULT_API_ENDPOINT = "https://compute.googleapis.com/compute/v1"
DEFAULT_POLL_INTERVAL_MS = 500

__all__ = ["DEFAULT_API_ENDPOINT", "DEFAULT_POLL_INTERVAL_MS"]
