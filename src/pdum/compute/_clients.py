"""Internal helpers to construct Compute API transports.

These helpers centralize credential resolution and transport options so
every scope talks to the API the same way. They are intentionally private;
the public API surface remains in `types`.
"""

from __future__ import annotations

from typing import Optional

import google.auth
from google.auth.credentials import Credentials

from pdum.compute._transport import DEFAULT_API_ENDPOINT, HttpTransport

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def default_credentials() -> tuple[Credentials, Optional[str]]:
    """Application Default Credentials and their project, if any."""
    return google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])


def compute_v1(
    credentials: Optional[Credentials] = None,
    *,
    api_endpoint: str = DEFAULT_API_ENDPOINT,
) -> HttpTransport:
    """Compute Engine v1 transport (explicit credentials > ADC)."""
    if credentials is None:
        credentials, _ = default_credentials()
    return HttpTransport(credentials, api_endpoint=api_endpoint)
