"""Transport used by scopes, resources and operations to reach the Compute API.

The transport is deliberately small: it knows how to send one JSON request
to an absolute API path and how to translate HTTP failures into the
exception hierarchy of :mod:`pdum.compute.types.exceptions`. Everything
resource-shaped lives above it.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Optional

import google_auth_httplib2
import httplib2
from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest, build_http
from googleapiclient.model import JsonModel

from pdum.compute.types.constants import DEFAULT_API_ENDPOINT
from pdum.compute.types.exceptions import ConflictError, NotFoundError, RequestError

DEFAULT_NUM_RETRIES = 3

_METHODS = ("GET", "POST", "PATCH", "DELETE")


class Transport(ABC):
    """Abstract JSON transport.

    Implementations must raise :class:`NotFoundError` for 404,
    :class:`ConflictError` for 409 and :class:`RequestError` for any other
    failure, and return the decoded response body otherwise.
    """

    api_endpoint: str = DEFAULT_API_ENDPOINT

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
    ) -> dict:
        """Send ``method path`` and return the decoded JSON body."""


class HttpTransport(Transport):
    """Transport backed by google-api-python-client's ``HttpRequest``.

    Parameters
    ----------
    credentials : Credentials
        Materialized credentials used to authorize every request.
    api_endpoint : str, optional
        Base URL the absolute API paths are appended to.
    num_retries : int, default 3
        Retries for transient failures (429 and 5xx), handled by the client
        library with exponential backoff.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        api_endpoint: str = DEFAULT_API_ENDPOINT,
        num_retries: int = DEFAULT_NUM_RETRIES,
    ) -> None:
        self.credentials = credentials
        self.api_endpoint = api_endpoint.rstrip("/")
        self.num_retries = num_retries
        self._model = JsonModel(data_wrapper=False)

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
    ) -> dict:
        method = method.upper()
        if method not in _METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        return await asyncio.to_thread(self._execute, method, path, query, body)

    def _execute(
        self,
        method: str,
        path: str,
        query: Optional[dict[str, Any]],
        body: Optional[dict[str, Any]],
    ) -> dict:
        headers, _, query_string, payload = self._model.request(
            {}, {}, {k: v for k, v in (query or {}).items() if v is not None}, body
        )
        uri = f"{self.api_endpoint}{path}{query_string}"

        # httplib2 connections are not thread safe, so each call gets its own.
        http = google_auth_httplib2.AuthorizedHttp(self.credentials, http=build_http())
        request = HttpRequest(http, self._model.response, uri, method=method, body=payload, headers=headers)

        try:
            result = request.execute(num_retries=self.num_retries)
        except HttpError as e:
            raise translate_http_error(e) from e
        except (httplib2.HttpLib2Error, GoogleAuthError, OSError) as e:
            raise RequestError(f"{method} {path} failed: {e}") from e

        return result if isinstance(result, dict) else {}


def translate_http_error(error: HttpError) -> RequestError:
    """Map a googleapiclient ``HttpError`` onto the pdum.compute taxonomy."""
    status = error.resp.status if error.resp is not None else None
    reason = error.reason or "Unknown error"
    details = error.error_details or None

    if status == 404:
        return NotFoundError(reason, status_code=status, details=details)
    if status == 409:
        return ConflictError(reason, status_code=status, details=details)
    return RequestError(reason, status_code=status, details=details)


__all__ = [
    "DEFAULT_API_ENDPOINT",
    "HttpTransport",
    "Transport",
    "translate_http_error",
]
