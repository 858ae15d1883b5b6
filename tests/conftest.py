"""Shared fixtures: an in-memory stand-in for the Compute API."""

import asyncio
import copy
import itertools
import re
from dataclasses import dataclass
from typing import Optional

import pytest

from pdum.compute import Compute, NotFoundError, Transport
from pdum.compute.types.exceptions import ConflictError

PROJECT = "test-project"
ZONE = "us-central1-a"

_COLLECTIONS = ("/autoscalers", "/networkEndpointGroups")
_SCOPE_RE = re.compile(r"^(/projects/[^/]+(?:/zones/[^/]+|/regions/[^/]+)?)")


@dataclass
class Call:
    method: str
    path: str
    query: dict
    body: Optional[dict]


class FakeTransport(Transport):
    """Minimal Compute API emulator.

    Resources are stored by path. Every mutation creates an operation whose
    status advances one scripted step per ``GET``.
    """

    api_endpoint = "https://compute.example.test/compute/v1"

    def __init__(self, *, operation_steps=None, initial_status="PENDING"):
        self.calls: list[Call] = []
        self.resources: dict[str, dict] = {}
        self.operations: dict[str, dict] = {}
        self.steps: dict[str, list[dict]] = {}
        self.errors: dict[tuple[str, str], Exception] = {}
        self.operation_steps = [{"status": "RUNNING"}, {"status": "DONE"}] if operation_steps is None else operation_steps
        self.initial_status = initial_status
        self._ids = itertools.count(1)

    def fail(self, method: str, path: str, error: Exception) -> None:
        self.errors[(method, path)] = error

    def calls_to(self, method: str, path: str) -> list[Call]:
        return [c for c in self.calls if c.method == method and c.path == path]

    def add_operation(self, scope_path: str, name: str, *, status: str = "RUNNING", steps=None) -> str:
        path = f"{scope_path}/operations/{name}"
        self.operations[path] = {"kind": "compute#operation", "name": name, "status": status}
        self.steps[path] = list(steps or [])
        return path

    async def request(self, method, path, *, query=None, body=None):
        query = {k: v for k, v in (query or {}).items() if v is not None}
        self.calls.append(Call(method, path, query, copy.deepcopy(body)))
        await asyncio.sleep(0)

        error = self.errors.get((method, path))
        if error is not None:
            raise error

        if "/operations/" in path:
            return self._poll(path)
        if method == "GET":
            return self._get(path)
        if method == "POST" and path.endswith(_COLLECTIONS):
            return self._insert(path, body or {})
        if method == "DELETE":
            self._require(path)
            del self.resources[path]
            return self._operation(path, "delete")
        if method == "PATCH":
            target = f"{path}/{query['autoscaler']}" if "autoscaler" in query else path
            self._require(target)
            self.resources[target].update(copy.deepcopy(body or {}))
            return self._operation(target, "patch")
        if method == "POST":
            resource, verb = path.rsplit("/", 1)
            self._require(resource)
            return self._operation(resource, verb)
        raise AssertionError(f"Unexpected request {method} {path}")

    def _require(self, path: str) -> None:
        if path not in self.resources:
            raise NotFoundError(f"The resource '{path}' was not found", status_code=404)

    def _get(self, path: str) -> dict:
        if path.endswith(_COLLECTIONS):
            prefix = f"{path}/"
            items = [copy.deepcopy(v) for k, v in self.resources.items() if k.startswith(prefix)]
            return {"items": items}
        self._require(path)
        return copy.deepcopy(self.resources[path])

    def _insert(self, collection: str, body: dict) -> dict:
        path = f"{collection}/{body['name']}"
        if path in self.resources:
            raise ConflictError(f"The resource '{path}' already exists", status_code=409)
        self.resources[path] = copy.deepcopy(body)
        return self._operation(path, "insert")

    def _operation(self, resource_path: str, operation_type: str) -> dict:
        scope = _SCOPE_RE.match(resource_path).group(1)
        if "/zones/" not in scope and "/regions/" not in scope:
            scope = f"{scope}/global"
        name = f"operation-{next(self._ids)}"
        path = self.add_operation(scope, name, status=self.initial_status, steps=copy.deepcopy(self.operation_steps))
        self.operations[path].update(
            operationType=operation_type,
            targetLink=f"{self.api_endpoint}{resource_path}",
        )
        return copy.deepcopy(self.operations[path])

    def _poll(self, path: str) -> dict:
        if path not in self.operations:
            raise NotFoundError(f"The resource '{path}' was not found", status_code=404)
        steps = self.steps[path]
        if steps:
            self.operations[path].update(steps.pop(0))
        return copy.deepcopy(self.operations[path])


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def compute(transport):
    return Compute(PROJECT, transport=transport, poll_interval_ms=10)


@pytest.fixture
def zone(compute):
    return compute.zone(ZONE)


def zone_path(name: str = ZONE) -> str:
    return f"/projects/{PROJECT}/zones/{name}"
