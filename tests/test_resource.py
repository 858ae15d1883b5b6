"""Tests for the uniform resource method set (create/exists/get/delete/set_metadata)."""

import asyncio

import pytest
from conftest import zone_path

from pdum.compute import Autoscaler, ConflictError, NotFoundError, Operation, RequestError
from pdum.compute.types.resource import NAME_PATTERN

CONFIG = {"target": "web-group", "coolDown": 30, "cpu": 80, "loadBalance": 40, "maxReplicas": 5, "minReplicas": 1}


def test_handle_construction_performs_no_io(zone, transport):
    autoscaler = zone.autoscaler("web")

    assert isinstance(autoscaler, Autoscaler)
    assert autoscaler.name == "web"
    assert autoscaler.parent is zone
    assert autoscaler.metadata == {}
    assert autoscaler.path == f"{zone_path()}/autoscalers/web"
    assert transport.calls == []


def test_create_returns_handle_and_operation(zone, transport):
    autoscaler, operation = asyncio.run(zone.autoscaler("web").create(CONFIG))

    assert autoscaler == zone.autoscaler("web")
    assert isinstance(operation, Operation)
    assert operation.parent is zone
    assert operation.target_link.endswith(f"{zone_path()}/autoscalers/web")
    assert [(c.method, c.path) for c in transport.calls] == [("POST", f"{zone_path()}/autoscalers")]


def test_create_then_get_reflects_config(zone):
    async def scenario():
        autoscaler, _ = await zone.autoscaler("web").create(CONFIG)
        return await autoscaler.get()

    fetched = asyncio.run(scenario())
    policy = fetched.metadata["autoscalingPolicy"]

    assert fetched.metadata["name"] == "web"
    assert policy["coolDownPeriodSec"] == 30
    assert policy["cpuUtilization"]["utilizationTarget"] == pytest.approx(0.8)
    assert policy["loadBalancingUtilization"]["utilizationTarget"] == pytest.approx(0.4)
    assert policy["maxNumReplicas"] == 5
    assert policy["minNumReplicas"] == 1


def test_create_conflict_propagates(zone, transport):
    transport.resources[f"{zone_path()}/autoscalers/web"] = {"name": "web"}

    with pytest.raises(ConflictError) as excinfo:
        asyncio.run(zone.autoscaler("web").create(CONFIG))

    assert excinfo.value.status_code == 409


def test_create_request_error_propagates(zone, transport):
    transport.fail("POST", f"{zone_path()}/autoscalers", RequestError("backend unavailable", status_code=503))

    with pytest.raises(RequestError) as excinfo:
        asyncio.run(zone.autoscaler("web").create(CONFIG))

    assert excinfo.value.status_code == 503


def test_exists_true_and_false(zone, transport):
    transport.resources[f"{zone_path()}/autoscalers/web"] = {"name": "web"}

    assert asyncio.run(zone.autoscaler("web").exists()) is True
    assert asyncio.run(zone.autoscaler("missing").exists()) is False


@pytest.mark.parametrize(
    "error",
    [
        RequestError("permission denied", status_code=403),
        ConflictError("conflict", status_code=409),
        RequestError("connection reset"),
    ],
)
def test_exists_propagates_other_errors(zone, transport, error):
    transport.fail("GET", f"{zone_path()}/autoscalers/web", error)

    with pytest.raises(RequestError) as excinfo:
        asyncio.run(zone.autoscaler("web").exists())

    assert excinfo.value is error


def test_get_missing_without_auto_create_raises(zone):
    with pytest.raises(NotFoundError):
        asyncio.run(zone.autoscaler("missing").get())


def test_get_auto_create_creates_exactly_once(zone, transport):
    autoscaler = asyncio.run(zone.autoscaler("web").get(auto_create=True, config=CONFIG))

    assert autoscaler.name == "web"
    assert len(transport.calls_to("POST", f"{zone_path()}/autoscalers")) == 1
    assert f"{zone_path()}/autoscalers/web" in transport.resources


def test_get_auto_create_existing_does_not_create(zone, transport):
    transport.resources[f"{zone_path()}/autoscalers/web"] = {"name": "web", "description": "existing"}

    autoscaler = asyncio.run(zone.autoscaler("web").get(auto_create=True, config=CONFIG))

    assert autoscaler.metadata["description"] == "existing"
    assert transport.calls_to("POST", f"{zone_path()}/autoscalers") == []


def test_get_auto_create_race_refetches(zone, transport):
    path = f"{zone_path()}/autoscalers/web"
    transport.fail("POST", f"{zone_path()}/autoscalers", ConflictError("already exists", status_code=409))

    async def scenario():
        autoscaler = zone.autoscaler("web")
        original_create = autoscaler.create

        async def create_racing(config=None):
            # Another client creates the resource between our GET and POST.
            transport.resources[path] = {"name": "web", "description": "winner"}
            return await original_create(config)

        autoscaler.create = create_racing
        return await autoscaler.get(auto_create=True, config=CONFIG)

    autoscaler = asyncio.run(scenario())

    assert autoscaler.metadata["description"] == "winner"
    assert len(transport.calls_to("GET", path)) == 2


def test_get_metadata_caches(zone, transport):
    transport.resources[f"{zone_path()}/autoscalers/web"] = {"name": "web", "status": "ACTIVE"}
    autoscaler = zone.autoscaler("web")

    metadata = asyncio.run(autoscaler.get_metadata())

    assert metadata == {"name": "web", "status": "ACTIVE"}
    assert autoscaler.metadata == metadata


def test_delete_returns_operation_without_waiting(zone, transport):
    transport.resources[f"{zone_path()}/autoscalers/web"] = {"name": "web"}

    operation = asyncio.run(zone.autoscaler("web").delete())

    assert operation.status.value == "PENDING"
    assert not operation.done
    assert f"{zone_path()}/autoscalers/web" not in transport.resources
    assert [c.method for c in transport.calls] == ["DELETE"]


def test_delete_missing_raises_not_found(zone):
    with pytest.raises(NotFoundError):
        asyncio.run(zone.autoscaler("missing").delete())


def test_set_metadata_merges_name_and_zone(zone, transport):
    transport.resources[f"{zone_path()}/autoscalers/web"] = {"name": "web"}

    operation = asyncio.run(zone.autoscaler("web").set_metadata({"description": "web tier"}))

    (call,) = transport.calls
    assert call.body == {"description": "web tier", "name": "web", "zone": zone.name}
    assert isinstance(operation, Operation)


def test_set_metadata_overrides_conflicting_identity(zone, transport):
    transport.resources[f"{zone_path()}/autoscalers/web"] = {"name": "web"}

    asyncio.run(zone.autoscaler("web").set_metadata({"name": "other", "zone": "elsewhere"}))

    assert transport.calls[0].body == {"name": "web", "zone": zone.name}


def test_set_metadata_without_patch(zone, transport):
    transport.resources[f"{zone_path()}/autoscalers/web"] = {"name": "web"}

    asyncio.run(zone.autoscaler("web").set_metadata())

    assert transport.calls[0].body == {"name": "web", "zone": zone.name}


def test_suggest_name_with_prefix():
    name = Autoscaler.suggest_name(prefix="web", random_digits=4)

    assert name.startswith("web-")
    assert len(name) == 8
    assert NAME_PATTERN.match(name)


def test_suggest_name_without_prefix_is_valid():
    name = Autoscaler.suggest_name()

    assert NAME_PATTERN.match(name)
    assert len(name) <= 63


def test_suggest_name_no_digits():
    assert Autoscaler.suggest_name(prefix="frontend", random_digits=0) == "frontend"


@pytest.mark.parametrize("prefix", ["", "1web", "Web"])
def test_suggest_name_rejects_bad_prefix(prefix):
    with pytest.raises(ValueError):
        Autoscaler.suggest_name(prefix=prefix)


def test_suggest_name_rejects_bad_digit_count():
    with pytest.raises(ValueError):
        Autoscaler.suggest_name(prefix="web", random_digits=11)
