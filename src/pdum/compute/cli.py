"""CLI entry point for pdum_compute."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from google.auth.exceptions import DefaultCredentialsError
from rich.console import Console

from pdum.compute.config import ComputeConfig, load_config, save_config
from pdum.compute.types import Compute, ComputeError, OperationError, Scope
from pdum.compute.utils import choose_zone, print_metadata, resources_table, wait_with_spinner

app = typer.Typer(
    help="Asynchronous resource and operation handles for Compute Engine",
    no_args_is_help=True,
)
autoscaler_app = typer.Typer(help="Manage zonal autoscalers", no_args_is_help=True)
neg_app = typer.Typer(help="Inspect network endpoint groups", no_args_is_help=True)
operation_app = typer.Typer(help="Track long-running operations", no_args_is_help=True)
app.add_typer(autoscaler_app, name="autoscaler")
app.add_typer(neg_app, name="neg")
app.add_typer(operation_app, name="operation")

console = Console()

ConfigOption = typer.Option(None, "--config", help="Path to a config.yaml (default: ~/.config/gcloud/pdum_compute)")
ProjectOption = typer.Option(None, "--project", "-p", help="Project id (default: config or ADC project)")
ZoneOption = typer.Option(None, "--zone", "-z", help="Zone (interactive if not configured)")
WaitOption = typer.Option(True, "--wait/--no-wait", help="Wait for the operation to finish")


def _run(coro):
    """Run ``coro`` and turn library errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except OperationError as e:
        console.print(f"[bold red]Operation failed:[/bold red] {e.operation.name}")
        for error in e.errors:
            console.print(f"  - [red]{error.get('code', 'ERROR')}[/red]: {error.get('message', '')}")
        sys.exit(1)
    except (ComputeError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(130)


def _load(config_path: Optional[Path], project: Optional[str]) -> tuple[ComputeConfig, Compute]:
    try:
        config = load_config(config_path)
        if project:
            config.project = project
        return config, Compute.from_config(config)
    except (ValueError, FileNotFoundError, DefaultCredentialsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)


async def _zone(compute: Compute, config: ComputeConfig, zone: Optional[str]):
    return compute.zone(zone or config.zone or await choose_zone(compute))


async def _finish(operation, config: ComputeConfig, wait: bool, action: str) -> None:
    if not wait:
        console.print(f"[cyan]{action} started:[/cyan] operation {operation.name}")
        return
    await wait_with_spinner(operation, timeout=config.timeout, description=f"{action}...")
    console.print(f"[green]{action} complete.[/green]")


@app.command("version")
def version():
    """Show the version of pdum_compute."""
    from pdum.compute import __version__

    console.print(f"pdum_compute version: [bold green]{__version__}[/bold green]")


@app.command("configure")
def configure(
    project: Optional[str] = ProjectOption,
    zone: Optional[str] = ZoneOption,
    poll_interval_ms: Optional[int] = typer.Option(None, "--poll-interval-ms", help="Operation poll interval"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds to wait for operations"),
    config_path: Optional[Path] = ConfigOption,
):
    """Write default settings to the configuration file."""

    async def _configure() -> Path:
        config, compute = _load(config_path if config_path and config_path.exists() else None, project)
        config.project = compute.project
        config.zone = zone or config.zone or await choose_zone(compute)
        if poll_interval_ms is not None:
            config.poll_interval_ms = poll_interval_ms
        if timeout is not None:
            config.timeout = timeout
        return save_config(ComputeConfig.from_dict(vars(config)), config_path)

    path = _run(_configure())
    console.print(f"[green]Saved configuration to:[/green] {path}")


@autoscaler_app.command("create")
def autoscaler_create(
    name: str = typer.Argument(..., help="Autoscaler name"),
    target: str = typer.Option(..., "--target", "-t", help="Managed instance group name or URL"),
    cpu: Optional[float] = typer.Option(None, "--cpu", help="Target CPU utilization (percent)"),
    load_balance: Optional[float] = typer.Option(None, "--load-balance", help="Target serving capacity (percent)"),
    cool_down: Optional[int] = typer.Option(None, "--cool-down", help="Cool down period in seconds"),
    min_replicas: Optional[int] = typer.Option(None, "--min-replicas"),
    max_replicas: Optional[int] = typer.Option(None, "--max-replicas"),
    wait: bool = WaitOption,
    project: Optional[str] = ProjectOption,
    zone: Optional[str] = ZoneOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Create an autoscaler for a managed instance group."""
    config, compute = _load(config_path, project)
    settings = {
        "target": target,
        "cpu": cpu,
        "loadBalance": load_balance,
        "coolDown": cool_down,
        "minReplicas": min_replicas,
        "maxReplicas": max_replicas,
    }

    async def _create() -> None:
        autoscaler = (await _zone(compute, config, zone)).autoscaler(name)
        _, operation = await autoscaler.create({k: v for k, v in settings.items() if v is not None})
        await _finish(operation, config, wait, f"Creating autoscaler {name}")

    _run(_create())


@autoscaler_app.command("describe")
def autoscaler_describe(
    name: str = typer.Argument(..., help="Autoscaler name"),
    project: Optional[str] = ProjectOption,
    zone: Optional[str] = ZoneOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Show an autoscaler's metadata."""
    config, compute = _load(config_path, project)

    async def _describe() -> dict:
        return await (await _zone(compute, config, zone)).autoscaler(name).get_metadata()

    print_metadata(_run(_describe()))


@autoscaler_app.command("exists")
def autoscaler_exists(
    name: str = typer.Argument(..., help="Autoscaler name"),
    project: Optional[str] = ProjectOption,
    zone: Optional[str] = ZoneOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Exit 0 if the autoscaler exists, 1 otherwise."""
    config, compute = _load(config_path, project)

    async def _exists() -> bool:
        return await (await _zone(compute, config, zone)).autoscaler(name).exists()

    if _run(_exists()):
        console.print(f"[green]Autoscaler {name} exists.[/green]")
        return
    console.print(f"[yellow]Autoscaler {name} does not exist.[/yellow]")
    raise typer.Exit(1)


@autoscaler_app.command("delete")
def autoscaler_delete(
    name: str = typer.Argument(..., help="Autoscaler name"),
    wait: bool = WaitOption,
    project: Optional[str] = ProjectOption,
    zone: Optional[str] = ZoneOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Delete an autoscaler."""
    config, compute = _load(config_path, project)

    async def _delete() -> None:
        operation = await (await _zone(compute, config, zone)).autoscaler(name).delete()
        await _finish(operation, config, wait, f"Deleting autoscaler {name}")

    _run(_delete())


@autoscaler_app.command("set-description")
def autoscaler_set_description(
    name: str = typer.Argument(..., help="Autoscaler name"),
    description: str = typer.Argument(..., help="New description"),
    wait: bool = WaitOption,
    project: Optional[str] = ProjectOption,
    zone: Optional[str] = ZoneOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Update an autoscaler's description."""
    config, compute = _load(config_path, project)

    async def _update() -> None:
        autoscaler = (await _zone(compute, config, zone)).autoscaler(name)
        operation = await autoscaler.set_metadata({"description": description})
        await _finish(operation, config, wait, f"Updating autoscaler {name}")

    _run(_update())


@neg_app.command("list")
def neg_list(
    filter: Optional[str] = typer.Option(None, "--filter", help="API filter expression"),
    project: Optional[str] = ProjectOption,
    config_path: Optional[Path] = ConfigOption,
):
    """List network endpoint groups across all zones."""
    _, compute = _load(config_path, project)
    groups = _run(compute.network_endpoint_groups(filter=filter))

    rows = [
        (group.zone.name, group.name, group.metadata.get("networkEndpointType", ""), str(group.metadata.get("size", 0)))
        for scoped in groups.values()
        for group in scoped
    ]
    console.print(resources_table("Network endpoint groups", rows, ("Zone", "Name", "Type", "Size")))


@neg_app.command("endpoints")
def neg_endpoints(
    name: str = typer.Argument(..., help="Network endpoint group name"),
    health: bool = typer.Option(False, "--health", help="Include health status"),
    project: Optional[str] = ProjectOption,
    zone: Optional[str] = ZoneOption,
    config_path: Optional[Path] = ConfigOption,
):
    """List the endpoints attached to a network endpoint group."""
    config, compute = _load(config_path, project)

    async def _endpoints() -> list[dict]:
        group = (await _zone(compute, config, zone)).network_endpoint_group(name)
        return await group.list_network_endpoints(health_status="SHOW" if health else None)

    rows = []
    for item in _run(_endpoints()):
        endpoint = item.get("networkEndpoint", {})
        healths = ", ".join(h.get("healthState", "") for h in item.get("healths", []))
        rows.append(
            (
                endpoint.get("instance", "").rsplit("/", 1)[-1],
                endpoint.get("ipAddress", ""),
                str(endpoint.get("port", "")),
                healths,
            )
        )
    console.print(resources_table(f"Endpoints of {name}", rows, ("Instance", "IP", "Port", "Health")))


@operation_app.command("wait")
def operation_wait(
    name: str = typer.Argument(..., help="Operation name"),
    zone: Optional[str] = typer.Option(None, "--zone", "-z", help="Zonal operation"),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="Regional operation"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds to wait (default: config)"),
    poll_interval_ms: Optional[int] = typer.Option(None, "--poll-interval-ms"),
    project: Optional[str] = ProjectOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Wait for a global, regional or zonal operation to finish."""
    if zone and region:
        console.print("[bold red]Error:[/bold red] --zone and --region are mutually exclusive")
        raise typer.Exit(2)

    config, compute = _load(config_path, project)
    scope: Scope = compute
    if zone:
        scope = compute.zone(zone)
    elif region:
        scope = compute.region(region)

    operation = scope.operation(name)
    metadata = _run(
        operation.wait(
            timeout=config.timeout if timeout is None else timeout,
            poll_interval_ms=poll_interval_ms,
            verbose=True,
        )
    )
    console.print(f"[green]Operation {name} is DONE.[/green] Target: {metadata.get('targetLink', '-')}")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
