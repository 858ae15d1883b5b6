#!/usr/bin/env python3
"""Example script demonstrating the autoscaler lifecycle.

This script creates an autoscaler for an existing managed instance group,
updates it, and deletes it again, waiting on every operation.

Usage:
    python example_autoscaler.py PROJECT ZONE INSTANCE_GROUP_MANAGER

Note: This mutates GCP state and requires the Compute Engine API.
"""

import asyncio
import sys

from pdum.compute import Autoscaler, Compute, OperationError


async def main(project: str, zone_name: str, target: str):
    """Create, update and delete an autoscaler."""
    zone = Compute(project).zone(zone_name)
    name = Autoscaler.suggest_name(prefix="example")

    print(f"Creating autoscaler {name} for {target}...")
    autoscaler, operation = await zone.autoscaler(name).create(
        {"target": target, "cpu": 60, "coolDown": 90, "minReplicas": 1, "maxReplicas": 3}
    )
    try:
        await operation.wait(timeout=300, verbose=True)
    except OperationError as e:
        for error in e.errors:
            print(f"  ⚠️  {error.get('code')}: {error.get('message')}")
        return

    await autoscaler.get()
    print(f"  Policy: {autoscaler.metadata.get('autoscalingPolicy')}")

    operation = await autoscaler.set_metadata({"description": "Created by example_autoscaler.py"})
    await operation.wait(timeout=300, verbose=True)

    operation = await autoscaler.delete()
    await operation.wait(timeout=300, verbose=True)
    print(f"Deleted: {not await autoscaler.exists()}")


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(*sys.argv[1:]))
