"""Configuration file and environment handling for pdum_compute."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Mapping, Optional

import yaml

from pdum.compute.types.constants import DEFAULT_API_ENDPOINT, DEFAULT_POLL_INTERVAL_MS

ENV_PREFIX = "PDUM_COMPUTE_"


@dataclass
class ComputeConfig:
    """Settings shared by the library helpers and the CLI.

    Attributes
    ----------
    project : str | None
        Project id; ``None`` falls back to the ADC project.
    zone : str | None
        Default zone for zonal commands.
    poll_interval_ms : int
        Interval between operation polls.
    timeout : float | None
        Seconds to wait for operations; ``None`` waits forever.
    api_endpoint : str
        Compute API base URL.
    """

    project: Optional[str] = None
    zone: Optional[str] = None
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    timeout: Optional[float] = 300.0
    api_endpoint: str = DEFAULT_API_ENDPOINT

    def __post_init__(self) -> None:
        self.poll_interval_ms = int(self.poll_interval_ms)
        if self.poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        if self.timeout is not None:
            self.timeout = float(self.timeout)

    @classmethod
    def from_dict(cls, data: Mapping) -> "ComputeConfig":
        """Build a config, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(data))


def get_config_dir() -> Path:
    """Directory holding pdum_compute configuration."""
    return Path.home() / ".config" / "gcloud" / "pdum_compute"


def get_config_file() -> Path:
    return get_config_dir() / "config.yaml"


def _from_env(environ: Mapping[str, str]) -> dict:
    values: dict = {}
    for f in fields(ComputeConfig):
        raw = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is not None and raw != "":
            values[f.name] = raw
    return values


def load_config(
    path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ComputeConfig:
    """Load configuration from YAML, then apply environment overrides.

    Parameters
    ----------
    path : Path, optional
        Config file to read. Defaults to :func:`get_config_file`; a missing
        default file is not an error.
    environ : Mapping, optional
        Environment to read ``PDUM_COMPUTE_*`` overrides from.

    Raises
    ------
    FileNotFoundError
        If an explicit ``path`` does not exist.
    ValueError
        If the file is not a mapping or holds unknown keys.
    """
    environ = os.environ if environ is None else environ

    data: dict = {}
    config_file = path or get_config_file()
    if config_file.exists():
        with open(config_file) as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {config_file} must contain a mapping")
        data.update(loaded)
    elif path is not None:
        raise FileNotFoundError(f"Configuration file not found: {path}")

    data.update(_from_env(environ))
    return ComputeConfig.from_dict(data)


def save_config(config: ComputeConfig, path: Optional[Path] = None) -> Path:
    """Write ``config`` as YAML and return the file path."""
    config_file = path or get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.dump(asdict(config), f, default_flow_style=False, sort_keys=False)
    return config_file


__all__ = ["ComputeConfig", "get_config_dir", "get_config_file", "load_config", "save_config"]
