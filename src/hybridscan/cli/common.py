"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from hybridscan.config import HybridScanConfig
from hybridscan.registry.models import RegistryError, Severity

console = Console(stderr=True)

SEVERITY_COLORS = {
    Severity.LOW: "blue",
    Severity.MEDIUM: "yellow",
    Severity.HIGH: "magenta",
    Severity.CRITICAL: "red",
}


def load_config(ctx: click.Context) -> HybridScanConfig:
    """Environment config with the --registry option applied on top."""
    try:
        config = HybridScanConfig.load()
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise SystemExit(2)

    registry_path = ctx.obj.get("registry_path") if ctx.obj else None
    if registry_path:
        config.registry_path = Path(registry_path)
    config.verbose = bool(ctx.obj.get("verbose")) if ctx.obj else False
    return config


def registry_failure(error: RegistryError) -> None:
    console.print(f"[red]Signature registry error:[/red] {error}")
    raise SystemExit(2)
