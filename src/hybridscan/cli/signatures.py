"""CLI command: hybridscan signatures — list the signature registry."""

from __future__ import annotations

import click
from rich.table import Table

from hybridscan.cli.common import SEVERITY_COLORS, console, load_config, registry_failure
from hybridscan.registry.loader import default_registry, load_registry
from hybridscan.registry.models import RegistryError
from hybridscan.scanner.languages import normalize_language


@click.command()
@click.option(
    "--language",
    "-l",
    default=None,
    help="Only list signatures that apply to this language.",
)
@click.pass_context
def signatures(ctx: click.Context, language: str | None) -> None:
    """List vulnerability signatures in the active registry."""
    config = load_config(ctx)
    try:
        registry = (
            load_registry(config.registry_path)
            if config.registry_path
            else default_registry()
        )
    except RegistryError as e:
        registry_failure(e)

    if language:
        selected = registry.applicable_signatures(normalize_language(language))
    else:
        selected = registry.signatures

    table = Table(title=f"Signatures ({registry.name})", show_lines=False)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Severity", style="bold")
    table.add_column("Languages")

    for sig in selected:
        color = SEVERITY_COLORS.get(sig.severity, "white")
        table.add_row(
            sig.id,
            sig.name,
            f"[{color}]{sig.severity.value}[/{color}]",
            ", ".join(sorted(sig.languages)),
        )

    console.print(table)
    console.print(f"\n{len(selected)} of {len(registry)} signature(s)")
