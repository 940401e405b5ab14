"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from hybridscan import __version__


@click.group()
@click.version_option(version=__version__, prog_name="hybridscan")
@click.option(
    "--registry",
    "-r",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML signature registry.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, registry: str | None, verbose: bool) -> None:
    """HybridScan — pattern and AI-assisted security scanning for source code."""
    ctx.ensure_object(dict)
    ctx.obj["registry_path"] = registry
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _register_commands() -> None:
    from hybridscan.cli.scan import scan  # noqa: F811
    from hybridscan.cli.signatures import signatures  # noqa: F811

    main.add_command(scan)
    main.add_command(signatures)


_register_commands()
