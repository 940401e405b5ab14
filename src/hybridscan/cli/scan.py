"""CLI command: hybridscan scan <path> — scan a file or directory."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click
from rich.table import Table

from hybridscan.cli.common import SEVERITY_COLORS, console, load_config, registry_failure
from hybridscan.engine import ScanEngine
from hybridscan.registry.models import RegistryError, Severity
from hybridscan.scanner.models import Finding, ProjectScanResult, ScanResult


@click.command()
@click.argument("path", type=click.Path(exists=True))
@click.option(
    "--language",
    "-l",
    default=None,
    help="Language tag for a single file (default: from the file extension).",
)
@click.option(
    "--semantic/--no-semantic",
    default=True,
    help="Ask the AI reviewer as well (requires an API key).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    help="File or directory names to exclude from a directory scan.",
)
@click.pass_context
def scan(
    ctx: click.Context,
    path: str,
    language: str | None,
    semantic: bool,
    as_json: bool,
    exclude: tuple[str, ...],
) -> None:
    """Scan source code for security weaknesses."""
    config = load_config(ctx)

    use_reviewer = semantic and bool(config.reviewer_api_key)
    try:
        engine = ScanEngine.from_config(config, semantic=use_reviewer)
    except RegistryError as e:
        registry_failure(e)

    if not as_json:
        mode = "pattern + AI review" if use_reviewer else "pattern only"
        console.print(
            f"[bold]HybridScan[/bold] scanning [cyan]{path}[/cyan] "
            f"with registry [cyan]{engine.registry.name}[/cyan] ({mode})\n"
        )
        if semantic and not use_reviewer:
            console.print("[dim]No reviewer API key configured; AI review skipped.[/dim]\n")

    target = Path(path)
    if target.is_dir():
        if use_reviewer:
            result = asyncio.run(engine.scan_directory_async(target, list(exclude)))
        else:
            result = engine.scan_directory(target, list(exclude))
    elif use_reviewer:
        result = asyncio.run(engine.scan_file_async(target, language))
    else:
        result = engine.scan_file(target, language)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result, target)

    critical_count = sum(1 for f in result.findings if f.severity == Severity.CRITICAL)
    if critical_count > 0:
        if not as_json:
            console.print(f"\n[red]{critical_count} critical finding(s)[/red]")
        sys.exit(1)


def _print_result(result: ScanResult | ProjectScanResult, target: Path) -> None:
    if not result.findings:
        console.print("[green]No findings.[/green]")
    else:
        # Sort by severity (critical first), then file, then line
        findings = sorted(
            result.findings,
            key=lambda f: (-f.severity.rank, f.file_path, f.line),
        )
        console.print(_findings_table(findings, target))

    _print_summary(result)


def _findings_table(findings: list[Finding], target: Path) -> Table:
    show_files = target.is_dir()
    table = Table(title="Findings", show_lines=False)
    table.add_column("Severity", style="bold", width=10)
    if show_files:
        table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Type")
    table.add_column("Confidence", justify="right")
    table.add_column("Method")

    for finding in findings:
        color = SEVERITY_COLORS.get(finding.severity, "white")
        row = [f"[{color}]{finding.severity.value}[/{color}]"]
        if show_files:
            row.append(_shorten_path(finding.file_path, str(target.resolve())))
        row.extend(
            [
                str(finding.line),
                finding.type,
                f"{finding.confidence:.0f}",
                finding.detection_method.value,
            ]
        )
        table.add_row(*row)
    return table


def _print_summary(result: ScanResult | ProjectScanResult) -> None:
    if isinstance(result, ProjectScanResult):
        console.print(
            f"\nScanned {result.files_scanned} files "
            f"({result.files_skipped} skipped) "
            f"in {result.duration:.2f}s"
        )
    else:
        console.print(f"\nSemantic review: {result.semantic_status.value}")

    counts = ", ".join(f"{name}: {count}" for name, count in result.summary.items())
    console.print(f"Total findings: {len(result.findings)} ({counts})")
    console.print(f"Security score: [bold]{result.score}[/bold]")

    for note in result.diagnostics:
        console.print(f"[yellow]![/yellow] {note}")

    if result.recommendations:
        console.print("\n[bold]Recommendations[/bold]")
        for item in result.recommendations:
            console.print(f"  • {item}")


def _shorten_path(file_path: str, base_dir: str) -> str:
    """Shorten file path relative to scan directory."""
    if file_path.startswith(base_dir):
        return file_path[len(base_dir) :].lstrip("/")
    return file_path
