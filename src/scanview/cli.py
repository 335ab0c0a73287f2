"""scanview CLI — Typer application with show, toggle, clear, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler

from scanview import __version__

app = typer.Typer(
    name="scanview",
    help="Browse static-analysis results as a grouped tree with editor diagnostics.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config: Optional[str]):
    from scanview.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _build_provider(cfg, results: Optional[str], workspace: Optional[str], store=None):
    """Create a provider over the configured results document and state file."""
    from scanview.filters.state import JsonStateStore
    from scanview.provider import MemoryDiagnosticsSink, ResultsProvider, file_loader
    from scanview.results.loader import ResultsError

    results_path = Path(results or cfg.results.path)
    if store is None:
        store = JsonStateStore(Path(cfg.state.file))
    try:
        provider = ResultsProvider(
            store,
            file_loader(results_path),
            MemoryDiagnosticsSink(),
            workspace_root=workspace or cfg.workspace.root or str(Path.cwd()),
            results_path=results_path,
            defaults=cfg.filters.to_filter_state(),
        )
    except ResultsError as exc:
        console.print(f"[bold red]Results error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    return provider, results_path


def _parse_levels(values: List[str]):
    from scanview.results.severity import FILTERABLE, Severity

    levels = set()
    for value in values:
        if value.strip().lower() == "none":
            continue
        level = Severity.parse(value)
        if level not in FILTERABLE:
            console.print(f"[bold red]Invalid severity:[/bold red] {value}")
            raise typer.Exit(code=2)
        levels.add(level)
    return levels


# ── show ──────────────────────────────────────────────────────────────────────


@app.command()
def show(
    results: Optional[str] = typer.Argument(None, help="Results document (default from config)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .scanview.toml"),
    group_by: Optional[str] = typer.Option(None, "--group-by", "-g", help="fileName | severity | status | language"),
    severity: Optional[List[str]] = typer.Option(None, "--severity", "-s", help="Show only these levels (repeatable, 'none' for nothing)"),
    scan_id: Optional[str] = typer.Option(None, "--scan-id", help="Label for the tree root"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    workspace: Optional[str] = typer.Option(None, "--workspace", "-w", help="Workspace root for diagnostics"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Build the grouped tree and diagnostics and print them."""
    from scanview.filters.state import SCAN_ID_KEY, FilterState, JsonStateStore, MemoryStateStore
    from scanview.output import json_report, terminal
    from scanview.results.loader import load_results
    from scanview.tree.grouping import GroupDimension

    _setup_logging(verbose)
    cfg = _load_config(config)

    if format:
        if format not in ("terminal", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]

    store = JsonStateStore(Path(cfg.state.file))
    if scan_id is not None:
        store.update(SCAN_ID_KEY, scan_id)

    # One-off overrides run against a throwaway copy of the persisted state.
    if group_by or severity:
        filters = FilterState.from_store(store, cfg.filters.to_filter_state())
        if group_by:
            try:
                filters.set_grouping_dimension(GroupDimension.parse_selectable(group_by))
            except ValueError as exc:
                console.print(f"[bold red]Invalid grouping:[/bold red] {group_by}")
                raise typer.Exit(code=2) from exc
        if severity:
            filters.active_severities = _parse_levels(severity)
        overridden = MemoryStateStore({SCAN_ID_KEY: store.get(SCAN_ID_KEY, "")})
        filters.save(overridden)
        store = overridden

    provider, results_path = _build_provider(cfg, results, workspace, store)
    root = provider.get_root()
    total = len(load_results(results_path) or [])

    report_text: Optional[str] = None
    if cfg.output.format == "json":
        report_text = json_report.render(root, provider.diagnostics, provider.filters)
        print(report_text)
    else:
        terminal.render(
            root,
            provider.diagnostics,
            total_results=total,
            show_summary=cfg.output.show_summary,
        )

    if output:
        if report_text is None:
            report_text = json_report.render(root, provider.diagnostics, provider.filters)
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")


# ── toggle ────────────────────────────────────────────────────────────────────


@app.command()
def toggle(
    key: str = typer.Argument(..., help="Severity (high, medium, low, info) or grouping dimension"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .scanview.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Flip a severity filter or select a grouping, and persist the change."""
    from scanview.filters.state import FilterError, FilterState, JsonStateStore

    _setup_logging(verbose)
    cfg = _load_config(config)

    # The toggle is saved before the results document is read.
    store = JsonStateStore(Path(cfg.state.file))
    filters = FilterState.from_store(store, cfg.filters.to_filter_state())
    try:
        store_key, value = filters.toggle(key)
    except FilterError as exc:
        console.print(f"[bold red]Filter error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    store.update(store_key, value)

    provider, _ = _build_provider(cfg, None, None, store)

    for name, active in _filter_summary(provider):
        mark = "[green]on[/green]" if active else "[dim]off[/dim]"
        console.print(f"  {name:<8} {mark}")
    console.print(f"  group by {provider.filters.grouping_dimension.value}")


def _filter_summary(provider) -> List[Tuple[str, bool]]:
    from scanview.results.severity import FILTERABLE

    return [(level.value, provider.filters.is_active(level)) for level in FILTERABLE]


# ── clear ─────────────────────────────────────────────────────────────────────


@app.command()
def clear(
    results: Optional[str] = typer.Argument(None, help="Results document (default from config)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .scanview.toml"),
) -> None:
    """Delete the results document."""
    from scanview.results.loader import delete_results

    cfg = _load_config(config)
    results_path = Path(results or cfg.results.path)
    if delete_results(results_path):
        console.print(f"[green]✓[/green] Removed {results_path}")
    else:
        console.print(f"[dim]No results document at {results_path}[/dim]")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .scanview.toml in the current directory."""
    from scanview.config.defaults import DEFAULT_TOML
    from scanview.config.loader import CONFIG_FILE

    config_path = Path.cwd() / CONFIG_FILE
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILE} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"scanview {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """scanview — grouped static-analysis results with editor diagnostics."""
