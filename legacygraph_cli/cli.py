"""Typer-based CLI for LegacyGraph script call-graph analysis."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .cli_groups import config_grp
from .config_manager import AnalyzerSettings, load_settings
from .errors import ConfigError, EntryScriptNotFound
from .extractor import extract_calls
from .graph_export import render_tree, script_type
from .models import AnalysisReport, DiscoveryResult
from .orchestrator import ScriptGraphAnalyzer

app = typer.Typer(
    help="🧭 LegacyGraph CLI: call graphs for legacy batch and Perl automation scripts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config_grp, name="config")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"LegacyGraph CLI v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log discovery and traversal details."),
):
    """LegacyGraph CLI: reconstruct who-calls-whom across a tree of scripts."""
    if verbose:
        logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
        logging.getLogger("legacygraph_cli").setLevel(logging.DEBUG)


def _settings(config_file: Optional[Path], **overrides) -> AnalyzerSettings:
    try:
        return load_settings(config_file, **overrides)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))


def _report_scan_problems(discovery: DiscoveryResult, limit: int) -> None:
    if discovery.fatal:
        typer.echo(f"⚠️  Could not scan {discovery.root}: {discovery.fatal}", err=True)
    errors = discovery.errors
    if not errors:
        return
    typer.echo(f"⚠️  {len(errors)} path(s) could not be scanned:", err=True)
    for err in errors[:limit]:
        typer.echo(f"   - {err.path}: {err.message}", err=True)
    if len(errors) > limit:
        typer.echo(f"   ... and {len(errors) - limit} more", err=True)


@app.command("analyze")
def analyze(
    root: Path = typer.Argument(..., help="Root directory of the scripts to scan."),
    entry: str = typer.Option(..., "--entry", "-e", help="Script name to start the call tree from."),
    tree_out: Optional[Path] = typer.Option(None, "--tree-out", "-t", help="Text call tree output file."),
    graph_out: Optional[Path] = typer.Option(None, "--graph-out", "-g", help="Graphviz DOT output file."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", "-j", help="Optional JSON output file."),
    edges: Optional[str] = typer.Option(None, "--edges", help="Edge policy: all or unique."),
    font: Optional[str] = typer.Option(None, "--font", help="Font name used for graph labels."),
    print_tree: bool = typer.Option(False, "--print-tree", "-p", help="Also print the call tree."),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file to use."),
):
    """Build the call tree and call graph starting at an entry script."""
    settings = _settings(config_file, edge_policy=edges, font=font)
    analyzer = ScriptGraphAnalyzer(settings)

    discovery = analyzer.discover(root)
    _report_scan_problems(discovery, settings.max_reported_errors)

    try:
        state = analyzer.walk(discovery, entry)
    except EntryScriptNotFound as exc:
        typer.echo(f"❌ {exc}", err=True)
        typer.echo(f"   {len(discovery.records)} script(s) discovered.", err=True)
        raise typer.Exit(code=1)

    report = AnalysisReport(discovery=discovery, state=state)
    analyzer.write_outputs(report, tree_out, graph_out, json_out)

    if print_tree:
        typer.echo(render_tree(state), nl=False)

    internal = len(state.internal_edges)
    external = len(state.external_edges)
    typer.echo(f"Scripts discovered: {len(discovery.records)} | Visited: {len(state.visited)}")
    typer.echo(f"Calls: {internal} internal | {external} external")
    for kind, path in report.outputs.items():
        typer.echo(f"Wrote {kind} to {path}")


@app.command("scan")
def scan(
    root: Path = typer.Argument(..., help="Root directory of the scripts to scan."),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file to use."),
):
    """List the scripts discovery finds under a directory."""
    settings = _settings(config_file)
    discovery = ScriptGraphAnalyzer(settings).discover(root)
    _report_scan_problems(discovery, settings.max_reported_errors)

    if not discovery.records:
        typer.echo("No scripts found.")
        raise typer.Exit(code=0)

    table = Table(title=f"Scripts under {root}", show_header=True)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Type", width=6)
    table.add_column("Path", overflow="fold")
    for record in discovery.records:
        table.add_row(record.name, script_type(record), str(record.full_path))
    Console().print(table)

    for dup in discovery.duplicates:
        typer.echo(f"Note: duplicate name ignored: {dup.full_path}")
    typer.echo(f"Total: {len(discovery.records)} script(s)")


@app.command("calls")
def calls(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="Script file to inspect."),
):
    """Show the call targets found in a single script."""
    targets = extract_calls(script)
    if not targets:
        typer.echo(f"No calls found in {script.name}.")
        raise typer.Exit(code=0)
    for target in targets:
        typer.echo(target)


if __name__ == "__main__":
    app()
