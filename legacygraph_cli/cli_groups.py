"""Command groups for the LegacyGraph CLI.

Provides:
  lg config show  : print effective analyzer settings
  lg config init  : write a default config file
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Optional

import toml
import typer

from . import config
from .config_manager import AnalyzerSettings, load_settings, save_settings
from .errors import ConfigError

# ── Configuration group ──────────────────────────────────────
config_grp = typer.Typer(
    help="⚙️  Configuration: analyzer defaults stored in config.toml.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@config_grp.command("show")
def show_config(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file to read."),
):
    """Print the analyzer settings in effect."""
    try:
        settings = load_settings(config_file)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))

    data = asdict(settings)
    extra = data.pop("extra")
    data["extensions"] = list(settings.extensions)
    data["skip_dirs"] = list(settings.skip_dirs)
    typer.echo(f"# {config_file or config.CONFIG_FILE}")
    typer.echo(toml.dumps({"analyzer": data}).rstrip())
    if extra:
        typer.echo(f"# ignored keys: {', '.join(sorted(extra))}")


@config_grp.command("init")
def init_config(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file to write."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
):
    """Write the default analyzer settings to a config file."""
    path = config_file or config.CONFIG_FILE
    if path.exists() and not force:
        typer.echo(f"❌ {path} already exists (use --force to overwrite).", err=True)
        raise typer.Exit(code=1)
    # Only the [analyzer] section is replaced; other sections are kept
    try:
        written = save_settings(AnalyzerSettings(), path)
    except ConfigError as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"✅ Wrote default settings to {written}")
