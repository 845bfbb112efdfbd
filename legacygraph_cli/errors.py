"""Exception types raised by the analyzer layers."""

from __future__ import annotations


class LegacyGraphError(Exception):
    """Base class for analyzer failures surfaced to the CLI."""


class EntryScriptNotFound(LegacyGraphError):
    """The requested entry script is not among the discovered files."""

    def __init__(self, entry: str, root: str = ""):
        self.entry = entry
        self.root = root
        where = f" under '{root}'" if root else ""
        super().__init__(f"Entry script '{entry}' was not found{where}.")


class ConfigError(LegacyGraphError):
    """Configuration file or option values are invalid."""
