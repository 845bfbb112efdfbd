"""Configuration manager for LegacyGraph CLI using TOML files."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import toml

from . import config
from .errors import ConfigError


@dataclass
class AnalyzerSettings:
    extensions: Tuple[str, ...] = config.SUPPORTED_EXTENSIONS
    skip_dirs: Tuple[str, ...] = config.SKIP_DIRS
    tree_file: str = config.DEFAULT_TREE_FILE
    graph_file: str = config.DEFAULT_GRAPH_FILE
    font: str = config.DEFAULT_FONT
    edge_policy: str = config.DEFAULT_EDGE_POLICY
    max_reported_errors: int = config.MAX_REPORTED_ERRORS
    extra: Dict[str, Any] = field(default_factory=dict)


def load_full_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load the entire TOML config (all sections).

    A missing file means an empty config; a malformed one raises
    :class:`ConfigError`.
    """
    path = config_file or config.CONFIG_FILE
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (toml.TomlDecodeError, OSError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc


def load_settings(config_file: Optional[Path] = None, **overrides: Any) -> AnalyzerSettings:
    """Build settings from the ``[analyzer]`` section plus CLI overrides.

    Overrides whose value is ``None`` are ignored so unset CLI options fall
    back to the file, then to the built-in defaults.
    """
    section = dict(load_full_config(config_file).get("analyzer", {}))
    section.update({k: v for k, v in overrides.items() if v is not None})
    return _validate(section)


def save_settings(settings: AnalyzerSettings, config_file: Optional[Path] = None) -> Path:
    """Write *settings* to the ``[analyzer]`` section, preserving other sections."""
    path = config_file or config.CONFIG_FILE
    full = load_full_config(path)
    data = asdict(settings)
    data.pop("extra")
    data["extensions"] = list(settings.extensions)
    data["skip_dirs"] = list(settings.skip_dirs)
    full["analyzer"] = data
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        toml.dump(full, f)
    return path


def _validate(section: Dict[str, Any]) -> AnalyzerSettings:
    known = {k: section.pop(k) for k in list(section) if k in AnalyzerSettings.__dataclass_fields__}
    known.pop("extra", None)

    if "extensions" in known:
        known["extensions"] = _normalize_extensions(known["extensions"])
    if "skip_dirs" in known:
        if isinstance(known["skip_dirs"], str) or not all(isinstance(d, str) for d in known["skip_dirs"]):
            raise ConfigError("'skip_dirs' must be a list of directory names.")
        known["skip_dirs"] = tuple(known["skip_dirs"])

    policy = known.get("edge_policy", config.DEFAULT_EDGE_POLICY)
    if policy not in config.EDGE_POLICIES:
        raise ConfigError(
            f"Unknown edge policy '{policy}'. Choose one of: {', '.join(config.EDGE_POLICIES)}"
        )

    limit = known.get("max_reported_errors", config.MAX_REPORTED_ERRORS)
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
        raise ConfigError("'max_reported_errors' must be a non-negative integer.")

    return AnalyzerSettings(**known, extra=section)


def _normalize_extensions(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str) or not value:
        raise ConfigError("'extensions' must be a non-empty list such as ['.bat', '.cmd', '.pl'].")
    exts = []
    for item in value:
        if not isinstance(item, str) or not item.strip(". "):
            raise ConfigError(f"Invalid extension entry: {item!r}")
        ext = item.strip().lower()
        exts.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(dict.fromkeys(exts))
