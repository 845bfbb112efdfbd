"""Configuration paths and analyzer defaults for LegacyGraph."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("LEGACYGRAPH_HOME", str(Path.home() / ".legacygraph"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

# Script types picked up by discovery
SUPPORTED_EXTENSIONS = (".bat", ".cmd", ".pl")
BATCH_EXTENSIONS = frozenset({".bat", ".cmd"})
PERL_EXTENSIONS = frozenset({".pl"})

SKIP_DIRS = (".git", ".svn", "node_modules", "__pycache__")

DEFAULT_TREE_FILE = "call_tree.txt"
DEFAULT_GRAPH_FILE = "call_graph.dot"
DEFAULT_FONT = "Consolas"

# "all" keeps every recorded edge, "unique" collapses repeated parent/child pairs
EDGE_POLICIES = ("all", "unique")
DEFAULT_EDGE_POLICY = "all"

MAX_REPORTED_ERRORS = 10
