"""Orchestrator running discovery, traversal and export as one pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config_manager import AnalyzerSettings
from .discovery import discover_scripts
from .graph_export import export_dot, export_json, export_tree
from .models import AnalysisReport, DiscoveryResult, TraversalState
from .walker import GraphWalker

logger = logging.getLogger(__name__)


class ScriptGraphAnalyzer:
    """Coordinates discovery, the graph walk and the emitters."""

    def __init__(self, settings: Optional[AnalyzerSettings] = None):
        self.settings = settings or AnalyzerSettings()

    def discover(self, root: Path) -> DiscoveryResult:
        return discover_scripts(root, self.settings.extensions, self.settings.skip_dirs)

    def walk(self, discovery: DiscoveryResult, entry: str) -> TraversalState:
        walker = GraphWalker(discovery, edge_policy=self.settings.edge_policy)
        return walker.walk(entry)

    def analyze(self, root: Path, entry: str) -> AnalysisReport:
        """Discover and walk without writing anything.

        Raises :class:`EntryScriptNotFound` before any traversal when *entry*
        is not among the discovered scripts.
        """
        discovery = self.discover(root)
        state = self.walk(discovery, entry)
        return AnalysisReport(discovery=discovery, state=state)

    def run(
        self,
        root: Path,
        entry: str,
        tree_out: Optional[Path] = None,
        graph_out: Optional[Path] = None,
        json_out: Optional[Path] = None,
    ) -> AnalysisReport:
        report = self.analyze(root, entry)
        self.write_outputs(report, tree_out, graph_out, json_out)
        return report

    def write_outputs(
        self,
        report: AnalysisReport,
        tree_out: Optional[Path] = None,
        graph_out: Optional[Path] = None,
        json_out: Optional[Path] = None,
    ) -> None:
        tree_out = tree_out or Path.cwd() / self.settings.tree_file
        graph_out = graph_out or Path.cwd() / self.settings.graph_file

        export_tree(report.state, tree_out)
        report.outputs["tree"] = tree_out
        export_dot(report.state, report.discovery.index, graph_out, font=self.settings.font)
        report.outputs["graph"] = graph_out
        if json_out is not None:
            export_json(report, json_out)
            report.outputs["json"] = json_out
        logger.debug("Wrote outputs: %s", ", ".join(str(p) for p in report.outputs.values()))
