"""Call tree and graph export helpers for text, DOT and JSON outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

from .config import BATCH_EXTENSIONS, DEFAULT_FONT, PERL_EXTENSIONS
from .models import AnalysisReport, EdgeKind, ScriptRecord, TraversalState

NODE_STYLES = {
    "batch": 'shape=box, style=filled, fillcolor="lightblue"',
    "perl": 'shape=ellipse, style=filled, fillcolor="lightyellow"',
    "other": 'shape=note, style=filled, fillcolor="white"',
}
INTERNAL_EDGE_STYLE = ""
EXTERNAL_EDGE_STYLE = 'style=dashed, color="grey", fontcolor="grey"'


def render_tree(state: TraversalState) -> str:
    return "".join(f"{line}\n" for line in state.tree_lines)


def export_tree(state: TraversalState, output_file: Path) -> None:
    output_file.write_text(render_tree(state), encoding="utf-8")


def render_dot(state: TraversalState, index: Dict[str, ScriptRecord], font: str = DEFAULT_FONT) -> str:
    lines = ["digraph ScriptCalls {"]
    lines.append("  rankdir=LR;")
    lines.append(f'  node [fontname="{_esc(font)}"];')
    lines.append(f'  edge [fontname="{_esc(font)}"];')

    # External targets were never visited and get no declaration
    for name in state.visit_order:
        record = index.get(name)
        if record is None:
            continue
        lines.append(f'  "{_esc(name)}" [{NODE_STYLES[script_type(record)]}];')

    for edge in state.edges:
        style = INTERNAL_EDGE_STYLE if edge.kind is EdgeKind.INTERNAL else EXTERNAL_EDGE_STYLE
        attrs = f" [{style}]" if style else ""
        lines.append(f'  "{_esc(edge.parent)}" -> "{_esc(edge.child)}"{attrs};')

    lines.append("}")
    return "\n".join(lines) + "\n"


def export_dot(
    state: TraversalState,
    index: Dict[str, ScriptRecord],
    output_file: Path,
    font: str = DEFAULT_FONT,
) -> None:
    output_file.write_text(render_dot(state, index, font=font), encoding="utf-8")


def export_json(report: AnalysisReport, output_file: Path) -> None:
    """Export visited nodes, edges and scan errors as JSON."""
    index = report.discovery.index
    nodes: List[dict] = [
        {
            "name": name,
            "type": script_type(index[name]),
            "path": str(index[name].full_path),
        }
        for name in report.state.visit_order
        if name in index
    ]
    payload = {
        "root": str(report.discovery.root),
        "entry": report.state.entry,
        "nodes": nodes,
        "edges": [
            {"parent": e.parent, "child": e.child, "kind": e.kind.value}
            for e in report.state.edges
        ],
        "scan_errors": [
            {"path": err.path, "message": err.message} for err in report.discovery.errors
        ],
    }
    output_file.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def script_type(record: ScriptRecord) -> str:
    # Extensions added through configuration are neither batch nor Perl
    if record.extension in BATCH_EXTENSIONS:
        return "batch"
    if record.extension in PERL_EXTENSIONS:
        return "perl"
    return "other"


def _esc(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
