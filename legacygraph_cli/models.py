"""Core data models shared by discovery, traversal, and export layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Set


@dataclass(frozen=True)
class ScriptRecord:
    name: str
    extension: str
    full_path: Path

    @property
    def key(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ScanError:
    path: str
    message: str


class EdgeKind(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


@dataclass(frozen=True)
class CallEdge:
    parent: str
    child: str
    kind: EdgeKind


@dataclass
class DiscoveryResult:
    """Scripts found under one root plus the failures met while walking it.

    ``fatal`` is set when the root itself could not be scanned; ``records``
    is then empty.
    """

    root: Path
    records: List[ScriptRecord] = field(default_factory=list)
    errors: List[ScanError] = field(default_factory=list)
    fatal: Optional[str] = None
    duplicates: List[ScriptRecord] = field(default_factory=list)
    index: Dict[str, ScriptRecord] = field(default_factory=dict)

    def add(self, record: ScriptRecord) -> None:
        self.records.append(record)
        if record.key in self.index:
            self.duplicates.append(record)
        else:
            self.index[record.key] = record

    @property
    def known(self) -> FrozenSet[str]:
        return frozenset(self.index)


@dataclass
class TraversalState:
    """Mutable state of a single walk, owned by the walk that created it."""

    entry: str
    visited: Set[str] = field(default_factory=set)
    visit_order: List[str] = field(default_factory=list)
    tree_lines: List[str] = field(default_factory=list)
    edges: List[CallEdge] = field(default_factory=list)

    @property
    def internal_edges(self) -> List[CallEdge]:
        return [e for e in self.edges if e.kind is EdgeKind.INTERNAL]

    @property
    def external_edges(self) -> List[CallEdge]:
        return [e for e in self.edges if e.kind is EdgeKind.EXTERNAL]


@dataclass
class AnalysisReport:
    discovery: DiscoveryResult
    state: TraversalState
    outputs: Dict[str, Path] = field(default_factory=dict)
