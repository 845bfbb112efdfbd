"""Depth-first call-graph walk over discovered scripts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Set, Tuple

from .config import DEFAULT_EDGE_POLICY, EDGE_POLICIES
from .errors import ConfigError, EntryScriptNotFound
from .extractor import extract_calls
from .models import CallEdge, DiscoveryResult, EdgeKind, TraversalState

logger = logging.getLogger(__name__)

INDENT = "  "
EXTERNAL_SUFFIX = " (external)"
LOOP_SUFFIX = " (LOOP/ALREADY VISITED)"


class GraphWalker:
    """Walks the call graph from an entry script.

    Each walk owns a fresh :class:`TraversalState`; a node is expanded at most
    once and any later reach is logged as a loop marker, so the walk
    terminates on cyclic graphs.
    """

    def __init__(
        self,
        discovery: DiscoveryResult,
        extractor: Callable[[Path], List[str]] = extract_calls,
        edge_policy: str = DEFAULT_EDGE_POLICY,
    ) -> None:
        if edge_policy not in EDGE_POLICIES:
            raise ConfigError(
                f"Unknown edge policy '{edge_policy}'. Choose one of: {', '.join(EDGE_POLICIES)}"
            )
        self.discovery = discovery
        self.known = discovery.known
        self.index = discovery.index
        self.extractor = extractor
        self.edge_policy = edge_policy

    def walk(self, entry: str) -> TraversalState:
        key = entry.strip().lower()
        if key not in self.known:
            raise EntryScriptNotFound(entry, str(self.discovery.root))

        state = TraversalState(entry=key)
        seen_edges: Set[Tuple[str, str]] = set()
        # Each frame is (script, depth, remaining children); the top frame is
        # the script whose calls are being expanded.
        stack: List[Tuple[str, int, Iterator[str]]] = []
        self._enter(key, 0, state, stack)
        while stack:
            name, depth, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                continue
            kind = EdgeKind.INTERNAL if child in self.known else EdgeKind.EXTERNAL
            self._record_edge(CallEdge(parent=name, child=child, kind=kind), state, seen_edges)
            if kind is EdgeKind.INTERNAL:
                self._enter(child, depth + 1, state, stack)
            else:
                state.tree_lines.append(f"{INDENT * (depth + 1)}{child}{EXTERNAL_SUFFIX}")
        logger.debug(
            "Walk from %s visited %d scripts, recorded %d edges",
            key, len(state.visited), len(state.edges),
        )
        return state

    def _enter(
        self,
        name: str,
        depth: int,
        state: TraversalState,
        stack: List[Tuple[str, int, Iterator[str]]],
    ) -> None:
        """Emit the tree line for *name* and queue its calls unless already visited."""
        indent = INDENT * depth
        if name in state.visited:
            state.tree_lines.append(f"{indent}{name}{LOOP_SUFFIX}")
            return

        state.tree_lines.append(f"{indent}{name}")
        state.visited.add(name)
        state.visit_order.append(name)

        record = self.index.get(name)
        if record is None:
            return
        stack.append((name, depth, iter(self.extractor(record.full_path))))

    def _record_edge(self, edge: CallEdge, state: TraversalState, seen_edges: Set[Tuple[str, str]]) -> None:
        pair = (edge.parent, edge.child)
        if self.edge_policy == "unique" and pair in seen_edges:
            return
        seen_edges.add(pair)
        state.edges.append(edge)


def walk_calls(
    discovery: DiscoveryResult,
    entry: str,
    edge_policy: str = DEFAULT_EDGE_POLICY,
    extractor: Optional[Callable[[Path], List[str]]] = None,
) -> TraversalState:
    walker = GraphWalker(discovery, extractor=extractor or extract_calls, edge_policy=edge_policy)
    return walker.walk(entry)
