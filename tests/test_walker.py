"""Tests for the depth-first call-graph walk."""

import sys
from pathlib import Path

import pytest

from legacygraph_cli.discovery import discover_scripts
from legacygraph_cli.errors import ConfigError, EntryScriptNotFound
from legacygraph_cli.models import CallEdge, DiscoveryResult, EdgeKind, ScriptRecord
from legacygraph_cli.walker import GraphWalker, walk_calls


def _discovery(*names: str) -> DiscoveryResult:
    result = DiscoveryResult(root=Path("/virtual"))
    for name in names:
        result.add(ScriptRecord(name=name, extension=Path(name).suffix, full_path=Path("/virtual") / name))
    return result


def _fake_extractor(calls):
    return lambda path: calls.get(path.name, [])


class TestLoopScenario:
    def test_tree_lines(self, loop_scripts: Path):
        state = walk_calls(discover_scripts(loop_scripts), "main.bat")

        assert state.tree_lines == [
            "main.bat",
            "  a.bat",
            "    main.bat (LOOP/ALREADY VISITED)",
            "  missing.exe (external)",
        ]

    def test_edges(self, loop_scripts: Path):
        state = walk_calls(discover_scripts(loop_scripts), "main.bat")

        assert state.edges == [
            CallEdge("main.bat", "a.bat", EdgeKind.INTERNAL),
            CallEdge("a.bat", "main.bat", EdgeKind.INTERNAL),
            CallEdge("main.bat", "missing.exe", EdgeKind.EXTERNAL),
        ]

    def test_each_node_visited_once(self, loop_scripts: Path):
        state = walk_calls(discover_scripts(loop_scripts), "main.bat")

        assert state.visited == {"main.bat", "a.bat"}
        assert state.visit_order == ["main.bat", "a.bat"]


def test_sample_tree(sample_scripts_path: Path, sample_tree_text: str):
    state = walk_calls(discover_scripts(sample_scripts_path), "main.bat")

    assert "\n".join(state.tree_lines) + "\n" == sample_tree_text
    assert "orphan.bat" not in state.visited
    assert state.visit_order == [
        "main.bat", "cleanup.bat", "report.pl", "helper.pl", "common.bat", "setup.cmd",
    ]
    assert {(e.parent, e.child) for e in state.external_edges} == {
        ("cleanup.bat", "cleanmgr.exe"),
        ("main.bat", "notepad.exe"),
        ("report.pl", "ipconfig.exe"),
    }


def test_self_call_terminates():
    discovery = _discovery("loop.bat")
    walker = GraphWalker(discovery, extractor=_fake_extractor({"loop.bat": ["loop.bat"]}))

    state = walker.walk("loop.bat")

    assert state.tree_lines == ["loop.bat", "  loop.bat (LOOP/ALREADY VISITED)"]
    assert state.edges == [CallEdge("loop.bat", "loop.bat", EdgeKind.INTERNAL)]


def test_long_cycle_terminates():
    names = [f"s{i}.bat" for i in range(50)]
    calls = {name: [names[(i + 1) % len(names)]] for i, name in enumerate(names)}
    walker = GraphWalker(_discovery(*names), extractor=_fake_extractor(calls))

    state = walker.walk("s0.bat")

    assert state.visited == set(names)
    assert len(state.visit_order) == len(names)
    assert state.tree_lines[-1].endswith("s0.bat (LOOP/ALREADY VISITED)")


def test_chain_deeper_than_recursion_limit():
    depth = sys.getrecursionlimit() * 3
    names = [f"s{i}.bat" for i in range(depth)]
    calls = {name: [nxt] for name, nxt in zip(names, names[1:])}
    calls[names[-1]] = ["end.exe"]
    walker = GraphWalker(_discovery(*names), extractor=_fake_extractor(calls))

    state = walker.walk("s0.bat")

    assert state.visit_order == names
    assert len(state.edges) == depth
    assert state.tree_lines[-2] == "  " * (depth - 1) + names[-1]
    assert state.tree_lines[-1] == "  " * depth + "end.exe (external)"


def test_external_never_recursed_even_if_on_disk(make_scripts, temp_dir: Path):
    outside = temp_dir / "elsewhere"
    outside.mkdir()
    (outside / "shared.bat").write_text("call deeper.bat\n")
    root = make_scripts({"main.bat": "call ..\\elsewhere\\shared.bat\n"})

    state = walk_calls(discover_scripts(root), "main.bat")

    assert state.edges == [CallEdge("main.bat", "shared.bat", EdgeKind.EXTERNAL)]
    assert state.tree_lines == ["main.bat", "  shared.bat (external)"]
    assert state.visited == {"main.bat"}


def test_second_parent_records_edge_without_reexpanding():
    discovery = _discovery("a.bat", "b.bat", "c.bat", "shared.bat")
    calls = {
        "a.bat": ["b.bat", "c.bat"],
        "b.bat": ["shared.bat"],
        "c.bat": ["shared.bat"],
        "shared.bat": ["tool.exe"],
    }
    state = GraphWalker(discovery, extractor=_fake_extractor(calls)).walk("a.bat")

    assert state.tree_lines == [
        "a.bat",
        "  b.bat",
        "    shared.bat",
        "      tool.exe (external)",
        "  c.bat",
        "    shared.bat (LOOP/ALREADY VISITED)",
    ]
    assert CallEdge("c.bat", "shared.bat", EdgeKind.INTERNAL) in state.edges
    assert sum(1 for e in state.edges if e.child == "tool.exe") == 1


def test_entry_lookup_is_case_insensitive(loop_scripts: Path):
    state = walk_calls(discover_scripts(loop_scripts), "MAIN.BAT")

    assert state.entry == "main.bat"
    assert state.tree_lines[0] == "main.bat"


def test_missing_entry_raises(loop_scripts: Path):
    with pytest.raises(EntryScriptNotFound) as info:
        walk_calls(discover_scripts(loop_scripts), "nope.bat")

    assert info.value.entry == "nope.bat"
    assert "nope.bat" in str(info.value)


def test_missing_entry_after_fatal_scan(temp_dir: Path):
    discovery = discover_scripts(temp_dir / "gone")

    with pytest.raises(EntryScriptNotFound):
        walk_calls(discovery, "main.bat")


def test_extractor_is_not_called_before_entry_check():
    seen = []
    walker = GraphWalker(_discovery("a.bat"), extractor=lambda p: seen.append(p) or [])

    with pytest.raises(EntryScriptNotFound):
        walker.walk("b.bat")
    assert seen == []


class TestEdgePolicy:
    calls = {"a.bat": ["b.bat", "b.bat"], "b.bat": []}

    def test_all_keeps_repeated_pairs(self):
        walker = GraphWalker(_discovery("a.bat", "b.bat"), extractor=_fake_extractor(self.calls))

        state = walker.walk("a.bat")

        assert len(state.edges) == 2

    def test_unique_collapses_repeated_pairs(self):
        walker = GraphWalker(
            _discovery("a.bat", "b.bat"),
            extractor=_fake_extractor(self.calls),
            edge_policy="unique",
        )

        state = walker.walk("a.bat")

        assert state.edges == [CallEdge("a.bat", "b.bat", EdgeKind.INTERNAL)]
        assert state.tree_lines == ["a.bat", "  b.bat", "  b.bat (LOOP/ALREADY VISITED)"]

    def test_unknown_policy(self):
        with pytest.raises(ConfigError):
            GraphWalker(_discovery("a.bat"), edge_policy="sometimes")


def test_walks_are_independent(loop_scripts: Path):
    walker = GraphWalker(discover_scripts(loop_scripts))

    first = walker.walk("main.bat")
    second = walker.walk("main.bat")

    assert first is not second
    assert first.tree_lines == second.tree_lines
    assert first.edges == second.edges
