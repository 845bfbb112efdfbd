"""Regex-based call extraction for batch and Perl scripts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Set

from .patterns import code_lines, match_target, normalize_target, pattern_for

logger = logging.getLogger(__name__)


def extract_calls_from_lines(extension: str, lines: Iterable[str]) -> List[str]:
    """Return the sorted, distinct call targets found in *lines*.

    Comments are stripped before matching so commented-out invocations are
    never reported.  Every match on a line counts.
    """
    pattern = pattern_for(extension)
    if pattern is None:
        return []

    calls: Set[str] = set()
    for line in code_lines(extension, (raw.rstrip("\r\n") for raw in lines)):
        for match in pattern.finditer(line):
            name = normalize_target(match_target(match))
            if name:
                calls.add(name)
    return sorted(calls)


def extract_calls(file_path: Path) -> List[str]:
    """Return the call targets of the script at *file_path*.

    Unreadable files and unsupported extensions yield an empty list.
    """
    file_path = Path(file_path)
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as handle:
            return extract_calls_from_lines(file_path.suffix, handle)
    except OSError as exc:
        logger.debug("Could not read %s: %s", file_path, exc)
        return []
