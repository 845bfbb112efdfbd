"""Recursive discovery of candidate scripts under a scan root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from .config import SKIP_DIRS, SUPPORTED_EXTENSIONS
from .models import DiscoveryResult, ScanError, ScriptRecord

logger = logging.getLogger(__name__)


def discover_scripts(
    root: Path,
    extensions: Iterable[str] = SUPPORTED_EXTENSIONS,
    skip_dirs: Iterable[str] = SKIP_DIRS,
) -> DiscoveryResult:
    """Collect every file under *root* whose extension is in *extensions*.

    Failures on individual paths are recorded in ``result.errors`` and the
    walk goes on.  When *root* itself cannot be scanned the result is empty
    and ``result.fatal`` carries the reason; nothing is raised.
    """
    root = Path(root)
    allowed = {ext.lower() for ext in extensions}
    skipped = {name.lower() for name in skip_dirs}
    result = DiscoveryResult(root=root)

    fatal = _check_root(root)
    if fatal:
        result.fatal = fatal
        logger.warning("Cannot scan %s: %s", root, fatal)
        return result

    def _on_error(exc: OSError) -> None:
        path = exc.filename or str(root)
        if Path(path) == root:
            result.fatal = exc.strerror or str(exc)
            return
        result.errors.append(ScanError(path=str(path), message=exc.strerror or str(exc)))
        logger.debug("Skipping %s (%s)", path, exc.strerror or exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = sorted(d for d in dirnames if d.lower() not in skipped)
        for fname in sorted(filenames):
            ext = os.path.splitext(fname)[1].lower()
            if ext not in allowed:
                continue
            record = ScriptRecord(name=fname, extension=ext, full_path=Path(dirpath) / fname)
            result.add(record)
            logger.debug("Discovered %s", record.full_path)

    if result.fatal:
        logger.warning("Cannot scan %s: %s", root, result.fatal)
        result.records.clear()
        result.index.clear()
        result.duplicates.clear()
        return result

    for dup in result.duplicates:
        first = result.index[dup.key]
        logger.info("Duplicate script name %s ignored (already found at %s)", dup.full_path, first.full_path)

    logger.debug("Discovered %d scripts under %s (%d errors)", len(result.records), root, len(result.errors))
    return result


def _check_root(root: Path) -> Optional[str]:
    try:
        if not root.exists():
            return "path does not exist"
        if not root.is_dir():
            return "path is not a directory"
    except OSError as exc:
        return exc.strerror or str(exc)
    return None
