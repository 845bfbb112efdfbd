"""Per-extension invocation patterns and comment stripping.

Each supported script extension maps to one compiled regular expression that
locates invocation syntax within a single line of source text:

- batch (``.bat`` / ``.cmd``): ``call`` or ``start``, an optional quoted window
  title and ``/switches``, then a quoted or bare path ending in a recognized
  target extension.
- Perl (``.pl``): ``system`` / ``exec`` / ``qx`` with an optional parenthesis
  (group 1), or a backtick-delimited command (group 2).  Quoted targets may
  contain spaces; the quotes stay in the capture and are dropped by
  :func:`normalize_target`.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, Optional

from .config import BATCH_EXTENSIONS, PERL_EXTENSIONS

TARGET_EXTENSIONS = ("bat", "cmd", "exe", "com", "pl", "ps1", "vbs", "py")
_TARGET_EXT = "|".join(TARGET_EXTENSIONS)

BATCH_CALL_RE = re.compile(
    r"""(?ix)
    \b(?:call|start)\s+
    (?:"[^"]*"\s+)?                # optional window title (start "title" ...)
    (?:/\w+(?::\S+)?\s+)*          # start switches such as /b /wait /min
    (
        "[^"]*?\.(?:%s)"           # quoted target
      | [^\s"&|<>()]+?\.(?:%s)     # bare target
    )
    (?![\w.])
    """
    % (_TARGET_EXT, _TARGET_EXT)
)

# Directory prefix such as %~dp0 in front of a batch target
_BATCH_DIR_VAR_RE = re.compile(r"^(?:%~[a-z]*\d)+", re.IGNORECASE)

# Interpreter or shell prefix allowed in front of the real target
_LAUNCHER = r"(?:(?:perl|cmd(?:\.exe)?\s+/[ck]|call|start)\s+)?"

PERL_CALL_RE = re.compile(
    r"""(?ix)
        \b(?:system|exec|qx)\s*\(?\s*[{/(]?\s*(?:["']\s*)?%(launcher)s
        (
            "[^"]+?\.(?:%(ext)s)"          # double-quoted path, may hold spaces
          | '[^']+?\.(?:%(ext)s)'          # single-quoted path, may hold spaces
          | [^\s"'`(){};,]+?\.(?:%(ext)s)  # bare target
        )(?![\w.])
      |
        `\s*%(launcher)s"?
        (
            "[^"`]+?\.(?:%(ext)s)"
          | [^\s"`]+?\.(?:%(ext)s)
        )(?![\w.])
    """
    % {"ext": _TARGET_EXT, "launcher": _LAUNCHER}
)

PATTERNS: Dict[str, re.Pattern[str]] = {}
PATTERNS.update({ext: BATCH_CALL_RE for ext in BATCH_EXTENSIONS})
PATTERNS.update({ext: PERL_CALL_RE for ext in PERL_EXTENSIONS})

_BATCH_FULL_COMMENT_RE = re.compile(r"^\s*(?:@?rem(?:\s|$)|::)", re.IGNORECASE)
_BATCH_TRAILING_COMMENT_RE = re.compile(r"&\s*(?:rem(?:\s|$)|::).*$", re.IGNORECASE)
_POD_START_RE = re.compile(r"^=[a-zA-Z]")
_PERL_END_RE = re.compile(r"^__(?:END|DATA)__\s*$")


def pattern_for(extension: str) -> Optional[re.Pattern[str]]:
    return PATTERNS.get(extension.lower())


def match_target(match: re.Match[str]) -> str:
    """Return the captured target of whichever alternative matched."""
    return next((group for group in match.groups() if group), "")


def normalize_target(raw: str) -> str:
    """Reduce a raw call target to its lowercased base filename."""
    target = raw.strip().strip("\"'").strip()
    name = re.split(r"[\\/]", target)[-1]
    name = _BATCH_DIR_VAR_RE.sub("", name)
    return name.strip().lower()


def strip_batch_comment(line: str) -> str:
    if _BATCH_FULL_COMMENT_RE.match(line):
        return ""
    return _BATCH_TRAILING_COMMENT_RE.sub("", line)


def strip_perl_comment(line: str) -> str:
    """Cut a ``#`` comment that is not inside a quoted string or ``$#``."""
    quote = ""
    prev = ""
    for i, ch in enumerate(line):
        if quote:
            if ch == quote and prev != "\\":
                quote = ""
        elif ch in "\"'`":
            quote = ch
        elif ch == "#" and prev != "$":
            return line[:i]
        prev = "" if prev == "\\" else ch
    return line


def batch_code_lines(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        code = strip_batch_comment(line)
        if code.strip():
            yield code


def perl_code_lines(lines: Iterable[str]) -> Iterator[str]:
    in_pod = False
    for line in lines:
        if in_pod:
            if line.startswith("=cut"):
                in_pod = False
            continue
        if _POD_START_RE.match(line):
            in_pod = not line.startswith("=cut")
            continue
        if _PERL_END_RE.match(line):
            return
        code = strip_perl_comment(line)
        if code.strip():
            yield code


def code_lines(extension: str, lines: Iterable[str]) -> Iterator[str]:
    """Yield the non-blank, comment-free lines of a script of ``extension``."""
    ext = extension.lower()
    if ext in BATCH_EXTENSIONS:
        return batch_code_lines(lines)
    if ext in PERL_EXTENSIONS:
        return perl_code_lines(lines)
    return iter(())
