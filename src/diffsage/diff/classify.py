"""Classification of single unified-diff lines.

Each line of a ``git diff`` / ``git show`` output is mapped to one of a small
set of variants so that callers never have to poke at field positions
themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

BOUNDARY_PREFIX = "diff --git"

_QUOTED_PAIR = re.compile(r'^"((?:[^"\\]|\\.)*)" "((?:[^"\\]|\\.)*)"$')


@dataclass(frozen=True)
class BoundaryLine:
    """``diff --git a/<path> b/<path>``, the start of a new file section."""

    path_a: str
    path_b: str


@dataclass(frozen=True)
class HunkHeader:
    """``@@ -a,b +c,d @@``."""

    text: str


@dataclass(frozen=True)
class Addition:
    text: str


@dataclass(frozen=True)
class Removal:
    text: str


@dataclass(frozen=True)
class Context:
    text: str


@dataclass(frozen=True)
class Other:
    """Anything else: commit headers, index lines, mode changes."""

    text: str


DiffLine = BoundaryLine | HunkHeader | Addition | Removal | Context | Other


def _strip_prefix(path: str, prefix: str) -> str:
    return path[len(prefix):] if path.startswith(prefix) else path


def parse_boundary(line: str) -> BoundaryLine | None:
    """Extract both paths from a ``diff --git`` line.

    Returns None when the line carries fewer than two path tokens.
    """
    rest = line[len(BOUNDARY_PREFIX):].strip()

    # git quotes paths with unusual characters
    quoted = _QUOTED_PAIR.match(rest)
    if quoted:
        return BoundaryLine(
            path_a=_strip_prefix(quoted.group(1), "a/"),
            path_b=_strip_prefix(quoted.group(2), "b/"),
        )

    # Unquoted paths may contain spaces: "a/x y b/x y" splits in the middle.
    if rest.startswith("a/") and len(rest) % 2 == 1:
        half = len(rest) // 2
        left, right = rest[:half], rest[half + 1:]
        if rest[half] == " " and right.startswith("b/") and left[2:] == right[2:]:
            return BoundaryLine(path_a=left[2:], path_b=right[2:])

    # Positional: third and fourth whitespace fields of the whole line.
    fields = line.split()
    if len(fields) < 4:
        return None
    return BoundaryLine(
        path_a=_strip_prefix(fields[2], "a/"),
        path_b=_strip_prefix(fields[3], "b/"),
    )


def is_boundary(line: str) -> bool:
    return line.startswith(BOUNDARY_PREFIX)


def classify_line(line: str) -> DiffLine:
    """Classify one diff line.

    A boundary line whose paths cannot be read is reported as ``Other``.
    File headers (``+++``/``---``) count as additions/removals, matching the
    simple prefix heuristic used for diff statistics.
    """
    if is_boundary(line):
        return parse_boundary(line) or Other(line)
    if line.startswith("@@"):
        return HunkHeader(line)
    if line.startswith("+"):
        return Addition(line)
    if line.startswith("-"):
        return Removal(line)
    if line.startswith(" "):
        return Context(line)
    return Other(line)
