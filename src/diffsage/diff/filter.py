"""Drop whole file sections from a unified diff.

The raw diff is split into a preamble (commit headers and anything else
before the first ``diff --git`` line) followed by one FileSection per changed
file. Sections whose post-change path is matched by the PathFilter are
excluded; everything else is emitted verbatim and in order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from diffsage.diff.classify import BoundaryLine, classify_line, is_boundary
from diffsage.diff.path_filter import PathFilter

logger = logging.getLogger("diffsage.diff")


@dataclass
class FileSection:
    """The lines of one changed file, boundary line included."""

    path: str
    body: list[str] = field(default_factory=list)
    is_excluded: bool = False


@dataclass
class DiffDocument:
    """A diff split into its preamble and per-file sections."""

    preamble: list[str] = field(default_factory=list)
    sections: list[FileSection] = field(default_factory=list)

    @classmethod
    def parse(cls, raw_diff: str, path_filter: PathFilter | None = None) -> DiffDocument:
        """Split ``raw_diff`` in a single forward pass, marking excluded sections."""
        doc = cls()
        current: FileSection | None = None

        for line in raw_diff.split("\n"):
            if is_boundary(line):
                parsed = classify_line(line)
                if isinstance(parsed, BoundaryLine):
                    excluded = bool(path_filter and path_filter.should_exclude(parsed.path_b))
                    current = FileSection(path=parsed.path_b, is_excluded=excluded)
                else:
                    # Unreadable boundary: keep it, nothing to match against.
                    current = FileSection(path="")
                doc.sections.append(current)

            if current is None:
                doc.preamble.append(line)
            else:
                current.body.append(line)

        return doc

    @property
    def kept_sections(self) -> list[FileSection]:
        return [s for s in self.sections if not s.is_excluded]

    @property
    def excluded_paths(self) -> list[str]:
        return [s.path for s in self.sections if s.is_excluded]

    def render(self) -> str:
        """Join the preamble and the kept sections back into diff text."""
        lines = list(self.preamble)
        for section in self.kept_sections:
            lines.extend(section.body)
        return "\n".join(lines)


class DiffFilter:
    """Removes excluded files from a raw diff."""

    def __init__(self, path_filter: PathFilter | None = None) -> None:
        self.path_filter = path_filter or PathFilter()

    def split(self, raw_diff: str) -> DiffDocument:
        return DiffDocument.parse(raw_diff, self.path_filter)

    def filter(self, raw_diff: str) -> str:
        doc = self.split(raw_diff)
        if not doc.sections:
            return raw_diff
        return self.render(doc)

    def render(self, doc: DiffDocument) -> str:
        """Render a split document without its excluded sections."""
        excluded = doc.excluded_paths
        if excluded:
            logger.info(
                f"Excluded {len(excluded)} of {len(doc.sections)} file(s) from diff"
            )
            logger.debug(f"Excluded paths: {', '.join(excluded)}")
        return doc.render()


def filter_diff(raw_diff: str, path_filter: PathFilter | None = None) -> str:
    """Convenience wrapper around ``DiffFilter(path_filter).filter``."""
    return DiffFilter(path_filter).filter(raw_diff)
