"""Path-based exclusion of noisy files from diffs."""

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    # Lock files
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "composer.lock",
    "Gemfile.lock",
    "poetry.lock",
    "Pipfile.lock",
    "go.sum",
    # Generated/compiled files
    ".min.js",
    ".min.css",
    ".bundle.js",
    ".bundle.css",
    # Build directories, matched anywhere in the path
    "dist/",
    "build/",
    "output/",
    "out/",
    # Auto-generated docs
    "CHANGELOG.md",
    # IDE/editor files
    ".vscode/",
    ".idea/",
    # OS files
    ".DS_Store",
    "Thumbs.db",
    # Source maps
    ".json.map",
    ".js.map",
    ".css.map",
)

# Handed to git so the heaviest files never leave the repository.
GIT_EXCLUDE_PATHSPECS: tuple[str, ...] = (
    ":!package-lock.json",
    ":!yarn.lock",
    ":!pnpm-lock.yaml",
    ":!composer.lock",
    ":!Gemfile.lock",
    ":!poetry.lock",
    ":!Pipfile.lock",
    ":!go.sum",
    ":!*.min.js",
    ":!*.min.css",
    ":!dist/*",
    ":!build/*",
)


class PathFilter:
    """Decides whether a file's hunks should be dropped from a diff.

    Patterns are plain, case-sensitive substrings. A path is excluded when it
    contains (or ends with) any of them; there is no glob support.
    """

    def __init__(self, patterns: Iterable[str] = DEFAULT_EXCLUDE_PATTERNS) -> None:
        self.patterns: tuple[str, ...] = tuple(p for p in patterns if p)

    @classmethod
    def with_extra(cls, extra: Iterable[str]) -> PathFilter:
        """Default rules plus additional patterns."""
        return cls((*DEFAULT_EXCLUDE_PATTERNS, *extra))

    def should_exclude(self, path: str) -> bool:
        return any(p in path or path.endswith(p) for p in self.patterns)

    def __repr__(self) -> str:
        return f"PathFilter({len(self.patterns)} patterns)"
