"""Persisting diffs and analysis reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from diffsage.analysis.prompts import AnalysisIdentity

logger = logging.getLogger("diffsage.reports")


@dataclass(frozen=True)
class ReportPaths:
    diff: Path
    summary: Path


def _safe(part: str) -> str:
    return part.replace("/", "_").replace("\\", "_")


def report_paths(reports_dir: Path, identity: AnalysisIdentity) -> ReportPaths:
    """File names for the filtered diff and the markdown summary."""
    if identity.is_commit:
        stem = f"{_safe(identity.project)}_commit_{_safe(identity.from_ref)}"
    else:
        stem = (
            f"{_safe(identity.project)}_{_safe(identity.from_ref)}"
            f"_{_safe(identity.to_ref)}"
        )
    return ReportPaths(
        diff=Path(reports_dir) / f"{stem}_diff.txt",
        summary=Path(reports_dir) / f"{stem}_summary.md",
    )


def save_report(path: Path, content: str) -> Path:
    """Write a report file, creating its directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Wrote {path}")
    return path
