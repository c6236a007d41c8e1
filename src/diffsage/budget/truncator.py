"""Fit a diff into a token budget.

The output always starts with a short statistics header, followed by as many
leading diff lines as fit. Lines are never reordered or sampled: the first
line that does not fit ends the body and a marker line is appended.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from diffsage.budget.tokens import TokenEstimator

logger = logging.getLogger("diffsage.budget")

TRUNCATION_MARKER = "... (remainder omitted due to token budget)\n"


@dataclass
class DiffStats:
    files: int = 0
    additions: int = 0
    removals: int = 0

    def header(self) -> str:
        return (
            "=== Statistics ===\n"
            f"{self.files} file(s), +{self.additions} -{self.removals} lines\n\n"
        )


def split_lines(text: str) -> list[str]:
    """Split on newlines without producing a phantom last line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def compute_stats(lines: list[str]) -> DiffStats:
    """Count files and changed lines with plain prefix checks.

    ``+++``/``---`` file headers are counted as changed lines too.
    """
    stats = DiffStats()
    for line in lines:
        if line.startswith("diff "):
            stats.files += 1
        if line.startswith("+"):
            stats.additions += 1
        elif line.startswith("-"):
            stats.removals += 1
    return stats


class BudgetTruncator:
    """Truncates diff text to an estimated token budget."""

    def __init__(self, estimator: type[TokenEstimator] = TokenEstimator) -> None:
        self.estimator = estimator

    def truncate(self, diff_text: str, budget: int) -> str:
        lines = split_lines(diff_text)
        header = compute_stats(lines).header()

        available = budget - self.estimator.estimate(header)
        if available <= 0:
            logger.warning(f"Budget of {budget} tokens does not cover the stats header")
            return header + TRUNCATION_MARKER

        # Running counts keep the loop linear; the estimate of the joined text
        # equals the estimate recomputed from scratch.
        dense = other = 0
        body: list[str] = []
        truncated = False
        for line in lines:
            chunk = line + "\n"
            d, o = self.estimator.count_chars(chunk)
            if self.estimator.from_counts(dense + d, other + o) < available:
                body.append(chunk)
                dense += d
                other += o
            else:
                body.append(TRUNCATION_MARKER)
                truncated = True
                break

        if truncated:
            logger.info(
                f"Truncated diff to {len(body) - 1} of {len(lines)} lines "
                f"for a {budget}-token budget"
            )
        return header + "".join(body)
