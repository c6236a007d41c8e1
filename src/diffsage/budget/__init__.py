"""Token estimation and budget truncation."""

from diffsage.budget.tokens import TokenEstimator
from diffsage.budget.truncator import TRUNCATION_MARKER, BudgetTruncator, DiffStats

__all__ = ["BudgetTruncator", "DiffStats", "TRUNCATION_MARKER", "TokenEstimator"]
