"""Budgeted diff analysis against a completion API."""

from diffsage.analysis.orchestrator import AnalysisOrchestrator, AnalysisResult, AnalysisState
from diffsage.analysis.prompts import AnalysisIdentity, get_analysis_prompt

__all__ = [
    "AnalysisIdentity",
    "AnalysisOrchestrator",
    "AnalysisResult",
    "AnalysisState",
    "get_analysis_prompt",
]
