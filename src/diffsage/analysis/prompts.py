"""Instruction templates for diff analysis."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisIdentity:
    """What is being analyzed: a tag range or a single commit of a project."""

    project: str
    from_ref: str
    to_ref: str = ""

    @classmethod
    def for_range(cls, project: str, from_ref: str, to_ref: str) -> AnalysisIdentity:
        return cls(project=project, from_ref=from_ref, to_ref=to_ref)

    @classmethod
    def for_commit(cls, project: str, commit: str) -> AnalysisIdentity:
        return cls(project=project, from_ref=commit)

    @property
    def is_commit(self) -> bool:
        return not self.to_ref

    @property
    def subject_label(self) -> str:
        return self.project

    @property
    def range_label(self) -> str:
        if self.is_commit:
            return f"commit {self.from_ref}"
        return f"{self.from_ref} → {self.to_ref}"

    @property
    def title(self) -> str:
        if self.is_commit:
            return f"{self.project} commit {self.from_ref} change analysis"
        return f"{self.project} change analysis ({self.range_label})"


_REPORT_SECTIONS = """\
## 📊 Overview
- Target: {subject} {range_label}
- Purpose: prevent side effects for library users
- Focus: behavior changes

## 🌐 Compatibility Impact
For every file with a real behavior change:
- File name and the concrete code change
- Runtime/platform APIs the change relies on and their minimum supported versions
- Which environments would fail, and a safe coding pattern

## 🔧 Library User Impact
For API, behavior and performance changes:
- File name and concrete change
- Whether user code must change
- Performance improvements or caveats
- Compatibility issues and how to handle them

## ⚠️ Upgrade Checklist
- Scenarios that must be tested
- Things to verify before upgrading
- Recommended rollout steps

## 📈 Overall Assessment
- Change size (large/medium/small)
- Side-effect risk (high/medium/low); any compatibility problem means high
- Upgrade recommendation (now/after testing/with caution)
- Key files to review

## 💡 Conclusion
- Summary of the main side effects
- Safe upgrade strategy
- Fixes needed before release, if any
"""


def get_analysis_prompt(identity: AnalysisIdentity, diff_content: str) -> str:
    """Build the user prompt for a tag range or a single commit."""
    subject = identity.subject_label
    range_label = identity.range_label
    if identity.is_commit:
        scope = f"the changes in {subject} {range_label}"
    else:
        scope = f"the changes in {subject} from {range_label}"

    sections = _REPORT_SECTIONS.format(subject=subject, range_label=range_label)

    return f"""Analyze {scope} from the point of view of a developer who builds and uses this library.

**Goal**: find side effects that an upgrade could cause for library users before they happen.

**Rules**:
- Only report changes that affect the built library's behavior for its users
- Skip changes with no runtime effect (formatting, comments)
- Focus on API changes, behavior and logic changes, performance and optimizations
- Report every behavior change, even if users are unlikely to notice it
- For each change, name the file and show the actual code change

Write a markdown report in this format:

# {identity.title} - side effect analysis

{sections}
**Diff to analyze:**
{diff_content}"""
