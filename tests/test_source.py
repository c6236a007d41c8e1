"""Tests for git diff retrieval and report persistence."""

from __future__ import annotations

from pathlib import Path

import pytest

from diffsage.analysis.prompts import AnalysisIdentity
from diffsage.diff.filter import DiffFilter
from diffsage.diff.path_filter import PathFilter
from diffsage.diff.source import (
    get_commit_diff,
    get_range_diff,
    read_commit_diff,
    read_range_diff,
)
from diffsage.exceptions import GitError
from diffsage.reports import report_paths, save_report


class TestGitSource:
    def test_range_diff_excludes_noise(self, git_repo: Path):
        diff = get_range_diff(git_repo, "v1", "v2")
        assert "diff --git a/src/app.js b/src/app.js" in diff
        assert "+const c = 4;" in diff
        assert "package-lock.json" not in diff
        assert "dist/bundle.js" not in diff
        assert "CHANGELOG.md" not in diff

    def test_diff_filter_works_without_pathspecs(self, git_repo: Path):
        diff = get_range_diff(git_repo, "v1", "v2", use_pathspecs=False)
        assert "src/app.js" in diff
        assert "package-lock.json" not in diff
        assert "dist/bundle.js" not in diff

    def test_custom_filter(self, git_repo: Path):
        diff = get_range_diff(
            git_repo, "v1", "v2", DiffFilter(PathFilter.with_extra(["src/"]))
        )
        assert "src/app.js" not in diff

    def test_commit_diff_has_header(self, git_repo: Path):
        diff = get_commit_diff(git_repo, "v2")
        assert diff.startswith("commit ")
        assert "CommitDate:" in diff
        assert "tweak app" in diff
        assert "src/app.js" in diff
        assert "package-lock.json" not in diff

    def test_raw_range_diff_keeps_files_for_diff_filter(self, git_repo: Path):
        raw = read_range_diff(git_repo, "v1", "v2")
        assert "CHANGELOG.md" in raw
        assert "package-lock.json" not in raw
        assert DiffFilter().filter(raw) == get_range_diff(git_repo, "v1", "v2")

    def test_raw_commit_diff(self, git_repo: Path):
        raw = read_commit_diff(git_repo, "v2", use_pathspecs=False)
        assert raw.startswith("commit ")
        assert "package-lock.json" in raw

    def test_unknown_ref(self, git_repo: Path):
        with pytest.raises(GitError, match="git diff failed"):
            get_range_diff(git_repo, "v1", "does-not-exist")

    def test_missing_repository(self, tmp_path: Path):
        with pytest.raises(GitError, match="does not exist"):
            get_commit_diff(tmp_path / "nope", "HEAD")


class TestReports:
    def test_range_paths(self, tmp_path: Path):
        paths = report_paths(tmp_path, AnalysisIdentity.for_range("mylib", "v1.0", "v1.1"))
        assert paths.diff == tmp_path / "mylib_v1.0_v1.1_diff.txt"
        assert paths.summary == tmp_path / "mylib_v1.0_v1.1_summary.md"

    def test_commit_paths(self, tmp_path: Path):
        paths = report_paths(tmp_path, AnalysisIdentity.for_commit("mylib", "3f2a9e1"))
        assert paths.diff.name == "mylib_commit_3f2a9e1_diff.txt"
        assert paths.summary.name == "mylib_commit_3f2a9e1_summary.md"

    def test_slashes_in_refs(self, tmp_path: Path):
        paths = report_paths(
            tmp_path, AnalysisIdentity.for_range("mylib", "release/1.0", "release/1.1")
        )
        assert paths.diff.parent == tmp_path
        assert paths.diff.name == "mylib_release_1.0_release_1.1_diff.txt"

    def test_save_creates_directory(self, tmp_path: Path):
        target = tmp_path / "reports" / "x_diff.txt"
        save_report(target, "diff body")
        assert target.read_text(encoding="utf-8") == "diff body"
