"""Obtain diffs from a git repository."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from diffsage.diff.filter import DiffFilter
from diffsage.diff.path_filter import GIT_EXCLUDE_PATHSPECS
from diffsage.exceptions import GitError

logger = logging.getLogger("diffsage.git")

GIT_TIMEOUT_SECONDS = 120


def _run_git(repo_path: Path, args: list[str]) -> str:
    if not Path(repo_path).is_dir():
        raise GitError(f"Project path does not exist: {repo_path}")

    logger.debug(f"git {' '.join(args)} (cwd={repo_path})")
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=repo_path,
            capture_output=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found on PATH") from e
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git {args[0]} timed out after {GIT_TIMEOUT_SECONDS}s") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(f"git {args[0]} failed: {stderr}")
    return result.stdout.decode("utf-8", errors="replace")


def _pathspecs(use_pathspecs: bool) -> list[str]:
    return ["--", *GIT_EXCLUDE_PATHSPECS] if use_pathspecs else []


def read_range_diff(
    repo_path: Path, from_ref: str, to_ref: str, use_pathspecs: bool = True
) -> str:
    """Raw ``git diff`` between two refs, before DiffFilter runs."""
    logger.info(f"Generating diff {from_ref} -> {to_ref} in {repo_path}")
    return _run_git(repo_path, ["diff", from_ref, to_ref, *_pathspecs(use_pathspecs)])


def read_commit_diff(repo_path: Path, commit: str, use_pathspecs: bool = True) -> str:
    """Raw ``git show`` of one commit, before DiffFilter runs."""
    logger.info(f"Generating diff for commit {commit} in {repo_path}")
    return _run_git(
        repo_path, ["show", "--format=fuller", commit, *_pathspecs(use_pathspecs)]
    )


def get_range_diff(
    repo_path: Path,
    from_ref: str,
    to_ref: str,
    diff_filter: DiffFilter | None = None,
    use_pathspecs: bool = True,
) -> str:
    """Diff between two refs (usually tags), with noisy files removed."""
    raw = read_range_diff(repo_path, from_ref, to_ref, use_pathspecs)
    return (diff_filter or DiffFilter()).filter(raw)


def get_commit_diff(
    repo_path: Path,
    commit: str,
    diff_filter: DiffFilter | None = None,
    use_pathspecs: bool = True,
) -> str:
    """Full commit header plus patch for a single commit, with noisy files removed."""
    raw = read_commit_diff(repo_path, commit, use_pathspecs)
    return (diff_filter or DiffFilter()).filter(raw)
