"""Shared test fixtures for diffsage."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from diffsage.config import LLMConfig
from diffsage.llm.base import CompletionRequest, LLMProvider, LLMResponse

SAMPLE_DIFF = """\
diff --git a/package-lock.json b/package-lock.json
index 1111111..2222222 100644
--- a/package-lock.json
+++ b/package-lock.json
@@ -1,3 +1,3 @@
 {
-  "version": "1.0.0"
+  "version": "1.1.0"
 }
diff --git a/src/app.js b/src/app.js
index 3333333..4444444 100644
--- a/src/app.js
+++ b/src/app.js
@@ -1,2 +1,3 @@
 const a = 1;
-const b = 2;
+const b = 3;
+const c = 4;
"""

COMMIT_PREAMBLE = """\
commit 3f2a9e1c0ffee
Author:     Dev <dev@example.com>
AuthorDate: Mon Jan 1 00:00:00 2024 +0000

    Bump version and tweak app

"""


class FakeProvider(LLMProvider):
    """Replays scripted outcomes: strings are responses, exceptions are raised."""

    name = "fake"

    def __init__(self, outcomes: list) -> None:
        super().__init__()
        self.outcomes = list(outcomes)
        self.requests: list[CompletionRequest] = []

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(content=outcome, model=request.model)


@pytest.fixture
def sample_diff() -> str:
    return SAMPLE_DIFF


@pytest.fixture
def llm_config() -> LLMConfig:
    return LLMConfig()


def _git(repo: Path, *args: str) -> None:
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=repo,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A repository with tags v1 and v2; v2 touches source, a lockfile and dist/."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "mylib"
    (repo / "src").mkdir(parents=True)
    (repo / "dist").mkdir()
    (repo / "src" / "app.js").write_text("const a = 1;\nconst b = 2;\n")
    (repo / "package-lock.json").write_text('{\n  "version": "1.0.0"\n}\n')
    (repo / "dist" / "bundle.js").write_text("var a=1;\n")

    _git(repo, "init", "-q")
    _git(repo, "add", ".")
    _git(repo, "commit", "-q", "-m", "initial")
    _git(repo, "tag", "v1")

    (repo / "src" / "app.js").write_text("const a = 1;\nconst b = 3;\nconst c = 4;\n")
    (repo / "package-lock.json").write_text('{\n  "version": "1.1.0"\n}\n')
    (repo / "dist" / "bundle.js").write_text("var a=1,b=3,c=4;\n")
    (repo / "CHANGELOG.md").write_text("## 1.1.0\n- tweak app\n")

    _git(repo, "add", ".")
    _git(repo, "commit", "-q", "-m", "tweak app")
    _git(repo, "tag", "v2")
    return repo
