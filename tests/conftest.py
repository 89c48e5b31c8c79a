from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from cherry_plan.plan import PlanStore
from tests.utils import FakeVCS, git_commit, run


@pytest.fixture()
def fake_vcs(tmp_path: Path) -> FakeVCS:
    """main has two commits; feature forks from it and adds three."""
    vcs = FakeVCS(tmp_path)
    vcs.commit("main", "Initial commit")
    vcs.commit("main", "Add README")
    vcs.fork("feature", "main")
    vcs.commit("feature", "Add parser")
    vcs.commit("feature", "Fix bug")
    vcs.commit("feature", "Update docs")
    return vcs


@pytest.fixture()
def store(fake_vcs: FakeVCS, tmp_path: Path) -> PlanStore:
    return PlanStore(fake_vcs, plan_dir=tmp_path / "plans")


@pytest.fixture()
def temp_repo(tmp_path: Path) -> Iterator[Path]:
    """Real git repository on branch main with one commit."""
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    run(["git", "init", "-q"], cwd=repo_dir)
    run(["git", "symbolic-ref", "HEAD", "refs/heads/main"], cwd=repo_dir)
    run(["git", "config", "user.name", "Cherry Plan"], cwd=repo_dir)
    run(["git", "config", "user.email", "plan@example.com"], cwd=repo_dir)
    run(["git", "config", "commit.gpgsign", "false"], cwd=repo_dir)
    git_commit(repo_dir, "README.md", "# Demo\n", "Initial commit")
    yield repo_dir


@pytest.fixture()
def feature_repo(temp_repo: Path) -> Path:
    """temp_repo plus a feature branch with three commits touching separate files."""
    run(["git", "checkout", "-q", "-b", "feature"], cwd=temp_repo)
    git_commit(temp_repo, "parser.py", "def parse():\n    pass\n", "Add parser")
    git_commit(temp_repo, "bug.txt", "fixed\n", "Fix bug")
    git_commit(temp_repo, "docs.md", "docs\n", "Update docs")
    run(["git", "checkout", "-q", "main"], cwd=temp_repo)
    return temp_repo
