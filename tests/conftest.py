"""Shared fixtures: bare git remotes on disk and a recording platform adapter."""

import shutil
import subprocess
from pathlib import Path
from typing import List

import pytest

from gitact.adapters.base import GitPlatformAdapter
from gitact.models import PR, Comment, Issue, RepoRef
from gitact.services.git import RepositoryStore

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

TEST_IDENTITY = ["-c", "user.name=Test", "-c", "user.email=test@example.com", "-c", "commit.gpgsign=false"]


def git(args: List[str], cwd: Path) -> str:
    """Run git for test setup; fail the test on error."""
    proc = subprocess.run(["git"] + args, cwd=cwd, check=True, capture_output=True, text=True)
    return proc.stdout.strip()


@pytest.fixture
def remote_base(tmp_path: Path) -> Path:
    """Directory of bare remotes (<base>/<owner>/<name>.git) with owner/repo on main."""
    base = tmp_path / "remotes"
    seed = tmp_path / "seed"
    seed.mkdir()
    git(["init", "-q"], seed)
    git(["checkout", "-q", "-b", "main"], seed)
    (seed / "README.md").write_text("# demo\n", encoding="utf-8")
    (seed / ".gitignore").write_text("# build output\n*.log\nbuild/\n!keep.log\n", encoding="utf-8")
    git(["add", "-A"], seed)
    git(TEST_IDENTITY + ["commit", "-q", "-m", "init"], seed)
    (base / "owner").mkdir(parents=True)
    git(["clone", "-q", "--bare", str(seed), str(base / "owner" / "repo.git")], tmp_path)
    return base


@pytest.fixture
def repos(tmp_path: Path, remote_base: Path) -> RepositoryStore:
    """RepositoryStore cloning from the local bare remotes into tmp_path/work."""
    return RepositoryStore(tmp_path / "work", remote_base=str(remote_base))


@pytest.fixture
def ref() -> RepoRef:
    return RepoRef(owner="owner", name="repo")


class FakeAdapter(GitPlatformAdapter):
    """Records calls and hands out increasing issue/PR numbers."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self._next = 1

    def _number(self) -> int:
        n = self._next
        self._next += 1
        return n

    def create_issue(self, ref, title, body, labels=None) -> Issue:
        self.calls.append(("create_issue", ref, title, body, labels))
        n = self._number()
        return Issue(
            number=n,
            title=title,
            body=body,
            labels=labels or [],
            html_url=f"https://github.com/{ref.full_name}/issues/{n}",
        )

    def update_issue(self, ref, issue_number, title=None, body=None, labels=None, state=None) -> Issue:
        self.calls.append(("update_issue", ref, issue_number, title, body, labels, state))
        return Issue(
            number=issue_number,
            title=title or "",
            body=body or "",
            labels=labels or [],
            html_url=f"https://github.com/{ref.full_name}/issues/{issue_number}",
        )

    def create_comment(self, ref, issue_number, body) -> Comment:
        self.calls.append(("create_comment", ref, issue_number, body))
        n = self._number()
        return Comment(
            id=n,
            body=body,
            html_url=f"https://github.com/{ref.full_name}/issues/{issue_number}#issuecomment-{n}",
        )

    def create_pr(self, ref, title, body, head, base) -> PR:
        self.calls.append(("create_pr", ref, title, body, head, base))
        n = self._number()
        return PR(
            number=n,
            title=title,
            body=body,
            head_branch=head,
            base_branch=base,
            html_url=f"https://github.com/{ref.full_name}/pull/{n}",
        )


@pytest.fixture
def adapter() -> FakeAdapter:
    return FakeAdapter()
