"""Tests for git repository operations."""

from pathlib import Path

import pytest
from conftest import commit_file
from git import Repo

from gmc.git import BranchNotFoundError, FetchResult, GitError, GitRepo, NotARepositoryError, RemoteNotFoundError


def test_is_valid(test_repo: Path, tmp_path: Path) -> None:
    """Test repository validation."""
    empty = tmp_path / "empty"
    empty.mkdir()
    assert GitRepo.is_valid(test_repo)
    assert not GitRepo.is_valid(empty)
    assert not GitRepo.is_valid(tmp_path / "missing")


def test_open_invalid_repo(tmp_path: Path) -> None:
    """Test that opening a plain directory fails."""
    with pytest.raises(NotARepositoryError, match="Not a Git repository"):
        GitRepo(tmp_path)


def test_open_bare_repo(test_env: tuple[Path, Path]) -> None:
    """Test that bare repositories are rejected."""
    _, remote_path = test_env
    with pytest.raises(NotARepositoryError, match="bare"):
        GitRepo(remote_path)


def test_checkout(test_repo: Path) -> None:
    """Test checking out an existing branch."""
    repo = GitRepo(test_repo)
    repo.checkout("main")
    assert repo.current_branch() == "main"


def test_checkout_missing_branch(test_repo: Path) -> None:
    """Test checking out a branch that does not exist."""
    repo = GitRepo(test_repo)
    with pytest.raises(BranchNotFoundError) as exc_info:
        repo.checkout("master")
    assert exc_info.value.branch == "master"
    assert repo.current_branch() == "feature/active"


def test_list_local_branches(test_repo: Path) -> None:
    """Test that local branches are listed by short name in ref order."""
    repo = GitRepo(test_repo)
    assert repo.list_local_branches() == ["feature/active", "feature/merged", "local-only", "main"]


def test_list_remote_branches(test_repo: Path) -> None:
    """Test that the remote is queried for its current branches."""
    repo = GitRepo(test_repo)
    assert repo.list_remote_branches("origin") == {"main", "feature/active"}


def test_list_remote_branches_is_live(test_env: tuple[Path, Path]) -> None:
    """Test that remote branches created after the last fetch are seen."""
    local_path, remote_path = test_env
    Repo(remote_path).git.branch("new-on-remote", "main")
    repo = GitRepo(local_path)
    assert "new-on-remote" in repo.list_remote_branches("origin")


def test_list_remote_branches_unknown_remote(test_repo: Path) -> None:
    """Test that an unconfigured remote is reported."""
    repo = GitRepo(test_repo)
    with pytest.raises(RemoteNotFoundError) as exc_info:
        repo.list_remote_branches("upstream")
    assert exc_info.value.remote == "upstream"


def test_list_remote_branches_unreachable(test_repo: Path, tmp_path: Path) -> None:
    """Test fallback to remote-tracking branches when the remote is unreachable."""
    repo = GitRepo(test_repo)
    repo.repo.remote("origin").set_url(str(tmp_path / "nowhere"))
    assert repo.list_remote_branches("origin") == {"main", "feature/active"}


def test_fetch_prune(test_env: tuple[Path, Path]) -> None:
    """Test that fetch prunes remote-tracking branches deleted on the remote."""
    local_path, remote_path = test_env
    Repo(remote_path).git.branch("-D", "feature/active")
    repo = GitRepo(local_path)

    assert repo.fetch_prune("origin") is FetchResult.UPDATED
    tracking = [ref.name for ref in repo.repo.remote("origin").refs]
    assert "origin/feature/active" not in tracking


def test_fetch_prune_up_to_date(test_env: tuple[Path, Path]) -> None:
    """Test that a fetch with nothing new reports up to date."""
    local_path, remote_path = test_env
    Repo(remote_path).git.branch("-D", "feature/active")
    repo = GitRepo(local_path)

    assert repo.fetch_prune("origin") is FetchResult.UPDATED
    assert repo.fetch_prune("origin") is FetchResult.UP_TO_DATE


def test_fetch_prune_unknown_remote(test_repo: Path) -> None:
    """Test fetching from an unconfigured remote."""
    repo = GitRepo(test_repo)
    with pytest.raises(RemoteNotFoundError):
        repo.fetch_prune("upstream")


def test_fetch_prune_unreachable(test_repo: Path, tmp_path: Path) -> None:
    """Test fetching from an unreachable remote."""
    repo = GitRepo(test_repo)
    repo.repo.remote("origin").set_url(str(tmp_path / "nowhere"))
    with pytest.raises(GitError, match="Failed to fetch from remote origin"):
        repo.fetch_prune("origin")


def test_delete_merged_branch(test_repo: Path) -> None:
    """Test deleting a merged branch."""
    repo = GitRepo(test_repo)
    repo.checkout("main")
    repo.delete_branch("feature/merged")
    assert "feature/merged" not in repo.list_local_branches()


def test_delete_unmerged_branch_refused(test_repo: Path) -> None:
    """Test that branches with unmerged commits are not deleted."""
    repo = GitRepo(test_repo)
    repo.checkout("main")
    repo.repo.create_head("wip/unmerged").checkout()
    commit_file(repo.repo, "wip.txt", "work in progress")
    repo.checkout("main")

    with pytest.raises(GitError):
        repo.delete_branch("wip/unmerged")
    assert "wip/unmerged" in repo.list_local_branches()


def test_current_branch_detached(test_repo: Path) -> None:
    """Test that a detached HEAD has no current branch."""
    repo = GitRepo(test_repo)
    repo.repo.git.checkout("--detach")
    assert repo.current_branch() == ""
