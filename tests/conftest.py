"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo

AUTHOR = Actor("Test User", "test@example.com")


def commit_file(repo: Repo, name: str, content: str) -> None:
    """Write a file in the working tree and commit it."""
    path = Path(repo.working_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    repo.index.commit(f"Add {name}", author=AUTHOR, committer=AUTHOR)


def local_branches(path: Path) -> list[str]:
    """List local branch names of the repository at path."""
    repo = Repo(path)
    return sorted(head.name for head in repo.heads)


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    Local branches:
        main            on the remote
        feature/active  on the remote
        feature/merged  merged into main, deleted on the remote
        local-only      never pushed

    The local repository is left on feature/active.

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)
    local_repo.config_writer().set_value("user", "name", AUTHOR.name).release()
    local_repo.config_writer().set_value("user", "email", AUTHOR.email).release()

    commit_file(local_repo, "README.md", "# Test Repository")
    local_repo.git.branch("-M", "main")
    main_branch = local_repo.heads.main

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")

    def create_branch(name: str, merge: bool = False) -> None:
        main_branch.checkout()
        local_repo.create_head(name).checkout()
        commit_file(local_repo, f"{name}.txt", f"{name} content")
        origin.push(name)
        if merge:
            main_branch.checkout()
            local_repo.git.merge(name, "--no-ff")
            origin.push("main")

    create_branch("feature/active")
    create_branch("feature/merged", merge=True)
    origin.push(":feature/merged")

    local_repo.create_head("local-only", "main")
    local_repo.heads["feature/active"].checkout()

    yield local_path, remote_path

    local_repo.close()


@pytest.fixture
def test_repo(test_env: tuple[Path, Path]) -> Path:
    """Local repository path of the test environment."""
    local_path, _ = test_env
    return local_path
