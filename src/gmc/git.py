"""Git repository operations."""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from gmc.branches import short_branch_name
from gmc.logging_config import get_logger

logger = get_logger(__name__)


class FetchResult(Enum):
    """Outcome of a successful fetch."""

    UPDATED = "updated"
    UP_TO_DATE = "up to date"


class GitError(Exception):
    """Git operation error."""


class NotARepositoryError(GitError):
    """Path is not a usable git repository."""


class BranchNotFoundError(GitError):
    """No local branch with the requested name."""

    def __init__(self, branch: str) -> None:
        super().__init__(f"Branch {branch} not found")
        self.branch = branch


class RemoteNotFoundError(GitError):
    """Remote is not configured in the repository."""

    def __init__(self, remote: str) -> None:
        super().__init__(f"Remote {remote} not found")
        self.remote = remote


class Repository(ABC):
    """Repository operations used by the maintenance workflow."""

    @abstractmethod
    def checkout(self, branch: str) -> None:
        """Check out a local branch.

        Raises:
            BranchNotFoundError: If no local branch has this name
            GitError: If the checkout fails
        """

    @abstractmethod
    def fetch_prune(self, remote: str) -> FetchResult:
        """Fetch all branches from a remote, pruning deleted remote-tracking refs.

        Raises:
            RemoteNotFoundError: If the remote is not configured
            GitError: If the fetch fails
        """

    @abstractmethod
    def list_local_branches(self) -> list[str]:
        """List local branch names in enumeration order."""

    @abstractmethod
    def list_remote_branches(self, remote: str) -> set[str]:
        """List the branch names advertised by a remote.

        Raises:
            RemoteNotFoundError: If the remote is not configured
        """

    @abstractmethod
    def current_branch(self) -> str:
        """Get the checked out branch name, empty for a detached HEAD."""

    @abstractmethod
    def delete_branch(self, branch: str) -> None:
        """Delete a local branch.

        Raises:
            GitError: If git refuses the deletion
        """


class GitRepo(Repository):
    """Git repository backed by GitPython."""

    def __init__(self, path: Path) -> None:
        """Open repository."""
        try:
            self.repo: Repo = Repo(path)
        except (InvalidGitRepositoryError, NoSuchPathError) as err:
            raise NotARepositoryError(f"Not a Git repository: {path}") from err
        except (GitCommandError, ValueError) as err:
            raise NotARepositoryError(f"Failed to open repository at {path}: {err}") from err
        if self.repo.bare:
            raise NotARepositoryError("Cannot operate on bare repository")

    @staticmethod
    def is_valid(path: Path) -> bool:
        """Check whether a path is a git repository."""
        try:
            Repo(path).close()
        except (InvalidGitRepositoryError, NoSuchPathError, GitCommandError, ValueError):
            return False
        return True

    def _get_remote(self, remote: str):
        if remote not in [r.name for r in self.repo.remotes]:
            raise RemoteNotFoundError(remote)
        return self.repo.remote(remote)

    def checkout(self, branch: str) -> None:
        try:
            head = self.repo.heads[branch]
        except IndexError as err:
            raise BranchNotFoundError(branch) from err
        logger.debug("Checking out %s", branch)
        try:
            head.checkout()
        except GitCommandError as err:
            raise GitError(f"Failed to checkout {branch}: {err}") from err

    def fetch_prune(self, remote: str) -> FetchResult:
        self._get_remote(remote)
        logger.debug("Fetching %s with --prune", remote)
        try:
            # git reports updated and pruned refs on stderr, nothing when up to date
            _, _, stderr = self.repo.git.fetch(remote, "--prune", with_extended_output=True)
        except GitCommandError as err:
            raise GitError(f"Failed to fetch from remote {remote}: {err}") from err

        if stderr.strip():
            return FetchResult.UPDATED
        return FetchResult.UP_TO_DATE

    def list_local_branches(self) -> list[str]:
        try:
            output = self.repo.git.for_each_ref("--format=%(refname)", "refs/heads")
        except GitCommandError as err:
            raise GitError(f"Failed to list branches: {err}") from err
        return [short_branch_name(ref) for ref in output.splitlines() if ref]

    def list_remote_branches(self, remote: str) -> set[str]:
        self._get_remote(remote)
        logger.debug("Listing branches on %s", remote)
        try:
            output = self.repo.git.ls_remote("--heads", remote)
        except GitCommandError as err:
            # Remote is configured but unreachable, use the last fetched state
            logger.warning("Could not query remote %s, using remote-tracking branches: %s", remote, err)
            return self._list_tracking_branches(remote)

        branches = set()
        for line in output.splitlines():
            _, _, ref = line.partition("\t")
            if ref:
                branches.add(short_branch_name(ref))
        return branches

    def _list_tracking_branches(self, remote: str) -> set[str]:
        try:
            output = self.repo.git.for_each_ref("--format=%(refname)", f"refs/remotes/{remote}")
        except GitCommandError as err:
            raise GitError(f"Failed to list remote-tracking branches for {remote}: {err}") from err
        names = {short_branch_name(ref, remote) for ref in output.splitlines() if ref}
        names.discard("HEAD")
        return names

    def current_branch(self) -> str:
        try:
            return self.repo.active_branch.name
        except TypeError:
            # Detached HEAD
            return ""

    def delete_branch(self, branch: str) -> None:
        logger.debug("Deleting %s", branch)
        try:
            self.repo.git.branch("-d", branch)
        except GitCommandError as err:
            raise GitError(str(err)) from err
