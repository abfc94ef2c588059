"""Repository maintenance workflow.

Runs four steps against a single repository:

1. Check out the primary branch (``main``, falling back to ``master``)
2. Fetch from the remote with pruning (failures only warn)
3. Identify local branches that no longer exist on the remote
4. Report them, then delete them when ``force`` is set
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from gmc.branches import find_stale_branches
from gmc.git import BranchNotFoundError, GitError, RemoteNotFoundError, Repository
from gmc.ui import Reporter

PRIMARY_BRANCHES = ("main", "master")


class WorkflowState(Enum):
    """Workflow progress."""

    INIT = "init"
    CHECKED_OUT = "checked out"
    FETCHED = "fetched"
    STALE_IDENTIFIED = "stale identified"
    EARLY_EXIT = "no stale branches"
    DRY_RUN_REPORTED = "dry run reported"
    DELETED = "deleted"
    REFUSED_NO_FORCE = "refused without force"
    FAILED = "failed"


TRANSITIONS: dict[WorkflowState, set[WorkflowState]] = {
    WorkflowState.INIT: {WorkflowState.CHECKED_OUT},
    WorkflowState.CHECKED_OUT: {WorkflowState.FETCHED, WorkflowState.STALE_IDENTIFIED},
    WorkflowState.FETCHED: {WorkflowState.STALE_IDENTIFIED},
    WorkflowState.STALE_IDENTIFIED: {
        WorkflowState.EARLY_EXIT,
        WorkflowState.DRY_RUN_REPORTED,
        WorkflowState.DELETED,
        WorkflowState.REFUSED_NO_FORCE,
    },
}

TERMINAL_STATES = {
    WorkflowState.EARLY_EXIT,
    WorkflowState.DRY_RUN_REPORTED,
    WorkflowState.DELETED,
    WorkflowState.REFUSED_NO_FORCE,
    WorkflowState.FAILED,
}


class MaintenanceError(Exception):
    """Fatal maintenance error."""


class PrimaryBranchNotFoundError(MaintenanceError):
    """Neither main nor master exists."""


class PrimaryBranchCheckoutError(MaintenanceError):
    """The primary branch exists but git refused to check it out."""


class RemoteNotConfiguredError(MaintenanceError):
    """Remote used for the staleness check is not configured."""


class StaleBranchLookupError(MaintenanceError):
    """Branches could not be listed."""


class ForceRequiredError(MaintenanceError):
    """Stale branches exist but deletion was not confirmed."""


class BranchDeletionError(MaintenanceError):
    """A stale branch could not be deleted."""

    def __init__(self, branch: str, cause: GitError, deleted: list[str]) -> None:
        """Initialize error.

        Args:
            branch: Branch that failed to delete
            cause: Underlying git error
            deleted: Branches deleted before the failure, they stay deleted
        """
        super().__init__(f"failed to delete branch {branch}: {cause}")
        self.branch = branch
        self.cause = cause
        self.deleted = deleted


@dataclass
class MaintenanceOptions:
    """Options for a maintenance run."""

    remote: str = "origin"
    dry_run: bool = False
    force: bool = False
    verbose: bool = False


@dataclass
class MaintenanceResult:
    """Outcome of a maintenance run."""

    state: WorkflowState
    primary_branch: str = ""
    stale_branches: list[str] = field(default_factory=list)
    deleted_branches: list[str] = field(default_factory=list)
    fetch_error: Optional[str] = None


class Maintenance:
    """Maintenance workflow for one repository."""

    def __init__(self, repo: Repository, options: MaintenanceOptions, reporter: Optional[Reporter] = None) -> None:
        self.repo = repo
        self.options = options
        self.reporter = reporter or Reporter(verbose=options.verbose)
        self.state = WorkflowState.INIT
        self.result = MaintenanceResult(state=self.state)

    def _advance(self, state: WorkflowState) -> None:
        if self.state in TERMINAL_STATES or (
            state is not WorkflowState.FAILED and state not in TRANSITIONS[self.state]
        ):
            raise RuntimeError(f"Invalid workflow transition: {self.state.value} -> {state.value}")
        self.state = state
        self.result.state = state

    def _fail(self, error: MaintenanceError) -> MaintenanceError:
        self._advance(WorkflowState.FAILED)
        return error

    def run(self) -> MaintenanceResult:
        """Run every step in order.

        Raises:
            MaintenanceError: On any fatal step failure
        """
        self.checkout_primary_branch()
        self.fetch_and_prune()
        stale = self.identify_stale_branches()
        if stale:
            self.delete_stale_branches(stale)
        self.reporter.success("Git maintenance completed successfully!")
        return self.result

    def checkout_primary_branch(self) -> str:
        """Check out main, or master when there is no main branch.

        Raises:
            PrimaryBranchNotFoundError: If neither branch exists
            PrimaryBranchCheckoutError: If git refuses to check out an existing branch
        """
        self.reporter.info("Checking out main branch...")
        self.reporter.detail("Looking for main or master branch...")
        last_error: Optional[GitError] = None
        for branch in PRIMARY_BRANCHES:
            try:
                self.repo.checkout(branch)
            except BranchNotFoundError as err:
                last_error = err
                continue
            except GitError as err:
                raise self._fail(PrimaryBranchCheckoutError(f"failed to checkout {branch} branch: {err}")) from err
            self.result.primary_branch = branch
            self._advance(WorkflowState.CHECKED_OUT)
            self.reporter.success("Checked out %s branch", branch)
            return branch

        raise self._fail(
            PrimaryBranchNotFoundError(f"no primary branch found, failed to checkout main or master: {last_error}")
        ) from last_error

    def fetch_and_prune(self) -> bool:
        """Fetch from the remote with pruning.

        Returns:
            True if the fetch succeeded. Failures are reported as warnings.
        """
        remote = self.options.remote
        self.reporter.info("Fetching from remote '%s' with pruning...", remote)
        self.reporter.detail("This will update local remote-tracking branches...")
        try:
            self.repo.fetch_prune(remote)
        except GitError as err:
            self.result.fetch_error = str(err)
            self.reporter.warning("Skipping fetch/prune: %s", err)
            self.reporter.detail("Remote unavailable, proceeding with local state only...")
            return False

        self._advance(WorkflowState.FETCHED)
        self.reporter.success("Fetched and pruned remote branches")
        return True

    def identify_stale_branches(self) -> list[str]:
        """Compare local branches with the remote's branches.

        Ends the workflow early when nothing is stale.
        """
        remote = self.options.remote
        self.reporter.info("Identifying stale local branches...")
        self.reporter.detail("Comparing local branches with remote branches...")
        try:
            remote_branches = self.repo.list_remote_branches(remote)
        except RemoteNotFoundError as err:
            raise self._fail(RemoteNotConfiguredError(f"remote {remote} not found")) from err
        except GitError as err:
            raise self._fail(StaleBranchLookupError(f"failed to list remote branches: {err}")) from err

        try:
            local_branches = self.repo.list_local_branches()
            current = self.repo.current_branch()
        except GitError as err:
            raise self._fail(StaleBranchLookupError(f"failed to list local branches: {err}")) from err

        stale = find_stale_branches(local_branches, remote_branches, current)
        self.result.stale_branches = stale
        self._advance(WorkflowState.STALE_IDENTIFIED)
        if not stale:
            self._advance(WorkflowState.EARLY_EXIT)
            self.reporter.success("No stale branches found")
            return stale

        self.reporter.warning("Found %d stale local branch(es):", len(stale))
        self.reporter.branch_list(stale)
        return stale

    def delete_stale_branches(self, stale: list[str]) -> list[str]:
        """Delete stale branches in order, gated by dry run and force.

        Raises:
            ForceRequiredError: If neither dry run nor force was requested
            BranchDeletionError: On the first branch that fails to delete
        """
        if self.options.dry_run:
            self._advance(WorkflowState.DRY_RUN_REPORTED)
            self.reporter.info("Dry run: would delete %d branch(es)", len(stale))
            return []

        if not self.options.force:
            self._advance(WorkflowState.REFUSED_NO_FORCE)
            self.reporter.warning("Use --force to actually delete branches, or --dry-run to preview")
            raise ForceRequiredError("refusing to delete branches without --force flag")

        self.reporter.info("Deleting stale branches...")
        self.reporter.detail("Deleting %d branch(es)...", len(stale))
        deleted = self.result.deleted_branches
        for branch in stale:
            try:
                self.repo.delete_branch(branch)
            except GitError as err:
                raise self._fail(BranchDeletionError(branch, err, list(deleted))) from err
            deleted.append(branch)
            self.reporter.detail("Deleted %s", branch)

        self._advance(WorkflowState.DELETED)
        self.reporter.success("Deleted %d stale branch(es)", len(deleted))
        return deleted
