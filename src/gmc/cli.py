"""Command line interface for gmc."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from gmc import __version__
from gmc.git import GitError, GitRepo
from gmc.logging_config import setup_logging
from gmc.maintenance import Maintenance, MaintenanceError, MaintenanceOptions
from gmc.ui import Reporter

app = typer.Typer(
    help="GIT Maintenance Complete - check out main, fetch with pruning and clean up stale local branches",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gmc {__version__}")
        raise typer.Exit()


def get_repo(path: Path, reporter: Reporter) -> GitRepo:
    """Get git repository instance."""
    if not GitRepo.is_valid(path):
        reporter.error("Not a Git repository: %s", path)
        raise typer.Exit(code=1)
    try:
        return GitRepo(path)
    except GitError as err:
        reporter.error("Failed to open repository: %s", err)
        raise typer.Exit(code=1) from err


@app.command()
def main(
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done without making changes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    remote: str = typer.Option("origin", "--remote", help="Remote name to use"),
    force: bool = typer.Option(False, "--force", help="Required to actually delete stale branches"),
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    debug: bool = typer.Option(False, "--debug", help="Log git operations"),
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """Check out main, fetch and prune, then clean up stale local branches."""
    setup_logging(debug=debug, color=not no_color)
    reporter = Reporter(verbose=verbose, color=not no_color)
    path = path.resolve()

    repo = get_repo(path, reporter)
    reporter.info("Starting Git maintenance in: %s", path)

    options = MaintenanceOptions(remote=remote, dry_run=dry_run, force=force, verbose=verbose)
    try:
        Maintenance(repo, options, reporter).run()
    except MaintenanceError as err:
        reporter.error("%s", err)
        raise typer.Exit(code=1) from err


if __name__ == "__main__":
    app()
