"""Stale branch detection."""

from typing import Iterable, Optional


def short_branch_name(ref: str, remote: Optional[str] = None) -> str:
    """Reduce a reference name to its short branch name.

    ``refs/heads/feature-x`` becomes ``feature-x``. When ``remote`` is given,
    ``refs/remotes/<remote>/feature-x`` and ``<remote>/feature-x`` are reduced
    as well. Nothing else is normalized.
    """
    if ref.startswith("refs/heads/"):
        return ref[len("refs/heads/") :]
    if remote:
        for prefix in (f"refs/remotes/{remote}/", f"{remote}/"):
            if ref.startswith(prefix):
                return ref[len(prefix) :]
    return ref


def find_stale_branches(local: Iterable[str], remote: Iterable[str], current: str) -> list[str]:
    """Get local branches that are missing on the remote.

    Args:
        local: Local branch names in enumeration order
        remote: Branch names advertised by the remote
        current: Checked out branch, never reported as stale

    Returns:
        Stale branch names, in local order
    """
    remote_names = set(remote)
    stale: list[str] = []
    for branch in local:
        if branch == current or branch in remote_names or branch in stale:
            continue
        stale.append(branch)
    return stale
