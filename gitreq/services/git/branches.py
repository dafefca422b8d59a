"""Check out the local branch for a merge/pull request.

Reuses an existing local branch when there is one; otherwise fetches the
request branch from the remote and creates the local branch from it.
"""

import enum
import logging
from pathlib import Path

from gitreq.errors import CheckoutFailedError, FetchFailedError
from gitreq.services.git._run import GitRunnerError, _run_git
from gitreq.services.git.repo import current_branch, local_branch_exists

LOG = logging.getLogger("gitreq.services.git.branches")


class CheckoutResult(enum.Enum):
    """Outcome of a checkout attempt."""

    CHANGED = "changed"
    UNCHANGED = "unchanged"


def scoped_local_branch_name(
    remote_name: str,
    local_branch_name: str,
    default_remote: str | None,
) -> str:
    """Prefix the branch name with the remote unless it is the default remote.

    - default remote configured and active: ``<name>``
    - another remote configured as default: ``req/<remote>/<name>``
    - no default remote configured: ``<remote>/<name>``
    """
    if default_remote is None:
        LOG.warning("No default remote found. Using %s", remote_name)
        return f"{remote_name}/{local_branch_name}"
    if remote_name != default_remote:
        LOG.debug("Non-default remote name requested: %s", remote_name)
        return f"req/{remote_name}/{local_branch_name}"
    LOG.debug("Default remote name requested: %s", remote_name)
    return local_branch_name


def checkout_request_branch(
    remote_name: str,
    remote_branch_name: str,
    local_branch_name: str,
    is_virtual_remote_branch: bool,
    default_remote: str | None,
    repo_dir: Path | None = None,
) -> CheckoutResult:
    """Switch to the local branch for a request, fetching it if needed.

    Args:
        remote_name: Remote to fetch from (e.g. "origin").
        remote_branch_name: Branch or ref on the remote ("feature-x" or
            "pull/42/head").
        local_branch_name: Unscoped local name ("feature-x" or "pr/42").
        is_virtual_remote_branch: The remote ref is read-only and must be bound
            to a local branch while fetching.
        default_remote: Configured default remote, if any.
        repo_dir: Repository directory (default: cwd).

    Returns:
        CheckoutResult.UNCHANGED if the branch was already checked out,
        CheckoutResult.CHANGED otherwise.

    Raises:
        FetchFailedError: If the fetch fails.
        CheckoutFailedError: If the checkout fails.
    """
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    local_name = scoped_local_branch_name(remote_name, local_branch_name, default_remote)

    if local_branch_exists(local_name, repo_dir=cwd):
        if current_branch(repo_dir=cwd) == local_name:
            LOG.debug("Already on %s", local_name)
            return CheckoutResult.UNCHANGED
        LOG.debug("Checking out existing branch: %s", local_name)
        try:
            _run_git(["checkout", local_name], cwd=cwd, log=LOG)
        except GitRunnerError as e:
            raise CheckoutFailedError(f"Could not check out local branch {local_name!r}: {e}") from e
        return CheckoutResult.CHANGED

    if is_virtual_remote_branch:
        fetch_args = ["fetch", remote_name, f"{remote_branch_name}:{local_name}"]
        checkout_args = ["checkout", local_name]
    else:
        tracking = f"{remote_name}/{remote_branch_name}"
        fetch_args = ["fetch", remote_name, remote_branch_name]
        checkout_args = ["checkout", "-b", local_name, tracking]
    try:
        _run_git(fetch_args, cwd=cwd, log=LOG, timeout=None)
    except GitRunnerError as e:
        raise FetchFailedError(f"Could not fetch remote branch {remote_branch_name!r}: {e}") from e

    LOG.debug("Checking out %s as %s", remote_branch_name, local_name)
    try:
        _run_git(checkout_args, cwd=cwd, log=LOG)
    except GitRunnerError as e:
        raise CheckoutFailedError(f"Could not check out local branch {local_name!r}: {e}") from e
    LOG.info("Checked out branch %s", local_name)
    return CheckoutResult.CHANGED
