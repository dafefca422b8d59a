"""Repository lookups: root, remotes, HEAD and local branch refs."""

import logging
from pathlib import Path

from gitreq.errors import RemoteNotFoundError, RepositoryNotFoundError
from gitreq.services.git._run import GitRunnerError, _run_git

LOG = logging.getLogger("gitreq.services.git.repo")


def _cwd(repo_dir: Path | None) -> Path:
    return Path(repo_dir) if repo_dir is not None else Path.cwd()


def find_repo_root(repo_dir: Path | None = None) -> Path:
    """Return the top-level directory of the enclosing repository.

    Raises:
        RepositoryNotFoundError: If repo_dir is not inside a git work tree.
    """
    cwd = _cwd(repo_dir)
    try:
        top = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd, log=LOG)
    except (GitRunnerError, OSError) as e:
        raise RepositoryNotFoundError(f"Couldn't find repository at {cwd}") from e
    return Path(top)


def get_remotes(repo_dir: Path | None = None) -> list[str]:
    """List configured remote names."""
    try:
        out = _run_git(["remote"], cwd=_cwd(repo_dir), log=LOG)
    except GitRunnerError:
        return []
    return [line.strip() for line in out.splitlines() if line.strip()]


def get_remote_url(remote_name: str, repo_dir: Path | None = None) -> str:
    """Return the URL of the given remote.

    Raises:
        RemoteNotFoundError: If the remote is not configured.
    """
    try:
        return _run_git(["remote", "get-url", remote_name], cwd=_cwd(repo_dir), log=LOG)
    except GitRunnerError as e:
        raise RemoteNotFoundError(f"Couldn't find the remote {remote_name!r}") from e


def guess_default_remote_name(repo_dir: Path | None = None) -> str:
    """Guess the remote to use: the only remote, else "origin".

    Raises:
        RemoteNotFoundError: If there are no remotes, or several without an origin.
    """
    remotes = get_remotes(repo_dir)
    if not remotes:
        raise RemoteNotFoundError("Could not find any remotes")
    if len(remotes) == 1:
        return remotes[0]
    if "origin" in remotes:
        return "origin"
    raise RemoteNotFoundError("No origin remote found")


def current_branch(repo_dir: Path | None = None) -> str | None:
    """Return the checked-out branch name, or None on a detached HEAD."""
    try:
        ref = _run_git(["symbolic-ref", "-q", "HEAD"], cwd=_cwd(repo_dir), log=LOG)
    except GitRunnerError:
        return None
    prefix = "refs/heads/"
    return ref[len(prefix) :] if ref.startswith(prefix) else None


def local_branch_exists(branch_name: str, repo_dir: Path | None = None) -> bool:
    """Check whether refs/heads/<branch_name> exists."""
    try:
        _run_git(["show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"], cwd=_cwd(repo_dir), log=LOG)
    except GitRunnerError:
        return False
    return True
