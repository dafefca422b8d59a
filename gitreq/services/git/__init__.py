"""Git operations: config store, repository lookups, checkout, history."""

from gitreq.services.git._run import GitRunnerError
from gitreq.services.git.branches import (
    CheckoutResult,
    checkout_request_branch,
    scoped_local_branch_name,
)
from gitreq.services.git.config_store import ConfigStore, slugify_domain
from gitreq.services.git.history import RequestHistory
from gitreq.services.git.repo import (
    current_branch,
    find_repo_root,
    get_remote_url,
    get_remotes,
    guess_default_remote_name,
    local_branch_exists,
)

__all__ = [
    "CheckoutResult",
    "ConfigStore",
    "GitRunnerError",
    "RequestHistory",
    "checkout_request_branch",
    "current_branch",
    "find_repo_root",
    "get_remote_url",
    "get_remotes",
    "guess_default_remote_name",
    "local_branch_exists",
    "scoped_local_branch_name",
    "slugify_domain",
]
