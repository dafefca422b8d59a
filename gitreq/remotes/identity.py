"""Parse git remote URLs into domain and project path.

Both URL forms git accepts for remotes are supported:

- ``scheme://[user@]host[:port]/path[.git]`` (https, ssh, git)
- ``[user@]host:path[.git]`` (SCP-like)

The project path keeps every namespace segment, so nested GitLab groups
(``group/subgroup/project``) resolve to the right project.
"""

import logging
from urllib.parse import unquote, urlsplit

from gitreq.errors import InvalidRemoteError
from gitreq.models import RemoteIdentity

LOG = logging.getLogger("gitreq.remotes.identity")

GITHUB_DOMAIN = "github.com"


def _split_origin(origin: str) -> tuple[str, str] | None:
    """Split a remote URL into (host, raw path); None if it has no host."""
    origin = origin.strip()
    if not origin:
        return None
    if "://" in origin:
        parts = urlsplit(origin)
        host = parts.netloc.rpartition("@")[2]
        if host.startswith("["):
            host = host[: host.find("]") + 1]
        else:
            host = host.partition(":")[0]
        return (host, unquote(parts.path)) if host else None
    head, sep, path = origin.partition(":")
    if not sep or "/" in head:
        # local path, not an SCP-like remote
        return None
    host = head.rpartition("@")[2]
    return (host, path) if host else None


def _project_path(origin: str) -> str | None:
    split = _split_origin(origin)
    if split is None:
        return None
    path = split[1].strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")].rstrip("/")
    return path or None


def get_domain(origin: str) -> str:
    """Return the host of a remote URL (e.g. gitlab.example.com).

    Raises:
        InvalidRemoteError: If no host can be found.
    """
    split = _split_origin(origin)
    if split is None:
        raise InvalidRemoteError(f"invalid remote set: {origin!r}")
    return split[0]


def github_project_name(origin: str) -> str | None:
    """Return "owner/repo" for a GitHub remote."""
    LOG.debug("Getting project name for: %s", origin)
    return _project_path(origin)


def gitlab_project_full_path(origin: str) -> str | None:
    """Return the namespace chain plus project name, e.g. "group/sub/project"."""
    LOG.debug("Getting full path for: %s", origin)
    return _project_path(origin)


def gitlab_project_namespace(origin: str) -> str | None:
    """Return the top-level namespace (first path segment)."""
    path = _project_path(origin)
    if path is None or "/" not in path:
        return None
    return path.split("/", 1)[0]


def gitlab_project_name(origin: str) -> str | None:
    """Return the project name (last path segment)."""
    path = _project_path(origin)
    if path is None or "/" not in path:
        return None
    return path.rsplit("/", 1)[1]


def parse_remote(origin: str) -> RemoteIdentity:
    """Parse a remote URL into a RemoteIdentity.

    Raises:
        InvalidRemoteError: If the URL has no host or no owner/project path.
    """
    domain = get_domain(origin)
    namespace = gitlab_project_namespace(origin)
    if namespace is None:
        raise InvalidRemoteError(f"Could not parse the project namespace from {origin!r}")
    name = gitlab_project_name(origin)
    if not name:
        raise InvalidRemoteError(f"Could not parse the project name from {origin!r}")
    full_path = gitlab_project_full_path(origin)
    if full_path is None:
        raise InvalidRemoteError(f"Could not parse the project path from {origin!r}")
    return RemoteIdentity(domain=domain, namespace=namespace, name=name, full_path=full_path, origin=origin)


def is_github(domain: str) -> bool:
    """Only github.com is GitHub; every other host is treated as GitLab."""
    return domain.lower() == GITHUB_DOMAIN
