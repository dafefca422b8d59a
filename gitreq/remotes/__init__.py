"""Hosting provider remotes and the factory that picks one for a URL."""

import logging
from typing import Callable

from gitreq.config import HttpConfig
from gitreq.errors import ReqError
from gitreq.remotes.base import Remote
from gitreq.remotes.github import GitHub
from gitreq.remotes.gitlab import GitLab
from gitreq.remotes.identity import get_domain, is_github, parse_remote
from gitreq.services.git.config_store import ConfigStore

LOG = logging.getLogger("gitreq.remotes")

# Asks the user for the API key of a domain
KeyProvider = Callable[[str], str]


def _mask(secret: str) -> str:
    return f"{secret[:4]}..." if len(secret) > 8 else "***"


def get_api_key(domain: str, store: ConfigStore, key_provider: KeyProvider | None = None) -> str:
    """Return the stored API key for domain, prompting and saving it if absent.

    Returns an empty string when no key is stored and there is no provider.
    """
    key = store.get_req_config(domain, "apikey")
    if key:
        LOG.debug("API key for %s: %s", domain, _mask(key))
        return key
    if key_provider is None:
        LOG.info("No API key for %s; requests will be unauthenticated", domain)
        return ""
    key = (key_provider(domain) or "").strip()
    if key:
        store.set_req_config(domain, "apikey", key)
    return key


def get_remote(
    remote_name: str,
    origin: str,
    store: ConfigStore,
    key_provider: KeyProvider | None = None,
    skip_api_key: bool = False,
    http: HttpConfig | None = None,
) -> Remote:
    """Build the Remote for a remote URL.

    github.com gets a GitHub remote; any other host is treated as GitLab. For
    GitLab the project ID is read from ``req.<remote>.projectid``; when it is
    missing (and API keys are not skipped) it is resolved through the API and
    saved there.

    Raises:
        InvalidRemoteError: If the URL cannot be parsed.
        ApiError, ProjectNotFoundError: If the GitLab project ID lookup fails.
    """
    http = http or HttpConfig()
    domain = get_domain(origin)
    identity = parse_remote(origin)
    api_key = "" if skip_api_key else get_api_key(domain, store, key_provider)

    if is_github(domain):
        return GitHub(identity, api_root=http.github_api_url, api_key=api_key, timeout=http.timeout)

    remote = GitLab(identity, api_key=api_key, timeout=http.timeout)
    project_id = store.get_config("projectid", remote_name)
    if project_id:
        LOG.debug("Loaded project ID %s for remote %s", project_id, remote_name)
        remote.id = project_id
    elif not skip_api_key:
        try:
            project_id = remote.project_id()
        except ReqError:
            LOG.info("Error getting project ID for %s", identity.full_path)
            raise
        store.set_config("projectid", remote_name, project_id)
        LOG.info("Got project ID: %s", project_id)
    return remote


__all__ = [
    "GitHub",
    "GitLab",
    "KeyProvider",
    "Remote",
    "get_api_key",
    "get_remote",
]
