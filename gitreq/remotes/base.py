"""Abstract base for hosting provider remotes (GitHub, GitLab)."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

import requests

from gitreq.errors import ApiError
from gitreq.models import MergeRequest, RemoteIdentity

DEFAULT_TIMEOUT = 30


class Remote(ABC):
    """A repository remote hosted on GitHub or a GitLab instance.

    Instances are per invocation; resolved values (project ID, branch names)
    are cached on the instance.
    """

    def __init__(
        self,
        identity: RemoteIdentity,
        api_root: str,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.identity = identity
        self.api_root = api_root.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._log = logging.getLogger(f"gitreq.remotes.{type(self).__name__.lower()}")
        self.api_key = api_key

    @property
    def api_key(self) -> str:
        return self._api_key

    @api_key.setter
    def api_key(self, value: str) -> None:
        self._api_key = value.strip() if value else ""
        self._set_auth_header(self._api_key)

    @property
    def domain(self) -> str:
        """The host serving the remote."""
        return self.identity.domain

    @abstractmethod
    def _set_auth_header(self, api_key: str) -> None:
        """Attach (or drop) the provider's auth header on the session."""
        ...

    @abstractmethod
    def project_id(self) -> str:
        """Return the ID the provider uses for this project."""
        ...

    @abstractmethod
    def local_branch_name(self, request_id: int) -> str:
        """Return the local branch name for the request."""
        ...

    @abstractmethod
    def remote_branch_name(self, request_id: int) -> str:
        """Return the branch (or ref) to fetch for the request."""
        ...

    @abstractmethod
    def list_open_requests(self) -> List[MergeRequest]:
        """Return the open merge/pull requests of the project."""
        ...

    @abstractmethod
    def uses_human_branch_names(self) -> bool:
        """Whether branch names are worth showing to the user."""
        ...

    @abstractmethod
    def uses_virtual_remote_refs(self) -> bool:
        """Whether the remote branch is a read-only ref (e.g. pull/42/head)."""
        ...

    def _get(self, path: str, params: Dict[str, Any] | None = None) -> requests.Response:
        """GET api_root + path; raise ApiError on transport failure only.

        Status handling is left to callers since 404 means different things
        per endpoint.
        """
        url = f"{self.api_root}{path}" if path.startswith("/") else f"{self.api_root}/{path}"
        self._log.debug("GET %s params=%s", url, params)
        try:
            return self._session.request("GET", url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"Request to {url} failed: {e}") from e

    @staticmethod
    def _status_message(resp: requests.Response) -> str:
        msg = resp.text or resp.reason or str(resp.status_code)
        try:
            data = resp.json()
        except ValueError:
            return f"{resp.status_code}: {msg}"
        if isinstance(data, dict) and data.get("message"):
            msg = str(data["message"])
        return f"{resp.status_code}: {msg}"

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(f"Malformed API response ({resp.status_code})") from e

    def close(self) -> None:
        """Release the HTTP session's pooled connections."""
        self._session.close()

    def __enter__(self) -> "Remote":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.identity.full_path} @ {self.domain})"
