"""GitHub remote.

Pull requests are fetched through GitHub's read-only ``pull/<n>/head`` refs,
so no API call is needed to check one out; the API is only used to list
open pull requests.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ValidationError

from gitreq.errors import ApiError, ProjectNotFoundError
from gitreq.models import MergeRequest, RemoteIdentity
from gitreq.remotes.base import DEFAULT_TIMEOUT, Remote

GITHUB_API_ROOT = "https://api.github.com/repos"


class GitHubPullRequest(BaseModel):
    """Fields of GET /repos/{owner}/{repo}/pulls entries that git-req uses."""

    id: int
    number: int
    title: str
    body: str | None = None
    html_url: str | None = None


def _pr_to_request(pr: GitHubPullRequest) -> MergeRequest:
    return MergeRequest(
        id=pr.number,
        title=pr.title,
        description=pr.body,
        source_branch=local_pr_branch(pr.number),
    )


def local_pr_branch(request_id: int) -> str:
    return f"pr/{request_id}"


def remote_pr_ref(request_id: int) -> str:
    return f"pull/{request_id}/head"


class GitHub(Remote):
    """GitHub remote; the project ID is the "owner/repo" path."""

    def __init__(
        self,
        identity: RemoteIdentity,
        api_root: str = GITHUB_API_ROOT,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(identity, api_root=api_root, api_key=api_key, timeout=timeout)
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _set_auth_header(self, api_key: str) -> None:
        if api_key:
            self._session.headers["Authorization"] = f"token {api_key}"
        else:
            self._session.headers.pop("Authorization", None)

    def project_id(self) -> str:
        return self.identity.full_path

    def local_branch_name(self, request_id: int) -> str:
        return local_pr_branch(request_id)

    def remote_branch_name(self, request_id: int) -> str:
        return remote_pr_ref(request_id)

    def list_open_requests(self) -> List[MergeRequest]:
        self._log.debug("Querying GitHub PRs for %s", self)
        resp = self._get(f"/{self.project_id()}/pulls")
        if resp.status_code == 404:
            raise ProjectNotFoundError(f"Remote project {self.project_id()} not found")
        if resp.status_code >= 400:
            raise ApiError(self._status_message(resp))
        data: List[Dict[str, Any]] = self._json(resp) or []
        try:
            pulls = [GitHubPullRequest.model_validate(d) for d in data]
        except (ValidationError, TypeError) as e:
            raise ApiError(f"Failed to decode pull request list: {e}") from e
        return [_pr_to_request(pr) for pr in pulls]

    def uses_human_branch_names(self) -> bool:
        return False

    def uses_virtual_remote_refs(self) -> bool:
        return True
