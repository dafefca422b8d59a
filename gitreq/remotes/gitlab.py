"""GitLab remote (gitlab.com or any self-hosted instance, API v4)."""

from typing import Any, Dict, List
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from gitreq.errors import ApiError, ProjectNotFoundError, RequestNotFoundError
from gitreq.models import MergeRequest, RemoteIdentity
from gitreq.remotes.base import DEFAULT_TIMEOUT, Remote

MR_PAGE_SIZE = 50


class GitLabMergeRequest(BaseModel):
    id: int
    iid: int
    title: str
    description: str | None = None
    target_branch: str | None = None
    source_branch: str
    sha: str | None = None
    web_url: str | None = None


class GitLabProject(BaseModel):
    id: int
    description: str | None = None
    name: str
    path: str | None = None
    path_with_namespace: str | None = None


class GitLabNamespace(BaseModel):
    id: int
    name: str
    path: str
    kind: str
    full_path: str | None = None


def _mr_to_request(mr: GitLabMergeRequest) -> MergeRequest:
    return MergeRequest(
        id=mr.iid,
        title=mr.title,
        description=mr.description,
        source_branch=mr.source_branch,
    )


def gitlab_api_root(domain: str) -> str:
    return f"https://{domain}/api/v4"


class GitLab(Remote):
    """GitLab remote; the project ID is numeric and resolved through the API."""

    def __init__(
        self,
        identity: RemoteIdentity,
        api_root: str | None = None,
        api_key: str = "",
        project_id: str = "",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(
            identity,
            api_root=api_root or gitlab_api_root(identity.domain),
            api_key=api_key,
            timeout=timeout,
        )
        self.id = project_id
        self._branches: Dict[int, str] = {}

    def _set_auth_header(self, api_key: str) -> None:
        if api_key:
            self._session.headers["PRIVATE-TOKEN"] = api_key
        else:
            self._session.headers.pop("PRIVATE-TOKEN", None)

    def project_id(self) -> str:
        if not self.id:
            self.id = str(self._query_project_id())
        return self.id

    def local_branch_name(self, request_id: int) -> str:
        return self.remote_branch_name(request_id)

    def remote_branch_name(self, request_id: int) -> str:
        if request_id not in self._branches:
            self._branches[request_id] = self._query_branch_name(request_id)
        return self._branches[request_id]

    def list_open_requests(self) -> List[MergeRequest]:
        self._log.debug("Querying GitLab MRs for %s", self)
        resp = self._get(
            f"/projects/{self.project_id()}/merge_requests",
            params={"state": "opened", "per_page": MR_PAGE_SIZE},
        )
        if resp.status_code == 404:
            raise ProjectNotFoundError("remote project not found")
        if resp.status_code >= 400:
            raise ApiError(f"Failed to list merge requests: {self._status_message(resp)}")
        data: List[Dict[str, Any]] = self._json(resp) or []
        try:
            mrs = [GitLabMergeRequest.model_validate(d) for d in data]
        except (ValidationError, TypeError) as e:
            raise ApiError(f"Failed to decode merge request list: {e}") from e
        return [_mr_to_request(mr) for mr in mrs]

    def uses_human_branch_names(self) -> bool:
        return True

    def uses_virtual_remote_refs(self) -> bool:
        return False

    def _query_branch_name(self, request_id: int) -> str:
        resp = self._get(f"/projects/{self.project_id()}/merge_requests/{request_id}")
        if resp.status_code == 404:
            raise RequestNotFoundError(f"Merge request !{request_id} not found in {self.identity.full_path}")
        if resp.status_code >= 400:
            raise ApiError(f"Failed to read merge request !{request_id}: {self._status_message(resp)}")
        try:
            mr = GitLabMergeRequest.model_validate(self._json(resp))
        except ValidationError as e:
            raise ApiError(f"Failed to decode merge request !{request_id}: {e}") from e
        self._log.debug("Merge request !%s has source branch %s", request_id, mr.source_branch)
        return mr.source_branch

    def _query_project_id(self) -> int:
        """Look the project up by full path, falling back to a namespace search."""
        path = quote(self.identity.full_path, safe="")
        self._log.debug("Attempting direct project ID lookup: %s", path)
        resp = self._get(f"/projects/{path}")
        if resp.status_code >= 400:
            self._log.debug("Direct lookup unsuccessful (%s). Attempting search strategy.", resp.status_code)
            return self._search_project_id()
        try:
            project = GitLabProject.model_validate(self._json(resp))
        except ValidationError as e:
            raise ApiError(f"Failed to decode project response: {e}") from e
        self._log.debug("Direct lookup response: %s", project)
        return project.id

    def _search_project_id(self) -> int:
        """Find the project among the namespace's projects by exact name."""
        namespace, name = self.identity.namespace, self.identity.name
        self._log.debug("Searching namespace %s for project %s", namespace, name)
        resp = self._get(f"/namespaces/{quote(namespace, safe='')}")
        if resp.status_code == 404:
            raise ProjectNotFoundError(f"Couldn't find namespace {namespace!r}")
        if resp.status_code >= 400:
            raise ApiError(f"Failed to read namespace {namespace!r}: {self._status_message(resp)}")
        try:
            ns = GitLabNamespace.model_validate(self._json(resp))
        except ValidationError as e:
            raise ApiError(f"Failed to decode namespace response: {e}") from e

        if ns.kind == "user":
            resp = self._get(f"/users/{ns.id}/projects")
        elif ns.kind == "group":
            resp = self._get(f"/groups/{ns.id}/projects", params={"search": name})
        else:
            self._log.error("Unknown namespace kind %r", ns.kind)
            raise ProjectNotFoundError(f"Unknown namespace kind {ns.kind!r} for {namespace!r}")
        if resp.status_code >= 400:
            raise ApiError(f"Failed to read projects of {namespace!r}: {self._status_message(resp)}")
        try:
            projects = [GitLabProject.model_validate(p) for p in (self._json(resp) or [])]
        except (ValidationError, TypeError) as e:
            raise ApiError(f"Failed to decode projects response: {e}") from e

        for project in projects:
            if project.name == name:
                return project.id
        raise ProjectNotFoundError(
            f"Unable to find project {self.identity.full_path} on {self.domain}. "
            "Set the project ID with `git req --set-project-id <id>`."
        )
