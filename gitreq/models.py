"""Data models for remotes and merge/pull requests (Pydantic)."""

from pydantic import BaseModel


class MergeRequest(BaseModel):
    """Merge request (GitLab) or pull request (GitHub).

    ``id`` is the number users see (GitHub PR number, GitLab iid), not the
    provider's global database ID.
    """

    id: int
    title: str
    description: str | None = None
    source_branch: str


class RemoteIdentity(BaseModel):
    """Where a remote lives, derived from its URL."""

    model_config = {"frozen": True}

    domain: str
    namespace: str
    name: str
    full_path: str
    origin: str
