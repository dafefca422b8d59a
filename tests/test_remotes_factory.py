"""Tests for gitreq.remotes.get_remote and get_api_key."""

from unittest.mock import Mock, patch

import pytest

from gitreq.config import HttpConfig
from gitreq.errors import InvalidRemoteError, ProjectNotFoundError
from gitreq.remotes import GitHub, GitLab, get_api_key, get_remote
from gitreq.services.git.config_store import ConfigStore


@pytest.fixture
def store() -> Mock:
    store = Mock(spec=ConfigStore)
    store.get_req_config.return_value = None
    store.get_config.return_value = None
    return store


class TestGetApiKey:
    def test_stored_key(self, store: Mock) -> None:
        store.get_req_config.return_value = "stored"
        provider = Mock()
        assert get_api_key("gitlab.com", store, provider) == "stored"
        provider.assert_not_called()
        store.get_req_config.assert_called_once_with("gitlab.com", "apikey")

    def test_prompts_and_saves(self, store: Mock) -> None:
        """A missing key is asked for once, trimmed and saved."""
        provider = Mock(return_value="  new-key\n")
        assert get_api_key("gitlab.com", store, provider) == "new-key"
        provider.assert_called_once_with("gitlab.com")
        store.set_req_config.assert_called_once_with("gitlab.com", "apikey", "new-key")

    def test_empty_answer_not_saved(self, store: Mock) -> None:
        assert get_api_key("gitlab.com", store, Mock(return_value="   ")) == ""
        store.set_req_config.assert_not_called()

    def test_no_provider(self, store: Mock) -> None:
        assert get_api_key("gitlab.com", store, None) == ""


class TestGetRemote:
    def test_github(self, store: Mock) -> None:
        store.get_req_config.return_value = "gh-key"
        remote = get_remote("origin", "https://github.com/acme/widget.git", store)
        assert isinstance(remote, GitHub)
        assert remote.project_id() == "acme/widget"
        assert remote.api_key == "gh-key"
        assert remote.api_root == "https://api.github.com/repos"

    def test_github_api_url_and_timeout_from_config(self, store: Mock) -> None:
        http = HttpConfig(timeout=5, github_api_url="https://ghe.example/api/repos/")
        remote = get_remote("origin", "git@github.com:acme/widget.git", store, skip_api_key=True, http=http)
        assert remote.api_root == "https://ghe.example/api/repos"
        assert remote.timeout == 5

    def test_gitlab_uses_stored_project_id(self, store: Mock) -> None:
        store.get_req_config.return_value = "gl-key"
        store.get_config.return_value = "77"
        with patch.object(GitLab, "_query_project_id") as query:
            remote = get_remote("upstream", "git@gitlab.example.com:group/project.git", store)
        assert isinstance(remote, GitLab)
        assert remote.project_id() == "77"
        query.assert_not_called()
        store.get_config.assert_called_once_with("projectid", "upstream")
        store.set_config.assert_not_called()

    def test_gitlab_resolves_and_persists_project_id(self, store: Mock) -> None:
        store.get_req_config.return_value = "gl-key"
        with patch.object(GitLab, "_query_project_id", return_value=88):
            remote = get_remote("origin", "git@gitlab.example.com:group/project.git", store)
        assert remote.id == "88"
        store.set_config.assert_called_once_with("projectid", "origin", "88")

    def test_gitlab_skip_api_key(self, store: Mock) -> None:
        """With keys skipped there is no prompt and no project lookup."""
        provider = Mock()
        with patch.object(GitLab, "_query_project_id") as query:
            remote = get_remote("origin", "git@gitlab.example.com:group/project.git", store, provider, skip_api_key=True)
        assert remote.id == ""
        assert remote.api_key == ""
        query.assert_not_called()
        provider.assert_not_called()
        store.get_req_config.assert_not_called()

    def test_gitlab_lookup_failure_propagates(self, store: Mock) -> None:
        store.get_req_config.return_value = "gl-key"
        with patch.object(GitLab, "_query_project_id", side_effect=ProjectNotFoundError("nope")):
            with pytest.raises(ProjectNotFoundError):
                get_remote("origin", "git@gitlab.example.com:group/project.git", store)
        store.set_config.assert_not_called()

    def test_invalid_remote(self, store: Mock) -> None:
        with pytest.raises(InvalidRemoteError):
            get_remote("origin", "/srv/git/project.git", store)
