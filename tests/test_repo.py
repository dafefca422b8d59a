"""Tests for gitreq.services.git.repo (mocked git)."""

from pathlib import Path
from unittest.mock import patch

import pytest

from gitreq.errors import RemoteNotFoundError, RepositoryNotFoundError
from gitreq.services.git import (
    GitRunnerError,
    current_branch,
    find_repo_root,
    get_remote_url,
    get_remotes,
    guess_default_remote_name,
    local_branch_exists,
)

REPO = Path("/tmp/repo")
MODULE = "gitreq.services.git.repo"


def test_find_repo_root() -> None:
    with patch(f"{MODULE}._run_git", return_value="/tmp/repo") as mock_run:
        assert find_repo_root(Path("/tmp/repo/src")) == REPO
    mock_run.assert_called_once()
    assert mock_run.call_args[0][0] == ["rev-parse", "--show-toplevel"]
    assert mock_run.call_args[1]["cwd"] == Path("/tmp/repo/src")


def test_find_repo_root_outside_repo() -> None:
    with patch(f"{MODULE}._run_git", side_effect=GitRunnerError("not a git repository", returncode=128)):
        with pytest.raises(RepositoryNotFoundError):
            find_repo_root(REPO)


def test_get_remotes() -> None:
    with patch(f"{MODULE}._run_git", return_value="origin\nupstream\n"):
        assert get_remotes(REPO) == ["origin", "upstream"]


def test_get_remote_url_missing() -> None:
    with patch(f"{MODULE}._run_git", side_effect=GitRunnerError("No such remote", returncode=2)):
        with pytest.raises(RemoteNotFoundError):
            get_remote_url("nope", REPO)


class TestGuessDefaultRemote:
    def test_single_remote(self) -> None:
        with patch(f"{MODULE}.get_remotes", return_value=["upstream"]):
            assert guess_default_remote_name(REPO) == "upstream"

    def test_prefers_origin(self) -> None:
        with patch(f"{MODULE}.get_remotes", return_value=["fork", "origin"]):
            assert guess_default_remote_name(REPO) == "origin"

    def test_ambiguous(self) -> None:
        with patch(f"{MODULE}.get_remotes", return_value=["fork", "upstream"]):
            with pytest.raises(RemoteNotFoundError):
                guess_default_remote_name(REPO)

    def test_no_remotes(self) -> None:
        with patch(f"{MODULE}.get_remotes", return_value=[]):
            with pytest.raises(RemoteNotFoundError):
                guess_default_remote_name(REPO)


def test_current_branch() -> None:
    with patch(f"{MODULE}._run_git", return_value="refs/heads/pr/42"):
        assert current_branch(REPO) == "pr/42"


def test_current_branch_detached() -> None:
    with patch(f"{MODULE}._run_git", side_effect=GitRunnerError("", returncode=1)):
        assert current_branch(REPO) is None


def test_local_branch_exists() -> None:
    with patch(f"{MODULE}._run_git", return_value="") as mock_run:
        assert local_branch_exists("feature-x", REPO) is True
    assert mock_run.call_args[0][0] == ["show-ref", "--verify", "--quiet", "refs/heads/feature-x"]
    with patch(f"{MODULE}._run_git", side_effect=GitRunnerError("", returncode=1)):
        assert local_branch_exists("feature-x", REPO) is False
