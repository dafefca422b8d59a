"""Tests for gitreq.services.git.config_store (git config emulated in memory)."""

from pathlib import Path
from unittest.mock import patch

import pytest

from gitreq.errors import ConfigError, ReqError
from gitreq.services.git import GitRunnerError
from gitreq.services.git.config_store import ConfigStore, slugify_domain


class FakeGitConfig:
    """Stands in for _run_git, handling only `git config` invocations."""

    def __init__(self, local: dict[str, str] | None = None) -> None:
        self.local = dict(local or {})
        self.files: dict[str, dict[str, str]] = {}
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str], cwd: Path, log=None, **kwargs) -> str:
        self.calls.append(args)
        assert args[0] == "config"
        rest = args[1:]
        values = self.local
        if rest[0] == "--file":
            values = self.files.setdefault(rest[1], {})
            rest = rest[2:]
        elif rest[0] == "--local":
            rest = rest[1:]
        if rest[0] == "--get":
            if rest[1] not in values:
                raise GitRunnerError("missing", returncode=1)
            return values[rest[1]]
        if rest[0] in ("--unset", "--unset-all"):
            if rest[1] not in values:
                raise GitRunnerError("missing", returncode=5)
            del values[rest[1]]
            return ""
        values[rest[0]] = rest[1]
        return ""


@pytest.fixture
def fake() -> FakeGitConfig:
    return FakeGitConfig()


@pytest.fixture
def store(tmp_path: Path, fake: FakeGitConfig):
    global_path = tmp_path / "gitreqconfig"
    with patch("gitreq.services.git.config_store._run_git", fake):
        yield ConfigStore(tmp_path, global_config_path=global_path)


def test_slugify_domain() -> None:
    assert slugify_domain("gitlab.example.com") == "gitlab|example|com"
    assert slugify_domain("localhost") == "localhost"


class TestRemoteScoped:
    def test_set_and_get(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        store.set_config("projectid", "origin", "42")
        assert fake.local == {"req.origin.projectid": "42"}
        assert store.get_config("projectid", "origin") == "42"
        assert store.get_config("projectid", "upstream") is None

    def test_delete(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        fake.local["req.origin.projectid"] = "42"
        assert store.delete_config("projectid", "origin") is True
        assert store.delete_config("projectid", "origin") is False
        assert fake.local == {}

    def test_set_uses_local_scope(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        store.set_config("projectid", "origin", "42")
        assert fake.calls[-1] == ["config", "--local", "req.origin.projectid", "42"]

    def test_unreadable_config_is_config_error(self, store: ConfigStore) -> None:
        """A broken config file surfaces as a ReqError, not a raw runner error."""
        failure = GitRunnerError("fatal: bad config line 1", returncode=3)
        with patch("gitreq.services.git.config_store._run_git", side_effect=failure):
            with pytest.raises(ConfigError, match="bad config line"):
                store.get_project_config("defaultremote")
            with pytest.raises(ReqError):
                store.set_project_config("defaultremote", "origin")
            with pytest.raises(ConfigError):
                store.delete_config("projectid", "origin")

    def test_unreadable_global_file(self, store: ConfigStore) -> None:
        store.global_config_path.write_text("[req\nbroken\n")
        failure = GitRunnerError("fatal: bad config line 1", returncode=3)
        with patch("gitreq.services.git.config_store._run_git", side_effect=failure):
            with pytest.raises(ConfigError):
                store.get_req_config("gitlab.com", "apikey")


class TestLegacyMigration:
    def test_migrates_on_first_read(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        """req.projectid moves to req.origin.projectid with its value."""
        fake.local["req.projectid"] = "99"
        assert store.get_config("projectid", "origin") == "99"
        assert fake.local == {"req.origin.projectid": "99"}

    def test_idempotent(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        fake.local["req.projectid"] = "99"
        assert store.migrate_legacy("projectid") is True
        assert store.migrate_legacy("projectid") is False
        assert fake.local == {"req.origin.projectid": "99"}
        assert "req.projectid" not in fake.local

    def test_removes_every_legacy_value(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        fake.local["req.projectid"] = "99"
        store.migrate_legacy("projectid")
        assert ["config", "--local", "--unset-all", "req.projectid"] in fake.calls

    def test_legacy_overrides_nothing_else(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        fake.local["req.defaultremote"] = "origin"
        store.get_config("projectid", "origin")
        assert fake.local == {"req.defaultremote": "origin"}


class TestProjectConfig:
    def test_default_remote(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        assert store.get_project_config("defaultremote") is None
        store.set_project_config("defaultremote", "upstream")
        assert fake.local == {"req.defaultremote": "upstream"}
        assert store.get_project_config("defaultremote") == "upstream"


class TestGlobalConfig:
    def test_missing_file(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        assert store.get_req_config("gitlab.com", "apikey") is None
        assert store.delete_req_config("gitlab.com", "apikey") is False
        assert fake.calls == []

    def test_set_get_delete(self, store: ConfigStore, fake: FakeGitConfig) -> None:
        store.global_config_path.write_text("")
        store.set_req_config("gitlab.example.com", "apikey", "tok")
        path = str(store.global_config_path)
        assert fake.files[path] == {"req.gitlab|example|com.apikey": "tok"}
        assert store.get_req_config("gitlab.example.com", "apikey") == "tok"
        assert store.get_req_config("github.com", "apikey") is None
        assert store.delete_req_config("gitlab.example.com", "apikey") is True
        assert fake.files[path] == {}

    def test_expands_user(self, tmp_path: Path) -> None:
        store = ConfigStore(tmp_path, global_config_path=Path("~/.gitreqconfig"))
        assert store.global_config_path == Path.home() / ".gitreqconfig"
