"""git-req settings kept in git config.

Three kinds of keys:

- ``req.<remote>.<field>``: repository-local, scoped to a remote (projectid)
- ``req.<field>``: repository-local, unscoped (defaultremote)
- ``req.<domain slug>.<field>``: global, in a separate git-config-format file
  (apikey); the slug is the domain with dots replaced by pipes

Older releases stored remote-scoped fields without the remote name. Those keys
are moved under the ``origin`` remote the first time the field is accessed.
"""

import logging
from pathlib import Path

from gitreq.errors import ConfigError
from gitreq.services.git._run import GitRunnerError, _run_git

LOG = logging.getLogger("gitreq.services.git.config_store")

SECTION = "req"
LEGACY_REMOTE = "origin"
DEFAULT_GLOBAL_CONFIG_PATH = Path("~/.gitreqconfig")

# git config exit codes
_KEY_NOT_FOUND = 1
_NOTHING_TO_UNSET = 5


def slugify_domain(domain: str) -> str:
    """Convert a domain into a config subsection: gitlab.com -> gitlab|com."""
    return domain.replace(".", "|")


class ConfigStore:
    """Read and write req.* keys in the repository and global git config."""

    def __init__(
        self,
        repo_dir: Path | None = None,
        global_config_path: Path | None = None,
    ) -> None:
        self._cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
        path = global_config_path or DEFAULT_GLOBAL_CONFIG_PATH
        self._global_path = Path(path).expanduser()

    @property
    def global_config_path(self) -> Path:
        return self._global_path

    # Low-level access

    def _get(self, key: str, file: Path | None = None) -> str | None:
        args = ["config"] + (["--file", str(file)] if file else []) + ["--get", key]
        try:
            return _run_git(args, cwd=self._cwd, log=LOG)
        except GitRunnerError as e:
            if e.returncode == _KEY_NOT_FOUND:
                return None
            raise ConfigError(f"Could not read {key}: {e}") from e

    def _set(self, key: str, value: str, file: Path | None = None) -> None:
        scope = ["--file", str(file)] if file else ["--local"]
        try:
            _run_git(["config"] + scope + [key, value], cwd=self._cwd, log=LOG)
        except GitRunnerError as e:
            raise ConfigError(f"Could not write {key}: {e}") from e

    def _unset(self, key: str, file: Path | None = None, all_values: bool = False) -> bool:
        scope = ["--file", str(file)] if file else ["--local"]
        action = "--unset-all" if all_values else "--unset"
        try:
            _run_git(["config"] + scope + [action, key], cwd=self._cwd, log=LOG)
        except GitRunnerError as e:
            if e.returncode in (_KEY_NOT_FOUND, _NOTHING_TO_UNSET):
                return False
            raise ConfigError(f"Could not remove {key}: {e}") from e
        return True

    # Remote-scoped, repository-local

    def migrate_legacy(self, field_name: str, remote_name: str = LEGACY_REMOTE) -> bool:
        """Move ``req.<field>`` to ``req.<remote>.<field>``.

        Returns True if a legacy key was migrated, False if there was nothing
        to do.
        """
        legacy_key = f"{SECTION}.{field_name}"
        value = self._get(legacy_key)
        if value is None:
            return False
        self._set(f"{SECTION}.{remote_name}.{field_name}", value)
        # a legacy key may hold several values; --get returned the last one
        self._unset(legacy_key, all_values=True)
        LOG.info("Migrated legacy config %s to remote %s", legacy_key, remote_name)
        return True

    def get_config(self, field_name: str, remote_name: str) -> str | None:
        """Get a remote-scoped value for the current repository."""
        self.migrate_legacy(field_name)
        return self._get(f"{SECTION}.{remote_name}.{field_name}")

    def set_config(self, field_name: str, remote_name: str, value: str) -> None:
        """Set a remote-scoped value for the current repository."""
        self.migrate_legacy(field_name)
        self._set(f"{SECTION}.{remote_name}.{field_name}", value)

    def delete_config(self, field_name: str, remote_name: str) -> bool:
        """Delete a remote-scoped value; returns False if it was not set."""
        self.migrate_legacy(field_name)
        return self._unset(f"{SECTION}.{remote_name}.{field_name}")

    # Unscoped, repository-local

    def get_project_config(self, field_name: str) -> str | None:
        """Get an unscoped value (e.g. defaultremote) for the current repository."""
        return self._get(f"{SECTION}.{field_name}")

    def set_project_config(self, field_name: str, value: str) -> None:
        """Set an unscoped value. Prefer set_config for anything remote-specific."""
        self._set(f"{SECTION}.{field_name}", value)

    # Global, domain-scoped

    def get_req_config(self, domain: str, field_name: str) -> str | None:
        """Get a global value for the given domain."""
        if not self._global_path.is_file():
            return None
        return self._get(f"{SECTION}.{slugify_domain(domain)}.{field_name}", file=self._global_path)

    def set_req_config(self, domain: str, field_name: str, value: str) -> None:
        """Set a global value for the given domain."""
        self._global_path.parent.mkdir(parents=True, exist_ok=True)
        self._set(f"{SECTION}.{slugify_domain(domain)}.{field_name}", value, file=self._global_path)

    def delete_req_config(self, domain: str, field_name: str) -> bool:
        """Clear a global value; returns False if it was not set."""
        if not self._global_path.is_file():
            return False
        return self._unset(f"{SECTION}.{slugify_domain(domain)}.{field_name}", file=self._global_path)
