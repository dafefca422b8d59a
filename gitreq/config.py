"""Application settings from an optional YAML file and the environment.

These are settings for git-req itself (logging, HTTP, where the global
key file lives). Per-repository values such as the project ID or the
default remote live in git config, see gitreq.services.git.config_store.
"""

from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = Path("~/.config/git-req/config.yaml")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="GIT_REQ_LOGGING_", extra="ignore")

    level: str = Field(default="WARNING", description="Log level")
    format: str = Field(
        default="%(levelname)s - %(name)s - %(message)s",
        description="Log format",
    )


class HttpConfig(BaseSettings):
    """Provider API client settings."""

    model_config = SettingsConfigDict(env_prefix="GIT_REQ_HTTP_", extra="ignore")

    timeout: float = Field(default=30, gt=0, description="Request timeout in seconds")
    github_api_url: str = Field(
        default="https://api.github.com/repos",
        description="GitHub repository API root",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(env_prefix="GIT_REQ_", extra="ignore")

    global_config_path: Path = Field(
        default=Path("~/.gitreqconfig"),
        description="git-config-format file holding per-domain API keys",
    )
    http: HttpConfig = Field(default_factory=HttpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    A missing file is not an error: defaults and GIT_REQ_* env apply.
    """
    path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    http = HttpConfig(**(raw.get("http") or {}))
    logging = LoggingConfig(**(raw.get("logging") or {}))
    extra = {}
    if raw.get("global_config_path"):
        extra["global_config_path"] = Path(raw["global_config_path"])
    return AppConfig(http=http, logging=logging, **extra)
