"""Configuration loading from YAML and environment.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo. Only the CLI reads this; services receive explicit values.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitact.errors import ConfigurationError
from gitact.models import RepoRef


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so secrets and ${VAR} substitution read one snapshot
_current_env: dict[str, str] = {}


class BotConfig(BaseSettings):
    """Identity used for commits."""

    model_config = SettingsConfigDict(env_prefix="BOT_", extra="ignore")

    name: str = Field(default="gitact", description="Git user.name for commits")
    email: str = Field(default="gitact@users.noreply.github.com", description="Git user.email for commits")


class GitHubConfig(BaseSettings):
    """GitHub API and git remote settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    remote_base: str = Field(default="https://github.com", description="Base of clone URLs")
    timeout: float = Field(default=30, gt=0, description="HTTP timeout in seconds")


class RepositoryConfig(BaseSettings):
    """Target repository of the cycle."""

    model_config = SettingsConfigDict(env_prefix="REPOSITORY_", extra="ignore")

    owner: str = Field(default="", description="Repository owner (GITHUB_OWNER in env)")
    name: str = Field(default="", description="Repository name (GITHUB_REPO in env)")
    default_branch: str = Field(default="main", description="Branch to clone and PR base")


class WorkspaceConfig(BaseSettings):
    """Where clones and memories live."""

    model_config = SettingsConfigDict(env_prefix="WORKSPACE_", extra="ignore")

    workdir: Path = Field(default=Path(".repos"), description="Root of local clones <workdir>/<owner>/<repo>")
    memory_dir: Path = Field(default=Path(".gitact/memories"), description="YAML memory store directory")
    git_timeout: float | None = Field(default=None, gt=0, description="Timeout for git commands; none by default")


class CycleConfig(BaseSettings):
    """Decision cycle behaviour."""

    model_config = SettingsConfigDict(env_prefix="CYCLE_", extra="ignore")

    skip_duplicates: bool = Field(default=True, description="Skip create actions already in history")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    bot: BotConfig = Field(default_factory=BotConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    cycle: CycleConfig = Field(default_factory=CycleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")

    def repo_ref(self) -> RepoRef:
        """Configured target repository.

        Raises ConfigurationError when owner or name is missing or invalid.
        """
        owner = self.repository.owner.strip()
        name = self.repository.name.strip()
        if not owner or not name:
            raise ConfigurationError("Repository owner or name is not set", operation="config")
        try:
            return RepoRef(owner=owner, name=name)
        except ValueError as e:
            raise ConfigurationError(f"Invalid repository {owner}/{name}", operation="config") from e


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        # Simple $VAR
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _repository_env_overrides(repo_raw: dict[str, Any]) -> dict[str, Any]:
    """GITACT_REPOSITORY=owner/name, GITHUB_OWNER and GITHUB_REPO override YAML."""
    out = dict(repo_raw)
    full = _current_env.get("GITACT_REPOSITORY")
    if full and "/" in full:
        owner, _, name = full.strip().partition("/")
        out["owner"], out["name"] = owner, name
    if _current_env.get("GITHUB_OWNER"):
        out["owner"] = _current_env["GITHUB_OWNER"]
    if _current_env.get("GITHUB_REPO"):
        out["name"] = _current_env["GITHUB_REPO"]
    return out


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Secrets: GITHUB_TOKEN or GITHUB_TOKEN_FILE. Repository:
    GITACT_REPOSITORY=owner/name, or GITHUB_OWNER and GITHUB_REPO.
    """
    global _current_env

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    raw: dict[str, Any] = {}
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
        raw = _substitute_env(raw)

    return AppConfig(
        bot=BotConfig(**(raw.get("bot") or {})),
        github=GitHubConfig(**(raw.get("github") or {})),
        repository=RepositoryConfig(**_repository_env_overrides(raw.get("repository") or {})),
        workspace=WorkspaceConfig(**(raw.get("workspace") or {})),
        cycle=CycleConfig(**(raw.get("cycle") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
