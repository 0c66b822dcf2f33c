from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml
from dotenv import dotenv_values

DEFAULT_CONFIG: dict = {
    "provider": "groq",
    "review_stack": "backend",
    "max_files": 8,
    "max_new_file_lines": 100,
    "max_context_lines": 3,
    "guidelines": None,  # optional path to a Markdown file appended to the review prompt
    "exclude": [],  # fnmatch patterns or directory names to skip (e.g. "migrations/", "*.min.js")
}

ENV_KEYS = (
    "AZURE_ORG",
    "AZURE_PROJECT",
    "AZURE_PAT",
    "GROQ_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "AZURE_REPO",
    "FIGMA_PAT",
    "AZURE_USER_EMAIL",
)

PROVIDER_KEYS = {
    "groq": "GROQ_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

AZURE_KEYS = ("AZURE_ORG", "AZURE_PROJECT", "AZURE_PAT")


class ConfigError(Exception):
    """Raised when required settings are missing or invalid."""

    def __init__(self, missing: list[str] | None = None, message: str | None = None):
        self.missing = list(missing or [])
        if message is None:
            message = "Missing config. Create .env.local with: " + ", ".join(self.missing)
        super().__init__(message)


@dataclass
class Config:
    # Credentials and per-user settings, from .env / .env.local / the environment.
    azure_org: str | None = None
    azure_project: str | None = None
    azure_pat: str | None = None
    groq_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    azure_repo: str | None = None
    figma_pat: str | None = None
    azure_user_email: str | None = None

    # Tool settings, from .adolens.yml and CLI overrides.
    provider: str = DEFAULT_CONFIG["provider"]
    review_stack: str = DEFAULT_CONFIG["review_stack"]
    max_files: int = DEFAULT_CONFIG["max_files"]
    max_new_file_lines: int = DEFAULT_CONFIG["max_new_file_lines"]
    max_context_lines: int = DEFAULT_CONFIG["max_context_lines"]
    guidelines: str | None = None
    exclude: list[str] = field(default_factory=list)

    def get(self, name: str) -> str | None:
        """Look a setting up by its environment-variable name (``"AZURE_PAT"``)."""
        return getattr(self, name.lower())

    def require(self, *names: str) -> None:
        """Raise ConfigError naming every key in ``names`` that is empty."""
        missing = [name for name in names if not self.get(name)]
        if missing:
            raise ConfigError(missing)

    @property
    def provider_key_name(self) -> str:
        try:
            return PROVIDER_KEYS[self.provider]
        except KeyError:
            raise ConfigError(
                message=f"Unknown provider: {self.provider!r}. Choose one of: {', '.join(PROVIDER_KEYS)}."
            )

    def require_azure(self, *extra: str) -> None:
        """Require the DevOps credentials, the active provider's key, and ``extra``."""
        self.require(*AZURE_KEYS, self.provider_key_name, *extra)


def load_env(env_dir: str | Path = ".") -> dict[str, str]:
    """
    Resolve credentials from, in order of precedence:
      1. .env.local (developer overrides, not committed)
      2. the process environment
      3. .env (committed template)
    """
    env_dir = Path(env_dir)
    values = {k: v for k, v in dotenv_values(env_dir / ".env").items() if v is not None}
    values.update({k: os.environ[k] for k in ENV_KEYS if k in os.environ})
    local_path = env_dir / ".env.local"
    if local_path.exists():
        values.update({k: v for k, v in dotenv_values(local_path).items() if v is not None})
    return {k: values[k] for k in ENV_KEYS if values.get(k)}


def load_config(
    config_path: str = ".adolens.yml",
    cli_overrides: Optional[dict] = None,
    env_dir: str | Path = ".",
) -> Config:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .adolens.yml in the current directory
      3. CLI argument overrides
    Credentials come from the .env files, see ``load_env``.
    """
    settings = {**DEFAULT_CONFIG, "exclude": list(DEFAULT_CONFIG["exclude"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        settings.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                settings[key] = value

    known = {f.name for f in fields(Config)}
    values = {key: value for key, value in settings.items() if key in known}
    for name, value in load_env(env_dir).items():
        values[name.lower()] = value

    return Config(**values)


def load_guidelines(config: Config) -> str | None:
    """
    Load extra review guidelines.

    If ``guidelines`` is set in config, loads from that path (relative to cwd).
    Otherwise there are none; the built-in review prompt stands alone.
    """
    if not config.guidelines:
        return None
    p = Path(config.guidelines)
    if not p.exists():
        raise FileNotFoundError(f"Guidelines file not found: {config.guidelines}")
    return p.read_text()
