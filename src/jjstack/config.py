"""Runtime configuration: defaults, repo-local ``.jjstack.json``, then environment."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Mapping

from jjstack.errors import ConfigError

CONFIG_FILENAME = ".jjstack.json"
DEFAULT_API_URL = "https://api.github.com"

# Environment variable -> StackConfig field
ENV_VARS = {
    "JJSTACK_REPO": "repo",
    "JJSTACK_BACKEND": "backend",
    "JJSTACK_API_URL": "api_url",
    "JJSTACK_TIMEOUT": "timeout",
    "GH_TOKEN": "token",
    "GITHUB_TOKEN": "token",
}


@dataclass(frozen=True)
class StackConfig:
    """
    Settings for one sync run.

    Fields:
    - repo: ``owner/name``; None means ask the backend (``gh repo set-default``)
    - backend: Registered hosting backend name (gh, rest)
    - api_url: REST API base URL (rest backend only)
    - token: API token (rest backend only; passed through untouched)
    - timeout: Per-request HTTP timeout in seconds (rest backend only)
    """

    repo: str | None = None
    backend: str = "gh"
    api_url: str = DEFAULT_API_URL
    token: str | None = None
    timeout: float = 10.0

    def with_overrides(self, **overrides: object) -> "StackConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


def _coerce(values: Mapping[str, object], source: str) -> dict[str, object]:
    known = {f.name for f in fields(StackConfig)}
    result: dict[str, object] = {}
    for key, value in values.items():
        if key not in known:
            raise ConfigError(f"Unknown setting '{key}' in {source}")
        if key == "timeout":
            try:
                value = float(value)  # type: ignore[arg-type]
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Invalid timeout in {source}: {value!r}") from exc
            if value <= 0:
                raise ConfigError(f"Invalid timeout in {source}: must be positive")
        elif value is not None:
            value = str(value)
        result[key] = value
    return result


def load_config_file(path: Path) -> dict[str, object]:
    """Read settings from a JSON config file (missing file means no settings)."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return _coerce(data, str(path))


def load_config(
    repo_root: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> StackConfig:
    """Build the effective configuration.

    Args:
        repo_root: Working copy root holding ``.jjstack.json`` (skipped when None)
        environ: Environment mapping (defaults to ``os.environ``)

    Raises:
        ConfigError: If the config file or an environment value is invalid
    """
    env = os.environ if environ is None else environ
    settings: dict[str, object] = {}
    if repo_root is not None:
        settings.update(load_config_file(repo_root / CONFIG_FILENAME))

    # GITHUB_TOKEN is listed last so it wins over GH_TOKEN
    env_values = {field: env[var] for var, field in ENV_VARS.items() if env.get(var)}
    settings.update(_coerce(env_values, "environment"))

    return StackConfig(**settings)  # type: ignore[arg-type]


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_API_URL",
    "StackConfig",
    "load_config",
    "load_config_file",
]
