"""
Hosting backends for reading and updating pull request descriptions.

This package provides the HostingBackend protocol and two implementations:
``gh`` shells out to the GitHub CLI (which owns authentication), ``rest`` talks
to the GitHub REST API through httpx with a token from configuration.
"""

from typing import Callable, Dict

from jjstack.config import StackConfig
from jjstack.errors import ConfigError
from jjstack.hosting.gh_cli import GhCliBackend
from jjstack.hosting.protocol import HostingBackend
from jjstack.hosting.rest import RestBackend

__all__ = [
    "GhCliBackend",
    "HostingBackend",
    "RestBackend",
    "get_backend",
    "list_backends",
    "register_backend",
]

BackendFactory = Callable[[StackConfig], HostingBackend]

_registry: Dict[str, BackendFactory] = {}


def register_backend(name: str, factory: BackendFactory) -> None:
    """Register a backend factory under ``name``."""
    _registry[name] = factory


def get_backend(config: StackConfig) -> HostingBackend:
    """Instantiate the backend selected by ``config.backend``.

    Raises:
        ConfigError: If the backend is unknown or misconfigured
    """
    if config.backend not in _registry:
        raise ConfigError(
            f"Unknown backend: {config.backend}. Available: {', '.join(list_backends())}"
        )
    return _registry[config.backend](config)


def list_backends() -> list[str]:
    """List registered backend names."""
    return sorted(_registry.keys())


def _make_rest(config: StackConfig) -> HostingBackend:
    if not config.token:
        raise ConfigError(
            "The rest backend needs a token. Set GITHUB_TOKEN (or GH_TOKEN), "
            "or use --backend gh."
        )
    return RestBackend(api_url=config.api_url, token=config.token, timeout=config.timeout)


# Pre-register backends
register_backend("gh", lambda config: GhCliBackend())
register_backend("rest", _make_rest)
