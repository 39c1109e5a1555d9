"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class ServerConfig(BaseModel):
    """Webhook listener configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    path: str = "/api/breaker"
    # Azure Functions custom handlers receive their port through this variable.
    port_env: str = "FUNCTIONS_CUSTOMHANDLER_PORT"
    shutdown_grace_secs: float = 10.0


class BreakerConfig(BaseModel):
    """Decision cycle policy."""

    # Functions consumption plan stops executions after 5 minutes.
    cycle_timeout_secs: float = 240.0
    required_routing_method: str = "Priority"
    min_endpoints: int = 2


class AzureConfig(BaseModel):
    """Credential options for the Azure management plane."""

    managed_identity_client_id: str = ""
    exclude_interactive_browser_credential: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    server: ServerConfig = ServerConfig()
    breaker: BreakerConfig = BreakerConfig()
    azure: AzureConfig = AzureConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
