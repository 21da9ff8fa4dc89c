"""
Configuration management for the Snow Oracle SDK.

Loads configuration from environment variables with sensible defaults.

Usage:
    ```python
    from snow_oracle.config import get_config

    config = get_config(timeout=10.0)

    from snow_oracle import SnowOracleClient
    client = SnowOracleClient(config=config.to_rest_config())
    ```
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from snow_oracle.base.rest_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, RestConfig
from snow_oracle.base.websocket_client import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_RECONNECT_ATTEMPTS,
    DEFAULT_RECONNECT_INTERVAL,
    DEFAULT_WS_URL,
    WebSocketConfig,
)


def load_env(env_path: str | Path | None = None) -> bool:
    """
    Load environment variables from .env.config and .env files.

    Files loaded (in order):
    1. .env.config - General configuration (can be shared)
    2. .env - Private overrides

    Args:
        env_path: Path to .env file. If None, searches in current dir and parent dirs.

    Returns:
        True if any .env file was found and loaded, False otherwise.
    """
    if env_path:
        return load_dotenv(env_path)

    current = Path.cwd()

    for _ in range(5):  # Max 5 levels up
        loaded = False

        config_file = current / ".env.config"
        if config_file.exists():
            load_dotenv(config_file)
            loaded = True

        env_file = current / ".env"
        if env_file.exists():
            load_dotenv(env_file, override=True)
            loaded = True

        if loaded:
            return True

        current = current.parent

    return False


def _get_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def _get_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class SnowOracleConfig:
    """SDK settings for both the REST client and the trade feed."""

    # REST
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    # WebSocket
    ws_url: str = DEFAULT_WS_URL
    ws_reconnect: bool = True
    ws_reconnect_interval: float = DEFAULT_RECONNECT_INTERVAL
    ws_max_reconnect_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS
    ws_connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    def to_rest_config(self, headers: dict[str, str] | None = None) -> RestConfig:
        """Build the REST client configuration."""
        return RestConfig(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=dict(headers or {}),
        )

    def to_websocket_config(self) -> WebSocketConfig:
        """Build the trade feed configuration."""
        return WebSocketConfig(
            url=self.ws_url,
            reconnect=self.ws_reconnect,
            reconnect_interval=self.ws_reconnect_interval,
            max_reconnect_attempts=self.ws_max_reconnect_attempts,
            connect_timeout=self.ws_connect_timeout,
        )

    @classmethod
    def from_env(cls) -> "SnowOracleConfig":
        """Load config from environment variables."""
        return cls(
            base_url=os.environ.get("SNOW_ORACLE_BASE_URL", "").strip() or DEFAULT_BASE_URL,
            timeout=_get_float("SNOW_ORACLE_TIMEOUT", DEFAULT_TIMEOUT),
            ws_url=os.environ.get("SNOW_ORACLE_WS_URL", "").strip() or DEFAULT_WS_URL,
            ws_reconnect=_get_bool("SNOW_ORACLE_WS_RECONNECT", True),
            ws_reconnect_interval=_get_float(
                "SNOW_ORACLE_WS_RECONNECT_INTERVAL", DEFAULT_RECONNECT_INTERVAL
            ),
            ws_max_reconnect_attempts=_get_int(
                "SNOW_ORACLE_WS_MAX_RECONNECT_ATTEMPTS", DEFAULT_MAX_RECONNECT_ATTEMPTS
            ),
            ws_connect_timeout=_get_float("SNOW_ORACLE_WS_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
        )


def get_config(**overrides: Any) -> SnowOracleConfig:
    """
    Get SDK configuration.

    Loads from environment variables, with optional keyword overrides.
    Overrides set to None are ignored.

    Example:
        ```python
        config = get_config()
        config = get_config(base_url="http://localhost:5000", ws_reconnect=False)
        ```
    """
    config = SnowOracleConfig.from_env()

    for key, value in overrides.items():
        if value is None:
            continue
        if not hasattr(config, key):
            raise TypeError(f"Unknown config option: {key}")
        setattr(config, key, value)

    return config


# Auto-load .env on import
load_env()
