"""
Logging helpers for the Snow Oracle SDK.

Every module logs through ``logging.getLogger(__name__)``, so all records
live under the ``snow_oracle`` namespace. The two components can be tuned
separately:

- ``gateway``: REST requests (``snow_oracle.base.rest_client``, ``snow_oracle.client``)
- ``feed``: the live trade feed (``snow_oracle.base.websocket_client``, ``snow_oracle.websocket``)

The default level is read from SNOW_ORACLE_LOG_LEVEL (INFO when unset).
"""

import logging
import os
import sys
from typing import TextIO

ROOT_LOGGER = "snow_oracle"
LOG_LEVEL_ENV = "SNOW_ORACLE_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

COMPONENT_LOGGERS: dict[str, tuple[str, ...]] = {
    "gateway": ("snow_oracle.base.rest_client", "snow_oracle.client"),
    "feed": ("snow_oracle.base.websocket_client", "snow_oracle.websocket"),
}

# Name of the handler installed by setup_logger(), replaced on repeat calls
_HANDLER_NAME = "snow_oracle"


def resolve_level(level: int | str | None) -> int:
    """
    Turn a level name or number into a logging level.

    None falls back to SNOW_ORACLE_LOG_LEVEL, then INFO. Unknown names
    resolve to INFO.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "").strip() or logging.INFO

    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        return resolved if isinstance(resolved, int) else logging.INFO

    return level


def setup_logger(
    level: int | str | None = None,
    stream: TextIO | None = None,
    format_string: str | None = None,
    gateway_level: int | str | None = None,
    feed_level: int | str | None = None,
) -> logging.Logger:
    """
    Attach a formatted stream handler to the SDK logger.

    Args:
        level: SDK-wide level (default: SNOW_ORACLE_LOG_LEVEL or INFO)
        stream: Output stream (default: stderr)
        format_string: Custom format string
        gateway_level: Separate level for REST request logging
        feed_level: Separate level for trade feed logging

    Returns:
        The ``snow_oracle`` logger

    Example:
        ```python
        # Quiet REST calls, full detail from the feed
        setup_logger(level="INFO", gateway_level="WARNING", feed_level="DEBUG")
        ```
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(resolve_level(level))

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(handler)

    if gateway_level is not None:
        set_component_level("gateway", gateway_level)
    if feed_level is not None:
        set_component_level("feed", feed_level)

    return logger


def set_component_level(component: str, level: int | str) -> None:
    """Set the level of every module logger of "gateway" or "feed"."""
    try:
        names = COMPONENT_LOGGERS[component]
    except KeyError:
        raise ValueError(
            f"Unknown component {component!r}, expected one of {sorted(COMPONENT_LOGGERS)}"
        ) from None

    resolved = resolve_level(level)
    for name in names:
        logging.getLogger(name).setLevel(resolved)


def get_logger(component: str | None = None) -> logging.Logger:
    """
    Get an SDK logger.

    Args:
        component: "gateway" or "feed" for that component's core logger,
            any other name for ``snow_oracle.<name>``, None for the SDK root
    """
    if component is None:
        return logging.getLogger(ROOT_LOGGER)
    if component in COMPONENT_LOGGERS:
        return logging.getLogger(COMPONENT_LOGGERS[component][0])
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")
