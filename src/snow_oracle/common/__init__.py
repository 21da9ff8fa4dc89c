"""
Common utilities and exceptions for the Snow Oracle SDK.
"""

from snow_oracle.common.exceptions import (
    ApiError,
    ConfigurationError,
    ConnectionError,
    InvalidResponseError,
    MessageParseError,
    NetworkError,
    SnowOracleError,
    StreamUnavailableError,
    TimeoutError,
    WebSocketError,
)
from snow_oracle.common.logger import get_logger, set_component_level, setup_logger
from snow_oracle.common.utils import (
    decimal_or_zero,
    parse_datetime,
    parse_decimal,
    parse_int,
    utc_now,
)

__all__ = [
    # Exceptions
    "SnowOracleError",
    "ApiError",
    "InvalidResponseError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "WebSocketError",
    "StreamUnavailableError",
    "MessageParseError",
    "ConfigurationError",
    # Logging
    "setup_logger",
    "set_component_level",
    "get_logger",
    # Utilities
    "parse_datetime",
    "parse_decimal",
    "decimal_or_zero",
    "parse_int",
    "utc_now",
]
