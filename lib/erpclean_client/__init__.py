from .client import ERPCleanClient
from .config_types import ClientConfig, Environment, RequestOptions
from .errors import (
    ApiError,
    ConfigurationError,
    ERPCleanError,
    RemoteError,
    TransportError,
    UnrecognizedResponseError,
)
from .executor import NormalizedResponse

__all__ = [
    "ERPCleanClient",
    "ClientConfig",
    "Environment",
    "RequestOptions",
    "NormalizedResponse",
    "ERPCleanError",
    "ApiError",
    "ConfigurationError",
    "RemoteError",
    "TransportError",
    "UnrecognizedResponseError",
]
