"""Python client for the SolusVM admin API."""

__version__ = "1.0.0"

from solusvm_client.core.client import SolusVMClient
from solusvm_client.exceptions import (
    ConfigurationError,
    InvalidArgument,
    InvalidArgumentError,
    SolusVMConnectionError,
    SolusVMError,
    SolusVMTimeoutError,
    TransportError,
)
from solusvm_client.utils.validation import VirtualizationType

__all__ = [
    "SolusVMClient",
    "SolusVMError",
    "ConfigurationError",
    "InvalidArgument",
    "InvalidArgumentError",
    "TransportError",
    "SolusVMTimeoutError",
    "SolusVMConnectionError",
    "VirtualizationType",
]
