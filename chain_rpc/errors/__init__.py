"""
Error definitions for chain_rpc
"""

from .exceptions import (
    ErrorCode,
    ChainRpcError,
    TransportError,
    HttpStatusError,
    JsonRpcError,
    DecodeError,
    ValidationError,
    ConfigurationError,
    TRANSIENT_HTTP_STATUSES,
    is_transient_status,
)

__all__ = [
    "ErrorCode",
    "ChainRpcError",
    "TransportError",
    "HttpStatusError",
    "JsonRpcError",
    "DecodeError",
    "ValidationError",
    "ConfigurationError",
    "TRANSIENT_HTTP_STATUSES",
    "is_transient_status",
]
