"""
Exception definitions for chain_rpc
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """
    Unified error codes for RPC and decoding operations

    1xxx - Transport / RPC errors
    2xxx - Decoding errors
    3xxx - Validation errors
    9xxx - Configuration errors
    """
    # Transport / RPC errors
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_HTTP_STATUS = "1004"
    RPC_ERROR_RESPONSE = "1005"
    RPC_INVALID_RESPONSE = "1006"

    # Decoding errors
    DECODE_FAILED = "2001"
    DECODE_NON_JSON = "2002"

    # Validation errors
    VALIDATION_FAILED = "3001"
    ARG_COUNT_MISMATCH = "3002"
    INVALID_ADDRESS = "3003"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


# HTTP statuses a node or proxy returns for transient conditions
TRANSIENT_HTTP_STATUSES = frozenset({408, 425, 429, 499, 502, 503, 504, 522, 523, 524})


def is_transient_status(status: Optional[int]) -> bool:
    """Check whether an HTTP status denotes a transient server condition"""
    if status is None:
        return False
    return status in TRANSIENT_HTTP_STATUSES or status >= 500


class ChainRpcError(Exception):
    """
    Base exception for all chain_rpc errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class TransportError(ChainRpcError):
    """
    Network-level failure - recoverable

    Raised when:
    - Connection to the node fails or is reset
    - Request times out
    - Request is aborted
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "TransportError":
        reason = f": {error}" if error else ""
        return cls(
            f"Network error contacting {endpoint}{reason}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: Optional[str], timeout_seconds: float) -> "TransportError":
        return cls(
            f"Request timeout after {timeout_seconds}s" + (f": {endpoint}" if endpoint else ""),
            ErrorCode.RPC_TIMEOUT,
            endpoint=endpoint,
        )


class HttpStatusError(ChainRpcError):
    """Non-2xx HTTP response; recoverable when the status is transient"""

    def __init__(self, status: int, endpoint: Optional[str] = None, body: str = ""):
        code = ErrorCode.RPC_RATE_LIMITED if status == 429 else ErrorCode.RPC_HTTP_STATUS
        super().__init__(
            f"HTTP {status}" + (f" from {endpoint}" if endpoint else ""),
            code,
            recoverable=is_transient_status(status),
            details={"endpoint": endpoint, "status": status, "body": body[:200]},
        )
        self.status = status
        self.endpoint = endpoint


class JsonRpcError(ChainRpcError):
    """
    Error object returned by the node in a JSON-RPC response

    Recoverability is decided by the retry classifier from the code and message.
    """

    def __init__(
        self,
        rpc_code: Optional[int],
        rpc_message: str,
        data: Any = None,
        recoverable: bool = False,
    ):
        super().__init__(
            f"RPC error {rpc_code}: {rpc_message}",
            ErrorCode.RPC_ERROR_RESPONSE,
            recoverable=recoverable,
            details={"rpc_error_code": rpc_code, "rpc_error_data": data},
        )
        self.rpc_code = rpc_code
        self.rpc_message = rpc_message
        self.data = data


class DecodeError(ChainRpcError):
    """Malformed response body or result payload"""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DECODE_FAILED,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, code, recoverable, original_error, details)

    @classmethod
    def non_json(cls, status: int, body: str, error: Exception = None) -> "DecodeError":
        """Body could not be parsed; worth retrying only when the status is transient"""
        return cls(
            f"Non-JSON response (HTTP {status}): {body[:120]!r}",
            ErrorCode.DECODE_NON_JSON,
            recoverable=is_transient_status(status),
            original_error=error,
            details={"status": status},
        )


class ValidationError(ChainRpcError):
    """Caller supplied invalid input; never retried"""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.VALIDATION_FAILED, details: Optional[dict] = None):
        super().__init__(message, code, recoverable=False, details=details)

    @classmethod
    def arg_count_mismatch(cls, signature: str, expected: int, got: int) -> "ValidationError":
        return cls(
            f"Arg count mismatch for {signature}: expected {expected}, got {got}",
            ErrorCode.ARG_COUNT_MISMATCH,
            details={"signature": signature, "expected": expected, "got": got},
        )

    @classmethod
    def invalid_address(cls, value: Any, reason: str = "") -> "ValidationError":
        suffix = f" ({reason})" if reason else ""
        return cls(
            f"Invalid address: {value!r}{suffix}",
            ErrorCode.INVALID_ADDRESS,
            details={"value": value},
        )


class ConfigurationError(ChainRpcError):
    """Configuration errors"""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.CONFIG_INVALID):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration for {param}: {reason}", ErrorCode.CONFIG_INVALID)
