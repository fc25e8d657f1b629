"""
Retry Logic Helper Module

Classifies RPC failures as transient or permanent and re-runs transient
ones with capped exponential backoff and jitter.
Includes structured logging with correlation IDs for request tracing.
"""

import asyncio
import logging
import random
import uuid
import contextvars
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from ..errors import (
    ChainRpcError,
    JsonRpcError,
    TransportError,
    is_transient_status,
)
from ..types import RetryOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Context variable for correlation ID (task-safe)
_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> contextvars.Token:
    """Set the correlation ID in context. Returns token for reset."""
    return _correlation_id.set(correlation_id)


class CorrelationContext:
    """
    Context manager for correlation ID scoping.

    Usage:
        with CorrelationContext("metadata") as cid:
            logger.info(f"[{cid}] Fetching token metadata")
            result = await rpc.call("getAccountInfo", [...])
    """

    def __init__(self, prefix: Optional[str] = None):
        self.correlation_id = generate_correlation_id()
        if prefix:
            self.correlation_id = f"{prefix}_{self.correlation_id}"
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = set_correlation_id(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _correlation_id.reset(self._token)


def _log_with_correlation(
    level: int,
    message: str,
    operation_name: str,
    attempt: Optional[int] = None,
    max_retries: Optional[int] = None,
    **extra
):
    """
    Log message with correlation ID and structured context.

    Args:
        level: Logging level (logging.INFO, logging.WARNING, etc.)
        message: Log message
        operation_name: Name of the operation being executed
        attempt: Current attempt number (1-indexed)
        max_retries: Total number of attempts
        **extra: Additional context fields
    """
    cid = get_correlation_id()

    parts = []
    if cid:
        parts.append(f"[{cid}]")
    parts.append(f"[{operation_name}]")
    if attempt is not None and max_retries is not None:
        parts.append(f"[{attempt}/{max_retries}]")
    parts.append(message)

    extra_context = {
        "correlation_id": cid,
        "operation": operation_name,
        "attempt": attempt,
        "max_retries": max_retries,
        **extra
    }

    logger.log(level, " ".join(parts), extra=extra_context)


# JSON-RPC codes nodes use for transient server-side conditions
RETRYABLE_RPC_CODES = frozenset({-32000, -32001, -32002, -32603})

# -32600 with one of these means the node (or a proxy) lacks a capability another may have
CAPABILITY_MISMATCH_CODE = -32600
CAPABILITY_MISMATCH_KEYWORDS = [
    "does not support constant",
    "unsupported",
    "method not found",
]

TRANSPORT_KEYWORDS = [
    "network", "econnreset", "etimedout", "enotfound",
    "socket hang up", "operation was aborted", "fetch failed",
    "aborterror", "connection reset", "connection refused", "timed out",
]

OVERLOAD_KEYWORDS = [
    "too many requests", "rate limit", "temporarily unavailable",
    "timeout", "busy", "overloaded", "try again",
]

PARSE_FAILURE_KEYWORDS = [
    "unexpected token", "failed to parse", "non-json",
]

# httpx failures that never reached a healthy node
_HTTPX_TRANSIENT = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    httpx.ProxyError,
)


def _contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


def _classify_rpc_error(code: Optional[int], message: str) -> bool:
    """Classify a JSON-RPC error object by code and message"""
    message = (message or "").lower()
    if code in RETRYABLE_RPC_CODES:
        return True
    if code == CAPABILITY_MISMATCH_CODE and _contains_any(message, CAPABILITY_MISMATCH_KEYWORDS):
        return True
    return _contains_any(message, OVERLOAD_KEYWORDS) or _contains_any(message, PARSE_FAILURE_KEYWORDS)


def is_retryable(
    error: Optional[BaseException] = None,
    status: Optional[int] = None,
    payload: Optional[dict] = None,
) -> bool:
    """
    Decide whether a failed RPC attempt is worth repeating.

    Any one signal marking the failure transient is enough.

    Args:
        error: Exception raised by the attempt
        status: HTTP status of the response, if one was received
        payload: JSON-RPC error object ({"code": ..., "message": ...}) or a
            whole response carrying one under "error"

    Returns:
        True if the failure is transient
    """
    if is_transient_status(status):
        return True

    if payload:
        rpc_error = payload.get("error", payload) if isinstance(payload, dict) else None
        if isinstance(rpc_error, dict) and _classify_rpc_error(
            rpc_error.get("code"), str(rpc_error.get("message", ""))
        ):
            return True

    if error is None:
        return False

    if isinstance(error, JsonRpcError):
        return error.recoverable or _classify_rpc_error(error.rpc_code, error.rpc_message)
    if isinstance(error, ChainRpcError):
        return error.recoverable
    if isinstance(error, (asyncio.TimeoutError, *_HTTPX_TRANSIENT)):
        return True

    text = f"{type(error).__name__}: {error}".lower()
    return (
        _contains_any(text, TRANSPORT_KEYWORDS)
        or _contains_any(text, OVERLOAD_KEYWORDS)
        or _contains_any(text, PARSE_FAILURE_KEYWORDS)
    )


def compute_backoff_delay(attempt: int, options: RetryOptions) -> float:
    """
    Delay in milliseconds before the attempt following `attempt` (1-indexed).

    base * 2^(attempt-1) scaled by a uniform jitter factor, capped at max_delay_ms.
    """
    exponential = options.base_delay_ms * (2 ** (attempt - 1))
    jitter = random.uniform(options.jitter_min, options.jitter_max)
    return min(options.max_delay_ms, exponential * jitter)


async def _backoff(delay_seconds: float) -> None:
    await asyncio.sleep(delay_seconds)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    options: Optional[RetryOptions] = None,
    operation_name: str = "rpc_call",
) -> T:
    """
    Run an async operation, retrying transient failures.

    Each attempt is bounded by options.timeout_ms; expiry counts as a
    transient transport failure. A permanent failure, or the failure of
    the final attempt, is re-raised as-is.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        options: Retry policy (defaults from config.rpc)
        operation_name: Name for logging purposes

    Returns:
        The operation's result

    Example:
        async def fetch():
            return await transport.request("eth_blockNumber", [])

        block_hex = await execute_with_retry(fetch, RetryOptions.with_retries(5), "eth_blockNumber")
    """
    options = options or RetryOptions()
    attempts = options.attempts

    for attempt in range(1, attempts + 1):
        try:
            result = await asyncio.wait_for(operation(), timeout=options.timeout_seconds)
        except asyncio.TimeoutError as e:
            error: BaseException = TransportError.timeout(None, options.timeout_seconds)
            error.original_error = e
        except Exception as e:
            error = e
        else:
            if attempt > 1:
                _log_with_correlation(
                    logging.INFO,
                    f"Succeeded after {attempt} attempts",
                    operation_name,
                    attempt,
                    attempts,
                )
            return result

        if not is_retryable(error):
            _log_with_correlation(
                logging.DEBUG,
                f"Non-retryable error: {error}",
                operation_name,
                attempt,
                attempts,
                error_type="fatal",
            )
            raise error

        if attempt >= attempts:
            _log_with_correlation(
                logging.ERROR,
                f"Max retries ({attempts}) exceeded. Last error: {error}",
                operation_name,
                attempt,
                attempts,
                error_type="exhausted",
            )
            raise error

        delay_ms = compute_backoff_delay(attempt, options)
        _log_with_correlation(
            logging.WARNING,
            f"Recoverable error, retrying in {delay_ms:.0f}ms: {error}",
            operation_name,
            attempt,
            attempts,
            error_type="recoverable",
            delay_ms=delay_ms,
        )
        await _backoff(delay_ms / 1000.0)

    # attempts >= 1, so the loop always returns or raises
    raise RuntimeError(f"{operation_name}: retry loop exited without result")

