"""
Infrastructure layer for chain_rpc

Provides:
- RpcClient: JSON-RPC client with classified retry and batching
- JsonRpcTransport: single-attempt HTTP transport
- execute_with_retry / is_retryable: retry executor and failure classifier
"""

from .retry import (
    CorrelationContext,
    compute_backoff_delay,
    execute_with_retry,
    is_retryable,
)
from .transport import JsonRpcTransport, assign_request_ids
from .rpc import RpcClient

__all__ = [
    "RpcClient",
    "JsonRpcTransport",
    "assign_request_ids",
    "CorrelationContext",
    "compute_backoff_delay",
    "execute_with_retry",
    "is_retryable",
]
