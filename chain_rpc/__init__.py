"""
Chain RPC - Resilient JSON-RPC access for EVM and Solana nodes

Provides:
- RpcClient: single and batched JSON-RPC calls with retry and backoff
- EvmClient: eth_call / balance queries with ABI encoding and decoding
- SolanaClient: account reads, Metaplex and Token-2022 metadata
- LP token detection for Raydium, Pump.fun AMM and Meteora DLMM
"""

from .config import config, get_config, reload_config, setup_logging
from .types import (
    RpcRequest,
    RpcResult,
    RetryOptions,
    ContractCallRequest,
    TokenMetadata,
    SolanaAccountInfo,
    SolanaTokenMetadata,
    LpTokenCheck,
    LpTokenMetadata,
)
from .errors import (
    ErrorCode,
    ChainRpcError,
    TransportError,
    HttpStatusError,
    JsonRpcError,
    DecodeError,
    ValidationError,
    ConfigurationError,
)
from .infra import RpcClient, JsonRpcTransport, execute_with_retry, is_retryable

# Chain clients
from .evm import EvmClient, encode_call, normalize_address, to_chain_address
from .solana import SolanaClient
from .protocols import detect_lp_token

__all__ = [
    # Config
    "config",
    "get_config",
    "reload_config",
    "setup_logging",
    # Types
    "RpcRequest",
    "RpcResult",
    "RetryOptions",
    "ContractCallRequest",
    "TokenMetadata",
    "SolanaAccountInfo",
    "SolanaTokenMetadata",
    "LpTokenCheck",
    "LpTokenMetadata",
    # Errors
    "ErrorCode",
    "ChainRpcError",
    "TransportError",
    "HttpStatusError",
    "JsonRpcError",
    "DecodeError",
    "ValidationError",
    "ConfigurationError",
    # RPC
    "RpcClient",
    "JsonRpcTransport",
    "execute_with_retry",
    "is_retryable",
    # Chain clients
    "EvmClient",
    "encode_call",
    "normalize_address",
    "to_chain_address",
    "SolanaClient",
    "detect_lp_token",
]

__version__ = "0.1.0"
