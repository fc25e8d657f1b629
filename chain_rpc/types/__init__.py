"""
Type definitions for chain_rpc
"""

from .rpc import RpcRequest, RpcResult, RetryOptions, ContractCallRequest
from .evm import TokenMetadata
from .solana import (
    SolanaAccountInfo,
    ProgramAccount,
    MetaplexMetadata,
    Token2022Metadata,
    SolanaTokenMetadata,
    RaydiumAmmPoolInfo,
    RaydiumCpmmPoolInfo,
    PumpAmmPoolInfo,
    MeteoraDlmmPoolInfo,
    LpTokenCheck,
    LpTokenMetadata,
)
from .solana_tokens import (
    WSOL_MINT,
    NATIVE_SOL_MINT,
    WELL_KNOWN_MINTS,
    get_token_symbol,
)

__all__ = [
    # RPC
    "RpcRequest",
    "RpcResult",
    "RetryOptions",
    "ContractCallRequest",
    # EVM
    "TokenMetadata",
    # Solana
    "SolanaAccountInfo",
    "ProgramAccount",
    "MetaplexMetadata",
    "Token2022Metadata",
    "SolanaTokenMetadata",
    "RaydiumAmmPoolInfo",
    "RaydiumCpmmPoolInfo",
    "PumpAmmPoolInfo",
    "MeteoraDlmmPoolInfo",
    "LpTokenCheck",
    "LpTokenMetadata",
    # Token registry
    "WSOL_MINT",
    "NATIVE_SOL_MINT",
    "WELL_KNOWN_MINTS",
    "get_token_symbol",
]
