"""
LP token detection across supported Solana protocols

Protocols are tried in order: Pump.fun AMM, Meteora DLMM, then Raydium.
The Raydium check is last because its pool lookup uses getProgramAccounts.
"""

import logging
from typing import Optional

from ..errors import ChainRpcError
from ..solana import SolanaClient
from ..types import LpTokenMetadata, RetryOptions
from .meteora import derive_meteora_dlmm_lp_metadata, is_meteora_dlmm_lp_token
from .pump_amm import derive_pump_amm_lp_metadata, is_pump_amm_lp_token
from .raydium import derive_raydium_lp_metadata, generic_raydium_lp_metadata, is_raydium_lp_token

logger = logging.getLogger(__name__)


async def _detect_pump_amm(
    solana: SolanaClient,
    mint: str,
    options: Optional[RetryOptions],
) -> Optional[LpTokenMetadata]:
    check = await is_pump_amm_lp_token(solana, mint, options)
    if not check.is_lp_token or not check.pool_address:
        return None
    return await derive_pump_amm_lp_metadata(solana, check.pool_address, options)


async def _detect_meteora_dlmm(
    solana: SolanaClient,
    mint: str,
    options: Optional[RetryOptions],
) -> Optional[LpTokenMetadata]:
    check = await is_meteora_dlmm_lp_token(solana, mint, options)
    if not check.is_lp_token or not check.pool_address:
        return None
    return await derive_meteora_dlmm_lp_metadata(solana, check.pool_address, options)


async def _detect_raydium(
    solana: SolanaClient,
    mint: str,
    options: Optional[RetryOptions],
) -> Optional[LpTokenMetadata]:
    check = await is_raydium_lp_token(solana, mint, options)
    if not check.is_lp_token or not check.pool_type:
        return None
    if check.pool_address is None:
        logger.debug(f"Detected Raydium {check.pool_type} LP token {mint} (pool address not found)")
        return generic_raydium_lp_metadata(check.pool_type)
    return await derive_raydium_lp_metadata(solana, check.pool_address, check.pool_type, options)


DETECTORS = (
    ("Pump.fun AMM", _detect_pump_amm),
    ("Meteora DLMM", _detect_meteora_dlmm),
    ("Raydium", _detect_raydium),
)


async def detect_lp_token(
    solana: SolanaClient,
    mint: str,
    options: Optional[RetryOptions] = None,
) -> Optional[LpTokenMetadata]:
    """
    Identify an LP token mint and derive its display metadata.

    Args:
        solana: Solana client
        mint: Mint address (base58)
        options: Retry options for every RPC call made

    Returns:
        Metadata from the first protocol that recognizes the mint, or None
    """
    for protocol, detector in DETECTORS:
        try:
            metadata = await detector(solana, mint, options)
        except ChainRpcError as e:
            logger.debug(f"Failed to check for {protocol} LP token {mint}: {e}")
            continue
        if metadata is not None:
            logger.debug(f"Derived {protocol} LP metadata for {mint}: {metadata.name} / {metadata.symbol}")
            return metadata
    return None
