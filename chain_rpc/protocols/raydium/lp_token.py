"""
Raydium LP token identification and naming
"""

import logging
from typing import Optional

from ...errors import ChainRpcError
from ...solana import SolanaClient
from ...types import LpTokenCheck, LpTokenMetadata, RetryOptions
from ..base import compose_lp_metadata, fetch_mint_authority, fetch_pair_symbols
from .constants import (
    AMM_PROGRAM_ID,
    AMM_LP_MINT_OFFSET,
    AMM_POOL_SIZE,
    AUTHORITY_POOL_TYPES,
    CPMM_PROGRAM_ID,
    CPMM_LP_MINT_OFFSET,
    POOL_TYPE_AMM_V4,
    POOL_TYPE_CPMM,
)
from .pool_parser import parse_raydium_amm_pool, parse_raydium_cpmm_pool

logger = logging.getLogger(__name__)

PROTOCOL_NAME = "Raydium"
SOURCE = "raydium"


async def find_raydium_pool_address(
    solana: SolanaClient,
    lp_mint: str,
    pool_type: str,
    options: Optional[RetryOptions] = None,
) -> Optional[str]:
    """
    Find the pool whose lp_mint field equals lp_mint.

    Uses getProgramAccounts with a memcmp filter and an empty data slice,
    which is a heavy call on most nodes.
    """
    if pool_type == POOL_TYPE_AMM_V4:
        program_id = AMM_PROGRAM_ID
        filters = [
            {"memcmp": {"offset": AMM_LP_MINT_OFFSET, "bytes": lp_mint}},
            {"dataSize": AMM_POOL_SIZE},
        ]
    elif pool_type == POOL_TYPE_CPMM:
        program_id = CPMM_PROGRAM_ID
        filters = [{"memcmp": {"offset": CPMM_LP_MINT_OFFSET, "bytes": lp_mint}}]
    else:
        raise ValueError(f"Unknown Raydium pool type: {pool_type}")

    pools = await solana.get_program_accounts(
        program_id,
        filters=filters,
        data_slice={"offset": 0, "length": 0},
        options=options,
    )
    return pools[0].pubkey if pools else None


async def is_raydium_lp_token(
    solana: SolanaClient,
    mint: str,
    options: Optional[RetryOptions] = None,
) -> LpTokenCheck:
    """
    Check whether a mint is a Raydium AMM V4 or CPMM LP token.

    Classification rests on the mint authority alone; failing to find
    the pool address leaves pool_address None but keeps is_lp_token.
    """
    try:
        authority = await fetch_mint_authority(solana, mint, options)
    except ChainRpcError as e:
        logger.debug(f"Failed to read mint authority of {mint}: {e}")
        return LpTokenCheck.no()

    pool_type = AUTHORITY_POOL_TYPES.get(authority) if authority else None
    if pool_type is None:
        return LpTokenCheck.no()

    pool_address = None
    try:
        pool_address = await find_raydium_pool_address(solana, mint, pool_type, options)
    except ChainRpcError as e:
        logger.debug(f"Failed to find Raydium {pool_type} pool for {mint} (LP detection still valid): {e}")

    return LpTokenCheck(is_lp_token=True, pool_address=pool_address, pool_type=pool_type)


async def derive_raydium_lp_metadata(
    solana: SolanaClient,
    pool_address: str,
    pool_type: str = POOL_TYPE_AMM_V4,
    options: Optional[RetryOptions] = None,
) -> Optional[LpTokenMetadata]:
    """
    Name an LP token from its pool's constituent mints.

    Returns:
        Metadata like "Raydium (SOL-USDC) LP Token" / "SOL-USDC-LP", or
        None if the pool cannot be read or parsed
    """
    try:
        pool = await solana.get_account_info(pool_address, options)
        if pool is None or not pool.data:
            return None

        if pool_type == POOL_TYPE_AMM_V4:
            amm = parse_raydium_amm_pool(pool.data, pool.owner)
            if amm is None:
                return None
            mint_a, mint_b = amm.coin_mint, amm.pc_mint
        else:
            cpmm = parse_raydium_cpmm_pool(pool.data, pool.owner)
            if cpmm is None:
                return None
            mint_a, mint_b = cpmm.token0_mint, cpmm.token1_mint

        symbol_a, symbol_b = await fetch_pair_symbols(solana, mint_a, mint_b, options)
    except ChainRpcError as e:
        logger.debug(f"Failed to derive Raydium LP metadata for pool {pool_address} ({pool_type}): {e}")
        return None

    return compose_lp_metadata(PROTOCOL_NAME, symbol_a, symbol_b, SOURCE, pool_address, pool_type)


def generic_raydium_lp_metadata(pool_type: str) -> LpTokenMetadata:
    """Placeholder naming for a Raydium LP token whose pool was not found"""
    return LpTokenMetadata(
        name=f"{PROTOCOL_NAME} {pool_type.upper()} LP",
        symbol="RAY-LP",
        source=SOURCE,
        pool_type=pool_type,
    )
