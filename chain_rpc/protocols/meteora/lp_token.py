"""
Meteora DLMM LP tokens

An LP mint's authority is the LB pair account, owned by the DLMM program.
"""

import logging
from typing import Optional

from ...errors import ChainRpcError
from ...solana import SolanaClient
from ...types import LpTokenCheck, LpTokenMetadata, RetryOptions
from ..base import check_authority_owned_by, compose_lp_metadata, fetch_pair_symbols
from .constants import PROGRAM_ID, POOL_TYPE
from .pool_parser import parse_meteora_dlmm_pool

logger = logging.getLogger(__name__)

PROTOCOL_NAME = "Meteora DLMM"
SOURCE = "meteora-dlmm"


async def is_meteora_dlmm_lp_token(
    solana: SolanaClient,
    mint: str,
    options: Optional[RetryOptions] = None,
) -> LpTokenCheck:
    return await check_authority_owned_by(solana, mint, PROGRAM_ID, POOL_TYPE, options)


async def derive_meteora_dlmm_lp_metadata(
    solana: SolanaClient,
    pool_address: str,
    options: Optional[RetryOptions] = None,
) -> Optional[LpTokenMetadata]:
    """
    Name an LP token after its pool's X and Y tokens.

    A native-SOL token X resolves to "SOL" without a metadata lookup.

    Returns:
        Metadata like "Meteora DLMM (SOL-CATS) LP Token", or None if the
        pool cannot be read or parsed
    """
    try:
        pool_account = await solana.get_account_info(pool_address, options)
        if pool_account is None or not pool_account.data:
            return None
        pool = parse_meteora_dlmm_pool(pool_account.data, pool_account.owner)
        if pool is None:
            return None
        x_symbol, y_symbol = await fetch_pair_symbols(
            solana, pool.token_x_mint, pool.token_y_mint, options
        )
    except ChainRpcError as e:
        logger.debug(f"Failed to derive Meteora DLMM LP metadata for pool {pool_address}: {e}")
        return None

    return compose_lp_metadata(PROTOCOL_NAME, x_symbol, y_symbol, SOURCE, pool_address, POOL_TYPE)
