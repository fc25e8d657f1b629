"""
Pump.fun AMM LP tokens

An LP mint's authority is the pool account itself, owned by the AMM
program.
"""

import logging
from typing import Optional

from ...errors import ChainRpcError
from ...solana import SolanaClient
from ...types import LpTokenCheck, LpTokenMetadata, RetryOptions
from ..base import check_authority_owned_by, compose_lp_metadata, fetch_pair_symbols
from .constants import PROGRAM_ID, POOL_TYPE
from .pool_parser import parse_pump_amm_pool

logger = logging.getLogger(__name__)

PROTOCOL_NAME = "Pump.fun AMM"
SOURCE = "pump-amm"


async def is_pump_amm_lp_token(
    solana: SolanaClient,
    mint: str,
    options: Optional[RetryOptions] = None,
) -> LpTokenCheck:
    """Check whether a mint is a Pump.fun AMM LP token (pool = mint authority)"""
    return await check_authority_owned_by(solana, mint, PROGRAM_ID, POOL_TYPE, options)


async def derive_pump_amm_lp_metadata(
    solana: SolanaClient,
    pool_address: str,
    options: Optional[RetryOptions] = None,
) -> Optional[LpTokenMetadata]:
    """
    Name an LP token after its pool's quote and base tokens.

    Returns:
        Metadata like "Pump.fun AMM (SOL-TEST) LP Token", or None if the
        pool cannot be read or parsed
    """
    try:
        pool_account = await solana.get_account_info(pool_address, options)
        if pool_account is None or not pool_account.data:
            return None
        pool = parse_pump_amm_pool(pool_account.data, pool_account.owner)
        if pool is None:
            return None
        quote_symbol, base_symbol = await fetch_pair_symbols(
            solana, pool.quote_mint, pool.base_mint, options
        )
    except ChainRpcError as e:
        logger.debug(f"Failed to derive Pump.fun AMM LP metadata for pool {pool_address}: {e}")
        return None

    return compose_lp_metadata(PROTOCOL_NAME, quote_symbol, base_symbol, SOURCE, pool_address, POOL_TYPE)
