"""
Raydium AMM V4 / CPMM

LP tokens are recognized by their mint authority; pool accounts are
parsed to name them after their constituent tokens.
"""

from .constants import (
    AMM_PROGRAM_ID,
    CPMM_PROGRAM_ID,
    AMM_AUTHORITY,
    CPMM_AUTHORITY,
    POOL_TYPE_AMM_V4,
    POOL_TYPE_CPMM,
)
from .pool_parser import parse_raydium_amm_pool, parse_raydium_cpmm_pool
from .lp_token import (
    derive_raydium_lp_metadata,
    find_raydium_pool_address,
    generic_raydium_lp_metadata,
    is_raydium_lp_token,
)

__all__ = [
    # Constants
    "AMM_PROGRAM_ID",
    "CPMM_PROGRAM_ID",
    "AMM_AUTHORITY",
    "CPMM_AUTHORITY",
    "POOL_TYPE_AMM_V4",
    "POOL_TYPE_CPMM",
    # Parsers
    "parse_raydium_amm_pool",
    "parse_raydium_cpmm_pool",
    # LP tokens
    "derive_raydium_lp_metadata",
    "find_raydium_pool_address",
    "generic_raydium_lp_metadata",
    "is_raydium_lp_token",
]
