"""
Solana DEX protocols

Pool account parsers and LP token identification for Raydium,
Pump.fun AMM and Meteora DLMM.
"""

from .base import compose_lp_metadata, fetch_pair_symbols, resolve_symbol
from .raydium import (
    parse_raydium_amm_pool,
    parse_raydium_cpmm_pool,
    is_raydium_lp_token,
    derive_raydium_lp_metadata,
)
from .pump_amm import parse_pump_amm_pool, is_pump_amm_lp_token, derive_pump_amm_lp_metadata
from .meteora import parse_meteora_dlmm_pool, is_meteora_dlmm_lp_token, derive_meteora_dlmm_lp_metadata
from .registry import detect_lp_token

__all__ = [
    "compose_lp_metadata",
    "fetch_pair_symbols",
    "resolve_symbol",
    # Raydium
    "parse_raydium_amm_pool",
    "parse_raydium_cpmm_pool",
    "is_raydium_lp_token",
    "derive_raydium_lp_metadata",
    # Pump.fun AMM
    "parse_pump_amm_pool",
    "is_pump_amm_lp_token",
    "derive_pump_amm_lp_metadata",
    # Meteora DLMM
    "parse_meteora_dlmm_pool",
    "is_meteora_dlmm_lp_token",
    "derive_meteora_dlmm_lp_metadata",
    # Detection
    "detect_lp_token",
]
