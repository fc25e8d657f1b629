"""
Pump.fun AMM
"""

from .constants import PROGRAM_ID as PUMP_AMM_PROGRAM_ID
from .pool_parser import parse_pump_amm_pool
from .lp_token import derive_pump_amm_lp_metadata, is_pump_amm_lp_token

__all__ = [
    "PUMP_AMM_PROGRAM_ID",
    "parse_pump_amm_pool",
    "derive_pump_amm_lp_metadata",
    "is_pump_amm_lp_token",
]
