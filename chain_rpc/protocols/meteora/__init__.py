"""
Meteora DLMM
"""

from .constants import PROGRAM_ID as METEORA_DLMM_PROGRAM_ID
from .pool_parser import parse_meteora_dlmm_pool
from .lp_token import derive_meteora_dlmm_lp_metadata, is_meteora_dlmm_lp_token

__all__ = [
    "METEORA_DLMM_PROGRAM_ID",
    "parse_meteora_dlmm_pool",
    "derive_meteora_dlmm_lp_metadata",
    "is_meteora_dlmm_lp_token",
]
