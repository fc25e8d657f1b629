"""
Raydium AMM V4 / CPMM Pool State Parser

Extracts constituent mints from pool account data.
"""

from typing import Optional, Union

from ...errors import DecodeError
from ...solana.metadata import decode_account_data, pubkey_from_bytes
from ...types import RaydiumAmmPoolInfo, RaydiumCpmmPoolInfo
from .constants import (
    AMM_PROGRAM_ID,
    AMM_COIN_MINT_OFFSET,
    AMM_PC_MINT_OFFSET,
    AMM_LP_MINT_OFFSET,
    AMM_POOL_MIN_SIZE,
    CPMM_PROGRAM_ID,
    CPMM_LP_MINT_OFFSET,
    CPMM_TOKEN0_MINT_OFFSET,
    CPMM_TOKEN1_MINT_OFFSET,
    CPMM_POOL_MIN_SIZE,
)


def _pubkey_at(data: bytes, offset: int) -> str:
    return pubkey_from_bytes(data[offset:offset + 32])


def _load(data: Union[str, bytes], owner: Optional[str], program_id: str, min_size: int) -> Optional[bytes]:
    if owner is not None and owner != program_id:
        return None
    try:
        raw = decode_account_data(data)
    except DecodeError:
        return None
    if len(raw) < min_size:
        return None
    return raw


def parse_raydium_amm_pool(
    data: Union[str, bytes],
    owner: Optional[str] = None,
) -> Optional[RaydiumAmmPoolInfo]:
    """
    Parse an AMM V4 pool account (LiquidityStateV4)

    Layout (mint fields only):
    - publicKey(32): coin mint (offset 408)
    - publicKey(32): pc mint (offset 440)
    - publicKey(32): lp mint (offset 472)

    Args:
        data: Account data (base64 string or bytes)
        owner: Account owner; when given it must be the AMM V4 program

    Returns:
        Pool mints, or None if the data is too short or the owner differs
    """
    raw = _load(data, owner, AMM_PROGRAM_ID, AMM_POOL_MIN_SIZE)
    if raw is None:
        return None
    return RaydiumAmmPoolInfo(
        coin_mint=_pubkey_at(raw, AMM_COIN_MINT_OFFSET),
        pc_mint=_pubkey_at(raw, AMM_PC_MINT_OFFSET),
        lp_mint=_pubkey_at(raw, AMM_LP_MINT_OFFSET),
    )


def parse_raydium_cpmm_pool(
    data: Union[str, bytes],
    owner: Optional[str] = None,
) -> Optional[RaydiumCpmmPoolInfo]:
    """
    Parse a CPMM pool account

    Layout (mint fields only):
    - publicKey(32): lp mint (offset 136)
    - publicKey(32): token0 mint (offset 168)
    - publicKey(32): token1 mint (offset 200)
    """
    raw = _load(data, owner, CPMM_PROGRAM_ID, CPMM_POOL_MIN_SIZE)
    if raw is None:
        return None
    return RaydiumCpmmPoolInfo(
        token0_mint=_pubkey_at(raw, CPMM_TOKEN0_MINT_OFFSET),
        token1_mint=_pubkey_at(raw, CPMM_TOKEN1_MINT_OFFSET),
        lp_mint=_pubkey_at(raw, CPMM_LP_MINT_OFFSET),
    )
