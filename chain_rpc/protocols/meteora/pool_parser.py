"""
Meteora DLMM Pool Parser
"""

from typing import Optional, Union

from ...errors import DecodeError
from ...solana.metadata import decode_account_data, pubkey_from_bytes
from ...types import MeteoraDlmmPoolInfo
from .constants import PROGRAM_ID, TOKEN_X_MINT_OFFSET, TOKEN_Y_MINT_OFFSET, LB_MINT_OFFSET, POOL_MIN_SIZE


def parse_meteora_dlmm_pool(
    data: Union[str, bytes],
    owner: Optional[str] = None,
) -> Optional[MeteoraDlmmPoolInfo]:
    """
    Parse a Meteora DLMM pool account

    Layout (mint fields only):
    - publicKey(32): token X mint (offset 51; all zeros = native SOL)
    - publicKey(32): token Y mint (offset 83)
    - publicKey(32): LB mint (offset 115)
    """
    if owner is not None and owner != PROGRAM_ID:
        return None
    try:
        raw = decode_account_data(data)
    except DecodeError:
        return None
    if len(raw) < POOL_MIN_SIZE:
        return None

    return MeteoraDlmmPoolInfo(
        token_x_mint=pubkey_from_bytes(raw[TOKEN_X_MINT_OFFSET:TOKEN_X_MINT_OFFSET + 32]),
        token_y_mint=pubkey_from_bytes(raw[TOKEN_Y_MINT_OFFSET:TOKEN_Y_MINT_OFFSET + 32]),
        lb_mint=pubkey_from_bytes(raw[LB_MINT_OFFSET:LB_MINT_OFFSET + 32]),
    )
