"""
Pump.fun AMM Pool Parser
"""

from typing import Optional, Union

from ...errors import DecodeError
from ...solana.metadata import decode_account_data, pubkey_from_bytes
from ...types import PumpAmmPoolInfo
from .constants import PROGRAM_ID, QUOTE_MINT_OFFSET, BASE_MINT_OFFSET, LP_MINT_OFFSET, POOL_MIN_SIZE


def parse_pump_amm_pool(
    data: Union[str, bytes],
    owner: Optional[str] = None,
) -> Optional[PumpAmmPoolInfo]:
    """
    Parse a Pump.fun AMM pool account

    Layout (mint fields only):
    - publicKey(32): quote mint (offset 43)
    - publicKey(32): base mint (offset 75)
    - publicKey(32): lp mint (offset 107)

    Pools may be longer when the struct gains fields; only the minimum
    size is enforced.
    """
    if owner is not None and owner != PROGRAM_ID:
        return None
    try:
        raw = decode_account_data(data)
    except DecodeError:
        return None
    if len(raw) < POOL_MIN_SIZE:
        return None

    return PumpAmmPoolInfo(
        quote_mint=pubkey_from_bytes(raw[QUOTE_MINT_OFFSET:QUOTE_MINT_OFFSET + 32]),
        base_mint=pubkey_from_bytes(raw[BASE_MINT_OFFSET:BASE_MINT_OFFSET + 32]),
        lp_mint=pubkey_from_bytes(raw[LP_MINT_OFFSET:LP_MINT_OFFSET + 32]),
    )
