"""
Solana account, metadata and liquidity-pool type definitions
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional

from ..errors import DecodeError

_WHITESPACE = re.compile(r"\s+")


def decode_base64(value: str) -> bytes:
    """
    Decode base64 account data.

    Accepts the URL-safe alphabet, embedded whitespace, and missing or
    excess "=" padding.

    Raises:
        DecodeError: If the value is not base64
    """
    normalized = _WHITESPACE.sub("", value or "").replace("-", "+").replace("_", "/").rstrip("=")
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 account data ({len(value or '')} chars)", original_error=e) from e


@dataclass(frozen=True)
class SolanaAccountInfo:
    """
    Account as returned by getAccountInfo / getMultipleAccounts

    Attributes:
        data: Base64-encoded account data
        owner: Owning program id (base58)
        lamports: Balance in lamports
        executable: Whether the account holds a program
        rent_epoch: Rent epoch
    """
    data: str
    owner: str
    lamports: int = 0
    executable: bool = False
    rent_epoch: Optional[int] = None

    @property
    def raw(self) -> bytes:
        """Decoded account bytes"""
        return decode_base64(self.data) if self.data else b""

    @classmethod
    def from_rpc(cls, value: Optional[dict]) -> Optional["SolanaAccountInfo"]:
        """Build from an RPC account value; None for missing accounts"""
        if not value:
            return None
        data = value.get("data", "")
        if isinstance(data, list):
            data = data[0] if data else ""
        return cls(
            data=data or "",
            owner=value.get("owner", ""),
            lamports=value.get("lamports", 0),
            executable=value.get("executable", False),
            rent_epoch=value.get("rentEpoch"),
        )


@dataclass(frozen=True)
class ProgramAccount:
    """One entry of a getProgramAccounts response"""
    pubkey: str
    account: Optional[SolanaAccountInfo] = None


@dataclass(frozen=True)
class MetaplexMetadata:
    """
    Decoded prefix of a Metaplex token-metadata account

    Strings have their null padding stripped.
    """
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    update_authority: str = ""
    mint: str = ""
    primary_sale_happened: Optional[bool] = None
    is_mutable: Optional[bool] = None


@dataclass(frozen=True)
class Token2022Metadata:
    """Token-2022 TokenMetadata extension"""
    name: str
    symbol: str
    uri: str
    update_authority: str = ""
    mint: str = ""


@dataclass(frozen=True)
class SolanaTokenMetadata:
    """
    Token display metadata with the source it came from

    source is one of "metaplex", "token2022", "none".
    """
    mint: str
    name: str = ""
    symbol: str = ""
    uri: str = ""
    source: str = "none"

    @property
    def found(self) -> bool:
        return self.source != "none"


@dataclass(frozen=True)
class RaydiumAmmPoolInfo:
    coin_mint: str
    pc_mint: str
    lp_mint: str


@dataclass(frozen=True)
class RaydiumCpmmPoolInfo:
    token0_mint: str
    token1_mint: str
    lp_mint: str


@dataclass(frozen=True)
class PumpAmmPoolInfo:
    quote_mint: str
    base_mint: str
    lp_mint: str


@dataclass(frozen=True)
class MeteoraDlmmPoolInfo:
    token_x_mint: str
    token_y_mint: str
    lb_mint: str


@dataclass(frozen=True)
class LpTokenCheck:
    """
    Result of an LP-token identification

    Attributes:
        is_lp_token: Whether the mint authority identifies an LP token
        pool_address: Pool account, when discovered
        pool_type: Protocol-specific pool type (e.g. "amm-v4", "cpmm")
    """
    is_lp_token: bool
    pool_address: Optional[str] = None
    pool_type: Optional[str] = None

    @classmethod
    def no(cls) -> "LpTokenCheck":
        return cls(is_lp_token=False)


@dataclass(frozen=True)
class LpTokenMetadata:
    """Derived display metadata for an LP token"""
    name: str
    symbol: str
    source: str
    pool_address: Optional[str] = None
    pool_type: Optional[str] = None
