"""
EVM token type definitions
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TokenMetadata:
    """
    ERC-20 style token metadata read from a contract

    Fields the contract did not answer (or answered malformed) are "" / None.
    """
    contract: str
    name: str = ""
    symbol: str = ""
    decimals: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.symbol and self.decimals is None
