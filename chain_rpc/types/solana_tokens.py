"""
Well-known Solana token registry

Used to resolve display symbols without fetching metadata accounts.
"""

from typing import Dict, Optional


WSOL_MINT = "So11111111111111111111111111111111111111112"

# All-zero pubkey; pools use it to denote native SOL
NATIVE_SOL_MINT = "11111111111111111111111111111111"

# Mint -> display symbol
WELL_KNOWN_MINTS: Dict[str, str] = {
    WSOL_MINT: "SOL",
    NATIVE_SOL_MINT: "SOL",

    # Stablecoins
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v": "USDC",
    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB": "USDT",
    "USD1ttGY1N17NEEHLmELoaybftRBUSErhqYiQzvEmuB": "USD1",

    # Popular tokens
    "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263": "BONK",
    "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN": "JUP",
    "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R": "RAY",
    "orcaEKTdK7LKz57vaAYr9QeNsVEPfiu6QeMU1kektZE": "ORCA",
    "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So": "mSOL",
    "J1toso1uCk3RLmjorhTtrVwY9HJ7X8V9yYac6Y7kGCPn": "jitoSOL",
    "HZ1JovNiVvGrGNiiYvEozEVgZ58xaU3RKwX8eACQBCt3": "PYTH",
    "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm": "WIF",
}


def get_token_symbol(mint: str) -> Optional[str]:
    """
    Get display symbol for a well-known mint address

    Args:
        mint: Token mint address (base58)

    Returns:
        Symbol or None if the mint is not in the registry
    """
    return WELL_KNOWN_MINTS.get(mint)
