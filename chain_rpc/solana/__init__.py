"""
Solana support

Provides:
- SolanaClient: account reads and token metadata lookup
- Decoders for Metaplex metadata, Token-2022 extensions and mint authorities
"""

from .metadata import (
    METAPLEX_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    decode_account_data,
    decode_metaplex_metadata,
    find_metadata_pda,
    parse_mint_authority,
    parse_token2022_extensions,
    pubkey_from_bytes,
)
from .client import SolanaClient

__all__ = [
    "SolanaClient",
    "METAPLEX_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    "TOKEN_2022_PROGRAM_ID",
    "decode_account_data",
    "decode_metaplex_metadata",
    "find_metadata_pda",
    "parse_mint_authority",
    "parse_token2022_extensions",
    "pubkey_from_bytes",
]
