"""
Shared helpers for LP token identification

Symbol resolution for pool constituents and LP name composition.
"""

import logging
from typing import Dict, Optional, Tuple

from ..errors import ChainRpcError
from ..solana import SolanaClient
from ..solana.metadata import (
    TOKEN_2022_PROGRAM_ID,
    decode_metaplex_metadata,
    find_metadata_pda,
    parse_mint_authority,
    parse_token2022_extensions,
)
from ..types import LpTokenCheck, LpTokenMetadata, RetryOptions, SolanaAccountInfo
from ..types.solana_tokens import get_token_symbol

logger = logging.getLogger(__name__)

# Characters of the mint kept when no symbol resolves
FALLBACK_SYMBOL_LENGTH = 6


def resolve_symbol(
    mint: str,
    metadata_account: Optional[SolanaAccountInfo] = None,
    mint_account: Optional[SolanaAccountInfo] = None,
) -> str:
    """
    Resolve a display symbol for a mint.

    Order: well-known token registry, Metaplex metadata, Token-2022
    extension, then the first characters of the mint address.
    """
    known = get_token_symbol(mint)
    if known:
        return known

    if metadata_account is not None and metadata_account.data:
        metadata = decode_metaplex_metadata(metadata_account.data)
        if metadata is not None and metadata.symbol:
            return metadata.symbol

    if mint_account is not None and mint_account.data and mint_account.owner == TOKEN_2022_PROGRAM_ID:
        extension = parse_token2022_extensions(mint_account.data, mint_account.owner)
        if extension is not None and extension.symbol:
            return extension.symbol

    return mint[:FALLBACK_SYMBOL_LENGTH]


async def fetch_pair_symbols(
    solana: SolanaClient,
    mint_a: str,
    mint_b: str,
    options: Optional[RetryOptions] = None,
) -> Tuple[str, str]:
    """
    Resolve symbols for both sides of a pool with one getMultipleAccounts.

    Fetches [metadata PDAs..., mints...] for every mint the registry does
    not already know; well-known mints (including native SOL) are not
    fetched.
    """
    to_fetch = []
    for mint in (mint_a, mint_b):
        if get_token_symbol(mint) is None and mint not in to_fetch:
            to_fetch.append(mint)

    fetched: Dict[str, Tuple[Optional[SolanaAccountInfo], Optional[SolanaAccountInfo]]] = {}
    if to_fetch:
        addresses = [find_metadata_pda(mint) for mint in to_fetch] + to_fetch
        accounts = await solana.get_multiple_accounts(addresses, options)
        count = len(to_fetch)
        for index, mint in enumerate(to_fetch):
            fetched[mint] = (accounts[index], accounts[count + index])

    def symbol_for(mint: str) -> str:
        metadata_account, mint_account = fetched.get(mint, (None, None))
        return resolve_symbol(mint, metadata_account, mint_account)

    return symbol_for(mint_a), symbol_for(mint_b)


def compose_lp_metadata(
    protocol: str,
    symbol_a: str,
    symbol_b: str,
    source: str,
    pool_address: Optional[str] = None,
    pool_type: Optional[str] = None,
) -> LpTokenMetadata:
    """Build "<Protocol> (<A>-<B>) LP Token" / "<A>-<B>-LP" metadata"""
    return LpTokenMetadata(
        name=f"{protocol} ({symbol_a}-{symbol_b}) LP Token",
        symbol=f"{symbol_a}-{symbol_b}-LP",
        source=source,
        pool_address=pool_address,
        pool_type=pool_type,
    )


async def fetch_mint_authority(
    solana: SolanaClient,
    mint: str,
    options: Optional[RetryOptions] = None,
) -> Optional[str]:
    """Mint authority of a mint account, or None if unset or not found"""
    account = await solana.get_account_info(mint, options)
    if account is None or not account.data:
        return None
    return parse_mint_authority(account.data)


async def check_authority_owned_by(
    solana: SolanaClient,
    mint: str,
    program_id: str,
    pool_type: str,
    options: Optional[RetryOptions] = None,
) -> LpTokenCheck:
    """
    Identify an LP mint whose authority is a pool account of program_id.

    The pool account itself is the mint authority, so a match also gives
    the pool address.
    """
    try:
        authority = await fetch_mint_authority(solana, mint, options)
        if authority is None:
            return LpTokenCheck.no()

        authority_account = await solana.get_account_info(authority, options)
        if authority_account is not None and authority_account.owner == program_id:
            return LpTokenCheck(is_lp_token=True, pool_address=authority, pool_type=pool_type)
    except ChainRpcError as e:
        logger.debug(f"Failed to check {pool_type} LP token {mint}: {e}")

    return LpTokenCheck.no()
