"""
Solana node client

Account reads (single, multiple, by program) and token metadata lookup
on top of RpcClient.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..config import config as global_config
from ..errors import ChainRpcError
from ..infra import RpcClient
from ..types import (
    ProgramAccount,
    RetryOptions,
    SolanaAccountInfo,
    SolanaTokenMetadata,
)
from .metadata import (
    decode_metaplex_metadata,
    find_metadata_pda,
    parse_token2022_extensions,
)

logger = logging.getLogger(__name__)

# getMultipleAccounts accepts at most 100 keys per call
MAX_MULTIPLE_ACCOUNTS = 100


class SolanaClient:
    """
    Solana read client

    Usage:
        async with RpcClient(config.rpc.solana_node_url) as rpc:
            solana = SolanaClient(rpc)
            account = await solana.get_account_info(mint)
            metadata = await solana.fetch_token_metadata(mint)
    """

    def __init__(self, rpc: RpcClient, commitment: Optional[str] = None):
        """
        Args:
            rpc: RPC client bound to a Solana endpoint
            commitment: Commitment level (defaults to config.rpc.commitment)
        """
        self._rpc = rpc
        self._commitment = commitment or global_config.rpc.commitment

    @property
    def rpc(self) -> RpcClient:
        return self._rpc

    @property
    def commitment(self) -> str:
        return self._commitment

    async def get_account_info(
        self,
        address: str,
        options: Optional[RetryOptions] = None,
    ) -> Optional[SolanaAccountInfo]:
        """
        Get account information

        Args:
            address: Account address (base58)
            options: Retry policy override

        Returns:
            Account info or None if not found
        """
        params = [address, {"encoding": "base64", "commitment": self._commitment}]
        result = await self._rpc.call(
            "getAccountInfo",
            params,
            options,
            f"getting account info for {address}",
        )
        if not result:
            return None
        return SolanaAccountInfo.from_rpc(result.get("value"))

    async def get_multiple_accounts(
        self,
        addresses: Sequence[str],
        options: Optional[RetryOptions] = None,
    ) -> List[Optional[SolanaAccountInfo]]:
        """
        Get multiple account infos

        Splits into calls of at most 100 addresses.

        Returns:
            One entry per address, in input order (None for accounts not found)
        """
        if not addresses:
            return []

        accounts: List[Optional[SolanaAccountInfo]] = []
        for start in range(0, len(addresses), MAX_MULTIPLE_ACCOUNTS):
            chunk = list(addresses[start:start + MAX_MULTIPLE_ACCOUNTS])
            params = [chunk, {"encoding": "base64", "commitment": self._commitment}]
            result = await self._rpc.call(
                "getMultipleAccounts",
                params,
                options,
                f"getting multiple accounts ({len(chunk)})",
            )
            values = (result or {}).get("value") or []
            if len(values) != len(chunk):
                values = list(values) + [None] * (len(chunk) - len(values))
            accounts.extend(SolanaAccountInfo.from_rpc(value) for value in values[:len(chunk)])

        return accounts

    async def get_program_accounts(
        self,
        program_id: str,
        filters: Optional[List[Dict[str, Any]]] = None,
        data_slice: Optional[Dict[str, int]] = None,
        encoding: str = "base64",
        options: Optional[RetryOptions] = None,
    ) -> List[ProgramAccount]:
        """
        Get accounts owned by a program

        Args:
            program_id: Owning program (base58)
            filters: memcmp / dataSize filters
            data_slice: {"offset": ..., "length": ...}; length 0 fetches keys only
            encoding: Data encoding
            options: Retry policy override

        Returns:
            Matching accounts (pubkey plus account info)
        """
        config: Dict[str, Any] = {"encoding": encoding, "commitment": self._commitment}
        if filters:
            config["filters"] = filters
        if data_slice is not None:
            config["dataSlice"] = data_slice

        result = await self._rpc.call(
            "getProgramAccounts",
            [program_id, config],
            options,
            f"getting program accounts for {program_id}",
        )

        # withContext responses wrap the list in {"context", "value"}
        if isinstance(result, dict):
            result = result.get("value")

        return [
            ProgramAccount(
                pubkey=item.get("pubkey", ""),
                account=SolanaAccountInfo.from_rpc(item.get("account")),
            )
            for item in (result or [])
            if isinstance(item, dict)
        ]

    async def fetch_token_metadata(
        self,
        mint: str,
        options: Optional[RetryOptions] = None,
    ) -> SolanaTokenMetadata:
        """
        Fetch token metadata for a mint

        Tries the Metaplex metadata account first, then Token-2022
        extensions on the mint itself. A failed lookup falls through to
        the next source.

        Returns:
            Metadata with source "metaplex", "token2022" or "none"
        """
        try:
            metadata_pda = find_metadata_pda(mint)
            logger.debug(f"Looking up Metaplex metadata for {mint} at {metadata_pda}")
            account = await self.get_account_info(metadata_pda, options)
            if account is not None and account.data:
                metadata = decode_metaplex_metadata(account.data)
                if metadata is not None:
                    return SolanaTokenMetadata(
                        mint=mint,
                        name=metadata.name,
                        symbol=metadata.symbol,
                        uri=metadata.uri,
                        source="metaplex",
                    )
        except ChainRpcError as e:
            logger.debug(f"Metaplex lookup failed for {mint}: {e}")

        try:
            mint_account = await self.get_account_info(mint, options)
            if mint_account is not None and mint_account.data:
                extension = parse_token2022_extensions(mint_account.data, mint_account.owner)
                if extension is not None:
                    return SolanaTokenMetadata(
                        mint=mint,
                        name=extension.name,
                        symbol=extension.symbol,
                        uri=extension.uri,
                        source="token2022",
                    )
        except ChainRpcError as e:
            logger.debug(f"Token-2022 lookup failed for {mint}: {e}")

        logger.debug(f"No metadata found for mint {mint}")
        return SolanaTokenMetadata(mint=mint)
