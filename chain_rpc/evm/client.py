"""
EVM node client

Read-only contract calls and balance queries against an EVM-compatible
(TRON-style) JSON-RPC node. Addresses may be given in either 0x-hex or
base58check form.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from ..infra import RpcClient
from ..types import (
    ContractCallRequest,
    RetryOptions,
    RpcRequest,
    RpcResult,
    TokenMetadata,
)
from .abi import decode_decimals, decode_hex_string, encode_call_hex
from .address import normalize_address

logger = logging.getLogger(__name__)


def _strip_0x(value: Any) -> str:
    """Result hex without prefix; "" for empty or missing results"""
    if not value or not isinstance(value, str):
        return ""
    if value.lower() == "0x":
        return ""
    return value[2:] if value[:2].lower() == "0x" else value


def build_call_request(request: ContractCallRequest) -> RpcRequest:
    """
    Build the eth_call request for a contract call.

    Validation (address, argument count) happens here, before any I/O.
    """
    params = {
        "to": normalize_address(request.contract),
        "data": encode_call_hex(request.signature, request.args),
    }
    return RpcRequest("eth_call", [params, "latest"])


class EvmClient:
    """
    EVM read client on top of RpcClient

    Usage:
        async with RpcClient(node_url) as rpc:
            evm = EvmClient(rpc)
            decimals_hex = await evm.call_contract(
                ContractCallRequest(token, "decimals()")
            )
            balance_hex = await evm.call_contract(
                ContractCallRequest(token, "balanceOf(address)", (holder,))
            )
    """

    def __init__(self, rpc: RpcClient):
        self._rpc = rpc

    @property
    def rpc(self) -> RpcClient:
        return self._rpc

    async def call_contract(
        self,
        request: ContractCallRequest,
        options: Optional[RetryOptions] = None,
    ) -> str:
        """
        Execute eth_call

        Args:
            request: Contract, signature and arguments
            options: Retry policy override

        Returns:
            Result hex without 0x prefix; "" when the contract returned
            no data ("0x")

        Raises:
            ValidationError: Bad address or argument count (no I/O performed)
            ChainRpcError: Call failed after retries
        """
        rpc_request = build_call_request(request)
        result = await self._rpc.call(
            rpc_request.method,
            rpc_request.params,
            options,
            f"calling {request.signature} on {request.contract}",
        )
        return _strip_0x(result)

    async def batch_call_contracts(
        self,
        requests: Sequence[ContractCallRequest],
        options: Optional[RetryOptions] = None,
    ) -> List[RpcResult]:
        """
        Execute several eth_calls as JSON-RPC batches

        Every request is encoded before anything is sent, so one invalid
        request fails the whole call with ValidationError and no I/O.

        Returns:
            One RpcResult per request, in input order; successful values
            are hex without 0x prefix ("" for empty results)
        """
        if not requests:
            return []

        rpc_requests = [build_call_request(req) for req in requests]
        results = await self._rpc.batch_call(rpc_requests, options)
        return [
            RpcResult.ok(_strip_0x(r.value)) if r.success else r
            for r in results
        ]

    async def get_native_balance(
        self,
        account: str,
        options: Optional[RetryOptions] = None,
    ) -> str:
        """
        Get native balance

        Returns:
            Balance hex without 0x prefix; "0" for an empty or zero balance
        """
        address = normalize_address(account)
        result = await self._rpc.call(
            "eth_getBalance",
            [address, "latest"],
            options,
            f"getting balance for {account}",
        )
        balance = _strip_0x(result)
        if not balance or balance == "0":
            return "0"
        return balance

    async def batch_get_native_balances(
        self,
        accounts: Sequence[str],
        options: Optional[RetryOptions] = None,
    ) -> List[RpcResult]:
        """
        Get native balances for several accounts

        Returns:
            One RpcResult per account, in input order, carrying the raw
            0x-prefixed quantity
        """
        if not accounts:
            return []

        requests = [
            RpcRequest("eth_getBalance", [normalize_address(account), "latest"])
            for account in accounts
        ]
        return await self._rpc.batch_call(requests, options)

    async def get_block_number(self, options: Optional[RetryOptions] = None) -> int:
        """Get latest block number"""
        result = await self._rpc.call("eth_blockNumber", [], options)
        return int(result, 16) if _strip_0x(result) else 0

    async def get_code(
        self,
        address: str,
        block: str = "latest",
        options: Optional[RetryOptions] = None,
    ) -> str:
        """
        Get deployed bytecode

        Returns:
            Bytecode hex without 0x prefix; "" for accounts without code
        """
        result = await self._rpc.call(
            "eth_getCode",
            [normalize_address(address), block],
            options,
        )
        return _strip_0x(result)

    async def get_token_metadata(
        self,
        contract: str,
        options: Optional[RetryOptions] = None,
    ) -> TokenMetadata:
        """
        Read name, symbol and decimals in a single batch

        Missing or malformed answers leave the field empty; they do not
        raise.
        """
        results = await self.batch_call_contracts(
            [
                ContractCallRequest(contract, "name()"),
                ContractCallRequest(contract, "symbol()"),
                ContractCallRequest(contract, "decimals()"),
            ],
            options,
        )
        name_result, symbol_result, decimals_result = results

        for label, result in (("name", name_result), ("symbol", symbol_result), ("decimals", decimals_result)):
            if not result.success:
                logger.debug(f"{label}() failed on {contract}: {result.error}")

        return TokenMetadata(
            contract=contract,
            name=decode_hex_string(name_result.value) if name_result.success else "",
            symbol=decode_hex_string(symbol_result.value) if symbol_result.success else "",
            decimals=decode_decimals(decimals_result.value) if decimals_result.success else None,
        )
