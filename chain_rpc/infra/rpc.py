"""
RPC Client

Provides unified JSON-RPC interface with:
- Classified retry with exponential backoff and jitter
- Per-attempt timeout management
- Batched calls with per-item results
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import httpx

from ..config import config as global_config
from ..errors import ConfigurationError
from ..types import RetryOptions, RpcRequest, RpcResult
from .retry import execute_with_retry
from .transport import JsonRpcTransport, assign_request_ids

logger = logging.getLogger(__name__)


class RpcClient:
    """
    JSON-RPC client for one node endpoint

    Constructed once by the caller and passed to EvmClient / SolanaClient.

    Usage:
        async with RpcClient("https://node.example.com/jsonrpc") as rpc:
            block = await rpc.call("eth_blockNumber")

            results = await rpc.batch_call([
                RpcRequest("eth_getBalance", [address, "latest"]),
                RpcRequest("eth_getBalance", [other, "latest"]),
            ])
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        options: Optional[RetryOptions] = None,
        batch_size: Optional[int] = None,
        transport: Optional[JsonRpcTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize RPC client

        Args:
            endpoint: Node URL (defaults to config.rpc.node_url)
            options: Default retry policy for calls made by this client
            batch_size: Maximum requests per HTTP batch (defaults to config.rpc.batch_size)
            transport: Pre-built transport (endpoint and client are ignored)
            client: Pre-built httpx client handed to the transport
        """
        self._options = options or RetryOptions()
        if transport is None:
            endpoint = endpoint or global_config.rpc.node_url
            if not endpoint:
                raise ConfigurationError.missing("NODE_URL")
            transport = JsonRpcTransport(
                endpoint,
                timeout_seconds=self._options.timeout_seconds,
                client=client,
            )
        self._transport = transport

        self._batch_size = batch_size if batch_size is not None else global_config.rpc.batch_size
        if self._batch_size < 1:
            raise ConfigurationError.invalid("batch_size", f"must be >= 1, got {self._batch_size}")

    @property
    def endpoint(self) -> str:
        return self._transport.url

    @property
    def options(self) -> RetryOptions:
        """Default retry policy"""
        return self._options

    async def call(
        self,
        method: str,
        params: Optional[List[Any]] = None,
        options: Optional[RetryOptions] = None,
        operation_name: Optional[str] = None,
    ) -> Any:
        """
        Make JSON-RPC call with retry

        Args:
            method: RPC method name
            params: RPC parameters
            options: Retry policy override
            operation_name: Label for retry logging (defaults to method)

        Returns:
            RPC result

        Raises:
            ChainRpcError: When the call fails permanently or retries run out
        """
        params = list(params or [])
        opts = options or self._options
        return await execute_with_retry(
            lambda: self._transport.request(method, params, timeout=opts.timeout_seconds),
            opts,
            operation_name or method,
        )

    async def batch_call(
        self,
        requests: Sequence[RpcRequest],
        options: Optional[RetryOptions] = None,
        batch_size: Optional[int] = None,
    ) -> List[RpcResult]:
        """
        Make batched JSON-RPC calls with retry

        Requests are split into HTTP batches of batch_size; each batch is
        retried on its own. Per-item node errors do not fail the batch.

        Args:
            requests: Requests to send
            options: Retry policy override
            batch_size: Chunk size override

        Returns:
            One RpcResult per request, in input order
        """
        if not requests:
            return []

        requests = list(requests)
        ids = assign_request_ids(requests)
        size = batch_size or self._batch_size
        opts = options or self._options

        results: List[RpcResult] = []
        for start in range(0, len(requests), size):
            chunk = [
                RpcRequest(req.method, req.params, request_id)
                for req, request_id in zip(requests[start:start + size], ids[start:start + size])
            ]
            chunk_results = await execute_with_retry(
                lambda chunk=chunk: self._transport.request_batch(chunk, timeout=opts.timeout_seconds),
                opts,
                f"batch[{start}:{start + len(chunk)}]",
            )
            results.extend(chunk_results)

        return results

    async def aclose(self):
        """Close underlying transport"""
        await self._transport.aclose()

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
