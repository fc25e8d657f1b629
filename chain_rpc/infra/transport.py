"""
JSON-RPC 2.0 HTTP transport

One attempt per call; retries are layered on top by RpcClient.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from ..config import config as global_config
from ..errors import (
    ConfigurationError,
    DecodeError,
    ErrorCode,
    JsonRpcError,
    TransportError,
    ValidationError,
    HttpStatusError,
)
from ..types import RpcRequest, RpcResult
from .retry import is_retryable

logger = logging.getLogger(__name__)


def assign_request_ids(requests: Sequence[RpcRequest]) -> List[int]:
    """
    Resolve the id for each request of a batch.

    Requests without an id get their 1-based position, or the next free
    id after it when an explicit id already holds that value.

    Raises:
        ValidationError: If two requests carry the same explicit id
    """
    used = set()
    for req in requests:
        if req.id is None:
            continue
        if req.id in used:
            raise ValidationError(
                f"Duplicate request id in batch: {req.id}",
                details={"id": req.id},
            )
        used.add(req.id)

    ids: List[int] = []
    for index, req in enumerate(requests):
        request_id = req.id
        if request_id is None:
            request_id = index + 1
            while request_id in used:
                request_id += 1
            used.add(request_id)
        ids.append(request_id)
    return ids


def _id_key(value: Any) -> str:
    """Correlation key for a JSON-RPC id; some nodes echo numeric ids as strings"""
    return str(value)


def _rpc_error_fields(error: Any) -> tuple:
    if isinstance(error, dict):
        return error.get("code"), str(error.get("message", error)), error.get("data")
    return None, str(error), None


class JsonRpcTransport:
    """
    Async HTTP transport for JSON-RPC 2.0

    Usage:
        transport = JsonRpcTransport("https://node.example.com/jsonrpc")
        block = await transport.request("eth_blockNumber", [])

        results = await transport.request_batch([
            RpcRequest("eth_getBalance", [address, "latest"]),
            RpcRequest("eth_blockNumber", []),
        ])
        await transport.aclose()
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Args:
            url: Node endpoint
            timeout_seconds: HTTP timeout (defaults to config.rpc.timeout_ms)
            client: Pre-built httpx client (not closed by aclose)
            headers: Extra request headers, e.g. API keys
        """
        if not url:
            raise ConfigurationError.missing("RPC endpoint")

        self.url = url
        self._timeout = timeout_seconds or global_config.rpc.timeout_ms / 1000.0
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, headers=self._headers)
        return self._client

    async def _post(self, body: Any, timeout: Optional[float] = None) -> Tuple[int, Any]:
        """
        POST a JSON body and return the HTTP status with the parsed JSON response

        Args:
            body: JSON-RPC request object or batch array
            timeout: HTTP timeout in seconds for this attempt (defaults to the transport's)
        """
        client = self._get_client()
        timeout = timeout or self._timeout
        try:
            response = await client.post(self.url, json=body, headers=self._headers, timeout=timeout)
        except httpx.TimeoutException as e:
            raise TransportError.timeout(self.url, timeout) from e
        except httpx.UnsupportedProtocol as e:
            raise ConfigurationError.invalid("RPC endpoint", str(e)) from e
        except httpx.TransportError as e:
            raise TransportError.connection_failed(self.url, e) from e

        status = response.status_code
        try:
            payload = response.json()
        except ValueError as e:
            if not response.is_success:
                raise HttpStatusError(status, self.url, response.text) from e
            raise DecodeError.non_json(status, response.text, e) from e

        # A JSON-RPC error object is classified by its code, whatever the status
        carries_rpc_error = isinstance(payload, dict) and payload.get("error") is not None
        if not response.is_success and not carries_rpc_error:
            raise HttpStatusError(status, self.url, response.text)

        return status, payload

    async def request(
        self,
        method: str,
        params: Optional[List[Any]] = None,
        request_id: int = 1,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make a single JSON-RPC call

        Args:
            method: RPC method name
            params: RPC parameters
            request_id: JSON-RPC id
            timeout: HTTP timeout in seconds (defaults to the transport's)

        Returns:
            The "result" member, which may be None or "0x"

        Raises:
            TransportError: Network failure or timeout
            HttpStatusError: Non-2xx response
            DecodeError: Body is not a JSON-RPC object
            JsonRpcError: Node returned an error object
        """
        body = RpcRequest(method, params or [], request_id).to_payload(request_id)
        logger.debug(f"RPC {method} -> {self.url}")
        status, payload = await self._post(body, timeout)

        if not isinstance(payload, dict):
            raise DecodeError(
                f"Unexpected JSON-RPC response type for {method}: {type(payload).__name__}",
                ErrorCode.RPC_INVALID_RESPONSE,
            )

        error = payload.get("error")
        if error is not None:
            code, message, data = _rpc_error_fields(error)
            raise JsonRpcError(code, message, data, recoverable=is_retryable(status=status, payload=payload))

        return payload.get("result")

    async def request_batch(
        self,
        requests: Sequence[RpcRequest],
        timeout: Optional[float] = None,
    ) -> List[RpcResult]:
        """
        Send several calls as one JSON-RPC batch

        Per-item errors become failed RpcResults; only failures of the
        round trip itself raise.

        Args:
            requests: Requests to send (ids assigned by position when unset)
            timeout: HTTP timeout in seconds (defaults to the transport's)

        Returns:
            One RpcResult per request, in input order
        """
        if not requests:
            return []

        ids = assign_request_ids(requests)
        body = [req.to_payload(request_id) for req, request_id in zip(requests, ids)]
        logger.debug(f"RPC batch of {len(body)} -> {self.url}")
        status, payload = await self._post(body, timeout)

        # Some nodes answer a rejected batch with a single error object
        if isinstance(payload, dict) and payload.get("error") is not None:
            code, message, data = _rpc_error_fields(payload["error"])
            raise JsonRpcError(code, message, data, recoverable=is_retryable(status=status, payload=payload))

        if not isinstance(payload, list):
            raise DecodeError(
                f"Batch response is not an array: {type(payload).__name__}",
                ErrorCode.RPC_INVALID_RESPONSE,
                recoverable=True,
            )

        by_id: Dict[str, dict] = {}
        for item in payload:
            if isinstance(item, dict) and "id" in item:
                by_id[_id_key(item["id"])] = item

        results: List[RpcResult] = []
        for request_id in ids:
            item = by_id.get(_id_key(request_id))
            if item is None:
                results.append(RpcResult.failed(f"No response for request id {request_id}"))
            elif item.get("error") is not None:
                code, message, _ = _rpc_error_fields(item["error"])
                results.append(RpcResult.failed(message, code))
            else:
                results.append(RpcResult.ok(item.get("result")))

        failed = sum(1 for r in results if not r.success)
        if failed:
            logger.debug(f"RPC batch: {failed}/{len(results)} items failed")
        return results

    async def aclose(self):
        """Close the HTTP client if this transport created it"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "JsonRpcTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
