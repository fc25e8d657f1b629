"""
Test RPC Client with Mocks

Tests for JsonRpcTransport and RpcClient against a mocked HTTP node.
"""

import asyncio
import json
import unittest
from unittest.mock import AsyncMock, patch

import httpx

from chain_rpc.errors import (
    ConfigurationError,
    DecodeError,
    HttpStatusError,
    JsonRpcError,
    TransportError,
    ValidationError,
)
from chain_rpc.infra import JsonRpcTransport, RpcClient, assign_request_ids
from chain_rpc.types import RetryOptions, RpcRequest

NODE_URL = "https://node.example.com/jsonrpc"


class MockNode:
    """Scripted JSON-RPC node behind httpx.MockTransport"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(self.requests[-1])
        return response

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def ok(result, request_id=1):
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": request_id, "result": result})


def rpc_error(code, message, status=200):
    return httpx.Response(status, json={"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}})


class TestAssignRequestIds(unittest.TestCase):
    """Tests for batch id assignment"""

    def test_positional_ids(self):
        requests = [RpcRequest("eth_blockNumber"), RpcRequest("eth_chainId"), RpcRequest("net_version")]
        self.assertEqual(assign_request_ids(requests), [1, 2, 3])

    def test_explicit_ids_kept(self):
        requests = [RpcRequest("a", id=10), RpcRequest("b"), RpcRequest("c", id=7)]
        self.assertEqual(assign_request_ids(requests), [10, 2, 7])

    def test_duplicate_ids_rejected(self):
        requests = [RpcRequest("a", id=2), RpcRequest("b", id=2)]
        with self.assertRaises(ValidationError):
            assign_request_ids(requests)

    def test_missing_ids_skip_explicit_ones(self):
        """A request without an id never collides with an explicit id"""
        self.assertEqual(assign_request_ids([RpcRequest("a", id=2), RpcRequest("b")]), [2, 3])
        self.assertEqual(assign_request_ids([RpcRequest("a"), RpcRequest("b", id=1)]), [2, 1])


class TestJsonRpcTransport(unittest.IsolatedAsyncioTestCase):
    """Tests for single-attempt transport behavior"""

    async def test_request_returns_result(self):
        node = MockNode(ok("0x1b4"))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            result = await transport.request("eth_blockNumber", [])

        self.assertEqual(result, "0x1b4")
        sent = node.requests[0]
        self.assertEqual(sent["jsonrpc"], "2.0")
        self.assertEqual(sent["method"], "eth_blockNumber")
        self.assertEqual(sent["params"], [])

    async def test_result_0x_is_data(self):
        node = MockNode(ok("0x"))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            self.assertEqual(await transport.request("eth_call", [{}, "latest"]), "0x")

    async def test_rpc_error_raises(self):
        node = MockNode(rpc_error(-32602, "invalid argument 0"))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(JsonRpcError) as ctx:
                await transport.request("eth_call", [])

        self.assertEqual(ctx.exception.rpc_code, -32602)
        self.assertFalse(ctx.exception.recoverable)

    async def test_rpc_error_on_transient_status_is_recoverable(self):
        node = MockNode(rpc_error(-32602, "invalid argument", status=503))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(JsonRpcError) as ctx:
                await transport.request("eth_call", [])

        self.assertTrue(ctx.exception.recoverable)

    async def test_http_status_error(self):
        node = MockNode(httpx.Response(404, json={"message": "not found"}))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(HttpStatusError) as ctx:
                await transport.request("eth_blockNumber", [])

        self.assertEqual(ctx.exception.status, 404)
        self.assertFalse(ctx.exception.recoverable)

    async def test_error_page_raises_http_status_error(self):
        node = MockNode(httpx.Response(502, text="<html>Bad Gateway</html>"))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(HttpStatusError) as ctx:
                await transport.request("eth_blockNumber", [])

        self.assertEqual(ctx.exception.status, 502)
        self.assertTrue(ctx.exception.recoverable)

    async def test_empty_body_on_transient_status(self):
        node = MockNode(httpx.Response(503, text=""))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(HttpStatusError) as ctx:
                await transport.request("eth_blockNumber", [])

        self.assertEqual(ctx.exception.status, 503)
        self.assertTrue(ctx.exception.recoverable)

    async def test_html_not_found_is_permanent(self):
        node = MockNode(httpx.Response(404, text="<html>Not Found</html>"))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(HttpStatusError) as ctx:
                await transport.request("eth_blockNumber", [])

        self.assertEqual(ctx.exception.status, 404)
        self.assertFalse(ctx.exception.recoverable)

    async def test_non_json_success_body(self):
        node = MockNode(httpx.Response(200, text="upstream says hello"))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(DecodeError) as ctx:
                await transport.request("eth_blockNumber", [])

        self.assertFalse(ctx.exception.recoverable)

    async def test_request_timeout_forwarded_to_http_client(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.extensions["timeout"]["read"])
            return ok("0x1")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            transport = JsonRpcTransport(NODE_URL, timeout_seconds=0.1, client=client)
            await transport.request("eth_blockNumber", [])
            await transport.request("eth_blockNumber", [], timeout=3.0)
            await transport.request_batch([RpcRequest("eth_blockNumber")], timeout=2.0)

        self.assertEqual(seen, [0.1, 3.0, 2.0])

    async def test_connection_failure(self):
        node = MockNode(httpx.ConnectError("connection refused"))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(TransportError) as ctx:
                await transport.request("eth_blockNumber", [])

        self.assertTrue(ctx.exception.recoverable)
        self.assertEqual(ctx.exception.endpoint, NODE_URL)

    async def test_empty_batch_sends_nothing(self):
        node = MockNode(ok("unused"))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            self.assertEqual(await transport.request_batch([]), [])

        self.assertEqual(node.requests, [])

    async def test_batch_out_of_order_and_partial(self):
        """Results follow input order; missing and failed items become data"""
        body = [
            {"jsonrpc": "2.0", "id": 3, "result": "0x3"},
            {"jsonrpc": "2.0", "id": 1, "result": "0x1"},
            {"jsonrpc": "2.0", "id": 4, "error": {"code": 3, "message": "execution reverted"}},
        ]
        node = MockNode(httpx.Response(200, json=body))
        requests = [RpcRequest("eth_call", [i]) for i in range(4)]

        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            results = await transport.request_batch(requests)

        self.assertEqual(len(results), 4)
        self.assertTrue(results[0].success)
        self.assertEqual(results[0].value, "0x1")
        self.assertFalse(results[1].success)
        self.assertIn("No response for request id 2", results[1].error)
        self.assertEqual(results[2].value, "0x3")
        self.assertFalse(results[3].success)
        self.assertEqual(results[3].error, "execution reverted")
        self.assertEqual(results[3].code, 3)
        self.assertEqual([item["id"] for item in node.requests[0]], [1, 2, 3, 4])

    async def test_batch_ids_echoed_as_strings(self):
        body = [
            {"jsonrpc": "2.0", "id": "2", "result": "0x2"},
            {"jsonrpc": "2.0", "id": "1", "result": "0x1"},
        ]
        node = MockNode(httpx.Response(200, json=body))

        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            results = await transport.request_batch([RpcRequest("eth_blockNumber"), RpcRequest("eth_chainId")])

        self.assertEqual([r.value for r in results], ["0x1", "0x2"])

    async def test_batch_non_array_response(self):
        node = MockNode(httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1"}))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(DecodeError) as ctx:
                await transport.request_batch([RpcRequest("eth_blockNumber")])

        self.assertTrue(ctx.exception.recoverable)

    async def test_batch_single_error_object(self):
        node = MockNode(rpc_error(-32600, "unsupported request: batch"))
        async with node.client() as client:
            transport = JsonRpcTransport(NODE_URL, client=client)
            with self.assertRaises(JsonRpcError) as ctx:
                await transport.request_batch([RpcRequest("eth_blockNumber")])

        self.assertTrue(ctx.exception.recoverable)

    def test_missing_url(self):
        with self.assertRaises(ConfigurationError):
            JsonRpcTransport("")


class TestRpcClient(unittest.IsolatedAsyncioTestCase):
    """Tests for RpcClient retry and batching"""

    def setUp(self):
        self.options = RetryOptions(retries=3, base_delay_ms=10, timeout_ms=1_000)
        patcher = patch("chain_rpc.infra.retry._backoff", new=AsyncMock())
        patcher.start()
        self.addCleanup(patcher.stop)

    async def test_call_retries_transient_status(self):
        node = MockNode(httpx.Response(429, text="slow down"), httpx.Response(503, text=""), ok("0x10"))
        async with node.client() as client:
            rpc = RpcClient(NODE_URL, options=self.options, client=client)
            result = await rpc.call("eth_blockNumber")

        self.assertEqual(result, "0x10")
        self.assertEqual(len(node.requests), 3)

    async def test_call_gives_up_after_retries(self):
        node = MockNode(rpc_error(-32000, "header not found"))
        async with node.client() as client:
            rpc = RpcClient(NODE_URL, options=self.options, client=client)
            with self.assertRaises(JsonRpcError) as ctx:
                await rpc.call("eth_call", [{}, "latest"])

        self.assertEqual(ctx.exception.rpc_code, -32000)
        self.assertEqual(len(node.requests), 3)

    async def test_call_permanent_error_single_attempt(self):
        node = MockNode(rpc_error(-32602, "invalid argument 0: hex string has odd length"))
        async with node.client() as client:
            rpc = RpcClient(NODE_URL, options=self.options, client=client)
            with self.assertRaises(JsonRpcError):
                await rpc.call("eth_call", [{}, "latest"])

        self.assertEqual(len(node.requests), 1)

    async def test_per_call_options_override(self):
        node = MockNode(httpx.Response(503, text=""))
        async with node.client() as client:
            rpc = RpcClient(NODE_URL, options=self.options, client=client)
            with self.assertRaises(HttpStatusError):
                await rpc.call("eth_blockNumber", options=RetryOptions.with_retries(1))

        self.assertEqual(len(node.requests), 1)

    async def test_per_call_timeout_override(self):
        """A per-call timeout longer than the client default is honored"""
        seen = []

        async def slow_node(request: httpx.Request) -> httpx.Response:
            seen.append(request.extensions["timeout"]["read"])
            await asyncio.sleep(0.3)
            body = json.loads(request.content)
            if isinstance(body, list):
                return httpx.Response(200, json=[{"jsonrpc": "2.0", "id": 1, "result": "0x20"}])
            return ok("0x10")

        short = RetryOptions(retries=1, timeout_ms=100)
        generous = RetryOptions(retries=1, timeout_ms=3_000)
        async with httpx.AsyncClient(transport=httpx.MockTransport(slow_node)) as client:
            rpc = RpcClient(NODE_URL, options=short, client=client)
            self.assertEqual(await rpc.call("eth_blockNumber", options=generous), "0x10")
            results = await rpc.batch_call([RpcRequest("eth_blockNumber")], options=generous)

        self.assertEqual(results[0].value, "0x20")
        self.assertEqual(seen, [3.0, 3.0])

    async def test_default_timeout_still_bounds_attempts(self):
        async def slow_node(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.3)
            return ok("0x10")

        async with httpx.AsyncClient(transport=httpx.MockTransport(slow_node)) as client:
            rpc = RpcClient(NODE_URL, options=RetryOptions(retries=1, timeout_ms=50), client=client)
            with self.assertRaises(TransportError):
                await rpc.call("eth_blockNumber")

    async def test_batch_call_empty(self):
        node = MockNode(ok("unused"))
        async with node.client() as client:
            rpc = RpcClient(NODE_URL, options=self.options, client=client)
            self.assertEqual(await rpc.batch_call([]), [])

        self.assertEqual(node.requests, [])

    async def test_batch_call_chunks_keep_order(self):
        def echo_reversed(batch):
            items = [{"jsonrpc": "2.0", "id": item["id"], "result": item["params"][0]} for item in batch]
            return httpx.Response(200, json=list(reversed(items)))

        node = MockNode(echo_reversed)
        requests = [RpcRequest("echo", [f"v{i}"]) for i in range(5)]

        async with node.client() as client:
            rpc = RpcClient(NODE_URL, options=self.options, batch_size=2, client=client)
            results = await rpc.batch_call(requests)

        self.assertEqual([r.value for r in results], ["v0", "v1", "v2", "v3", "v4"])
        self.assertEqual([len(batch) for batch in node.requests], [2, 2, 1])
        # ids are global across chunks
        self.assertEqual([item["id"] for batch in node.requests for item in batch], [1, 2, 3, 4, 5])

    async def test_batch_call_retries_failed_chunk(self):
        body = [{"jsonrpc": "2.0", "id": 1, "result": "0x1"}]
        node = MockNode(httpx.Response(502, text="bad gateway"), httpx.Response(200, json=body))

        async with node.client() as client:
            rpc = RpcClient(NODE_URL, options=self.options, client=client)
            results = await rpc.batch_call([RpcRequest("eth_blockNumber")])

        self.assertEqual(len(node.requests), 2)
        self.assertEqual(results[0].value, "0x1")

    async def test_batch_call_duplicate_ids_no_io(self):
        node = MockNode(ok("unused"))
        async with node.client() as client:
            rpc = RpcClient(NODE_URL, options=self.options, client=client)
            with self.assertRaises(ValidationError):
                await rpc.batch_call([RpcRequest("a", id=1), RpcRequest("b", id=1)])

        self.assertEqual(node.requests, [])

    def test_invalid_batch_size(self):
        with self.assertRaises(ConfigurationError):
            RpcClient(NODE_URL, batch_size=0)

    def test_endpoint_property(self):
        rpc = RpcClient(NODE_URL)
        self.assertEqual(rpc.endpoint, NODE_URL)


if __name__ == "__main__":
    unittest.main()
