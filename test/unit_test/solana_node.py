"""
In-memory Solana JSON-RPC node for tests

Serves getAccountInfo / getMultipleAccounts / getProgramAccounts from a
dict of accounts through httpx.MockTransport.
"""

import base64
import json
import struct
from typing import Dict, List, Optional, Tuple

import httpx

from chain_rpc.solana import pubkey_from_bytes


UPDATE_AUTHORITY = bytes([7]) * 32
MINT = bytes([9]) * 32


def borsh_string(value: str, pad_to: int = 0) -> bytes:
    raw = value.encode("utf-8").ljust(pad_to, b"\x00")
    return struct.pack("<I", len(raw)) + raw


def metaplex_account(name="Wrapped SOL", symbol="SOL", uri="https://example.com/sol.json", fee=500) -> bytes:
    data = bytes([4]) + UPDATE_AUTHORITY + MINT
    data += borsh_string(name, 32) + borsh_string(symbol, 10) + borsh_string(uri, 200)
    data += struct.pack("<H", fee)
    # one creator, then primary_sale_happened / is_mutable
    data += bytes([1]) + struct.pack("<I", 1) + bytes([5]) * 32 + bytes([1, 100])
    data += bytes([1, 0])
    return data


def spl_mint(authority: bytes = None) -> bytes:
    if authority is None:
        head = struct.pack("<I", 0) + bytes(32)
    else:
        head = struct.pack("<I", 1) + authority
    # supply(8) + decimals(1) + is_initialized(1) + freeze authority COption(36)
    return head + struct.pack("<Q", 10 ** 9) + bytes([6, 1]) + struct.pack("<I", 0) + bytes(32)


def token_metadata_tlv(name: str, symbol: str, uri: str) -> bytes:
    body = UPDATE_AUTHORITY + MINT + borsh_string(name) + borsh_string(symbol) + borsh_string(uri)
    body += struct.pack("<I", 0)  # additional metadata
    return struct.pack("<HH", 19, len(body)) + body


def token2022_mint(*tlvs: bytes) -> bytes:
    """Extended mint: padded to 165 bytes, account type 1, then TLV entries"""
    return spl_mint(bytes([3]) * 32).ljust(165, b"\x00") + bytes([1]) + b"".join(tlvs)


def address(seed: int) -> str:
    """Deterministic test pubkey"""
    return pubkey_from_bytes(bytes([seed]) * 32)


class FakeSolanaNode:

    def __init__(self):
        self.accounts: Dict[str, Tuple[bytes, str]] = {}
        self.program_accounts: Dict[str, List[str]] = {}
        self.program_account_error: Optional[dict] = None
        self.requests: List[dict] = []

    def add_account(self, pubkey: str, data: bytes, owner: str) -> None:
        self.accounts[pubkey] = (data, owner)

    def _account_value(self, pubkey: str) -> Optional[dict]:
        if pubkey not in self.accounts:
            return None
        data, owner = self.accounts[pubkey]
        return {
            "data": [base64.b64encode(data).decode(), "base64"],
            "owner": owner,
            "lamports": 2039280,
            "executable": False,
            "rentEpoch": 0,
        }

    def _handle(self, body: dict) -> dict:
        method, params = body["method"], body["params"]
        if method == "getAccountInfo":
            return {"result": {"context": {"slot": 1}, "value": self._account_value(params[0])}}
        if method == "getMultipleAccounts":
            return {"result": {"context": {"slot": 1}, "value": [self._account_value(p) for p in params[0]]}}
        if method == "getProgramAccounts":
            if self.program_account_error is not None:
                return {"error": self.program_account_error}
            return {"result": [
                {"pubkey": pubkey, "account": self._account_value(pubkey)}
                for pubkey in self.program_accounts.get(params[0], [])
            ]}
        return {"error": {"code": -32601, "message": "Method not found"}}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        response = {"jsonrpc": "2.0", "id": body["id"], **self._handle(body)}
        return httpx.Response(200, json=response)

    def methods(self) -> List[str]:
        return [r["method"] for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))
