"""
EVM-compatible chain support

Provides:
- EvmClient: contract calls and balance queries
- ABI helpers: selector, call encoding, result decoding
- Address helpers: 0x-hex <-> base58check conversion
"""

from .abi import (
    function_selector,
    parse_signature_types,
    encode_call,
    encode_call_hex,
    decode_uint256,
    decode_string,
    decode_hex_string,
    decode_decimals,
)
from .address import (
    normalize_address,
    to_chain_address,
    is_evm_address,
    is_chain_address,
)
from .client import EvmClient, build_call_request

__all__ = [
    "EvmClient",
    "build_call_request",
    # ABI
    "function_selector",
    "parse_signature_types",
    "encode_call",
    "encode_call_hex",
    "decode_uint256",
    "decode_string",
    "decode_hex_string",
    "decode_decimals",
    # Address
    "normalize_address",
    "to_chain_address",
    "is_evm_address",
    "is_chain_address",
]
