"""
ABI call-data encoding and result decoding

Thin layer over eth_abi: selector derivation, signature parsing,
argument normalization, and decoding of the return values metadata
ingestion needs (uint256 and string).
"""

import logging
import re
from typing import Any, List, Optional, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError, ParseError
from web3 import Web3

from ..errors import DecodeError, ValidationError
from .address import normalize_address

logger = logging.getLogger(__name__)

_INT_TYPE = re.compile(r"^u?int(\d*)$")
_ADDRESS_ARRAY = re.compile(r"^address\[\d*\]$")


def function_selector(signature: str) -> bytes:
    """First 4 bytes of keccak-256 of the canonical signature"""
    return bytes(Web3.keccak(text=canonical_signature(signature))[:4])


def canonical_signature(signature: str) -> str:
    """Signature with whitespace removed"""
    return re.sub(r"\s+", "", signature)


def parse_signature_types(signature: str) -> List[str]:
    """
    Parse argument types from a function signature.

    Commas nested inside tuple parentheses do not split.

    Example:
        parse_signature_types("swap((address,uint256),bytes)")
        -> ["(address,uint256)", "bytes"]
    """
    sig = canonical_signature(signature)
    open_idx = sig.find("(")
    if open_idx <= 0 or not sig.endswith(")"):
        raise ValidationError(f"Invalid function signature: {signature!r}")

    inner = sig[open_idx + 1:-1]
    if not inner:
        return []

    types: List[str] = []
    depth = 0
    current = ""
    for char in inner:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ValidationError(f"Unbalanced parentheses in signature: {signature!r}")
        if char == "," and depth == 0:
            types.append(current)
            current = ""
        else:
            current += char
    if depth != 0:
        raise ValidationError(f"Unbalanced parentheses in signature: {signature!r}")
    types.append(current)

    if any(not t for t in types):
        raise ValidationError(f"Empty argument type in signature: {signature!r}")
    return types


def _normalize_arg(abi_type: str, value: Any) -> Any:
    """Bring an argument into the form eth_abi expects for its type"""
    if abi_type == "address":
        return Web3.to_checksum_address(normalize_address(value))
    if _ADDRESS_ARRAY.match(abi_type):
        return [Web3.to_checksum_address(normalize_address(v)) for v in value]
    if _INT_TYPE.match(abi_type) and isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError as e:
            raise ValidationError(f"Invalid {abi_type} value: {value!r}") from e
    return value


def encode_call(signature: str, args: Optional[Sequence[Any]] = None) -> bytes:
    """
    Build eth_call data: selector followed by ABI-encoded arguments.

    Args:
        signature: Function signature, e.g. "balanceOf(address)"
        args: One value per type in the signature

    Returns:
        Call data bytes

    Raises:
        ValidationError: Wrong argument count or unencodable values
    """
    types = parse_signature_types(signature)
    args = list(args or [])
    if len(args) != len(types):
        raise ValidationError.arg_count_mismatch(signature, len(types), len(args))

    selector = function_selector(signature)
    if not types:
        return selector

    values = [_normalize_arg(t, v) for t, v in zip(types, args)]
    try:
        return selector + encode(types, values)
    except (EncodingError, ParseError, TypeError, ValueError, OverflowError) as e:
        raise ValidationError(f"Cannot encode arguments for {signature}: {e}") from e


def encode_call_hex(signature: str, args: Optional[Sequence[Any]] = None) -> str:
    """encode_call as a 0x-prefixed hex string"""
    return "0x" + encode_call(signature, args).hex()


def _strip_0x(value: str) -> str:
    value = (value or "").strip()
    return value[2:] if value[:2].lower() == "0x" else value


def _to_bytes(hex_value: str) -> bytes:
    data = _strip_0x(hex_value)
    try:
        return bytes.fromhex(data)
    except ValueError as e:
        raise DecodeError(f"Malformed hex value: {hex_value[:80]!r}", original_error=e) from e


def decode_uint256(hex_value: str) -> int:
    """
    Decode a uint256 return value.

    Empty input ("" or "0x") decodes to 0.
    """
    data = _strip_0x(hex_value)
    if not data:
        return 0
    try:
        return int(data[:64], 16)
    except ValueError as e:
        raise DecodeError(f"Malformed uint256 value: {hex_value[:80]!r}", original_error=e) from e


def decode_string(hex_value: str) -> str:
    """
    Decode an ABI string return value.

    Empty input decodes to "". Legacy tokens returning a bare bytes32 are
    decoded as a null-padded UTF-8 string.
    """
    raw = _to_bytes(hex_value)
    if not raw:
        return ""
    try:
        (value,) = decode(["string"], raw)
        return value
    except (DecodingError, OverflowError, ValueError) as e:
        if len(raw) == 32:
            return raw.rstrip(b"\x00").decode("utf-8", errors="replace")
        raise DecodeError(f"Malformed ABI string: {hex_value[:80]!r}", original_error=e) from e


def decode_hex_string(hex_value: Optional[str]) -> str:
    """Lenient decode_string: "" when the value is missing or malformed"""
    if not hex_value:
        return ""
    try:
        return decode_string(hex_value)
    except DecodeError:
        logger.debug(f"Could not decode string value {hex_value[:80]!r}")
        return ""


def decode_decimals(hex_value: Optional[str]) -> Optional[int]:
    """Decode a decimals() result; None when empty, malformed or outside 0..255"""
    if not _strip_0x(hex_value or ""):
        return None
    try:
        value = decode_uint256(hex_value)
    except DecodeError:
        return None
    if value < 0 or value > 255:
        return None
    return value
