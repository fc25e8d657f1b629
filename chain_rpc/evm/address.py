"""
Address normalization between 0x-hex and base58check chain addresses

A chain address is base58check over a 0x41 version byte followed by the
20-byte account id; the 0x-hex form is the same 20 bytes.
"""

import re

import base58

from ..errors import ValidationError

CHAIN_ADDRESS_PREFIX = 0x41

_HEX40 = re.compile(r"^[0-9a-fA-F]{40}$")
_PREFIXED_HEX42 = re.compile(r"^41[0-9a-fA-F]{40}$")


def is_evm_address(value: str) -> bool:
    """Check for 0x followed by 40 hex characters"""
    return (
        isinstance(value, str)
        and value[:2].lower() == "0x"
        and bool(_HEX40.match(value[2:]))
    )


def _decode_chain_address(value: str) -> bytes:
    try:
        raw = base58.b58decode_check(value)
    except ValueError as e:
        raise ValidationError.invalid_address(value, "bad base58check encoding") from e
    if len(raw) != 21 or raw[0] != CHAIN_ADDRESS_PREFIX:
        raise ValidationError.invalid_address(value, "unexpected payload length or version byte")
    return raw[1:]


def is_chain_address(value: str) -> bool:
    """Check for a valid base58check chain address"""
    if not isinstance(value, str) or not value:
        return False
    try:
        _decode_chain_address(value)
    except ValidationError:
        return False
    return True


def normalize_address(value: str) -> str:
    """
    Normalize an address to lower-case 0x-hex.

    Accepts 0x-hex, 41-prefixed hex, or base58check chain addresses.

    Args:
        value: Address in any supported encoding

    Returns:
        "0x" + 40 lower-case hex characters

    Raises:
        ValidationError: If the value is not a valid address
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError.invalid_address(value, "empty")
    value = value.strip()

    if value[:2].lower() == "0x":
        if not _HEX40.match(value[2:]):
            raise ValidationError.invalid_address(value, "expected 40 hex characters")
        return "0x" + value[2:].lower()

    if _PREFIXED_HEX42.match(value):
        return "0x" + value[2:].lower()

    return "0x" + _decode_chain_address(value).hex()


def to_chain_address(value: str) -> str:
    """
    Convert an address to its base58check chain form.

    Args:
        value: Address in any supported encoding

    Returns:
        Base58check address (version byte 0x41)
    """
    account_id = bytes.fromhex(normalize_address(value)[2:])
    return base58.b58encode_check(bytes([CHAIN_ADDRESS_PREFIX]) + account_id).decode("ascii")
