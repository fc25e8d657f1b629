"""
Solana token metadata decoding

Decodes Metaplex token-metadata accounts, Token-2022 TokenMetadata
extensions and SPL mint authorities from raw account bytes.

Decoders return None when the data does not have the expected layout;
they never guess.
"""

import logging
import struct
from typing import Any, List, Optional, Tuple, Union

import base58
from solders.pubkey import Pubkey

from ..errors import DecodeError, ValidationError
from ..types import MetaplexMetadata, Token2022Metadata
from ..types.solana import decode_base64

logger = logging.getLogger(__name__)

# Program IDs
METAPLEX_PROGRAM_ID = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"

# Metaplex account key for a Metadata (v1) account
METAPLEX_METADATA_KEY = 4
# key(1) + update_authority(32) + mint(32) + name length prefix(4)
METAPLEX_MIN_SIZE = 1 + 32 + 32 + 4
# address(32) + verified(1) + share(1)
METAPLEX_CREATOR_SIZE = 34

# SPL mint layout
MINT_SIZE = 82
TOKEN_ACCOUNT_SIZE = 165
ACCOUNT_TYPE_MINT = 1

# Token-2022 extension type carrying name/symbol/uri
EXTENSION_TOKEN_METADATA = 19

_ZERO_PUBKEY = bytes(32)


def decode_account_data(data: Union[str, bytes, List[Any]]) -> bytes:
    """
    Normalize account data from any RPC shape to bytes.

    Accepts raw bytes, a base64 string, or the ["<base64>", "base64"]
    pair getAccountInfo returns.
    """
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, list):
        data = data[0] if data else ""
    if not isinstance(data, str):
        raise DecodeError(f"Unsupported account data type: {type(data).__name__}")
    return decode_base64(data)


def pubkey_from_bytes(data: bytes) -> str:
    """Base58-encode a 32-byte public key"""
    return base58.b58encode(bytes(data)).decode("ascii")


def _to_pubkey(address: str) -> Pubkey:
    try:
        return Pubkey.from_string(address)
    except ValueError as e:
        raise ValidationError.invalid_address(address, "not a Solana public key") from e


def find_metadata_pda(mint: str) -> str:
    """
    Derive the Metaplex metadata account for a mint.

    Seeds: ["metadata", metadata program id, mint]
    """
    program = _to_pubkey(METAPLEX_PROGRAM_ID)
    pda, _bump = Pubkey.find_program_address(
        [b"metadata", bytes(program), bytes(_to_pubkey(mint))],
        program,
    )
    return str(pda)


def _clean(value: str) -> str:
    """Strip null padding and surrounding whitespace"""
    return value.replace("\x00", "").strip()


def _read_borsh_string(data: bytes, offset: int) -> Tuple[str, int]:
    """
    Read a u32-LE length-prefixed UTF-8 string.

    Returns:
        (string, offset after the string)

    Raises:
        DecodeError: If the prefix or body runs past the buffer
    """
    if offset + 4 > len(data):
        raise DecodeError(f"String length prefix out of bounds at offset {offset}")
    (length,) = struct.unpack_from("<I", data, offset)
    start = offset + 4
    end = start + length
    if end > len(data):
        raise DecodeError(f"String of length {length} at offset {offset} exceeds buffer ({len(data)} bytes)")
    return data[start:end].decode("utf-8", errors="replace"), end


def decode_metaplex_metadata(data: Union[str, bytes]) -> Optional[MetaplexMetadata]:
    """
    Decode a Metaplex token-metadata account.

    Layout:
    - u8: key (4 = Metadata)
    - publicKey(32): update authority
    - publicKey(32): mint
    - string: name, symbol, uri (u32 LE length + bytes, null padded)
    - u16: seller fee basis points
    - option<vec<creator>>: creators (34 bytes each)
    - bool: primary sale happened
    - bool: is mutable

    Args:
        data: Account data (base64 string or bytes)

    Returns:
        Decoded metadata, or None if the data is not a Metadata account
    """
    try:
        raw = decode_account_data(data)
    except DecodeError as e:
        logger.debug(f"Metaplex data is not base64: {e}")
        return None

    if len(raw) < METAPLEX_MIN_SIZE:
        logger.debug(f"Metaplex data too short: {len(raw)} bytes")
        return None
    if raw[0] != METAPLEX_METADATA_KEY:
        logger.debug(f"Invalid Metaplex key {raw[0]}, expected {METAPLEX_METADATA_KEY}")
        return None

    update_authority = pubkey_from_bytes(raw[1:33])
    mint = pubkey_from_bytes(raw[33:65])

    try:
        name, offset = _read_borsh_string(raw, 65)
        symbol, offset = _read_borsh_string(raw, offset)
        uri, offset = _read_borsh_string(raw, offset)
    except DecodeError as e:
        logger.debug(f"Malformed Metaplex metadata: {e}")
        return None

    seller_fee_basis_points = 0
    if offset + 2 <= len(raw):
        (seller_fee_basis_points,) = struct.unpack_from("<H", raw, offset)
        offset += 2

    primary_sale_happened = None
    is_mutable = None
    if offset < len(raw):
        has_creators = raw[offset] == 1
        offset += 1
        if has_creators and offset + 4 <= len(raw):
            (creator_count,) = struct.unpack_from("<I", raw, offset)
            offset += 4 + creator_count * METAPLEX_CREATOR_SIZE
        if offset < len(raw):
            primary_sale_happened = raw[offset] == 1
            offset += 1
        if offset < len(raw):
            is_mutable = raw[offset] == 1

    return MetaplexMetadata(
        name=_clean(name),
        symbol=_clean(symbol),
        uri=_clean(uri),
        seller_fee_basis_points=seller_fee_basis_points,
        update_authority=update_authority,
        mint=mint,
        primary_sale_happened=primary_sale_happened,
        is_mutable=is_mutable,
    )


def _tlv_start(raw: bytes) -> Optional[int]:
    """
    Offset of the first TLV entry of a Token-2022 mint, or None.

    On chain, extended mints are padded to the token-account size and
    carry the account type at offset 165. Compact buffers with the
    account type right after the 82-byte mint are accepted too.
    """
    if len(raw) > TOKEN_ACCOUNT_SIZE and raw[TOKEN_ACCOUNT_SIZE] == ACCOUNT_TYPE_MINT:
        return TOKEN_ACCOUNT_SIZE + 1
    if len(raw) > MINT_SIZE and raw[MINT_SIZE] == ACCOUNT_TYPE_MINT:
        return MINT_SIZE + 1
    return None


def _parse_token_metadata_extension(body: bytes) -> Optional[Token2022Metadata]:
    """
    Parse a TokenMetadata extension value.

    Layout:
    - publicKey(32): update authority (all zeros = none)
    - publicKey(32): mint
    - string: name, symbol, uri
    - additional metadata (ignored)
    """
    if len(body) < 64:
        return None
    update_authority = "" if body[0:32] == _ZERO_PUBKEY else pubkey_from_bytes(body[0:32])
    mint = pubkey_from_bytes(body[32:64])
    try:
        name, offset = _read_borsh_string(body, 64)
        symbol, offset = _read_borsh_string(body, offset)
        uri, offset = _read_borsh_string(body, offset)
    except DecodeError as e:
        logger.debug(f"Malformed Token-2022 metadata extension: {e}")
        return None

    return Token2022Metadata(
        name=_clean(name),
        symbol=_clean(symbol),
        uri=_clean(uri),
        update_authority=update_authority,
        mint=mint,
    )


def parse_token2022_extensions(data: Union[str, bytes], owner: str) -> Optional[Token2022Metadata]:
    """
    Extract TokenMetadata from a Token-2022 mint account.

    Args:
        data: Mint account data (base64 string or bytes)
        owner: Owning program of the account

    Returns:
        Metadata, or None if the account is not a Token-2022 mint or has
        no TokenMetadata extension
    """
    if owner != TOKEN_2022_PROGRAM_ID:
        return None

    try:
        raw = decode_account_data(data)
    except DecodeError as e:
        logger.debug(f"Token-2022 data is not base64: {e}")
        return None

    offset = _tlv_start(raw)
    if offset is None:
        return None

    while offset + 4 <= len(raw):
        extension_type, length = struct.unpack_from("<HH", raw, offset)
        offset += 4
        if offset + length > len(raw):
            logger.debug(f"Token-2022 extension {extension_type} overruns buffer")
            break
        if extension_type == EXTENSION_TOKEN_METADATA:
            return _parse_token_metadata_extension(raw[offset:offset + length])
        offset += length

    return None


def parse_mint_authority(data: Union[str, bytes]) -> Optional[str]:
    """
    Read the mint authority of an SPL / Token-2022 mint.

    Layout:
    - u32: COption tag (1 = Some)
    - publicKey(32): mint authority

    Returns:
        Authority address, or None if unset or the data is too short
    """
    try:
        raw = decode_account_data(data)
    except DecodeError:
        return None
    if len(raw) < 36:
        return None
    (tag,) = struct.unpack_from("<I", raw, 0)
    if tag != 1:
        return None
    return pubkey_from_bytes(raw[4:36])
