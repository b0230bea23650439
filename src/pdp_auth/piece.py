"""
PieceCID reference parsing.

A PieceCID (FRC-0069) is a CIDv1 with the raw codec (0x55) and the
fr32-sha256-trunc254-padbintree multihash (0x1011). Signed structs carry its
binary form, never the string form.
"""

import base64
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

CID_VERSION_1 = 0x01
RAW_CODEC = 0x55
FR32_SHA256_TRUNC254_PADBINTREE = 0x1011
# padding varint (>= 1 byte) + tree height (1 byte) + 32-byte root
MIN_PIECE_DIGEST_LENGTH = 34

PieceResolver = Callable[[Any], Optional[bytes]]


def _read_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Decode an unsigned LEB128 varint, returning (value, next_offset)"""
    value = 0
    shift = 0
    while True:
        if offset >= len(data):
            raise ValueError("Truncated varint")
        byte = data[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset
        shift += 7
        if shift > 63:
            raise ValueError("Varint too long")


def is_piece_cid_bytes(data: bytes) -> bool:
    """Check that data is the binary form of a PieceCIDv2"""
    try:
        version, offset = _read_varint(data, 0)
        codec, offset = _read_varint(data, offset)
        mh_code, offset = _read_varint(data, offset)
        digest_length, offset = _read_varint(data, offset)
    except ValueError:
        return False

    return (
        version == CID_VERSION_1
        and codec == RAW_CODEC
        and mh_code == FR32_SHA256_TRUNC254_PADBINTREE
        and digest_length >= MIN_PIECE_DIGEST_LENGTH
        and len(data) - offset == digest_length
    )


def _decode_cid_string(value: str) -> bytes:
    """Decode a multibase string. Only base32 lower ('b' prefix) is used for PieceCIDs."""
    if not value.startswith("b"):
        raise ValueError(f"Unsupported multibase prefix: {value[:1]!r}")
    body = value[1:].upper()
    body += "=" * (-len(body) % 8)
    return base64.b32decode(body)


def resolve_piece_reference(value: Any) -> Optional[bytes]:
    """Resolve a piece identifier to PieceCID bytes.

    Accepts a PieceCID string (``bafkzcib...``), a 0x-prefixed hex string,
    raw bytes, or any object exposing a ``bytes`` attribute (CID objects).

    Returns:
        PieceCID bytes, or None if value is not a valid PieceCIDv2
    """
    try:
        if isinstance(value, (bytes, bytearray, memoryview)):
            data = bytes(value)
        elif isinstance(value, str):
            if value.startswith("0x"):
                data = bytes.fromhex(value[2:])
            else:
                data = _decode_cid_string(value)
        elif isinstance(getattr(value, "bytes", None), (bytes, bytearray)):
            data = bytes(value.bytes)
        else:
            return None
    except ValueError as e:
        logger.debug(f"Could not decode piece reference {value!r}: {e}")
        return None

    if not is_piece_cid_bytes(data):
        return None
    return data
