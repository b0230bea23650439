"""
EIP-712 hashing, value conversion and signature utilities.

The digest computed here is the one the WarmStorage contract recovers the
client address from. It is always computed locally from (domain, types,
message), independently of whichever backend produced the signature.
"""

import re
from typing import Any, Dict, List

from eth_abi import encode
from eth_account.messages import encode_typed_data
from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError
from eth_utils import to_checksum_address

from pdp_auth.abi import EIP712_DOMAIN_TYPE, keccak256, type_hash
from pdp_auth.exceptions import EncodingFailure, SignatureRejected

SIGNATURE_LENGTH = 65

_ARRAY_TYPE = re.compile(r"^(.*)\[(\d*)\]$")


def build_typed_data(
    domain: dict[str, Any],
    types: Dict[str, List[Dict[str, str]]],
    primary_type: str,
    message: dict[str, Any],
) -> dict[str, Any]:
    """Assemble the full typed-data document, EIP712Domain included"""
    return {
        "types": {"EIP712Domain": EIP712_DOMAIN_TYPE, **types},
        "primaryType": primary_type,
        "domain": domain,
        "message": message,
    }


def domain_separator(domain: dict[str, Any]) -> bytes:
    """hashStruct(EIP712Domain) for a name/version/chainId/verifyingContract domain"""
    domain_types = {"EIP712Domain": EIP712_DOMAIN_TYPE}
    return keccak256(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                type_hash("EIP712Domain", domain_types),
                keccak256(domain["name"].encode("utf-8")),
                keccak256(domain["version"].encode("utf-8")),
                int(domain["chainId"]),
                to_checksum_address(domain["verifyingContract"]),
            ],
        )
    )


def hash_typed_data(
    domain: dict[str, Any],
    types: Dict[str, List[Dict[str, str]]],
    primary_type: str,
    message: dict[str, Any],
) -> bytes:
    """Compute the 32-byte EIP-712 digest: keccak256(0x19 0x01 || domainSeparator || hashStruct)

    Raises:
        EncodingFailure: If message does not fit the declared types
    """
    try:
        signable = encode_typed_data(
            full_message=build_typed_data(domain, types, primary_type, message)
        )
    except Exception as e:
        raise EncodingFailure(f"Failed to encode {primary_type} typed data: {e}") from e
    return keccak256(b"\x19" + signable.version + signable.header + signable.body)


def to_display_value(types: Dict[str, List[Dict[str, str]]], field_type: str, value: Any) -> Any:
    """Convert a canonical value to the JSON form wallets render.

    Integers become decimal strings and byte strings become 0x hex, recursing
    through arrays and nested structs.
    """
    array_match = _ARRAY_TYPE.match(field_type)
    if array_match:
        item_type = array_match.group(1)
        return [to_display_value(types, item_type, item) for item in value]

    if field_type in types:
        return {
            field["name"]: to_display_value(types, field["type"], value[field["name"]])
            for field in types[field_type]
        }

    if field_type.startswith(("uint", "int")):
        return str(int(value))
    if field_type.startswith("bytes"):
        if isinstance(value, str):
            return value if value.startswith("0x") else "0x" + value
        return "0x" + bytes(value).hex()
    if field_type == "address":
        return to_checksum_address(value)
    return value


def to_display_message(
    types: Dict[str, List[Dict[str, str]]], primary_type: str, message: dict[str, Any]
) -> dict[str, Any]:
    """Display form of a full message"""
    return to_display_value(types, primary_type, message)


def signature_to_bytes(signature: str | bytes) -> bytes:
    """Parse a hex (with or without 0x) or raw signature"""
    if isinstance(signature, (bytes, bytearray)):
        return bytes(signature)
    if not isinstance(signature, str):
        raise SignatureRejected(f"Unexpected signature type: {type(signature).__name__}")
    hex_part = signature[2:] if signature.startswith("0x") else signature
    try:
        return bytes.fromhex(hex_part)
    except ValueError as e:
        raise SignatureRejected(f"Signature is not valid hex: {e}") from e


def split_signature(signature: str | bytes) -> tuple[bytes, int, bytes, bytes]:
    """Split a 65-byte r || s || v signature, normalizing v to 27/28.

    Returns:
        (normalized signature bytes, v, r, s)

    Raises:
        SignatureRejected: If signature is not 65 bytes or v is out of range
    """
    sig = signature_to_bytes(signature)
    if len(sig) != SIGNATURE_LENGTH:
        raise SignatureRejected(
            f"Invalid signature length: {len(sig)} bytes, expected {SIGNATURE_LENGTH}"
        )

    r, s, v = sig[:32], sig[32:64], sig[64]
    if v in (0, 1):
        v += 27
    if v not in (27, 28):
        raise SignatureRejected(f"Invalid signature recovery id: {v}")

    return r + s + bytes([v]), v, r, s


def recover_signer(digest: bytes, signature: str | bytes) -> str:
    """Recover the checksummed address that produced signature over digest

    Raises:
        SignatureRejected: If no public key can be recovered
    """
    _, v, r, s = split_signature(signature)
    try:
        sig = keys.Signature(vrs=(v - 27, int.from_bytes(r, "big"), int.from_bytes(s, "big")))
        return sig.recover_public_key_from_msg_hash(digest).to_checksum_address()
    except (BadSignature, KeyValidationError, ValueError) as e:
        raise SignatureRejected(f"Unable to recover signer: {e}") from e
