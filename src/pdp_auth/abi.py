"""
EIP-712 type schema and ABI layouts shared with the FilecoinWarmStorageService contract
"""

import re
from typing import Any, Dict, List

from Crypto.Hash import keccak

from pdp_auth.exceptions import EncodingFailure

# EIP-712 Domain Type
# keccak256("EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)")
EIP712_DOMAIN_TYPE: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# Struct definitions verified by WarmStorage. Field order is part of the typehash.
EIP712_TYPES: Dict[str, List[Dict[str, str]]] = {
    "MetadataEntry": [
        {"name": "key", "type": "string"},
        {"name": "value", "type": "string"},
    ],
    "CreateDataSet": [
        {"name": "clientDataSetId", "type": "uint256"},
        {"name": "payee", "type": "address"},
        {"name": "metadata", "type": "MetadataEntry[]"},
    ],
    "Cid": [
        {"name": "data", "type": "bytes"},
    ],
    "PieceMetadata": [
        {"name": "pieceIndex", "type": "uint256"},
        {"name": "metadata", "type": "MetadataEntry[]"},
    ],
    "AddPieces": [
        {"name": "clientDataSetId", "type": "uint256"},
        {"name": "firstAdded", "type": "uint256"},
        {"name": "pieceData", "type": "Cid[]"},
        {"name": "pieceMetadata", "type": "PieceMetadata[]"},
    ],
    "SchedulePieceRemovals": [
        {"name": "clientDataSetId", "type": "uint256"},
        {"name": "pieceIds", "type": "uint256[]"},
    ],
    "DeleteDataSet": [
        {"name": "clientDataSetId", "type": "uint256"},
    ],
}

# extraData layouts, in the exact order the contract decodes them.
# DataSetCreateData: (payer, clientDataSetId, metadataKeys, metadataValues, signature)
CREATE_DATA_SET_EXTRA_DATA_TYPES: List[str] = [
    "address",
    "uint256",
    "string[]",
    "string[]",
    "bytes",
]
# AddPieces: (signature, per-piece metadataKeys, per-piece metadataValues)
ADD_PIECES_EXTRA_DATA_TYPES: List[str] = ["bytes", "string[][]", "string[][]"]
# createDataSetAndAddPieces: (createExtraData, addExtraData)
CREATE_AND_ADD_EXTRA_DATA_TYPES: List[str] = ["bytes", "bytes"]
# schedulePieceRemovals / dataSetDeleted: (signature)
SIGNATURE_ONLY_EXTRA_DATA_TYPES: List[str] = ["bytes"]

_ARRAY_SUFFIX = re.compile(r"(\[\d*\])+$")


def _base_type(field_type: str) -> str:
    """Strip array suffixes: 'MetadataEntry[]' -> 'MetadataEntry'"""
    return _ARRAY_SUFFIX.sub("", field_type)


def _collect_dependencies(
    type_name: str,
    types: Dict[str, List[Dict[str, str]]],
    found: set[str],
) -> set[str]:
    if type_name in found or type_name not in types:
        return found
    found.add(type_name)
    for field in types[type_name]:
        _collect_dependencies(_base_type(field["type"]), types, found)
    return found


def _type_signature(type_name: str, types: Dict[str, List[Dict[str, str]]]) -> str:
    fields = ",".join(f"{field['type']} {field['name']}" for field in types[type_name])
    return f"{type_name}({fields})"


def get_dependencies(
    type_name: str, types: Dict[str, List[Dict[str, str]]] = EIP712_TYPES
) -> List[str]:
    """Struct types transitively referenced by *type_name*, sorted by name.

    Raises:
        EncodingFailure: If type_name is not defined in types
    """
    if type_name not in types:
        raise EncodingFailure(f"Unknown EIP-712 type: {type_name}")
    found = _collect_dependencies(type_name, types, set())
    found.discard(type_name)
    return sorted(found)


def encode_type(type_name: str, types: Dict[str, List[Dict[str, str]]] = EIP712_TYPES) -> str:
    """Build the canonical EIP-712 type string for *type_name*.

    The primary type comes first with its fields in declared order, followed by
    each referenced struct exactly once in lexicographic order.

    Example:
        >>> encode_type("DeleteDataSet")
        'DeleteDataSet(uint256 clientDataSetId)'
    """
    dependencies = get_dependencies(type_name, types)
    return "".join(_type_signature(name, types) for name in [type_name, *dependencies])


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (pre-standard SHA3 as used by the EVM)"""
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def type_hash(type_name: str, types: Dict[str, List[Dict[str, str]]] = EIP712_TYPES) -> bytes:
    """keccak256 of the canonical type string"""
    return keccak256(encode_type(type_name, types).encode("utf-8"))


def find_primary_type(types: Dict[str, List[Dict[str, str]]]) -> str:
    """Return the first type name that no other type in the set references.

    Raises:
        EncodingFailure: If every type is referenced (cyclic or empty set)
    """
    referenced = {
        _base_type(field["type"])
        for name, fields in types.items()
        if name != "EIP712Domain"
        for field in fields
    }
    for name in types:
        if name != "EIP712Domain" and name not in referenced:
            return name
    raise EncodingFailure("Unable to determine EIP-712 primary type")


def get_types_for(primary_type: str) -> Dict[str, List[Dict[str, Any]]]:
    """Primary type plus its dependencies, primary first, copied from the registry"""
    names = [primary_type, *get_dependencies(primary_type)]
    return {name: [dict(field) for field in EIP712_TYPES[name]] for name in names}


EIP712_ENCODED_TYPES: Dict[str, str] = {name: encode_type(name) for name in EIP712_TYPES}
EIP712_TYPE_HASHES: Dict[str, str] = {
    name: "0x" + keccak256(encoded.encode("utf-8")).hex()
    for name, encoded in EIP712_ENCODED_TYPES.items()
}
