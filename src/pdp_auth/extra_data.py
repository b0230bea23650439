"""
extraData codecs for WarmStorage contract calls.

One encoder/decoder pair per wire layout. Field order and types match the
contract's abi.decode order exactly; a change to any layout is a new layout,
never an edit of an existing one.
"""

from typing import Any, Iterable, Optional, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import is_address, to_checksum_address

from pdp_auth.abi import (
    ADD_PIECES_EXTRA_DATA_TYPES,
    CREATE_AND_ADD_EXTRA_DATA_TYPES,
    CREATE_DATA_SET_EXTRA_DATA_TYPES,
    SIGNATURE_ONLY_EXTRA_DATA_TYPES,
)
from pdp_auth.exceptions import EncodingFailure
from pdp_auth.operations import normalize_metadata
from pdp_auth.types import (
    AddPiecesExtraData,
    AuthSignature,
    CreateAndAddExtraData,
    CreateDataSetExtraData,
    MetadataEntry,
    SignatureOnlyExtraData,
)


def _signature_bytes(signature: str | bytes | AuthSignature) -> bytes:
    if isinstance(signature, AuthSignature):
        signature = signature.signature
    if isinstance(signature, (bytes, bytearray)):
        return bytes(signature)
    if isinstance(signature, str):
        hex_part = signature[2:] if signature.startswith("0x") else signature
        try:
            return bytes.fromhex(hex_part)
        except ValueError as e:
            raise EncodingFailure(f"Signature is not valid hex: {signature!r}") from e
    raise EncodingFailure(f"Unsupported signature type: {type(signature).__name__}")


def _hex_bytes(data: str | bytes) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    hex_part = data[2:] if data.startswith("0x") else data
    try:
        return bytes.fromhex(hex_part)
    except ValueError as e:
        raise EncodingFailure(f"extraData is not valid hex: {data!r}") from e


def _encode(layout: list[str], values: list[Any]) -> str:
    try:
        return "0x" + encode(layout, values).hex()
    except (EncodingError, TypeError, ValueError) as e:
        raise EncodingFailure(f"Failed to ABI encode ({','.join(layout)}): {e}") from e


def _decode(layout: list[str], data: str | bytes) -> tuple[Any, ...]:
    try:
        return decode(layout, _hex_bytes(data))
    except (DecodingError, TypeError, ValueError) as e:
        raise EncodingFailure(f"Failed to ABI decode ({','.join(layout)}): {e}") from e


def _split_metadata(entries: list[MetadataEntry]) -> tuple[list[str], list[str]]:
    return [entry.key for entry in entries], [entry.value for entry in entries]


def _join_metadata(keys: Sequence[str], values: Sequence[str]) -> list[MetadataEntry]:
    if len(keys) != len(values):
        raise EncodingFailure(
            f"Metadata keys ({len(keys)}) and values ({len(values)}) differ in length"
        )
    return [MetadataEntry(key=key, value=value) for key, value in zip(keys, values)]


def encode_create_data_set_extra_data(
    payer: str,
    client_data_set_id: int,
    metadata: Optional[Iterable[Any]],
    signature: str | bytes | AuthSignature,
) -> str:
    """Encode DataSetCreateData: (address payer, uint256 clientDataSetId,
    string[] metadataKeys, string[] metadataValues, bytes signature)

    Returns:
        0x-prefixed hex
    """
    if not isinstance(payer, str) or not is_address(payer):
        raise EncodingFailure(f"Invalid payer address: {payer!r}")
    keys, values = _split_metadata(normalize_metadata(metadata))
    return _encode(
        CREATE_DATA_SET_EXTRA_DATA_TYPES,
        [
            to_checksum_address(payer),
            client_data_set_id,
            keys,
            values,
            _signature_bytes(signature),
        ],
    )


def decode_create_data_set_extra_data(data: str | bytes) -> CreateDataSetExtraData:
    payer, client_data_set_id, keys, values, signature = _decode(
        CREATE_DATA_SET_EXTRA_DATA_TYPES, data
    )
    return CreateDataSetExtraData(
        payer=to_checksum_address(payer),
        clientDataSetId=client_data_set_id,
        metadata=_join_metadata(keys, values),
        signature="0x" + signature.hex(),
    )


def encode_add_pieces_extra_data(
    signature: str | bytes | AuthSignature,
    metadata: Sequence[Optional[Iterable[Any]]],
) -> str:
    """Encode addPieces extraData: (bytes signature, string[][] metadataKeys,
    string[][] metadataValues), one inner array per piece

    Returns:
        0x-prefixed hex
    """
    keys: list[list[str]] = []
    values: list[list[str]] = []
    for entries in metadata:
        piece_keys, piece_values = _split_metadata(normalize_metadata(entries))
        keys.append(piece_keys)
        values.append(piece_values)
    return _encode(ADD_PIECES_EXTRA_DATA_TYPES, [_signature_bytes(signature), keys, values])


def decode_add_pieces_extra_data(data: str | bytes) -> AddPiecesExtraData:
    signature, keys, values = _decode(ADD_PIECES_EXTRA_DATA_TYPES, data)
    if len(keys) != len(values):
        raise EncodingFailure(
            f"Per-piece metadata keys ({len(keys)}) and values ({len(values)}) differ in length"
        )
    return AddPiecesExtraData(
        signature="0x" + signature.hex(),
        metadata=[_join_metadata(k, v) for k, v in zip(keys, values)],
    )


def encode_create_and_add_extra_data(
    create_extra_data: str | bytes, add_extra_data: str | bytes
) -> str:
    """Encode createDataSetAndAddPieces extraData: (bytes createExtraData, bytes addExtraData)"""
    return _encode(
        CREATE_AND_ADD_EXTRA_DATA_TYPES,
        [_hex_bytes(create_extra_data), _hex_bytes(add_extra_data)],
    )


def decode_create_and_add_extra_data(data: str | bytes) -> CreateAndAddExtraData:
    create_data, add_data = _decode(CREATE_AND_ADD_EXTRA_DATA_TYPES, data)
    return CreateAndAddExtraData(
        create=decode_create_data_set_extra_data(create_data),
        add=decode_add_pieces_extra_data(add_data),
    )


def encode_signature_extra_data(signature: str | bytes | AuthSignature) -> str:
    """Encode extraData that carries only a signature: (bytes signature).

    Used for schedulePieceRemovals and deleteDataSet.
    """
    return _encode(SIGNATURE_ONLY_EXTRA_DATA_TYPES, [_signature_bytes(signature)])


def decode_signature_extra_data(data: str | bytes) -> SignatureOnlyExtraData:
    (signature,) = _decode(SIGNATURE_ONLY_EXTRA_DATA_TYPES, data)
    return SignatureOnlyExtraData(signature="0x" + signature.hex())


encode_schedule_piece_removals_extra_data = encode_signature_extra_data
encode_delete_data_set_extra_data = encode_signature_extra_data
