"""
Typed-data builders for WarmStorage operations.

Each builder validates its inputs and returns an AuthorizationRequest with the
operation's type set (primary type first) and a canonical value: ints for
uint256 fields, checksummed addresses, raw bytes for piece references.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from eth_utils import is_address, to_checksum_address

from pdp_auth.abi import get_types_for
from pdp_auth.exceptions import EncodingFailure, InvalidPieceReference, MetadataLengthMismatch
from pdp_auth.piece import PieceResolver, resolve_piece_reference
from pdp_auth.types import AuthorizationRequest, MetadataEntry, OperationKind

logger = logging.getLogger(__name__)

MAX_UINT256 = 2**256 - 1


def _uint256(name: str, value: Any) -> int:
    # decimal strings only; floats and Decimals are rejected, never truncated
    if isinstance(value, str) and value.isascii() and value.isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingFailure(f"{name} must be an integer, got {value!r}")
    if value < 0 or value > MAX_UINT256:
        raise EncodingFailure(f"{name} out of uint256 range: {value}")
    return value


def _address(name: str, value: Any) -> str:
    if not isinstance(value, str) or not is_address(value):
        raise EncodingFailure(f"{name} is not a valid address: {value!r}")
    return to_checksum_address(value)


def normalize_metadata(metadata: Optional[Iterable[Any]]) -> list[MetadataEntry]:
    """Coerce MetadataEntry models or {key, value} mappings, preserving order"""
    if metadata is None:
        return []
    entries = []
    for item in metadata:
        if isinstance(item, MetadataEntry):
            entries.append(item)
        elif isinstance(item, Mapping) and "key" in item and "value" in item:
            entries.append(MetadataEntry(key=item["key"], value=item["value"]))
        else:
            raise EncodingFailure(f"Invalid metadata entry: {item!r}")
    return entries


def _metadata_value(entries: list[MetadataEntry]) -> list[dict[str, str]]:
    return [{"key": entry.key, "value": entry.value} for entry in entries]


def build_create_data_set(
    client_data_set_id: int,
    payee: str,
    metadata: Optional[Iterable[Any]] = None,
) -> AuthorizationRequest:
    """CreateDataSet(uint256 clientDataSetId,address payee,MetadataEntry[] metadata)"""
    value = {
        "clientDataSetId": _uint256("clientDataSetId", client_data_set_id),
        "payee": _address("payee", payee),
        "metadata": _metadata_value(normalize_metadata(metadata)),
    }
    return AuthorizationRequest(
        kind=OperationKind.CREATE_DATA_SET,
        types=get_types_for(OperationKind.CREATE_DATA_SET.value),
        value=value,
    )


def build_add_pieces(
    client_data_set_id: int,
    nonce: int,
    pieces: Sequence[Any],
    metadata: Optional[Sequence[Optional[Iterable[Any]]]] = None,
    resolver: PieceResolver = resolve_piece_reference,
) -> AuthorizationRequest:
    """AddPieces(uint256 clientDataSetId,uint256 firstAdded,Cid[] pieceData,
    PieceMetadata[] pieceMetadata)

    Args:
        client_data_set_id: Client's data set ID
        nonce: Value signed as ``firstAdded`` (first piece ID or replay nonce)
        pieces: Piece identifiers, resolved to PieceCID bytes by resolver
        metadata: One metadata list per piece; omitted or empty means
            no metadata for any piece
        resolver: Maps a piece identifier to PieceCID bytes or None

    Raises:
        MetadataLengthMismatch: If metadata is non-empty and its length differs from pieces
        InvalidPieceReference: If a piece cannot be resolved
    """
    pieces = list(pieces)
    per_piece = per_piece_metadata(len(pieces), metadata)

    piece_data = []
    for piece in pieces:
        try:
            piece_bytes = resolver(piece)
        except ValueError as e:
            raise InvalidPieceReference(piece) from e
        if not piece_bytes:
            raise InvalidPieceReference(piece)
        piece_data.append({"data": bytes(piece_bytes)})

    value = {
        "clientDataSetId": _uint256("clientDataSetId", client_data_set_id),
        "firstAdded": _uint256("nonce", nonce),
        "pieceData": piece_data,
        "pieceMetadata": [
            {"pieceIndex": index, "metadata": _metadata_value(entries)}
            for index, entries in enumerate(per_piece)
        ],
    }
    return AuthorizationRequest(
        kind=OperationKind.ADD_PIECES,
        types=get_types_for(OperationKind.ADD_PIECES.value),
        value=value,
    )


def build_schedule_piece_removals(
    client_data_set_id: int, piece_ids: Iterable[int]
) -> AuthorizationRequest:
    """SchedulePieceRemovals(uint256 clientDataSetId,uint256[] pieceIds)"""
    value = {
        "clientDataSetId": _uint256("clientDataSetId", client_data_set_id),
        "pieceIds": [_uint256("pieceIds", piece_id) for piece_id in piece_ids],
    }
    return AuthorizationRequest(
        kind=OperationKind.SCHEDULE_PIECE_REMOVALS,
        types=get_types_for(OperationKind.SCHEDULE_PIECE_REMOVALS.value),
        value=value,
    )


def build_delete_data_set(client_data_set_id: int) -> AuthorizationRequest:
    """DeleteDataSet(uint256 clientDataSetId)"""
    return AuthorizationRequest(
        kind=OperationKind.DELETE_DATA_SET,
        types=get_types_for(OperationKind.DELETE_DATA_SET.value),
        value={"clientDataSetId": _uint256("clientDataSetId", client_data_set_id)},
    )


def per_piece_metadata(
    piece_count: int, metadata: Optional[Sequence[Optional[Iterable[Any]]]] = None
) -> list[list[MetadataEntry]]:
    """Metadata lists aligned with pieces, as used by the add-pieces extraData layout

    Raises:
        MetadataLengthMismatch: If metadata is non-empty and its length differs from piece_count
    """
    if not metadata:
        return [[] for _ in range(piece_count)]
    if len(metadata) != piece_count:
        raise MetadataLengthMismatch(expected=piece_count, actual=len(metadata))
    return [normalize_metadata(entries) for entries in metadata]
