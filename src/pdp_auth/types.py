"""
Type definitions for PDP authorization
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class OperationKind(str, Enum):
    """Operations WarmStorage accepts client authorization for.

    Values are the EIP-712 primary type names.
    """

    CREATE_DATA_SET = "CreateDataSet"
    ADD_PIECES = "AddPieces"
    SCHEDULE_PIECE_REMOVALS = "SchedulePieceRemovals"
    DELETE_DATA_SET = "DeleteDataSet"


class SigningBackend(str, Enum):
    """How a signature is produced"""

    LOCAL = "local"
    BRIDGE = "bridge"


class EIP712Domain(BaseModel):
    """EIP-712 domain for the WarmStorage verifying contract"""

    name: str
    version: str
    chain_id: int = Field(alias="chainId")
    verifying_contract: str = Field(alias="verifyingContract")

    class Config:
        populate_by_name = True
        frozen = True

    def to_typed_data(self) -> dict[str, Any]:
        """Domain dict keyed by EIP-712 field names"""
        return self.model_dump(by_alias=True)


class MetadataEntry(BaseModel):
    """Key/value metadata attached to a data set or piece"""

    key: str
    value: str


class PieceMetadata(BaseModel):
    """Metadata for the piece at position piece_index"""

    piece_index: int = Field(alias="pieceIndex")
    metadata: list[MetadataEntry] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class AuthorizationRequest(BaseModel):
    """Typed-data value ready for hashing and signing.

    Built fresh for each call. ``value`` holds canonical Python values
    (ints, checksummed addresses, raw bytes) keyed by EIP-712 field name.
    """

    kind: OperationKind
    types: dict[str, list[dict[str, str]]]
    value: dict[str, Any]

    @property
    def primary_type(self) -> str:
        return self.kind.value


class AuthSignature(BaseModel):
    """Signature over an EIP-712 digest plus its decomposed parts"""

    signature: str
    v: int
    r: str
    s: str
    signed_data: str = Field(alias="signedData")

    class Config:
        populate_by_name = True


class CreateDataSetExtraData(BaseModel):
    """Decoded create-data-set extraData"""

    payer: str
    client_data_set_id: int = Field(alias="clientDataSetId")
    metadata: list[MetadataEntry]
    signature: str

    class Config:
        populate_by_name = True


class AddPiecesExtraData(BaseModel):
    """Decoded add-pieces extraData"""

    signature: str
    metadata: list[list[MetadataEntry]]


class CreateAndAddExtraData(BaseModel):
    """Decoded create-and-add extraData"""

    create: CreateDataSetExtraData
    add: AddPiecesExtraData


class SignatureOnlyExtraData(BaseModel):
    """Decoded extraData carrying only a signature"""

    signature: str


class TypedDataPayload(BaseModel):
    """eth_signTypedData_v4 payload"""

    types: dict[str, list[dict[str, str]]]
    primary_type: str = Field(alias="primaryType")
    domain: dict[str, Any]
    message: dict[str, Any]

    class Config:
        populate_by_name = True

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

