"""
pdp_auth - EIP-712 authorization for FilecoinWarmStorageService PDP operations

Signs CreateDataSet, AddPieces, SchedulePieceRemovals and DeleteDataSet with a
local key or through an external wallet, and encodes the extraData the
contract expects alongside each signature.
"""

__version__ = "0.1.0"

from pdp_auth.auth import PDPAuthHelper
from pdp_auth.config import MetadataKeys, NetworkConfig
from pdp_auth.exceptions import (
    PDPAuthError,
    ValidationError,
    InvalidPieceReference,
    MetadataLengthMismatch,
    SignatureError,
    SigningUnavailable,
    SignatureRejected,
    EncodingFailure,
    ConfigurationError,
    UnsupportedNetworkError,
)
from pdp_auth.extra_data import (
    encode_create_data_set_extra_data,
    decode_create_data_set_extra_data,
    encode_add_pieces_extra_data,
    decode_add_pieces_extra_data,
    encode_create_and_add_extra_data,
    decode_create_and_add_extra_data,
    encode_signature_extra_data,
    decode_signature_extra_data,
)
from pdp_auth.signers import (
    AuthSigner,
    BridgeSigner,
    LocalSigner,
    as_auth_signer,
    is_bridge_signer,
)
from pdp_auth.types import (
    AuthSignature,
    AuthorizationRequest,
    EIP712Domain,
    MetadataEntry,
    OperationKind,
    SigningBackend,
)

__all__ = [
    "__version__",
    "PDPAuthHelper",
    # Config
    "MetadataKeys",
    "NetworkConfig",
    # Exceptions
    "PDPAuthError",
    "ValidationError",
    "InvalidPieceReference",
    "MetadataLengthMismatch",
    "SignatureError",
    "SigningUnavailable",
    "SignatureRejected",
    "EncodingFailure",
    "ConfigurationError",
    "UnsupportedNetworkError",
    # extraData
    "encode_create_data_set_extra_data",
    "decode_create_data_set_extra_data",
    "encode_add_pieces_extra_data",
    "decode_add_pieces_extra_data",
    "encode_create_and_add_extra_data",
    "decode_create_and_add_extra_data",
    "encode_signature_extra_data",
    "decode_signature_extra_data",
    # Signers
    "AuthSigner",
    "BridgeSigner",
    "LocalSigner",
    "as_auth_signer",
    "is_bridge_signer",
    # Types
    "AuthSignature",
    "AuthorizationRequest",
    "EIP712Domain",
    "MetadataEntry",
    "OperationKind",
    "SigningBackend",
]
