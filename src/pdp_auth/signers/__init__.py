"""
Authorization signers
"""

from pdp_auth.signers.base import AuthSigner
from pdp_auth.signers.bridge_signer import BridgeSigner
from pdp_auth.signers.local_signer import LocalSigner
from pdp_auth.signers.utils import (
    as_auth_signer,
    detect_signing_backend,
    is_bridge_signer,
    unwrap_signer,
)

__all__ = [
    "AuthSigner",
    "LocalSigner",
    "BridgeSigner",
    "as_auth_signer",
    "detect_signing_backend",
    "is_bridge_signer",
    "unwrap_signer",
]
