"""
EIP-712 authorization helper for PDP operations
"""

import logging
from typing import Any, Iterable, Optional, Sequence

from eth_utils import is_address, to_checksum_address

from pdp_auth.config import (
    WARM_STORAGE_DOMAIN_NAME,
    WARM_STORAGE_DOMAIN_VERSION,
    MetadataKeys,
    NetworkConfig,
)
from pdp_auth.exceptions import ConfigurationError, SignatureRejected
from pdp_auth.operations import (
    build_add_pieces,
    build_create_data_set,
    build_delete_data_set,
    build_schedule_piece_removals,
)
from pdp_auth.piece import PieceResolver, resolve_piece_reference
from pdp_auth.signers import AuthSigner, as_auth_signer
from pdp_auth.types import (
    AuthorizationRequest,
    AuthSignature,
    EIP712Domain,
    MetadataEntry,
    SigningBackend,
)
from pdp_auth.utils.eip712 import hash_typed_data, recover_signer, split_signature

logger = logging.getLogger(__name__)


class PDPAuthHelper:
    """
    Creates EIP-712 signatures authorizing a storage provider to act on a
    client's data sets in the FilecoinWarmStorageService contract.

    The domain is fixed at construction. Every sign_* call builds a fresh
    typed-data value, has the signer sign it, recomputes the digest locally
    and checks that the signature recovers to the signer address.

    Example:
        >>> signer = LocalSigner.from_private_key(private_key)
        >>> auth = PDPAuthHelper(warm_storage_address, signer, chain_id=314159)
        >>> sig = await auth.sign_delete_data_set(12345)
    """

    WITH_CDN_METADATA = MetadataEntry(key=MetadataKeys.WITH_CDN, value="")

    def __init__(
        self,
        verifying_contract: str,
        signer: Any,
        chain_id: int,
        *,
        piece_resolver: Optional[PieceResolver] = None,
        name: str = WARM_STORAGE_DOMAIN_NAME,
        version: str = WARM_STORAGE_DOMAIN_VERSION,
    ) -> None:
        """
        Args:
            verifying_contract: WarmStorage contract address
            signer: AuthSigner, or an opaque signer handle classified once here
            chain_id: Chain ID of the network the contract lives on
            piece_resolver: Maps piece identifiers to PieceCID bytes
            name: EIP-712 domain name
            version: EIP-712 domain version

        Raises:
            ConfigurationError: If verifying_contract or chain_id is invalid
            SigningUnavailable: If signer cannot be used for signing
        """
        if not isinstance(verifying_contract, str) or not is_address(verifying_contract):
            raise ConfigurationError(f"Invalid verifying contract address: {verifying_contract}")
        if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0:
            raise ConfigurationError(f"Invalid chain ID: {chain_id}")

        self._domain = EIP712Domain(
            name=name,
            version=version,
            chainId=chain_id,
            verifyingContract=to_checksum_address(verifying_contract),
        )
        self._signer: AuthSigner = as_auth_signer(signer)
        self._piece_resolver = piece_resolver or resolve_piece_reference
        logger.info(
            f"PDPAuthHelper initialized: contract={self._domain.verifying_contract}, "
            f"chain_id={chain_id}, signer={self._signer.get_address()}, "
            f"backend={self._signer.backend.value}"
        )

    @classmethod
    def from_network(cls, network: str, signer: Any, **kwargs: Any) -> "PDPAuthHelper":
        """Create helper for a known network (e.g. "filecoin:calibration")

        Raises:
            UnsupportedNetworkError: If the network or its WarmStorage deployment is unknown
        """
        return cls(
            NetworkConfig.get_warm_storage_address(network),
            signer,
            NetworkConfig.get_chain_id(network),
            **kwargs,
        )

    @property
    def domain(self) -> EIP712Domain:
        return self._domain

    @property
    def backend(self) -> SigningBackend:
        return self._signer.backend

    def get_signer_address(self) -> str:
        """Get the address of the signer"""
        return self._signer.get_address()

    async def sign_create_data_set(
        self,
        client_data_set_id: int,
        payee: str,
        metadata: Optional[Iterable[Any]] = None,
    ) -> AuthSignature:
        """
        Create signature for data set creation.

        Args:
            client_data_set_id: Unique data set ID chosen by the client
            payee: Service provider's payment address
            metadata: Data set metadata entries, order preserved

        Returns:
            AuthSignature over CreateDataSet
        """
        request = build_create_data_set(client_data_set_id, payee, metadata)
        return await self._sign(request)

    async def sign_add_pieces(
        self,
        client_data_set_id: int,
        nonce: int,
        pieces: Sequence[Any],
        metadata: Optional[Sequence[Optional[Iterable[Any]]]] = None,
    ) -> AuthSignature:
        """
        Create signature for adding pieces to a data set.

        Args:
            client_data_set_id: Client's data set ID
            nonce: First piece ID or random nonce, signed as ``firstAdded``
            pieces: PieceCID strings, hex strings or raw PieceCID bytes
            metadata: One metadata list per piece; None or [] means empty lists

        Raises:
            MetadataLengthMismatch: metadata given with a different length than pieces
            InvalidPieceReference: a piece is not a valid PieceCID
        """
        request = build_add_pieces(
            client_data_set_id,
            nonce,
            pieces,
            metadata,
            resolver=self._piece_resolver,
        )
        return await self._sign(request)

    async def sign_schedule_piece_removals(
        self, client_data_set_id: int, piece_ids: Iterable[int]
    ) -> AuthSignature:
        """Create signature for scheduling piece removals"""
        request = build_schedule_piece_removals(client_data_set_id, piece_ids)
        return await self._sign(request)

    async def sign_delete_data_set(self, client_data_set_id: int) -> AuthSignature:
        """Create signature for data set deletion. Deletion is irreversible on-chain."""
        request = build_delete_data_set(client_data_set_id)
        return await self._sign(request)

    def compute_digest(self, request: AuthorizationRequest) -> bytes:
        """EIP-712 digest for request under this helper's domain"""
        return hash_typed_data(
            self._domain.to_typed_data(), request.types, request.primary_type, request.value
        )

    async def _sign(self, request: AuthorizationRequest) -> AuthSignature:
        domain = self._domain.to_typed_data()
        digest = self.compute_digest(request)

        raw_signature = await self._signer.sign_typed_data(domain, request.types, request.value)
        signature, v, r, s = split_signature(raw_signature)

        expected = self._signer.get_address()
        recovered = recover_signer(digest, signature)
        if recovered.lower() != expected.lower():
            raise SignatureRejected(
                f"{request.primary_type} signature recovers to {recovered}, expected {expected}"
            )

        logger.info(
            f"Signed {request.primary_type} via {self._signer.backend.value} signer {expected}"
        )
        return AuthSignature(
            signature="0x" + signature.hex(),
            v=v,
            r="0x" + r.hex(),
            s="0x" + s.hex(),
            signedData="0x" + digest.hex(),
        )
