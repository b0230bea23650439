"""
Authorization signer base interface
"""

from abc import ABC, abstractmethod
from typing import Any

from pdp_auth.types import SigningBackend


class AuthSigner(ABC):
    """
    Abstract base class for signers that authorize PDP operations.

    Exactly two implementations exist: LocalSigner signs in-process with a key
    it holds, BridgeSigner forwards typed data to an external wallet.
    """

    backend: SigningBackend

    @abstractmethod
    def get_address(self) -> str:
        """Get the signer's checksummed account address"""
        pass

    @abstractmethod
    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
    ) -> str:
        """
        Sign typed data (EIP-712).

        Args:
            domain: EIP-712 domain
            types: Type definitions without EIP712Domain, primary type first
            message: Message to sign, canonical values

        Returns:
            Signature string (0x-prefixed hex, 65 bytes)

        Raises:
            SignatureRejected: If the backend declines to sign
            SigningUnavailable: If the backend cannot be reached
        """
        pass
