"""
LocalSigner - in-process EIP-712 signing with eth_account
"""

import inspect
import logging
from typing import Any

from eth_account import Account
from eth_utils import to_checksum_address, to_hex

from pdp_auth.exceptions import SignatureRejected, SigningUnavailable
from pdp_auth.signers.base import AuthSigner
from pdp_auth.types import SigningBackend

logger = logging.getLogger(__name__)


class LocalSigner(AuthSigner):
    """Signer backed by a key available to this process.

    Wraps an eth_account ``LocalAccount`` or any object with the same
    ``address`` attribute and ``sign_typed_data(domain_data=, message_types=,
    message_data=)`` method. The account performs canonical encoding and
    hashing itself.
    """

    backend = SigningBackend.LOCAL

    def __init__(self, account: Any) -> None:
        if not callable(getattr(account, "sign_typed_data", None)):
            raise SigningUnavailable(
                f"{type(account).__name__} does not support typed data signing"
            )
        self._account = account
        self._address = to_checksum_address(account_address(account))
        logger.debug(f"LocalSigner initialized: address={self._address}")

    @classmethod
    def from_private_key(cls, private_key: str) -> "LocalSigner":
        """Create signer from private key.

        Args:
            private_key: secp256k1 private key (hex string, 0x prefix optional)

        Returns:
            LocalSigner instance
        """
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        return cls(Account.from_key(private_key))

    def get_address(self) -> str:
        return self._address

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
    ) -> str:
        """Sign EIP-712 typed data with the wrapped account"""
        try:
            signed = self._account.sign_typed_data(
                domain_data=domain,
                message_types=types,
                message_data=message,
            )
            if inspect.isawaitable(signed):
                signed = await signed
        except Exception as e:
            raise SignatureRejected(f"Failed to sign typed data: {e}") from e

        signature = getattr(signed, "signature", signed)
        if isinstance(signature, (bytes, bytearray)):
            return to_hex(bytes(signature))
        if isinstance(signature, str):
            return signature if signature.startswith("0x") else "0x" + signature
        raise SignatureRejected(f"Unexpected signature type: {type(signature).__name__}")


def account_address(account: Any) -> str:
    """Read a signer handle's address from ``address`` or ``get_address()``"""
    address = getattr(account, "address", None)
    if address is None and callable(getattr(account, "get_address", None)):
        address = account.get_address()
    if not isinstance(address, str):
        raise SigningUnavailable(f"{type(account).__name__} exposes no address")
    return address
