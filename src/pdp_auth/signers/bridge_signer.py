"""
BridgeSigner - EIP-712 signing through an external wallet (eth_signTypedData_v4)
"""

import inspect
import json
import logging
from typing import Any

from eth_utils import to_checksum_address

from pdp_auth.abi import EIP712_DOMAIN_TYPE, find_primary_type
from pdp_auth.exceptions import PDPAuthError, SignatureRejected, SigningUnavailable
from pdp_auth.signers.base import AuthSigner
from pdp_auth.types import SigningBackend, TypedDataPayload
from pdp_auth.utils.eip712 import to_display_message

logger = logging.getLogger(__name__)

SIGN_TYPED_DATA_V4 = "eth_signTypedData_v4"
# EIP-1193 provider error: user rejected the request
USER_REJECTED_REQUEST = 4001


class BridgeSigner(AuthSigner):
    """Signer whose key lives in an external agent reached by JSON-RPC.

    The provider must expose ``request(method, params)`` (EIP-1193 style) or
    ``make_request(method, params)`` (web3.py provider style). Either may be
    sync or async and may return the raw result or a JSON-RPC response dict.

    Values are sent in display form (decimal strings, hex bytes) so the wallet
    can render them. Signing suspends until the user acts; there is no timeout.
    """

    backend = SigningBackend.BRIDGE

    def __init__(self, provider: Any, address: str) -> None:
        if provider is None:
            raise SigningUnavailable("No provider available for bridge signing")
        self._provider = provider
        self._address = to_checksum_address(address)
        logger.debug(f"BridgeSigner initialized: address={self._address}")

    def get_address(self) -> str:
        return self._address

    @staticmethod
    def build_payload(
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
    ) -> TypedDataPayload:
        """Assemble the eth_signTypedData_v4 document with display-friendly values"""
        primary_type = find_primary_type(types)
        return TypedDataPayload(
            types={"EIP712Domain": EIP712_DOMAIN_TYPE, **types},
            primaryType=primary_type,
            domain=domain,
            message=to_display_message(types, primary_type, message),
        )

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
    ) -> str:
        """Ask the wallet to sign; suspends until the user approves or rejects"""
        payload = self.build_payload(domain, types, message)
        params = [self._address, json.dumps(payload.to_json_dict())]
        logger.info(f"Requesting {payload.primary_type} signature from wallet {self._address}")

        result = await self._request(SIGN_TYPED_DATA_V4, params)
        if isinstance(result, (bytes, bytearray)):
            return "0x" + bytes(result).hex()
        if isinstance(result, str) and result:
            return result if result.startswith("0x") else "0x" + result
        raise SignatureRejected(f"Wallet returned no signature: {result!r}")

    async def _request(self, method: str, params: list[Any]) -> Any:
        request = getattr(self._provider, "request", None)
        if not callable(request):
            request = getattr(self._provider, "make_request", None)
        if not callable(request):
            raise SigningUnavailable(
                f"{type(self._provider).__name__} exposes no request method"
            )

        try:
            response = request(method, params)
            if inspect.isawaitable(response):
                response = await response
        except PDPAuthError:
            raise
        except Exception as e:
            code = getattr(e, "code", None)
            raise SignatureRejected(f"Wallet request {method} failed: {e}", code=code) from e

        if isinstance(response, dict) and ("result" in response or "error" in response):
            error = response.get("error")
            if error:
                if isinstance(error, dict):
                    code = error.get("code")
                    if code == USER_REJECTED_REQUEST:
                        raise SignatureRejected("User rejected the signature request", code=code)
                    raise SignatureRejected(
                        error.get("message", "Wallet returned an error"), code=code
                    )
                raise SignatureRejected(str(error))
            return response.get("result")
        return response
