"""
Signer classification for opaque signer handles.

Callers that already know how they sign construct LocalSigner or BridgeSigner
directly. as_auth_signer is the boundary adapter for handles whose kind is not
known up front; it classifies once and wraps.
"""

import logging
from typing import Any

from eth_account.signers.local import LocalAccount

from pdp_auth.exceptions import SigningUnavailable
from pdp_auth.signers.base import AuthSigner
from pdp_auth.signers.bridge_signer import BridgeSigner
from pdp_auth.signers.local_signer import LocalSigner, account_address
from pdp_auth.types import SigningBackend

logger = logging.getLogger(__name__)

# Attribute set by wallet wrappers that embed an EIP-1193 provider
EMBEDDED_BRIDGE_MARKER = "_eip1193_provider"
NONCE_MANAGER_CLASS_NAME = "NonceManager"


def unwrap_signer(handle: Any) -> Any:
    """Strip nonce-managing decorators to reach the signer that actually signs"""
    seen = set()
    while (
        type(handle).__name__ == NONCE_MANAGER_CLASS_NAME
        and getattr(handle, "signer", None) is not None
        and id(handle) not in seen
    ):
        seen.add(id(handle))
        handle = handle.signer
    return handle


def _is_direct_rpc_provider(provider: Any) -> bool:
    """HTTP and WebSocket JSON-RPC providers talk to a node, not to a wallet"""
    from web3 import AsyncHTTPProvider, HTTPProvider, LegacyWebSocketProvider, WebSocketProvider

    return isinstance(
        provider, (HTTPProvider, AsyncHTTPProvider, WebSocketProvider, LegacyWebSocketProvider)
    )


def _has_private_key(handle: Any) -> bool:
    if isinstance(handle, (LocalAccount, LocalSigner)):
        return True
    return getattr(handle, "_private_key", None) is not None


def _probe_bridge(handle: Any) -> bool:
    signer = unwrap_signer(handle)

    if _has_private_key(signer):
        return False

    provider = getattr(signer, "provider", None)
    if provider is None:
        return False

    if getattr(provider, EMBEDDED_BRIDGE_MARKER, None) is not None:
        return True

    if _is_direct_rpc_provider(provider):
        return False

    return callable(getattr(provider, "request", None))


def is_bridge_signer(handle: Any) -> bool:
    """Best-effort check whether handle signs through an external wallet.

    Total: never raises. Any probing failure is treated as a local signer.
    """
    if isinstance(handle, AuthSigner):
        return handle.backend == SigningBackend.BRIDGE
    try:
        return _probe_bridge(handle)
    except Exception as e:
        logger.debug(f"Signer probe failed for {type(handle).__name__}, assuming local: {e}")
        return False


def detect_signing_backend(handle: Any) -> SigningBackend:
    """Classify handle as LOCAL or BRIDGE (defaults to LOCAL)"""
    return SigningBackend.BRIDGE if is_bridge_signer(handle) else SigningBackend.LOCAL


def _bridge_provider(provider: Any) -> Any:
    embedded = getattr(provider, EMBEDDED_BRIDGE_MARKER, None)
    return embedded if embedded is not None else provider


def as_auth_signer(handle: Any) -> AuthSigner:
    """Wrap an opaque signer handle in LocalSigner or BridgeSigner.

    AuthSigner instances are returned unchanged.

    Raises:
        SigningUnavailable: If handle cannot sign on the selected backend
    """
    if handle is None:
        raise SigningUnavailable("No signer provided")
    if isinstance(handle, AuthSigner):
        return handle

    backend = detect_signing_backend(handle)
    signer = unwrap_signer(handle)
    logger.debug(f"Selected {backend.value} signing for {type(signer).__name__}")

    if backend == SigningBackend.BRIDGE:
        provider = _bridge_provider(getattr(signer, "provider", None))
        return BridgeSigner(provider, account_address(signer))
    return LocalSigner(signer)
