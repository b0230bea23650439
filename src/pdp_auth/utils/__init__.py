"""
Utility modules
"""

from pdp_auth.utils.eip712 import (
    build_typed_data,
    domain_separator,
    hash_typed_data,
    recover_signer,
    split_signature,
    to_display_message,
    to_display_value,
)

__all__ = [
    "build_typed_data",
    "domain_separator",
    "hash_typed_data",
    "recover_signer",
    "split_signature",
    "to_display_message",
    "to_display_value",
]
