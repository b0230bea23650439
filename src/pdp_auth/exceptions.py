"""
pdp_auth custom exception hierarchy
"""


class PDPAuthError(Exception):
    """pdp_auth base exception"""

    pass


class ValidationError(PDPAuthError):
    """Operation input failed validation before signing"""

    pass


class InvalidPieceReference(ValidationError):
    """Piece identifier could not be resolved to PieceCID bytes"""

    def __init__(self, reference: object, message: str | None = None):
        self.reference = reference
        super().__init__(message or f"Invalid PieceCID: {reference!r}")


class MetadataLengthMismatch(ValidationError):
    """Per-piece metadata length does not match the number of pieces"""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Metadata length ({actual}) must match pieces length ({expected})")


class SignatureError(PDPAuthError):
    """Signature-related error"""

    pass


class SigningUnavailable(SignatureError):
    """No usable signer or provider for the selected backend"""

    pass


class SignatureRejected(SignatureError):
    """Signing backend declined or returned an unusable signature"""

    def __init__(self, message: str, code: int | None = None):
        self.code = code
        super().__init__(message)


class EncodingFailure(PDPAuthError):
    """Structurally invalid value reached the typed-data or ABI encoder"""

    pass


class ConfigurationError(PDPAuthError):
    """Configuration-related error"""

    pass


class UnsupportedNetworkError(ConfigurationError):
    """Unsupported network"""

    pass
