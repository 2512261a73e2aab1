"""
Token verification: options, outcomes and the multi-certificate verifier.
"""

from .options import ClaimsValidator, VerifyOptions
from .outcomes import (
    CallbackFailure,
    TransportFailure,
    Unauthorized,
    VerificationOutcome,
    Verified,
)
from .verifier import TokenVerifier, decode_unverified, is_valid_format

__all__ = [
    "CallbackFailure",
    "ClaimsValidator",
    "TokenVerifier",
    "TransportFailure",
    "Unauthorized",
    "VerificationOutcome",
    "Verified",
    "VerifyOptions",
    "decode_unverified",
    "is_valid_format",
]
