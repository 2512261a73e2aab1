"""
Results of a single verification call.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from shared.errors import (
    AuthenticationError,
    AzureAuthException,
    CertificateRetrievalError,
    ValidationCallbackError,
)


INVALID_TOKEN_FORMAT = "Invalid token format"
NOT_A_VALID_TOKEN = "Not a valid AAD token"
INVALID_TOKEN = "Invalid token"
INVALID_CREDENTIALS = "Invalid credentials"


class VerificationOutcome:
    """Base class for verification results."""

    valid = False

    def to_error(self) -> Optional[AzureAuthException]:
        return None


@dataclass(frozen=True)
class Verified(VerificationOutcome):
    """Signature, nonce, audience and host checks all passed."""

    credentials: Dict[str, Any]
    claims: Dict[str, Any]
    token: str

    valid = True


@dataclass(frozen=True)
class Unauthorized(VerificationOutcome):
    """The token was rejected."""

    reason: str
    credentials: Optional[Dict[str, Any]] = None

    def to_error(self) -> AuthenticationError:
        return AuthenticationError(self.reason)


@dataclass(frozen=True)
class TransportFailure(VerificationOutcome):
    """Signing keys could not be obtained from the identity provider."""

    cause: CertificateRetrievalError

    def to_error(self) -> CertificateRetrievalError:
        return self.cause


@dataclass(frozen=True)
class CallbackFailure(VerificationOutcome):
    """The host validation callback raised."""

    cause: ValidationCallbackError

    def to_error(self) -> ValidationCallbackError:
        return self.cause
