"""
Shared error handling for the Azure AD token verifier.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AzureAuthException(Exception):
    """Base exception for the token verifier."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class AuthenticationError(AzureAuthException):
    """The presented token was rejected."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHENTICATION_ERROR", message, details)


class ConfigurationError(AzureAuthException):
    """Verifier options are incomplete or contradictory."""

    status_code = 500

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class CertificateRetrievalError(AzureAuthException):
    """Discovery document or signing keys could not be fetched."""

    status_code = 502

    def __init__(self, url: str, message: str = "Failed to retrieve signing certificates", details: Optional[Dict[str, Any]] = None):
        self.url = url
        details = dict(details or {})
        details.setdefault("url", url)
        super().__init__("CERTIFICATE_RETRIEVAL_ERROR", message, details)


class ValidationCallbackError(AzureAuthException):
    """The host validation callback raised instead of returning a decision."""

    status_code = 500

    def __init__(self, cause: BaseException, details: Optional[Dict[str, Any]] = None):
        self.cause = cause
        super().__init__("VALIDATION_CALLBACK_ERROR", f"Validation callback failed: {cause}", details)
