"""
Token verification against a tenant's published signing certificates.
"""

import inspect
from typing import Any, Dict, Optional, Tuple

from jose import jwt
from jose.exceptions import JOSEError

from shared.errors import CertificateRetrievalError, ValidationCallbackError
from shared.logging import get_logger, set_tenant_context
from ..certificates import AzureCertificateSource, SigningCertificate
from .options import VerifyOptions
from .outcomes import (
    INVALID_CREDENTIALS,
    INVALID_TOKEN,
    INVALID_TOKEN_FORMAT,
    NOT_A_VALID_TOKEN,
    CallbackFailure,
    TransportFailure,
    Unauthorized,
    VerificationOutcome,
    Verified,
)


def is_valid_format(token: Any) -> bool:
    """Cheap structural check: three non-empty dot-separated segments."""
    if not isinstance(token, str):
        return False
    parts = token.split(".")
    return len(parts) == 3 and all(parts)


def decode_unverified(token: str) -> Optional[Dict[str, Any]]:
    """Decode the payload without checking the signature.

    The result is only good for routing; never authorize on it.
    """
    if not is_valid_format(token):
        return None
    try:
        return jwt.get_unverified_claims(token)
    except JOSEError:
        return None


class TokenVerifier:
    """Verifies Azure AD tokens by trying each candidate signing certificate."""

    def __init__(self, certificate_source: AzureCertificateSource):
        self.certificate_source = certificate_source
        self.logger = get_logger("azure_auth.verifier")

    async def verify(self, token: str, options: VerifyOptions) -> VerificationOutcome:
        """Verify ``token`` and return a single outcome; never raises for bad tokens."""
        decoded = decode_unverified(token)
        if decoded is None:
            self.logger.warning("Token rejected", reason=INVALID_TOKEN_FORMAT)
            return Unauthorized(INVALID_TOKEN_FORMAT)

        tenant_id = decoded.get("tid")
        if not isinstance(tenant_id, str) or not tenant_id:
            self.logger.warning("Token rejected", reason=NOT_A_VALID_TOKEN)
            return Unauthorized(NOT_A_VALID_TOKEN)
        set_tenant_context(tenant_id)

        try:
            certificates = await self.certificate_source.resolve_signing_certificates(
                tenant_id, options.cache_duration
            )
        except CertificateRetrievalError as exc:
            self.logger.error("Signing certificates unavailable", tenant_id=tenant_id, error=exc.message)
            return TransportFailure(exc)

        keys_tried = 0
        for certificate in certificates:
            claims = self._try_certificate(token, certificate, options)
            if claims is None:
                keys_tried += 1
                continue

            if options.check_nonce and options.nonce != claims.get("nonce"):
                self.logger.warning("Token rejected", tenant_id=tenant_id, reason="nonce mismatch")
                return Unauthorized(INVALID_TOKEN)

            return await self._run_validate_func(token, claims, options, tenant_id)

        self.logger.warning(
            "Token rejected",
            tenant_id=tenant_id,
            reason="no signing certificate matched",
            keys_tried=keys_tried,
        )
        return Unauthorized(INVALID_TOKEN)

    def _try_certificate(
        self, token: str, certificate: SigningCertificate, options: VerifyOptions
    ) -> Optional[Dict[str, Any]]:
        """Return verified claims, or None when this certificate does not fit."""
        try:
            return jwt.decode(
                token,
                certificate.cert,
                algorithms=options.algorithms,
                audience=options.audience,
                issuer=options.issuer or certificate.issuer,
                options={
                    "verify_at_hash": False,
                    "leeway": options.verify_options.get("leeway", 0),
                },
            )
        except JOSEError as exc:
            self.logger.debug("Certificate did not verify token", issuer=certificate.issuer, error=str(exc))
            return None

    async def _run_validate_func(
        self, token: str, claims: Dict[str, Any], options: VerifyOptions, tenant_id: str
    ) -> VerificationOutcome:
        try:
            result = options.validate_func(claims)
            if inspect.isawaitable(result):
                result = await result
            valid, credentials = _unpack_validation_result(result)
        except Exception as exc:
            self.logger.error("Validation callback failed", tenant_id=tenant_id, error=str(exc))
            return CallbackFailure(ValidationCallbackError(exc))

        if not valid:
            self.logger.warning("Token rejected", tenant_id=tenant_id, reason="validation callback declined")
            return Unauthorized(INVALID_CREDENTIALS, credentials or claims)

        self.logger.info("Token verified", tenant_id=tenant_id, sub=claims.get("sub"))
        return Verified(credentials=credentials or claims, claims=claims, token=token)


def _unpack_validation_result(result: Any) -> Tuple[bool, Optional[Dict[str, Any]]]:
    if isinstance(result, tuple):
        valid, credentials = result
        return bool(valid), credentials
    return bool(result), None

