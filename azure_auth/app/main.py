"""
Azure AD token verification service.

Run as a module so the package imports resolve:

    python -m azure_auth.app.main
"""

from typing import Any, Dict, Mapping, Optional

from fastapi import Depends
from pydantic import BaseModel

from shared.base_service import BaseService
from shared.config import VerifierSettings
from .cache import TTLCache
from .certificates import AzureCertificateSource
from .security import AzureADBearer, ResponseFunc
from .validation import (
    ClaimsValidator,
    TokenVerifier,
    Unauthorized,
    Verified,
    VerifyOptions,
)


class TokenVerificationRequest(BaseModel):
    """Request model for token verification."""
    token: str


class TokenVerificationResponse(BaseModel):
    """Response model for token verification."""
    valid: bool
    credentials: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def accept_verified_claims(claims: Mapping[str, Any]):
    """Default validation callback: any correctly signed token is accepted."""
    return True, None


class AzureAuthService(BaseService):
    """Auth service implementation."""

    def __init__(
        self,
        settings: Optional[VerifierSettings] = None,
        *,
        validate_func: ClaimsValidator = accept_verified_claims,
        certificate_source: Optional[AzureCertificateSource] = None,
        response_func: Optional[ResponseFunc] = None,
    ):
        super().__init__("azure_auth", settings)
        self.cache = TTLCache(default_ttl_ms=self.config.cache_duration_ms)
        self.certificate_source = certificate_source or AzureCertificateSource(
            self.cache,
            authority_url=self.config.authority_url,
            http_timeout=self.config.http_timeout,
        )
        self.verifier = TokenVerifier(self.certificate_source)
        self.options = VerifyOptions.from_settings(self.config, validate_func)
        self.bearer = AzureADBearer(self.verifier, self.options, response_func=response_func)
        self.bearer.install(self.app)

        self._setup_auth_routes()

    def _setup_auth_routes(self):
        """Set up auth-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "azure_auth",
                "message": "Azure AD Token Verification Service",
                "version": "1.0.0"
            }

        @self.app.post("/auth/verify", response_model=TokenVerificationResponse)
        async def verify_token(request: TokenVerificationRequest):
            """Token verification endpoint."""
            token = request.token
            if token.startswith("Bearer "):
                token = token[7:]

            outcome = await self.verifier.verify(token, self.options)

            if isinstance(outcome, Verified):
                return TokenVerificationResponse(valid=True, credentials=outcome.credentials)
            if isinstance(outcome, Unauthorized):
                return TokenVerificationResponse(valid=False, error=outcome.reason)

            # Transport and callback failures are not the token's fault
            raise outcome.to_error()

        @self.app.get("/auth/me")
        async def current_identity(auth: Verified = Depends(self.bearer)):
            """Return the credentials of the authenticated caller."""
            return {"credentials": auth.credentials}

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"signing_certificate_cache_entries": str(len(self.cache))}

    async def _on_shutdown(self) -> None:
        await self.certificate_source.close()


def create_app(settings: Optional[VerifierSettings] = None, **kwargs):
    """Create the FastAPI application."""
    return AzureAuthService(settings, **kwargs).app


if __name__ == "__main__":
    AzureAuthService().run()
