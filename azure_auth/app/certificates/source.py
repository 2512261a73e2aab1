"""
Signing certificate discovery for Azure AD tenants.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Mapping, Optional

import httpx

from shared.errors import AuthenticationError, CertificateRetrievalError
from shared.logging import get_logger
from ..cache import TTLCache
from .pem import convert_certificate_to_pem


DEFAULT_AUTHORITY = "https://login.windows.net"
OPENID_CONFIG_PATH = "{authority}/{tenant_id}/v2.0/.well-known/openid-configuration"
TENANT_PLACEHOLDER = "{tenantid}"


@dataclass(frozen=True)
class SigningCertificate:
    """One candidate signing certificate for a tenant."""

    issuer: str
    cert: str


class AzureCertificateSource:
    """Resolves and caches the signing certificates published for a tenant."""

    def __init__(
        self,
        cache: TTLCache,
        *,
        authority_url: str = DEFAULT_AUTHORITY,
        http_client: Optional[httpx.AsyncClient] = None,
        http_timeout: float = 10.0,
    ) -> None:
        self.cache = cache
        self.authority_url = authority_url.rstrip("/")
        self.logger = get_logger("azure_auth.certificates")
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.AsyncClient(timeout=http_timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client if this source created it."""
        if self._owns_client:
            await self._client.aclose()

    def openid_config_url(self, tenant_id: str) -> str:
        return OPENID_CONFIG_PATH.format(authority=self.authority_url, tenant_id=tenant_id)

    async def retrieve_azure_certificates(
        self, claims: Mapping[str, Any], cache_duration: Optional[Any] = None
    ) -> List[SigningCertificate]:
        """Resolve certificates for the tenant named by a decoded token."""
        tenant_id = claims.get("tid")
        if not isinstance(tenant_id, str) or not tenant_id:
            raise AuthenticationError("Not a valid AAD token")
        return await self.resolve_signing_certificates(tenant_id, cache_duration)

    async def resolve_signing_certificates(
        self, tenant_id: str, cache_duration: Optional[Any] = None
    ) -> List[SigningCertificate]:
        """Return the tenant's signing certificates in document order.

        Raises CertificateRetrievalError when either the discovery document
        or the key set cannot be fetched or understood.
        """
        openid_config = await self._request_openid_config(tenant_id, cache_duration)

        jwks_uri = openid_config.get("jwks_uri") if isinstance(openid_config, dict) else None
        if not isinstance(jwks_uri, str) or not jwks_uri:
            raise CertificateRetrievalError(
                self.openid_config_url(tenant_id),
                "OpenID configuration missing 'jwks_uri'",
            )

        return await self._request_signing_certificates(tenant_id, jwks_uri, cache_duration)

    async def _request_openid_config(self, tenant_id: str, cache_duration: Optional[Any]) -> Dict[str, Any]:
        url = self.openid_config_url(tenant_id)

        cached = self._safe_get(url)
        if cached is not None:
            self.logger.debug("OpenID configuration cache hit", tenant_id=tenant_id)
            return cached

        openid_config = await self._fetch_json(url)
        self._safe_put(url, openid_config, cache_duration)
        self.logger.info("OpenID configuration fetched", tenant_id=tenant_id)
        return openid_config

    async def _request_signing_certificates(
        self, tenant_id: str, jwks_uri: str, cache_duration: Optional[Any]
    ) -> List[SigningCertificate]:
        cache_key = (tenant_id, jwks_uri)
        cached = self._safe_get(cache_key)
        if cached is not None:
            self.logger.debug("Signing certificates cache hit", tenant_id=tenant_id, jwks_uri=jwks_uri)
            return cached

        jwks = await self._fetch_json(jwks_uri)
        certificates = self._extract_certificates(tenant_id, jwks_uri, jwks)

        self._safe_put(cache_key, certificates, cache_duration)
        self.logger.info(
            "Signing certificates fetched",
            tenant_id=tenant_id,
            jwks_uri=jwks_uri,
            certificates_count=len(certificates),
        )
        return certificates

    def _extract_certificates(self, tenant_id: str, jwks_uri: str, jwks: Any) -> List[SigningCertificate]:
        """Flatten every key's x5c chain into SigningCertificate entries."""
        keys = jwks.get("keys") if isinstance(jwks, dict) else None
        if not isinstance(keys, list):
            raise CertificateRetrievalError(jwks_uri, "JWKS response missing 'keys' array")

        certificates: List[SigningCertificate] = []
        try:
            for public_key in keys:
                issuer = public_key["issuer"].replace(TENANT_PLACEHOLDER, tenant_id, 1)
                for certificate in public_key["x5c"]:
                    certificates.append(
                        SigningCertificate(issuer=issuer, cert=convert_certificate_to_pem(certificate))
                    )
        except (KeyError, TypeError, AttributeError) as exc:
            raise CertificateRetrievalError(
                jwks_uri, "Malformed key in JWKS response", details={"error": str(exc)}
            ) from exc

        return certificates

    async def _fetch_json(self, url: str) -> Any:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self.logger.error("Signing key discovery request failed", url=url, error=str(exc))
            raise CertificateRetrievalError(url, details={"error": str(exc)}) from exc
        except ValueError as exc:
            self.logger.error("Signing key discovery returned invalid JSON", url=url, error=str(exc))
            raise CertificateRetrievalError(url, "Invalid JSON in response", details={"error": str(exc)}) from exc

    def _safe_get(self, key: Hashable) -> Optional[Any]:
        """Read from the cache, treating any cache failure as a miss."""
        try:
            return self.cache.get(key)
        except Exception as exc:
            self.logger.error("Cache fetch error", key=key, error=str(exc))
            return None

    def _safe_put(self, key: Hashable, value: Any, ttl: Optional[Any]) -> None:
        try:
            self.cache.put(key, value, ttl)
        except Exception as exc:
            self.logger.error("Cache store error", key=key, error=str(exc))
