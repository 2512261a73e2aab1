"""
Signing certificate retrieval package.

Discovers a tenant's JWKS endpoint through its OpenID configuration
document, downloads the published keys and converts each x5c chain entry
into PEM text usable by the token verifier.

Key points:
- Both lookups are cached under their URL for the caller's TTL.
- Transport failures abort the whole resolution; nothing partial is returned.
- Certificates keep document order, which is the verification try-order.
"""

from .pem import BEGIN_CERTIFICATE, END_CERTIFICATE, convert_certificate_to_pem
from .source import AzureCertificateSource, SigningCertificate

__all__ = [
    "AzureCertificateSource",
    "BEGIN_CERTIFICATE",
    "END_CERTIFICATE",
    "SigningCertificate",
    "convert_certificate_to_pem",
]
