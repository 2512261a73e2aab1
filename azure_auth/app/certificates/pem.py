"""
PEM normalization for raw x5c certificate entries.
"""

BEGIN_CERTIFICATE = "-----BEGIN CERTIFICATE-----"
END_CERTIFICATE = "-----END CERTIFICATE-----"
PEM_LINE_LENGTH = 64


def convert_certificate_to_pem(cert: str) -> str:
    """Wrap a base64 DER certificate as PEM text that OpenSSL will load.

    Only the first newline, header and footer found in ``cert`` are removed,
    so the input must be a single unwrapped certificate.
    """
    body = cert.replace("\n", "", 1)
    body = body.replace(BEGIN_CERTIFICATE, "", 1)
    body = body.replace(END_CERTIFICATE, "", 1)

    lines = [BEGIN_CERTIFICATE]
    for start in range(0, len(body), PEM_LINE_LENGTH):
        lines.append(body[start:start + PEM_LINE_LENGTH])
    return "\n".join(lines) + "\n" + END_CERTIFICATE + "\n"
