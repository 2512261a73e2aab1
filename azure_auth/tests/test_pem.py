"""
Unit tests for certificate PEM normalization.
"""

import string

from cryptography import x509

from azure_auth.app.certificates import BEGIN_CERTIFICATE, END_CERTIFICATE, convert_certificate_to_pem
from shared.test_helpers import create_signing_material


BASE64_130 = (string.ascii_letters + string.digits + "+/") * 2 + "AB"


class TestConvertCertificateToPem:
    """Test cases for convert_certificate_to_pem."""

    def test_wraps_at_64_columns(self):
        """A 130-char body becomes 64/64/2 lines between the markers."""
        assert len(BASE64_130) == 130

        pem = convert_certificate_to_pem(BASE64_130)
        lines = pem.split("\n")

        assert pem.endswith("\n")
        assert lines[0] == BEGIN_CERTIFICATE
        assert [len(line) for line in lines[1:4]] == [64, 64, 2]
        assert lines[4] == END_CERTIFICATE
        assert lines[5] == ""

    def test_round_trip_recovers_body(self):
        pem = convert_certificate_to_pem(BASE64_130)

        body = pem.replace(BEGIN_CERTIFICATE, "").replace(END_CERTIFICATE, "").replace("\n", "")
        assert body == BASE64_130

    def test_existing_markers_are_replaced(self):
        """Header, footer and a single newline are stripped before rewrapping."""
        wrapped = f"{BEGIN_CERTIFICATE}\n{BASE64_130}{END_CERTIFICATE}"

        assert convert_certificate_to_pem(wrapped) == convert_certificate_to_pem(BASE64_130)

    def test_only_first_newline_is_removed(self):
        """Multi-line input keeps its remaining newlines."""
        multi_line = BASE64_130[:10] + "\n" + BASE64_130[10:20] + "\n" + BASE64_130[20:]

        pem = convert_certificate_to_pem(multi_line)

        assert pem.count("\n") == convert_certificate_to_pem(BASE64_130).count("\n") + 1

    def test_short_body_single_line(self):
        assert convert_certificate_to_pem("QUJD") == f"{BEGIN_CERTIFICATE}\nQUJD\n{END_CERTIFICATE}\n"

    def test_empty_body(self):
        assert convert_certificate_to_pem("") == f"{BEGIN_CERTIFICATE}\n{END_CERTIFICATE}\n"

    def test_output_loads_as_x509(self):
        """The converted x5c entry is a loadable certificate."""
        material = create_signing_material()

        pem = convert_certificate_to_pem(material.x5c)
        certificate = x509.load_pem_x509_certificate(pem.encode())

        assert certificate.public_key() is not None
        assert pem == material.cert_pem
