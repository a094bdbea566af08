"""Tests for certificate builder module."""

from datetime import timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from master_ca.lib.cert_utils import generate_certificate_request, generate_x500_name
from master_ca.lib.certificate_builder import CertificateBuilder

VALIDITY = timedelta(days=30)


@pytest.fixture
def ca_cert(ca_key: RSAPrivateKey) -> x509.Certificate:
    """Build self-signed CA certificate with serial 1."""
    return CertificateBuilder.build_root_ca(
        csr=generate_certificate_request(ca_key, generate_x500_name("Test CA")),
        private_key=ca_key,
        serial_number=1,
        validity=VALIDITY,
    )


class TestBuildRootCA:
    """Tests for CertificateBuilder.build_root_ca."""

    def test_self_signed(self, ca_cert: x509.Certificate) -> None:
        """Issuer equals subject and the signature verifies with its own key."""
        assert ca_cert.issuer == ca_cert.subject
        ca_cert.verify_directly_issued_by(ca_cert)

    def test_uses_allocated_serial(self, ca_cert: x509.Certificate) -> None:
        """Serial number is the one passed in."""
        assert ca_cert.serial_number == 1

    def test_ca_extensions(self, ca_cert: x509.Certificate) -> None:
        """CA certificate can sign certificates and CRLs."""
        bc = ca_cert.extensions.get_extension_for_class(x509.BasicConstraints).value
        ku = ca_cert.extensions.get_extension_for_class(x509.KeyUsage).value
        assert bc.ca is True
        assert ku.key_cert_sign is True
        assert ku.crl_sign is True

    def test_validity_period(self, ca_cert: x509.Certificate) -> None:
        """Validity spans the requested period."""
        assert ca_cert.not_valid_after_utc - ca_cert.not_valid_before_utc == VALIDITY


class TestSignCertificateRequest:
    """Tests for CertificateBuilder.sign_certificate_request."""

    def test_signed_by_ca(
        self,
        agent_csr: x509.CertificateSigningRequest,
        ca_cert: x509.Certificate,
        ca_key: RSAPrivateKey,
    ) -> None:
        """Certificate chains to the CA and keeps the CSR's subject."""
        cert = CertificateBuilder.sign_certificate_request(
            csr=agent_csr,
            issuer_name=generate_x500_name("Test CA"),
            serial_number=7,
            issuer_key=ca_key,
            validity=VALIDITY,
        )

        cert.verify_directly_issued_by(ca_cert)
        assert cert.subject == agent_csr.subject
        assert cert.serial_number == 7

    def test_not_a_ca(
        self, agent_csr: x509.CertificateSigningRequest, ca_key: RSAPrivateKey
    ) -> None:
        """Issued certificates are end-entity certificates."""
        cert = CertificateBuilder.sign_certificate_request(
            csr=agent_csr,
            issuer_name=generate_x500_name("Test CA"),
            serial_number=2,
            issuer_key=ca_key,
            validity=VALIDITY,
        )

        bc = cert.extensions.get_extension_for_class(x509.BasicConstraints).value
        assert bc.ca is False


class TestBuildCRL:
    """Tests for CertificateBuilder.build_crl."""

    def test_empty_and_signed_by_ca(
        self, ca_cert: x509.Certificate, ca_key: RSAPrivateKey
    ) -> None:
        """CRL is issued by the CA, verifies with its key, and revokes nothing."""
        crl = CertificateBuilder.build_crl(
            issuer_name=ca_cert.subject,
            issuer_key=ca_key,
            validity=VALIDITY,
        )

        assert crl.issuer == ca_cert.subject
        assert crl.is_signature_valid(ca_key.public_key())
        assert len(crl) == 0
