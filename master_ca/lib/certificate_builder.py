"""Certificate builder for X.509 certificate and CRL construction."""

from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey


class CertificateBuilder:
    """Builds the CA certificate, certificates signed by the CA, and the CA's CRL."""

    @staticmethod
    def build_root_ca(
        csr: x509.CertificateSigningRequest,
        private_key: RSAPrivateKey,
        serial_number: int,
        validity: timedelta,
    ) -> x509.Certificate:
        """Build self-signed CA certificate from the CA's own request.

        Args:
            csr: Certificate signing request generated from the CA key pair
            private_key: CA private key, used to sign its own certificate
            serial_number: Serial number allocated for the certificate
            validity: Certificate validity period

        Returns:
            Self-signed X.509 certificate with CA extensions

        Raises:
            ValueError: If CSR signature is invalid
        """
        if not csr.is_signature_valid:
            raise ValueError("CSR signature validation failed")

        not_before = datetime.now(timezone.utc)
        not_after = not_before + validity

        builder = (
            x509.CertificateBuilder()
            .subject_name(csr.subject)
            .issuer_name(csr.subject)
            .public_key(private_key.public_key())
            .serial_number(serial_number)
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=True, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=False,
                    content_commitment=False,
                    key_encipherment=False,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=True,
                    crl_sign=True,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
        )

        return builder.sign(private_key, hashes.SHA256())

    @staticmethod
    def sign_certificate_request(
        csr: x509.CertificateSigningRequest,
        issuer_name: x509.Name,
        serial_number: int,
        issuer_key: RSAPrivateKey,
        validity: timedelta,
    ) -> x509.Certificate:
        """Sign a certificate request on behalf of the CA.

        The CA never sees the subject's private key: the subject and public
        key come from the CSR.

        Args:
            csr: Certificate signing request from the subject
            issuer_name: X.500 name of the CA
            serial_number: Serial number allocated for the certificate
            issuer_key: CA private key for signing
            validity: Certificate validity period

        Returns:
            X.509 end-entity certificate signed by the CA

        Raises:
            ValueError: If CSR signature is invalid
        """
        if not csr.is_signature_valid:
            raise ValueError("CSR signature validation failed")

        not_before = datetime.now(timezone.utc)
        not_after = not_before + validity

        builder = (
            x509.CertificateBuilder()
            .subject_name(csr.subject)
            .issuer_name(issuer_name)
            .public_key(csr.public_key())
            .serial_number(serial_number)
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=False, path_length=None),
                critical=True,
            )
        )

        return builder.sign(issuer_key, hashes.SHA256())

    @staticmethod
    def build_crl(
        issuer_name: x509.Name,
        issuer_key: RSAPrivateKey,
        validity: timedelta,
    ) -> x509.CertificateRevocationList:
        """Build an empty CRL issued and signed by the CA.

        Args:
            issuer_name: X.500 name of the CA
            issuer_key: CA private key for signing
            validity: Time until the next CRL update is due

        Returns:
            Signed X.509 CRL with no revoked certificates
        """
        last_update = datetime.now(timezone.utc)

        builder = (
            x509.CertificateRevocationListBuilder()
            .issuer_name(issuer_name)
            .last_update(last_update)
            .next_update(last_update + validity)
        )

        return builder.sign(issuer_key, hashes.SHA256())
