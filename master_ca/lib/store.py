"""Access to certificate requests, signed certificates, and the CRL on disk."""

from datetime import timedelta
from pathlib import Path

from .cert_utils import (
    deserialize_csr,
    generate_x500_name,
    load_private_key,
    serialize_certificate,
    serialize_csr,
    write_pem,
)
from .certificate_builder import CertificateBuilder
from .config import CA_CERT_NAME, CaSettings, ConfigurationError, to_path
from .logging_config import LOGGER
from .models import SignedCertResult
from .paths import path_to_cert, path_to_cert_request
from .serial import next_serial_number


def _require_subject(subject: object) -> None:
    if not isinstance(subject, str) or not subject:
        raise ConfigurationError("subject must be a non-empty string")


def _read_if_exists(path: Path) -> str | None:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def save_certificate_request(subject: str, csr_pem: bytes, csrdir: Path) -> Path:
    """Write the subject's certificate request under ``csrdir``.

    An existing request for the subject is replaced.

    Raises:
        ValueError: If ``csr_pem`` is not a PEM certificate request
    """
    _require_subject(subject)
    csrdir = to_path("csrdir", csrdir)
    csr = deserialize_csr(csr_pem)
    path = path_to_cert_request(csrdir, subject)
    path.parent.mkdir(parents=True, exist_ok=True)
    return write_pem(serialize_csr(csr), path)


def autosign_certificate_request(
    subject: str, csr_pem: bytes, settings: CaSettings
) -> SignedCertResult:
    """Sign the subject's certificate request and write the certificate to disk.

    The CA key is read from ``settings.cakey`` on every call. The serial
    number is allocated before signing, so a failed signing still uses it up.

    Returns:
        SignedCertResult with the certificate path and serial number
    """
    _require_subject(subject)
    if not isinstance(settings, CaSettings):
        raise ConfigurationError(f"expected CaSettings, got {type(settings).__name__}")

    csr = deserialize_csr(csr_pem)
    serial_number = next_serial_number(settings.serial)
    # TODO: derive expiry from the CSR's requested validity, capped by ca_ttl
    signed_cert = CertificateBuilder.sign_certificate_request(
        csr=csr,
        issuer_name=generate_x500_name(settings.ca_name),
        serial_number=serial_number,
        issuer_key=load_private_key(settings.cakey),
        validity=timedelta(seconds=settings.ca_ttl),
    )

    cert_path = path_to_cert(settings.signeddir, subject)
    cert_path.parent.mkdir(parents=True, exist_ok=True)
    write_pem(serialize_certificate(signed_cert), cert_path)
    LOGGER.info("Signed certificate for %s (serial %d)", subject, serial_number)

    return SignedCertResult(subject=subject, cert_path=cert_path, serial_number=serial_number)


def get_certificate(subject: str, cacert: Path, signeddir: Path) -> str | None:
    """Return the subject's certificate as a string, or None if not found.

    The subject 'ca' returns the CA certificate from ``cacert``.
    """
    _require_subject(subject)
    cacert = to_path("cacert", cacert)
    signeddir = to_path("signeddir", signeddir)
    if subject == CA_CERT_NAME:
        return _read_if_exists(cacert)
    return _read_if_exists(path_to_cert(signeddir, subject))


def get_certificate_request(subject: str, csrdir: Path) -> str | None:
    """Return the subject's certificate request as a string, or None if not found."""
    _require_subject(subject)
    csrdir = to_path("csrdir", csrdir)
    return _read_if_exists(path_to_cert_request(csrdir, subject))


def get_certificate_revocation_list(cacrl: Path) -> str:
    """Return the CRL from the PEM file on disk, verbatim."""
    return to_path("cacrl", cacrl).read_text(encoding="utf-8")
