"""Result models for CA operations."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class CaInitResult:
    """Result from CA initialization.

    Contains file paths and the serial number of the self-signed CA certificate.
    """

    cert_path: Path
    key_path: Path
    public_key_path: Path
    crl_path: Path
    serial_number: int


@dataclass
class MasterInitResult:
    """Result from master initialization.

    Contains file paths and the serial number of the master's certificate.
    """

    cert_path: Path
    key_path: Path
    public_key_path: Path
    ca_cert_path: Path
    serial_number: int


@dataclass
class InitializeResult:
    """Result from a full initialization; a half is None when it was skipped."""

    ca: CaInitResult | None
    master: MasterInitResult | None


@dataclass
class SignedCertResult:
    """Result from signing and storing a subject's certificate."""

    subject: str
    cert_path: Path
    serial_number: int
