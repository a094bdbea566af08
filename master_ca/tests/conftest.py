"""Test fixtures for master_ca tests."""

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from master_ca.lib.cert_utils import (
    generate_certificate_request,
    generate_private_key,
    generate_x500_name,
    serialize_csr,
)
from master_ca.lib.config import CaSettings, MasterFilePaths
from master_ca.lib.logging_config import LOGGER

# Faster for tests
TEST_KEY_LENGTH = 2048


@pytest.fixture
def ssldir(tmp_path: Path) -> Path:
    """Return temporary SSL directory (nothing is created inside it)."""
    return tmp_path / "ssl"


@pytest.fixture
def ca_settings(ssldir: Path) -> CaSettings:
    """Return CA settings rooted in the temporary SSL directory."""
    cadir = ssldir / "ca"
    return CaSettings(
        autosign=False,
        cacert=cadir / "ca_crt.pem",
        cacrl=cadir / "ca_crl.pem",
        cakey=cadir / "private" / "ca_key.pem",
        capub=cadir / "ca_pub.pem",
        ca_name="Test CA",
        ca_ttl=5 * 365 * 24 * 60 * 60,
        csrdir=cadir / "requests",
        signeddir=cadir / "signed",
        serial=cadir / "serial",
        load_path=["ruby/puppet/lib", "ruby/facter/lib"],
    )


@pytest.fixture
def master_paths(ssldir: Path) -> MasterFilePaths:
    """Return master file paths rooted in the temporary SSL directory."""
    return MasterFilePaths(
        requestdir=ssldir / "certificate_requests",
        certdir=ssldir / "certs",
        hostcert=ssldir / "certs" / "master.pem",
        localcacert=ssldir / "certs" / "ca.pem",
        hostprivkey=ssldir / "private_keys" / "master.pem",
        hostpubkey=ssldir / "public_keys" / "master.pem",
    )


@pytest.fixture
def config_dict(ca_settings: CaSettings, master_paths: MasterFilePaths) -> dict:
    """Return configuration mapping equivalent to ca_settings and master_paths."""
    return {
        "master": {
            "autosign": ca_settings.autosign,
            "cacert": str(ca_settings.cacert),
            "cacrl": str(ca_settings.cacrl),
            "cakey": str(ca_settings.cakey),
            "capub": str(ca_settings.capub),
            "ca-name": ca_settings.ca_name,
            "ca-ttl": ca_settings.ca_ttl,
            "csrdir": str(ca_settings.csrdir),
            "signeddir": str(ca_settings.signeddir),
            "serial": str(ca_settings.serial),
            **{name: str(path) for name, path in master_paths.as_dict().items()},
        },
        "jruby": {"load-path": list(ca_settings.load_path)},
    }


@pytest.fixture
def config_file(tmp_path: Path, config_dict: dict) -> Path:
    """Write the configuration mapping to a JSON file."""
    path = tmp_path / "master.json"
    path.write_text(json.dumps(config_dict))
    return path


@pytest.fixture
def agent_key() -> RSAPrivateKey:
    """Generate RSA private key for an agent."""
    return generate_private_key(key_size=TEST_KEY_LENGTH)


@pytest.fixture
def agent_csr(agent_key: RSAPrivateKey) -> x509.CertificateSigningRequest:
    """Generate CSR for agent.example.com."""
    return generate_certificate_request(agent_key, generate_x500_name("agent.example.com"))


@pytest.fixture
def agent_csr_pem(agent_csr: x509.CertificateSigningRequest) -> bytes:
    """Return the agent CSR as PEM bytes."""
    return serialize_csr(agent_csr)


@pytest.fixture
def ca_key() -> RSAPrivateKey:
    """Generate RSA private key for a CA."""
    return generate_private_key(key_size=TEST_KEY_LENGTH)


@pytest.fixture
def propagate_logs() -> Iterator[None]:
    """Let caplog see records from the package logger."""
    LOGGER.propagate = True
    yield
    LOGGER.propagate = False
