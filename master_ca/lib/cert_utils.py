"""Certificate utility functions for key generation, naming, and PEM serialization."""

from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from cryptography.x509 import oid


def generate_private_key(key_size: int = 4096) -> RSAPrivateKey:
    """Generate RSA private key with specified size."""
    return rsa.generate_private_key(
        public_exponent=65537,
        key_size=key_size,
    )


def generate_x500_name(common_name: str) -> x509.Name:
    """Build an X.500 name holding only the given common name (CN=...)."""
    return x509.Name([x509.NameAttribute(oid.NameOID.COMMON_NAME, common_name)])


def generate_certificate_request(
    private_key: RSAPrivateKey, subject_name: x509.Name
) -> x509.CertificateSigningRequest:
    """Generate a CSR for the key pair, self-signed with its private key."""
    return (
        x509.CertificateSigningRequestBuilder()
        .subject_name(subject_name)
        .sign(private_key, hashes.SHA256())
    )


def get_common_name(name: x509.Name) -> str:
    """Return the first CN of an X.500 name."""
    cn = name.get_attributes_for_oid(oid.NameOID.COMMON_NAME)[0].value
    if not isinstance(cn, str):
        raise ValueError("CN must be string")
    return cn


def serialize_private_key(key: RSAPrivateKey) -> bytes:
    """Serialize private key to PEM format (PKCS8, no encryption)."""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def deserialize_private_key(pem_data: bytes) -> RSAPrivateKey:
    """Deserialize private key from PEM bytes."""
    key = serialization.load_pem_private_key(pem_data, password=None)
    if not isinstance(key, RSAPrivateKey):
        raise ValueError("expected RSA private key")
    return key


def serialize_public_key(key: RSAPublicKey) -> bytes:
    """Serialize public key to PEM format (SubjectPublicKeyInfo)."""
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def deserialize_public_key(pem_data: bytes) -> RSAPublicKey:
    """Deserialize public key from PEM bytes."""
    key = serialization.load_pem_public_key(pem_data)
    if not isinstance(key, RSAPublicKey):
        raise ValueError("expected RSA public key")
    return key


def serialize_certificate(cert: x509.Certificate) -> bytes:
    """Serialize certificate to PEM format."""
    return cert.public_bytes(serialization.Encoding.PEM)


def deserialize_certificate(pem_data: bytes) -> x509.Certificate:
    """Deserialize certificate from PEM bytes."""
    return x509.load_pem_x509_certificate(pem_data)


def serialize_csr(csr: x509.CertificateSigningRequest) -> bytes:
    """Serialize CSR to PEM format."""
    return csr.public_bytes(serialization.Encoding.PEM)


def deserialize_csr(pem_data: bytes) -> x509.CertificateSigningRequest:
    """Deserialize CSR from PEM bytes."""
    return x509.load_pem_x509_csr(pem_data)


def serialize_crl(crl: x509.CertificateRevocationList) -> bytes:
    """Serialize CRL to PEM format."""
    return crl.public_bytes(serialization.Encoding.PEM)


def deserialize_crl(pem_data: bytes) -> x509.CertificateRevocationList:
    """Deserialize CRL from PEM bytes."""
    return x509.load_pem_x509_crl(pem_data)


def load_private_key(path: Path) -> RSAPrivateKey:
    """Read and deserialize a PEM private key file."""
    return deserialize_private_key(Path(path).read_bytes())


def load_certificate(path: Path) -> x509.Certificate:
    """Read and deserialize a PEM certificate file."""
    return deserialize_certificate(Path(path).read_bytes())


def write_pem(pem_data: bytes, path: Path) -> Path:
    """Write PEM bytes to ``path``, replacing any existing file."""
    path = Path(path)
    path.write_bytes(pem_data)
    return path
