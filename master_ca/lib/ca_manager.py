"""CA manager for bootstrapping the certificate authority and the master."""

from datetime import timedelta
from pprint import pformat

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .cert_utils import (
    generate_certificate_request,
    generate_private_key,
    generate_x500_name,
    load_certificate,
    load_private_key,
    serialize_certificate,
    serialize_crl,
    serialize_private_key,
    serialize_public_key,
    write_pem,
)
from .certificate_builder import CertificateBuilder
from .config import (
    DEFAULT_KEY_LENGTH,
    CaSettings,
    ConfigurationError,
    MasterFilePaths,
    settings_to_cadir_paths,
)
from .logging_config import LOGGER
from .models import CaInitResult, InitializeResult, MasterInitResult
from .paths import create_parent_directories, files_exist, missing_files
from .serial import next_serial_number


def _require_master_paths(master_paths: object) -> None:
    if not isinstance(master_paths, MasterFilePaths):
        raise ConfigurationError(f"expected MasterFilePaths, got {type(master_paths).__name__}")


def _ensure_files_exist(paths: dict) -> None:
    missing = missing_files(paths.values())
    if missing:
        raise FileNotFoundError(f"initialization did not create: {', '.join(map(str, missing))}")


class CAManager:
    """Certificate Authority manager for CA and master initialization."""

    def __init__(self, settings: CaSettings) -> None:
        """Initialize CA manager with settings.

        Args:
            settings: CA settings with file paths, CA name and TTL
        """
        if not isinstance(settings, CaSettings):
            raise ConfigurationError(f"expected CaSettings, got {type(settings).__name__}")
        self.settings = settings

    @property
    def validity(self) -> timedelta:
        """Validity period of certificates issued by this CA."""
        return timedelta(seconds=self.settings.ca_ttl)

    def initialize_ca(self, keylength: int = DEFAULT_KEY_LENGTH) -> CaInitResult:
        """Generate and write all of the CA's SSL files.

        Generates:
            - CA key pair
            - Self-signed CA certificate
            - Empty CRL signed by the CA

        Any existing files are replaced.

        Args:
            keylength: RSA key length in bits

        Returns:
            CaInitResult with file paths and serial number
        """
        settings = self.settings
        cadir_paths = settings_to_cadir_paths(settings)
        LOGGER.debug("Initializing SSL for the CA; settings:\n%s", pformat(settings))

        create_parent_directories(cadir_paths.values())
        settings.csrdir.mkdir(parents=True, exist_ok=True)
        settings.signeddir.mkdir(parents=True, exist_ok=True)

        private_key = generate_private_key(keylength)
        x500_name = generate_x500_name(settings.ca_name)
        serial_number = next_serial_number(settings.serial)
        cacert = CertificateBuilder.build_root_ca(
            csr=generate_certificate_request(private_key, x500_name),
            private_key=private_key,
            serial_number=serial_number,
            validity=self.validity,
        )
        cacrl = CertificateBuilder.build_crl(
            issuer_name=cacert.issuer,
            issuer_key=private_key,
            validity=self.validity,
        )

        write_pem(serialize_public_key(private_key.public_key()), settings.capub)
        write_pem(serialize_private_key(private_key), settings.cakey)
        write_pem(serialize_certificate(cacert), settings.cacert)
        write_pem(serialize_crl(cacrl), settings.cacrl)

        _ensure_files_exist(cadir_paths)
        LOGGER.info("CA certificate %s written (serial %d)", settings.cacert, serial_number)

        return CaInitResult(
            cert_path=settings.cacert,
            key_path=settings.cakey,
            public_key_path=settings.capub,
            crl_path=settings.cacrl,
            serial_number=serial_number,
        )

    def initialize_master(
        self,
        master_paths: MasterFilePaths,
        master_certname: str,
        ca_private_key: RSAPrivateKey,
        ca_cert: x509.Certificate,
        keylength: int = DEFAULT_KEY_LENGTH,
    ) -> MasterInitResult:
        """Generate and write all of the master's SSL files, signed by the CA.

        Generates:
            - Master key pair
            - Master certificate signed by the CA
            - Local copy of the CA certificate

        Any existing files are replaced.

        Args:
            master_paths: Paths to the master's SSL files and directories
            master_certname: Certname of the master (CN of its certificate)
            ca_private_key: CA private key for signing
            ca_cert: CA certificate, copied to the master's localcacert
            keylength: RSA key length in bits

        Returns:
            MasterInitResult with file paths and serial number
        """
        _require_master_paths(master_paths)
        if not isinstance(master_certname, str) or not master_certname:
            raise ConfigurationError("master certname must be a non-empty string")

        paths = master_paths.as_dict()
        LOGGER.debug("Initializing SSL for the Master; file paths:\n%s", pformat(paths))

        create_parent_directories(paths.values())
        master_paths.certdir.mkdir(parents=True, exist_ok=True)
        master_paths.requestdir.mkdir(parents=True, exist_ok=True)

        private_key = generate_private_key(keylength)
        x500_name = generate_x500_name(master_certname)
        ca_x500_name = generate_x500_name(self.settings.ca_name)
        serial_number = next_serial_number(self.settings.serial)
        hostcert = CertificateBuilder.sign_certificate_request(
            csr=generate_certificate_request(private_key, x500_name),
            issuer_name=ca_x500_name,
            serial_number=serial_number,
            issuer_key=ca_private_key,
            validity=self.validity,
        )

        write_pem(serialize_public_key(private_key.public_key()), master_paths.hostpubkey)
        write_pem(serialize_private_key(private_key), master_paths.hostprivkey)
        write_pem(serialize_certificate(hostcert), master_paths.hostcert)
        write_pem(serialize_certificate(ca_cert), master_paths.localcacert)

        _ensure_files_exist(paths)
        LOGGER.info(
            "Master certificate %s written (serial %d)", master_paths.hostcert, serial_number
        )

        return MasterInitResult(
            cert_path=master_paths.hostcert,
            key_path=master_paths.hostprivkey,
            public_key_path=master_paths.hostpubkey,
            ca_cert_path=master_paths.localcacert,
            serial_number=serial_number,
        )

    def initialize(
        self,
        master_paths: MasterFilePaths,
        master_certname: str,
        keylength: int = DEFAULT_KEY_LENGTH,
    ) -> InitializeResult:
        """Prepare all SSL files for the CA and the master.

        Each half is skipped when all of its files already exist. The master
        half loads the CA key and certificate from disk, so it can run
        against a CA initialized earlier.

        Args:
            master_paths: Paths to the master's SSL files and directories
            master_certname: Certname of the master
            keylength: RSA key length in bits

        Returns:
            InitializeResult; skipped halves are None
        """
        _require_master_paths(master_paths)

        ca_result = None
        if files_exist(settings_to_cadir_paths(self.settings).values()):
            LOGGER.info("CA already initialized for SSL")
        else:
            ca_result = self.initialize_ca(keylength)

        master_result = None
        if files_exist(master_paths.as_dict().values()):
            LOGGER.info("Master already initialized for SSL")
        else:
            master_result = self.initialize_master(
                master_paths,
                master_certname,
                ca_private_key=load_private_key(self.settings.cakey),
                ca_cert=load_certificate(self.settings.cacert),
                keylength=keylength,
            )

        return InitializeResult(ca=ca_result, master=master_result)
