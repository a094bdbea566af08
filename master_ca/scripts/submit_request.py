#!/usr/bin/env python3
"""Store a certificate request and sign it if the autosign policy allows."""

import argparse
import sys
from pathlib import Path

from master_ca.lib.autosign import autosign_csr
from master_ca.lib.config import config_to_settings, load_config
from master_ca.lib.logging_config import LOGGER
from master_ca.lib.store import autosign_certificate_request, save_certificate_request


def main(argv: list[str] | None = None) -> int:
    """Save the CSR, then autosign it when permitted.

    Returns:
        Exit code (0 when signed or left pending, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Submit certificate signing request")
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="JSON file with 'master' and 'jruby' settings sections",
    )
    parser.add_argument(
        "--subject",
        required=True,
        help="Certname the request is for",
    )
    parser.add_argument(
        "--csr",
        type=Path,
        required=True,
        help="PEM file holding the certificate signing request",
    )
    args = parser.parse_args(argv)

    try:
        settings = config_to_settings(load_config(args.config))
        csr_pem = args.csr.read_bytes()

        csr_path = save_certificate_request(args.subject, csr_pem, settings.csrdir)
        LOGGER.info("Certificate request for %s saved to %s", args.subject, csr_path)

        if not autosign_csr(settings.autosign, args.subject, csr_pem, settings.load_path):
            LOGGER.info("Certificate request for %s is awaiting manual signing", args.subject)
            return 0

        result = autosign_certificate_request(args.subject, csr_pem, settings)
        LOGGER.info("Certificate for %s autosigned:", args.subject)
        LOGGER.info("  Cert: %s", result.cert_path)
        LOGGER.info("  Serial: %s", result.serial_number)
        return 0

    except Exception as e:
        LOGGER.error("Certificate request handling failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
