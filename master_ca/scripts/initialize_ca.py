#!/usr/bin/env python3
"""Initialize the CA and the master's SSL files if they are missing."""

import argparse
import sys
from pathlib import Path

from master_ca.lib.ca_manager import CAManager
from master_ca.lib.config import (
    DEFAULT_KEY_LENGTH,
    config_to_master_paths,
    config_to_settings,
    load_config,
)
from master_ca.lib.logging_config import LOGGER


def main(argv: list[str] | None = None) -> int:
    """Initialize CA and master.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Initialize CA and master SSL files")
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="JSON file with 'master' and 'jruby' settings sections",
    )
    parser.add_argument(
        "--certname",
        required=True,
        help="Certname of the master (used as CN in its certificate)",
    )
    parser.add_argument(
        "--keylength",
        type=int,
        default=DEFAULT_KEY_LENGTH,
        help=f"RSA key length in bits (default: {DEFAULT_KEY_LENGTH})",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        ca_manager = CAManager(config_to_settings(config))

        LOGGER.info("Initializing SSL for master: %s", args.certname)
        result = ca_manager.initialize(
            config_to_master_paths(config),
            args.certname,
            keylength=args.keylength,
        )

        if result.ca is not None:
            LOGGER.info("CA created:")
            LOGGER.info("  Key: %s", result.ca.key_path)
            LOGGER.info("  Cert: %s", result.ca.cert_path)
            LOGGER.info("  CRL: %s", result.ca.crl_path)
            LOGGER.info("  Serial: %s", result.ca.serial_number)

        if result.master is not None:
            LOGGER.info("Master certificate created:")
            LOGGER.info("  Key: %s", result.master.key_path)
            LOGGER.info("  Cert: %s", result.master.cert_path)
            LOGGER.info("  Serial: %s", result.master.serial_number)

        return 0

    except FileNotFoundError as e:
        LOGGER.error("CA file not found: %s", e)
        return 1
    except Exception as e:
        LOGGER.error("Initialization failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
