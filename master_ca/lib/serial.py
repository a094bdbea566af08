"""Serial number allocation backed by a file on disk.

The serial file always holds the next serial number to hand out, written as
upper-case hex zero-padded to four digits. This matches the format the Ruby
``puppet cert`` tooling reads and writes.
"""

import re
import threading
from pathlib import Path

from .paths import create_parent_directories

# Shared by every allocation in the process, regardless of file.
SERIAL_NUMBER_LOCK = threading.Lock()

_HEX_PATTERN = re.compile(r"[0-9A-Fa-f]+")


class MalformedSerialFileError(ValueError):
    """Raised when the serial number file does not contain a hex number."""


def parse_serial_number(serial_number: str) -> int:
    """Parse a serial number from its on-disk hex format.

    Raises:
        MalformedSerialFileError: If the text is not a hex number
    """
    if not _HEX_PATTERN.fullmatch(serial_number):
        raise MalformedSerialFileError(f"invalid serial number: {serial_number!r}")
    return int(serial_number, 16)


def format_serial_number(serial_number: int) -> str:
    """Format a serial number for disk, e.g. 42 -> '002A'."""
    if isinstance(serial_number, bool) or not isinstance(serial_number, int):
        raise ValueError(f"serial number must be an integer, got {serial_number!r}")
    if serial_number < 0:
        raise ValueError(f"serial number must be non-negative, got {serial_number}")
    return f"{serial_number:04X}"


def get_serial_number(serial_file: Path) -> int:
    """Read the serial number from disk, creating the file if it is missing.

    A missing file is created empty and the serial number 1 is returned.

    Raises:
        MalformedSerialFileError: If the file contents are not a hex number
    """
    serial_file = Path(serial_file)
    if not serial_file.exists():
        create_parent_directories([serial_file])
        serial_file.touch()
        return 1

    contents = serial_file.read_text(encoding="utf-8").strip()
    try:
        return parse_serial_number(contents)
    except MalformedSerialFileError as e:
        raise MalformedSerialFileError(f"malformed serial number file {serial_file}: {e}") from e


def next_serial_number(serial_file: Path) -> int:
    """Return the serial number to use for the next signed certificate.

    Replaces the file contents with the following serial number so the
    next call gets a fresh one. Safe across threads, not across processes.
    """
    with SERIAL_NUMBER_LOCK:
        serial_number = get_serial_number(serial_file)
        Path(serial_file).write_text(format_serial_number(serial_number + 1), encoding="utf-8")
        return serial_number
