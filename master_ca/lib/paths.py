"""Filesystem layout for certificate requests and signed certificates."""

from collections.abc import Iterable
from pathlib import Path


def path_to_cert(signeddir: Path, subject: str) -> Path:
    """Return the path to the subject's certificate under ``signeddir``."""
    return Path(signeddir) / f"{subject}.pem"


def path_to_cert_request(csrdir: Path, subject: str) -> Path:
    """Return the path to the subject's certificate request under ``csrdir``."""
    return Path(csrdir) / f"{subject}.pem"


def files_exist(paths: Iterable[Path]) -> bool:
    """Return True if every path exists on disk."""
    return all(Path(path).exists() for path in paths)


def missing_files(paths: Iterable[Path]) -> list[Path]:
    """Return the paths that do not exist on disk."""
    return [Path(path) for path in paths if not Path(path).exists()]


def create_parent_directories(paths: Iterable[Path]) -> None:
    """Create all intermediate directories for each of the file paths.

    Raises:
        OSError: If a directory cannot be created
    """
    for path in paths:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
