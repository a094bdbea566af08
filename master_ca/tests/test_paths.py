"""Tests for paths module."""

from pathlib import Path

from master_ca.lib.paths import (
    create_parent_directories,
    files_exist,
    missing_files,
    path_to_cert,
    path_to_cert_request,
)


class TestPathResolution:
    """Tests for path_to_cert and path_to_cert_request."""

    def test_cert_path_under_signeddir(self) -> None:
        """Certificate lives at <signeddir>/<subject>.pem."""
        assert path_to_cert(Path("/ca/signed"), "agent.example.com") == Path(
            "/ca/signed/agent.example.com.pem"
        )

    def test_cert_request_path_under_csrdir(self) -> None:
        """Request lives at <csrdir>/<subject>.pem."""
        assert path_to_cert_request(Path("/ca/requests"), "agent") == Path(
            "/ca/requests/agent.pem"
        )

    def test_accepts_string_directory(self) -> None:
        """Directory given as str is accepted."""
        assert path_to_cert("/ca/signed", "agent") == Path("/ca/signed/agent.pem")

    def test_subject_passed_through_verbatim(self) -> None:
        """Subject is not sanitized."""
        assert path_to_cert(Path("/ca/signed"), "Agent_01.Example") == Path(
            "/ca/signed/Agent_01.Example.pem"
        )


class TestFilesExist:
    """Tests for files_exist and missing_files."""

    def test_all_present(self, tmp_path: Path) -> None:
        """True when every path exists."""
        (tmp_path / "a").write_text("a")
        (tmp_path / "b").mkdir()
        assert files_exist([tmp_path / "a", tmp_path / "b"])

    def test_one_missing(self, tmp_path: Path) -> None:
        """False when any path is missing, and it is reported."""
        (tmp_path / "a").write_text("a")
        assert not files_exist([tmp_path / "a", tmp_path / "b"])
        assert missing_files([tmp_path / "a", tmp_path / "b"]) == [tmp_path / "b"]


class TestCreateParentDirectories:
    """Tests for create_parent_directories."""

    def test_creates_nested_parents(self, tmp_path: Path) -> None:
        """Intermediate directories are created, the file itself is not."""
        target = tmp_path / "x" / "y" / "file.pem"
        create_parent_directories([target])

        assert target.parent.is_dir()
        assert not target.exists()

    def test_existing_parent_is_fine(self, tmp_path: Path) -> None:
        """Existing directories do not raise."""
        create_parent_directories([tmp_path / "file.pem", tmp_path / "other.pem"])
        assert tmp_path.is_dir()
