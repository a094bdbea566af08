"""CA settings and master file path dataclasses."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

DEFAULT_KEY_LENGTH = 4096
CA_CERT_NAME = "ca"


class ConfigurationError(ValueError):
    """Raised when settings are missing or have the wrong shape."""


def to_path(name: str, value: object) -> Path:
    if isinstance(value, Path):
        return value
    if isinstance(value, str) and value:
        return Path(value)
    raise ConfigurationError(f"{name} must be a non-empty path, got {value!r}")


def to_load_path(value: object) -> list[str]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(entry, str) for entry in value):
        raise ConfigurationError(f"load_path must be a list of strings, got {value!r}")
    return list(value)


@dataclass
class CaSettings:
    """Settings necessary for CA initialization and request handling.

    Path fields accept str or Path and are stored as Path. ``autosign`` is
    either a boolean or a path to a whitelist file or executable.
    """

    autosign: bool | Path
    cacert: Path
    cacrl: Path
    cakey: Path
    capub: Path
    ca_name: str
    ca_ttl: int
    csrdir: Path
    signeddir: Path
    serial: Path
    load_path: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.autosign, bool):
            self.autosign = to_path("autosign", self.autosign)
        for name in ("cacert", "cacrl", "cakey", "capub", "csrdir", "signeddir", "serial"):
            setattr(self, name, to_path(name, getattr(self, name)))

        if not isinstance(self.ca_name, str) or not self.ca_name:
            raise ConfigurationError("ca_name must be a non-empty string")
        if isinstance(self.ca_ttl, bool) or not isinstance(self.ca_ttl, int):
            raise ConfigurationError(f"ca_ttl must be an integer, got {self.ca_ttl!r}")
        if self.ca_ttl < 0:
            raise ConfigurationError(f"ca_ttl must be non-negative, got {self.ca_ttl}")
        self.load_path = to_load_path(self.load_path)


@dataclass
class MasterFilePaths:
    """Paths within the SSL directory used to initialize the master.

    Excludes the CA directory and its contents.
    """

    requestdir: Path
    certdir: Path
    hostcert: Path
    localcacert: Path
    hostprivkey: Path
    hostpubkey: Path

    def __post_init__(self) -> None:
        for f in fields(self):
            setattr(self, f.name, to_path(f.name, getattr(self, f.name)))

        paths = self.as_dict()
        if len(set(paths.values())) != len(paths):
            raise ConfigurationError(f"master file paths must be distinct: {paths}")

    def as_dict(self) -> dict[str, Path]:
        """Return the paths keyed by field name."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def settings_to_cadir_paths(settings: CaSettings) -> dict[str, Path]:
    """Trim the CA settings down to the files and directories the CA owns.

    These are the paths checked and created during CA initialization.
    """
    return {
        "cacert": settings.cacert,
        "cacrl": settings.cacrl,
        "cakey": settings.cakey,
        "capub": settings.capub,
        "csrdir": settings.csrdir,
        "signeddir": settings.signeddir,
        "serial": settings.serial,
    }


def _section(config: Mapping, name: str) -> Mapping:
    section = config.get(name)
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"missing configuration section: {name}")
    return section


def _require(section: Mapping, key: str) -> Any:
    if key not in section:
        raise ConfigurationError(f"missing setting: {key}")
    return section[key]


def config_to_settings(config: Mapping) -> CaSettings:
    """Build CaSettings from the master configuration mapping.

    Expects a ``master`` section holding the CA settings under their
    hyphenated names and a ``jruby`` section holding ``load-path``.
    """
    if not isinstance(config, Mapping):
        raise ConfigurationError("configuration must be a mapping")
    master = _section(config, "master")
    jruby = _section(config, "jruby")

    return CaSettings(
        autosign=_require(master, "autosign"),
        cacert=_require(master, "cacert"),
        cacrl=_require(master, "cacrl"),
        cakey=_require(master, "cakey"),
        capub=_require(master, "capub"),
        ca_name=_require(master, "ca-name"),
        ca_ttl=_require(master, "ca-ttl"),
        csrdir=_require(master, "csrdir"),
        signeddir=_require(master, "signeddir"),
        serial=_require(master, "serial"),
        load_path=_require(jruby, "load-path"),
    )


def config_to_master_paths(config: Mapping) -> MasterFilePaths:
    """Build MasterFilePaths from the ``master`` section of the configuration."""
    if not isinstance(config, Mapping):
        raise ConfigurationError("configuration must be a mapping")
    master = _section(config, "master")
    return MasterFilePaths(
        **{f.name: _require(master, f.name) for f in fields(MasterFilePaths)}
    )


def load_config(path: Path) -> dict:
    """Read the configuration mapping from a JSON file."""
    config = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(config, dict):
        raise ConfigurationError(f"configuration file must hold a JSON object: {path}")
    return config
