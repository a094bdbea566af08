"""Autosign decision engine.

The ``autosign`` setting selects one of three policies by its shape:

- a boolean is the decision for every subject,
- an existing executable is run as a policy script,
- an existing non-executable file is read as a whitelist.

Anything else denies. The checks run in that order, so a boolean setting
never touches the filesystem.
"""

import os
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import ConfigurationError, to_load_path, to_path
from .logging_config import LOGGER

# Prepended with the load path so an autosign script can find the Ruby libraries.
LOAD_PATH_ENV_VAR = "RUBYLIB"


class AutosignCommandError(RuntimeError):
    """Raised when the autosign executable cannot be started."""


@dataclass(frozen=True)
class BooleanPolicy:
    """Sign (or refuse) every request unconditionally."""

    value: bool


@dataclass(frozen=True)
class ScriptPolicy:
    """Ask an executable; exit status 0 approves."""

    executable: Path


@dataclass(frozen=True)
class WhitelistPolicy:
    """Approve subjects matching a line of the whitelist file."""

    whitelist: Path


@dataclass(frozen=True)
class DenyPolicy:
    """Setting is neither a boolean nor an existing file."""


AutosignPolicy = BooleanPolicy | ScriptPolicy | WhitelistPolicy | DenyPolicy


@dataclass
class AutosignCommandResult:
    """Captured output and exit status of an autosign command."""

    stdout: str
    stderr: str
    exit_code: int


def resolve_autosign_policy(autosign: bool | str | Path) -> AutosignPolicy:
    """Determine which autosign policy the setting selects."""
    if isinstance(autosign, bool):
        return BooleanPolicy(autosign)

    path = Path(autosign)
    if path.exists():
        if os.access(path, os.X_OK):
            return ScriptPolicy(path)
        return WhitelistPolicy(path)
    return DenyPolicy()


def glob_matches(glob: str, subject: str) -> bool:
    """Test if a subject matches a domain-name glob from the autosign whitelist.

    The glob is expected to start with '*' and look like ``*.foo.bar``.
    Comparison ignores case.

    Examples:
        glob_matches("*.foo.bar", "agent.foo.bar") -> True
        glob_matches("*.baz", "baz") -> True
        glob_matches("*.QUX", "0.1.qux") -> True
    """

    def munge(name: str) -> list[str]:
        labels = name.lower().split(".")
        # A trailing dot (fully qualified name) adds no label.
        while labels and labels[-1] == "":
            labels.pop()
        return list(reversed(labels))

    suffix = munge(glob)[:-1]
    return munge(subject)[: len(suffix)] == suffix


def line_matches(whitelist: Path, subject: str, line: str) -> bool:
    """Test if the subject matches a line from the autosign whitelist.

    A line is an exact certname, a domain-name glob, or '*' to match all
    subjects. Lines containing '#' or a space are logged and never match.
    """
    if "#" in line or " " in line:
        LOGGER.error("Invalid pattern '%s' found in %s", line, whitelist)
        return False
    if line == "*":
        return True
    if line.startswith("*"):
        return glob_matches(line, subject)
    return line == subject


def whitelist_matches(whitelist: Path, subject: str) -> bool:
    """Test if the whitelist file has an entry matching the subject.

    Blank lines and comment lines (starting with '#') are skipped. The file
    is read on every call.
    """
    with open(whitelist, encoding="utf-8") as f:
        for line in f:
            line = line.rstrip("\r\n")
            if not line.strip() or line.startswith("#"):
                continue
            if line_matches(whitelist, subject, line):
                return True
    return False


def _merge_load_path(env: dict[str, str], load_path: Sequence[str]) -> dict[str, str]:
    entries = [os.path.abspath(entry) for entry in load_path]
    existing = env.get(LOAD_PATH_ENV_VAR)
    if existing:
        entries.append(existing)
    return {**env, LOAD_PATH_ENV_VAR: os.pathsep.join(entries)}


def execute_autosign_command(
    executable: Path,
    subject: str,
    csr_pem: bytes,
    load_path: Sequence[str],
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> AutosignCommandResult:
    """Run the autosign executable for a subject and capture its results.

    The subject is the only argument and the CSR is fed on standard input.
    The load path, made absolute, is prepended to RUBYLIB from the current
    environment. Output and exit status are logged at debug level.

    Args:
        executable: Path to the autosign script
        subject: Certname requesting a certificate
        csr_pem: The subject's CSR as PEM bytes
        load_path: Library directories for the script's runtime
        runner: Callable with the subprocess.run signature

    Returns:
        AutosignCommandResult with stdout, stderr, and exit code

    Raises:
        AutosignCommandError: If the executable cannot be started
    """
    LOGGER.debug("Executing '%s %s'", executable, subject)
    env = _merge_load_path(dict(os.environ), load_path)

    try:
        completed = runner(
            [str(executable), subject],
            input=csr_pem,
            capture_output=True,
            env=env,
            check=False,
        )
    except OSError as e:
        raise AutosignCommandError(f"failed to execute autosign command {executable}: {e}") from e

    result = AutosignCommandResult(
        stdout=completed.stdout.decode("utf-8", errors="replace"),
        stderr=completed.stderr.decode("utf-8", errors="replace"),
        exit_code=completed.returncode,
    )
    LOGGER.debug(
        "Autosign command '%s %s' exit status: %d", executable, subject, result.exit_code
    )
    LOGGER.debug(
        "Autosign command '%s %s' output: %s",
        executable,
        subject,
        result.stderr + result.stdout,
    )
    return result


def autosign_csr(
    autosign: bool | str | Path,
    subject: str,
    csr_pem: bytes,
    load_path: Sequence[str],
    executor: Callable[..., AutosignCommandResult] = execute_autosign_command,
) -> bool:
    """Return True if the CSR should be signed without manual intervention.

    Args:
        autosign: The autosign setting (boolean or path)
        subject: Certname requesting a certificate
        csr_pem: The subject's CSR as PEM bytes
        load_path: Library directories passed to an autosign script
        executor: Runs the autosign script; replaceable for tests

    Raises:
        ConfigurationError: If the subject, setting, or load path is malformed
        AutosignCommandError: If an autosign script cannot be started
    """
    if not isinstance(subject, str) or not subject:
        raise ConfigurationError("subject must be a non-empty string")
    if not isinstance(autosign, bool):
        autosign = to_path("autosign", autosign)
    load_path = to_load_path(load_path)

    policy = resolve_autosign_policy(autosign)
    if isinstance(policy, BooleanPolicy):
        return policy.value
    if isinstance(policy, ScriptPolicy):
        result = executor(policy.executable, subject, csr_pem, load_path)
        return result.exit_code == 0
    if isinstance(policy, WhitelistPolicy):
        return whitelist_matches(policy.whitelist, subject)
    return False
