"""
Helpers for talking to the host: running commands, downloads, checksums.
"""

import hashlib
import logging
import os
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Union

from debian_setup.errors import ChecksumError, CommandError, DownloadError

TEMP_PREFIX = "debian_setup_"

logger = logging.getLogger("debian_setup.system")


def _fmt_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in command)


class CommandRunner:
    """
    Run external commands with consistent logging.

    Every command is logged before it runs. A non-zero exit raises
    CommandError unless ``check`` is False or ``best_effort`` is set, in
    which case a warning is logged and the result returned. In dry-run
    mode commands are logged but never executed.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def run(
        self,
        command: Sequence[str],
        check: bool = True,
        capture_output: bool = False,
        input_text: Optional[str] = None,
        best_effort: bool = False,
    ) -> subprocess.CompletedProcess:
        command = [str(part) for part in command]
        logger.debug(f"Executing: {_fmt_command(command)}")

        if self.dry_run:
            logger.info(f"[dry-run] {_fmt_command(command)}")
            return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

        result = self._execute(command, capture_output, input_text)

        if result.returncode != 0:
            if best_effort:
                logger.warning(
                    f"Ignoring failure ({result.returncode}): {_fmt_command(command)}"
                )
            elif check:
                raise CommandError(command, result.returncode, result.stderr or "")
        return result

    def write_file(
        self, path: Union[str, Path], content: str, mode: Optional[int] = None
    ) -> None:
        """Write ``content`` to ``path`` (whole file, never appended)."""
        path = Path(path)
        if self.dry_run:
            logger.info(f"[dry-run] write {path} ({len(content)} bytes)")
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        if mode is not None:
            os.chmod(path, mode)
        logger.debug(f"Wrote {path}")

    def run_as_user(
        self, user: str, command: Sequence[str], **kwargs
    ) -> subprocess.CompletedProcess:
        """Run a command as ``user`` when the process is privileged."""
        if os.geteuid() == 0 and user != "root":
            command = ["runuser", "-u", user, "--", *command]
        return self.run(command, **kwargs)

    def _execute(
        self,
        command: List[str],
        capture_output: bool,
        input_text: Optional[str],
    ) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                command,
                capture_output=capture_output,
                input=input_text,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandError(command, 127, str(e)) from e


def command_exists(command: str) -> bool:
    """
    Check if a command exists in the system.

    Args:
        command: Name of the command to check

    Returns:
        True if the command exists, False otherwise
    """
    return shutil.which(command) is not None


def download_file(
    runner: CommandRunner, url: str, dest_path: Union[str, Path]
) -> Path:
    """
    Download a file from a URL to a local path with curl.

    Raises:
        DownloadError: if the transfer fails
    """
    dest_path = Path(dest_path)
    if not runner.dry_run:
        dest_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        runner.run(["curl", "-fsSL", url, "-o", str(dest_path)])
    except CommandError as e:
        raise DownloadError(f"Failed to download {url}: {e}") from e
    return dest_path


def fetch_text(runner: CommandRunner, url: str) -> str:
    """Fetch a small text resource (source-list template, checksum list)."""
    try:
        result = runner.run(["curl", "-fsSL", url], capture_output=True)
    except CommandError as e:
        raise DownloadError(f"Failed to fetch {url}: {e}") from e
    return result.stdout or ""


def temp_path(suffix: str = "") -> Path:
    """Reserve a temp file path that cleanup_temp_files() will remove."""
    fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix)
    os.close(fd)
    return Path(name)


def sha256sum(path: Union[str, Path]) -> str:
    """Hex-encoded SHA256 digest of a file."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def verify_checksum(path: Union[str, Path], expected: str) -> None:
    """Raise ChecksumError unless the file's SHA256 equals ``expected``."""
    actual = sha256sum(path)
    if actual.lower() != expected.strip().lower():
        raise ChecksumError(
            f"SHA256 mismatch for {Path(path).name}: expected {expected}, got {actual}"
        )
    logger.info(f"Checksum verified for {Path(path).name}")


def parse_sha256sums(text: str, filename: str) -> Optional[str]:
    """Find ``filename`` in a SHA256SUMS listing (``<hash> [*]<name>`` lines)."""
    for line in text.splitlines():
        parts = line.split()
        if len(parts) != 2:
            continue
        digest, name = parts
        if name.lstrip("*") == filename:
            return digest
    return None


def cleanup_temp_files() -> None:
    """Clean up temporary files created during execution."""
    tmp = Path(tempfile.gettempdir())
    for item in tmp.glob(f"{TEMP_PREFIX}*"):
        try:
            if item.is_dir() and not item.is_symlink():
                shutil.rmtree(item)
            else:
                item.unlink()
        except OSError as e:
            logger.debug(f"Could not remove {item}: {e}")
