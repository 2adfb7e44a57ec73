"""Waterfox from a release archive in the Downloads directory."""

import fnmatch
import os
import shutil
import tarfile
from pathlib import Path, PurePosixPath
from typing import List, Optional

from debian_setup.config import Config
from debian_setup.errors import (
    AmbiguousArchiveError,
    ArchiveNotFoundError,
    SetupError,
    StepResult,
)
from debian_setup.log import get_logger
from debian_setup.system import CommandRunner
from debian_setup.ui import print_step, print_success

logger = get_logger("browser")

STEP_NAME = "install_waterfox"
ARCHIVE_PATTERN = "waterfox*.tar.*"


def render_desktop_entry(bin_link: Path, install_dir: Path) -> str:
    return f"""[Desktop Entry]
Name=Waterfox
Exec={bin_link} %u
Icon={install_dir}/browser/chrome/icons/default/default128.png
Type=Application
Categories=Network;WebBrowser;
MimeType=text/html;text/xml;application/xhtml+xml;application/xml;x-scheme-handler/http;x-scheme-handler/https;
StartupNotify=true
"""


def find_archive(downloads_dir: Path) -> Path:
    """
    Locate the single Waterfox archive directly inside ``downloads_dir``.

    Raises:
        ArchiveNotFoundError: no file matches
        AmbiguousArchiveError: more than one file matches
    """
    candidates: List[Path] = []
    if downloads_dir.is_dir():
        candidates = [
            entry
            for entry in downloads_dir.iterdir()
            if entry.is_file()
            and not entry.is_symlink()
            and fnmatch.fnmatch(entry.name.lower(), ARCHIVE_PATTERN)
        ]

    if not candidates:
        raise ArchiveNotFoundError(f"No Waterfox archive found in {downloads_dir}.")
    if len(candidates) > 1:
        raise AmbiguousArchiveError(downloads_dir, candidates)
    return candidates[0]


def _strip_first(name: str) -> Optional[str]:
    parts = PurePosixPath(name).parts[1:]
    if not parts:
        return None
    return str(PurePosixPath(*parts))


def extract_stripped(archive: Path, dest: Path) -> None:
    """Extract ``archive`` into ``dest`` dropping the top-level directory."""
    try:
        with tarfile.open(archive, "r:*") as tar:
            members = []
            for member in tar.getmembers():
                stripped = _strip_first(member.name)
                if stripped is None:
                    continue
                member.name = stripped
                if member.islnk():
                    member.linkname = _strip_first(member.linkname) or ""
                members.append(member)
            tar.extractall(dest, members=members, filter="data")
    except (tarfile.TarError, OSError) as e:
        raise SetupError(f"Failed to extract {archive.name}: {e}") from e


def replace_symlink(target: Path, link: Path) -> None:
    link.parent.mkdir(parents=True, exist_ok=True)
    if link.is_symlink() or link.exists():
        link.unlink()
    os.symlink(target, link)


def install_waterfox(config: Config, runner: CommandRunner) -> StepResult:
    print_step("Installing Waterfox from archive...")

    install_dir = config.WATERFOX_INSTALL_DIR
    bin_link = config.WATERFOX_BIN_LINK
    archive = find_archive(config.DOWNLOADS_DIR)

    print_step(f"Found archive: {archive}")
    print_step(f"Installing to: {install_dir}")

    if runner.dry_run:
        logger.info(f"[dry-run] would extract {archive} to {install_dir}")
        return StepResult.skipped(STEP_NAME, f"dry-run: {archive.name}")

    if install_dir.exists():
        shutil.rmtree(install_dir)
    install_dir.mkdir(parents=True)
    extract_stripped(archive, install_dir)
    replace_symlink(install_dir / "waterfox", bin_link)

    print_step("Creating desktop entry...")
    runner.write_file(
        config.WATERFOX_DESKTOP_FILE,
        render_desktop_entry(bin_link, install_dir),
        mode=0o755,
    )

    print_success("Waterfox installed successfully!")
    return StepResult.success(STEP_NAME, f"Installed from {archive.name}")
