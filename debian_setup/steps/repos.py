"""
Third-party APT repositories (Tailscale, Docker) and Distrobox.

A vendor's source list is written only when the file is missing, and always
as a whole file, so preparing the repositories twice never duplicates
entries. The binary being on PATH is not enough to skip a vendor: without
its source list apt could not upgrade it.
"""

import re
from pathlib import Path
from typing import List

from debian_setup.config import Config
from debian_setup.errors import StepResult, UnverifiedError
from debian_setup.log import get_logger
from debian_setup.system import (
    CommandRunner,
    command_exists,
    download_file,
    fetch_text,
    sha256sum,
    temp_path,
    verify_checksum,
)
from debian_setup.ui import print_step, print_success, print_warning

logger = get_logger("repos")

STEP_NAME = "prepare_repos"

_DEB_LINE = re.compile(r"^deb ", re.MULTILINE)


def pin_keyring(source_list: str, keyring: Path) -> str:
    """Add ``signed-by`` for ``keyring`` to every ``deb`` line of a source list."""
    return _DEB_LINE.sub(f"deb [signed-by={keyring}] ", source_list)


def docker_source_line(config: Config, arch: str, keyring: Path) -> str:
    return (
        f"deb [arch={arch} signed-by={keyring}] "
        f"{config.DOCKER_REPO_URL} {config.DEBIAN_CODENAME} stable\n"
    )


def _source_missing(source: Path, binary: str) -> bool:
    if source.exists():
        logger.info(f"{source} already present; leaving it untouched.")
        return False
    if command_exists(binary):
        logger.warning(f"{binary} is installed but {source} is missing; adding it.")
    return True


def add_tailscale_repo(config: Config, runner: CommandRunner) -> bool:
    source = config.APT_SOURCES_DIR / "tailscale.list"
    if not _source_missing(source, "tailscale"):
        return False

    print_step(f"Adding Tailscale repo ({config.DEBIAN_CODENAME.title()})...")
    keyring = config.SHARE_KEYRINGS_DIR / "tailscale-archive-keyring.gpg"
    download_file(runner, config.TAILSCALE_KEY_URL, keyring)
    template = fetch_text(runner, config.TAILSCALE_LIST_URL)
    runner.write_file(source, pin_keyring(template, keyring))
    return True


def add_docker_repo(config: Config, runner: CommandRunner) -> bool:
    source = config.APT_SOURCES_DIR / "docker.list"
    if not _source_missing(source, "docker"):
        return False

    print_step("Adding Docker repo...")
    runner.run(["apt-get", "install", "-y", *config.DOCKER_PREREQUISITES])
    runner.run(["install", "-m", "0755", "-d", str(config.APT_KEYRINGS_DIR)])

    keyring = config.APT_KEYRINGS_DIR / "docker.gpg"
    armored = temp_path(".asc")
    try:
        download_file(runner, config.DOCKER_KEY_URL, armored)
        runner.run(["gpg", "--dearmor", "--yes", "-o", str(keyring), str(armored)])
    finally:
        armored.unlink(missing_ok=True)

    arch = runner.run(["dpkg", "--print-architecture"], capture_output=True)
    arch = (arch.stdout or "").strip() or "amd64"
    runner.write_file(source, docker_source_line(config, arch, keyring))
    return True


def install_distrobox(config: Config, runner: CommandRunner) -> bool:
    """
    Run the upstream installer script, but only once its checksum checks out.

    Raises:
        UnverifiedError: no checksum is pinned and unverified downloads are
            not allowed; nothing is downloaded
        ChecksumError: the downloaded script does not match the pinned digest
    """
    if command_exists("distrobox"):
        logger.info("distrobox already installed.")
        return False
    if not (config.DISTROBOX_INSTALLER_SHA256 or config.ALLOW_UNVERIFIED):
        raise UnverifiedError(
            "No pinned checksum for the distrobox installer; set "
            "DEBIAN_SETUP_DISTROBOX_SHA256 or DEBIAN_SETUP_ALLOW_UNVERIFIED=1"
        )

    print_step("Installing Distrobox manually...")
    script = temp_path(".sh")
    try:
        download_file(runner, config.DISTROBOX_INSTALL_URL, script)
        if runner.dry_run:
            logger.info("[dry-run] skipping checksum verification")
        elif config.DISTROBOX_INSTALLER_SHA256:
            verify_checksum(script, config.DISTROBOX_INSTALLER_SHA256)
        else:
            print_warning(
                f"Running unverified distrobox installer (sha256 {sha256sum(script)})"
            )
        runner.run(["bash", str(script)])
    finally:
        script.unlink(missing_ok=True)
    return True


def prepare_repos(config: Config, runner: CommandRunner) -> StepResult:
    print_step("Adding necessary third-party repositories...")

    added: List[str] = []
    refused: List[str] = []
    if add_tailscale_repo(config, runner):
        added.append("tailscale")
    if add_docker_repo(config, runner):
        added.append("docker")
    try:
        if install_distrobox(config, runner):
            added.append("distrobox")
    except UnverifiedError as e:
        logger.warning(str(e))
        print_warning(f"Skipping distrobox: {e}")
        refused.append("distrobox")

    if not added and not refused:
        return StepResult.skipped(STEP_NAME, "All repositories already configured")

    parts = []
    if added:
        parts.append(f"Configured: {', '.join(added)}")
        print_success(parts[-1])
    if refused:
        parts.append(f"Not installed (no pinned checksum): {', '.join(refused)}")
    message = "; ".join(parts)
    if not added:
        return StepResult.skipped(STEP_NAME, message)
    return StepResult.success(STEP_NAME, message)
