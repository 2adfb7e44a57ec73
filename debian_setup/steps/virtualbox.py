"""VirtualBox from the vendor .run installer."""

import os
from pathlib import Path

from debian_setup.config import Config
from debian_setup.errors import ChecksumError, StepResult
from debian_setup.log import get_logger
from debian_setup.system import (
    CommandRunner,
    download_file,
    fetch_text,
    parse_sha256sums,
    temp_path,
    verify_checksum,
)
from debian_setup.ui import print_step, print_success

logger = get_logger("virtualbox")

STEP_NAME = "install_virtualbox"


def expected_checksum(config: Config, runner: CommandRunner) -> str:
    """Pinned checksum if configured, else the vendor's SHA256SUMS entry."""
    if config.VIRTUALBOX_SHA256:
        return config.VIRTUALBOX_SHA256
    sums = fetch_text(runner, config.VIRTUALBOX_SUMS_URL)
    digest = parse_sha256sums(sums, config.VIRTUALBOX_FILENAME)
    if not digest:
        raise ChecksumError(
            f"{config.VIRTUALBOX_FILENAME} is not listed in {config.VIRTUALBOX_SUMS_URL}"
        )
    return digest


def install_virtualbox(config: Config, runner: CommandRunner) -> StepResult:
    print_step("Installing kernel headers and DKMS for VirtualBox modules...")
    runner.run(["apt-get", "install", "-y", *config.VIRTUALBOX_BUILD_DEPS])

    print_step(f"Downloading VirtualBox {config.VIRTUALBOX_VERSION} .run installer...")
    installer: Path = temp_path(".run")
    try:
        download_file(runner, config.VIRTUALBOX_URL, installer)
        if runner.dry_run:
            logger.info("[dry-run] skipping checksum verification")
        else:
            verify_checksum(installer, expected_checksum(config, runner))
            os.chmod(installer, 0o755)

        print_step("Running VirtualBox installer as root...")
        runner.run([str(installer)])
    finally:
        installer.unlink(missing_ok=True)

    print_step("Configuring VirtualBox kernel modules...")
    runner.run(["/sbin/vboxconfig"])

    print_success(f"VirtualBox {config.VIRTUALBOX_VERSION} installed.")
    return StepResult.success(STEP_NAME, f"VirtualBox {config.VIRTUALBOX_VERSION}")
