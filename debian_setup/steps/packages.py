"""APT package installation."""

from debian_setup.config import Config
from debian_setup.errors import StepResult
from debian_setup.log import get_logger
from debian_setup.system import CommandRunner
from debian_setup.ui import print_step, print_success

logger = get_logger("packages")

STEP_NAME = "install_packages"


def install_packages(config: Config, runner: CommandRunner) -> StepResult:
    """Remove the stock Firefox builds, then install the curated package set."""
    print_step("Removing Firefox variants...")
    runner.run(["apt-get", "purge", "-y", *config.REMOVE_PACKAGES], best_effort=True)
    runner.run(["apt-get", "autoremove", "--purge", "-y"])

    print_step("Installing APT packages...")
    runner.run(["apt-get", "update"])
    runner.run(["apt-get", "install", "-y", *config.APT_PACKAGES])

    print_success(f"Installed {len(config.APT_PACKAGES)} packages.")
    return StepResult.success(
        STEP_NAME, f"{len(config.APT_PACKAGES)} packages installed"
    )
