"""Flatpak, the Flathub remote and the application list."""

from typing import List, Set

from debian_setup.config import Config
from debian_setup.errors import StepResult
from debian_setup.log import get_logger
from debian_setup.system import CommandRunner, command_exists
from debian_setup.ui import item_progress, print_step, print_success

logger = get_logger("flatpak")

STEP_NAME = "install_flatpaks"


def installed_apps(config: Config, runner: CommandRunner) -> Set[str]:
    result = runner.run_as_user(
        config.USERNAME,
        ["flatpak", "list", "--user", "--app", "--columns=application"],
        capture_output=True,
        check=False,
    )
    if result.returncode != 0:
        return set()
    return {line.strip() for line in (result.stdout or "").splitlines() if line.strip()}


def install_flatpaks(config: Config, runner: CommandRunner) -> StepResult:
    """Install Flatpak if needed, register Flathub and install each app for the user."""
    print_step("Installing Flatpak and configuring Flathub...")

    if not command_exists("flatpak"):
        runner.run(["apt-get", "install", "-y", "flatpak"])
        logger.info("Flatpak installed.")

    runner.run_as_user(
        config.USERNAME,
        [
            "flatpak",
            "remote-add",
            "--user",
            "--if-not-exists",
            config.FLATPAK_REMOTE,
            config.FLATPAK_REMOTE_URL,
        ],
    )

    present = installed_apps(config, runner)
    newly_installed: List[str] = []

    with item_progress() as progress:
        task = progress.add_task("Installing Flatpak apps", total=len(config.FLATPAK_APPS))
        for app in config.FLATPAK_APPS:
            if app in present:
                logger.info(f"Flatpak app already installed: {app}")
            else:
                runner.run_as_user(
                    config.USERNAME,
                    ["flatpak", "install", "-y", "--user", config.FLATPAK_REMOTE, app],
                )
                logger.info(f"Installed Flatpak app: {app}")
                newly_installed.append(app)
            progress.update(task, advance=1)

    if not newly_installed:
        return StepResult.skipped(STEP_NAME, "All Flatpak apps already installed")
    print_success(f"Installed {len(newly_installed)} Flatpak apps.")
    return StepResult.success(STEP_NAME, f"{len(newly_installed)} apps installed")
