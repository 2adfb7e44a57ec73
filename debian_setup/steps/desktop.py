"""Switch between the GNOME and KDE desktop metapackages."""

from typing import Callable

from debian_setup.config import Config
from debian_setup.errors import StepResult
from debian_setup.log import get_logger
from debian_setup.system import CommandRunner
from debian_setup.ui import (
    NordColors,
    console,
    print_error,
    print_step,
    print_success,
    prompt_choice,
)

logger = get_logger("desktop")

STEP_NAME = "switch_desktop"


def is_installed(runner: CommandRunner, package: str) -> bool:
    result = runner.run(
        ["dpkg-query", "-W", "--showformat=${Status}", package],
        capture_output=True,
        check=False,
    )
    return result.returncode == 0 and "install ok installed" in (result.stdout or "")


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def switch_desktop_environment(
    config: Config,
    runner: CommandRunner,
    ask: Callable[[str], str] = prompt_choice,
) -> StepResult:
    print_step("Checking current desktop environment...")
    kde = is_installed(runner, config.KDE_METAPACKAGE)
    gnome = is_installed(runner, config.GNOME_METAPACKAGE)

    console.print(f"[bold {NordColors.FROST_3}]Current status:[/]")
    console.print(f"  KDE installed: {_yes_no(kde)}")
    console.print(f"  GNOME installed: {_yes_no(gnome)}")
    console.print()
    console.print("Which desktop environment do you want to switch to?")
    console.print("1) GNOME")
    console.print("2) KDE")
    choice = ask("Enter your choice: ")

    if choice == "1":
        target, purge, remove = "GNOME", kde, config.KDE_PURGE_PACKAGES
        install = config.GNOME_METAPACKAGE
    elif choice == "2":
        target, purge, remove = "KDE", gnome, config.GNOME_PURGE_PACKAGES
        install = config.KDE_METAPACKAGE
    else:
        print_error("Invalid choice. Aborting.")
        return StepResult.skipped(STEP_NAME, f"Invalid choice: {choice!r}")

    print_step(f"Switching to {target}...")
    if purge:
        runner.run(["apt-get", "purge", "-y", *remove])
        runner.run(["apt-get", "autoremove", "--purge", "-y"])
    runner.run(["apt-get", "install", "-y", install])

    print_success("Done. You may want to reboot to fully switch desktop environments.")
    return StepResult.success(STEP_NAME, f"Switched to {target}; reboot advised")
