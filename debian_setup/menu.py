"""
Menu rendering and dispatch.

The menu is shown once, one choice is read, and the steps behind that
choice run in order under a FailurePolicy. The returned integer is the
process exit status.
"""

import functools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from debian_setup.config import Config
from debian_setup.errors import FailurePolicy, SetupError, StepResult
from debian_setup.steps import browser, desktop, flatpak, packages, repos, shell, virtualbox
from debian_setup.system import CommandRunner
from debian_setup.ui import (
    NordColors,
    console,
    create_header,
    menu_table,
    print_error,
    print_results,
    prompt_choice,
)

logger = logging.getLogger("debian_setup.menu")

StepFunc = Callable[[Config, CommandRunner], StepResult]

QUIT_KEY = "7"


@dataclass
class MenuOption:
    key: str
    description: str
    steps: List[Tuple[str, StepFunc]] = field(default_factory=list)


def build_menu(
    config: Config, ask: Callable[[str], str] = prompt_choice
) -> List[MenuOption]:
    return [
        MenuOption(
            "1",
            "Setup Fish shell and config",
            [(shell.STEP_NAME, shell.setup_fish)],
        ),
        MenuOption(
            "2",
            "Install desktop packages (APT apps, Docker, Distrobox, remove Firefox)",
            [
                (repos.STEP_NAME, repos.prepare_repos),
                (packages.STEP_NAME, packages.install_packages),
            ],
        ),
        MenuOption(
            "3",
            "Install Flatpak apps (Flathub + your apps)",
            [(flatpak.STEP_NAME, flatpak.install_flatpaks)],
        ),
        MenuOption(
            "4",
            f"Install VirtualBox {config.VIRTUALBOX_VERSION} (.run installer)",
            [(virtualbox.STEP_NAME, virtualbox.install_virtualbox)],
        ),
        MenuOption(
            "5",
            "Switch between KDE or GNOME cleanly",
            [
                (
                    desktop.STEP_NAME,
                    functools.partial(desktop.switch_desktop_environment, ask=ask),
                )
            ],
        ),
        MenuOption(
            "6",
            "Install Waterfox (from archive in Downloads)",
            [(browser.STEP_NAME, browser.install_waterfox)],
        ),
        MenuOption(QUIT_KEY, "Quit"),
    ]


def execute_step(
    name: str, func: StepFunc, config: Config, runner: CommandRunner
) -> StepResult:
    """Run one step, turning a SetupError into a failed result."""
    logger.info(f"Running step {name}")
    start = time.time()
    try:
        result = func(config, runner)
    except SetupError as e:
        elapsed = time.time() - start
        logger.error(f"Step {name} failed after {elapsed:.2f}s: {e}")
        print_error(str(e))
        return StepResult.failed(name, e)

    elapsed = time.time() - start
    logger.info(f"Step {name} finished ({result.status.value}) in {elapsed:.2f}s")
    return result


def run_option(
    option: MenuOption,
    config: Config,
    runner: CommandRunner,
    policy: FailurePolicy = FailurePolicy.ABORT,
) -> List[StepResult]:
    results: List[StepResult] = []
    for name, func in option.steps:
        result = execute_step(name, func, config, runner)
        results.append(result)
        if not result.ok and policy is FailurePolicy.ABORT:
            logger.error(f"Aborting after failed step {name}")
            break
    return results


def dispatch(
    choice: str,
    config: Config,
    runner: CommandRunner,
    policy: FailurePolicy = FailurePolicy.ABORT,
    ask: Callable[[str], str] = prompt_choice,
) -> int:
    choice = choice.strip()
    if choice == QUIT_KEY:
        return 0

    option = next((o for o in build_menu(config, ask) if o.key == choice), None)
    if option is None or not option.steps:
        print_error("Invalid option")
        logger.debug(f"Rejected menu input {choice!r}")
        return 1

    results = run_option(option, config, runner, policy)
    print_results(results)
    return 0 if all(r.ok for r in results) else 1


def main_menu(
    config: Config,
    runner: CommandRunner,
    policy: FailurePolicy = FailurePolicy.ABORT,
    ask: Callable[[str], str] = prompt_choice,
    choice: Optional[str] = None,
) -> int:
    """Show the menu, read a single choice and run it."""
    console.print(create_header())
    console.print(f"[bold {NordColors.PURPLE}]Debian Installer Menu[/bold {NordColors.PURPLE}]")
    options = build_menu(config, ask)
    console.print(menu_table((o.key, o.description) for o in options))

    if choice is None:
        choice = ask("Choose an option: ")
    return dispatch(choice, config, runner, policy, ask)
