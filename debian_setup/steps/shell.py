"""Fish shell profile and login shell."""

import shutil
from pathlib import Path

from debian_setup.config import Config
from debian_setup.errors import SetupError, StepResult
from debian_setup.log import get_logger
from debian_setup.system import CommandRunner
from debian_setup.ui import print_step, print_success

logger = get_logger("shell")

STEP_NAME = "fish_setup"


def render_fish_config(user_home: Path) -> str:
    return f"""# No greeting
set -g fish_greeting ""

# Prompt Configuration
function fish_prompt
    set_color white; echo -n (whoami)
    set_color normal; echo -n ':'
    set_color cyan; echo -n (pwd)
    set_color normal; echo -n ' '
end

# Environment Variables
export PATH="$PATH:{user_home}/.local/bin"

# Aliases
alias lsblk="lsblk -e7"
"""


def setup_fish(config: Config, runner: CommandRunner) -> StepResult:
    """Write the fish config for the target user and make fish their login shell."""
    print_step("Setting up Fish config...")

    dot_config = config.FISH_CONFIG_DIR.parent
    created_dot_config = not dot_config.exists()
    runner.write_file(config.FISH_CONFIG_FILE, render_fish_config(config.USER_HOME))
    logger.info(f"Wrote {config.FISH_CONFIG_FILE}")

    owner = f"{config.USERNAME}:{config.USERNAME}"
    if created_dot_config:
        runner.run(["chown", owner, str(dot_config)])
    runner.run(["chown", "-R", owner, str(config.FISH_CONFIG_DIR)])

    fish = shutil.which("fish")
    if not fish and runner.dry_run:
        fish = "/usr/bin/fish"
    if not fish:
        raise SetupError("fish is not installed; install the desktop packages first")
    runner.run(["chsh", "-s", fish, config.USERNAME])

    print_success(f"Fish shell set as default for user: {config.USERNAME}")
    return StepResult.success(STEP_NAME, f"{config.FISH_CONFIG_FILE} written")
