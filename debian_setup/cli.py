"""Command-line entry point."""

import argparse
import atexit
import logging
import os
import signal
import sys
from typing import List, Optional

from rich.traceback import install as install_rich_traceback

from debian_setup import __version__
from debian_setup.config import Config
from debian_setup.errors import FailurePolicy, PrivilegeError
from debian_setup.log import setup_logger
from debian_setup.menu import main_menu
from debian_setup.system import CommandRunner, cleanup_temp_files
from debian_setup.ui import NordColors, console, print_error, print_warning

logger = logging.getLogger("debian_setup")


def signal_handler(signum, frame) -> None:
    """Gracefully handle termination signals."""
    sig_name = signal.Signals(signum).name
    logger.error(f"Script interrupted by {sig_name}. Initiating cleanup.")
    console.print(f"[bold {NordColors.RED}]Interrupted by {sig_name}. Cleaning up...[/]")
    cleanup_temp_files()
    sys.exit(128 + signum)


def install_signal_handlers() -> None:
    for sig in (signal.SIGINT, signal.SIGTERM, signal.SIGHUP):
        signal.signal(sig, signal_handler)
    atexit.register(cleanup_temp_files)


def check_root() -> None:
    if os.geteuid() != 0:
        raise PrivilegeError("This script must be run with root privileges (sudo).")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="debian-setup",
        description="Interactive provisioning menu for a Debian workstation",
    )
    parser.add_argument(
        "--choice",
        default=None,
        help="Menu option to run without prompting (1-7)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log commands and file writes instead of performing them",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Run the remaining steps of an option after one fails",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Log file path (default: /var/log/debian_setup.log)",
    )
    parser.add_argument(
        "--no-root-check",
        action="store_true",
        help="Do not require root privileges",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    install_rich_traceback(show_locals=False)

    config = Config.from_environment(log_file=args.log_file)
    setup_logger(config.LOG_FILE)
    logger.debug(f"Target user {config.USERNAME} (home {config.USER_HOME})")

    try:
        if not (args.no_root_check or args.dry_run):
            check_root()
    except PrivilegeError as e:
        print_error(str(e))
        return 1

    install_signal_handlers()
    policy = FailurePolicy.CONTINUE if args.keep_going else FailurePolicy.ABORT
    runner = CommandRunner(dry_run=args.dry_run)

    try:
        return main_menu(config, runner, policy, choice=args.choice)
    except (KeyboardInterrupt, EOFError):
        print_warning("Operation cancelled by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
