"""
Shared test fixtures: a Config pointed at tmp_path and a recording runner.
"""

import subprocess
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from debian_setup.config import Config
from debian_setup.system import CommandRunner


def _contains(command: List[str], parts: List[str]) -> bool:
    n = len(parts)
    return any(command[i : i + n] == parts for i in range(len(command) - n + 1))


class FakeRunner(CommandRunner):
    """CommandRunner that records argv and answers from scripted rules."""

    def __init__(self, dry_run: bool = False):
        super().__init__(dry_run=dry_run)
        self.commands: List[List[str]] = []
        self._rules = []

    def on(
        self,
        *parts: str,
        stdout: str = "",
        returncode: int = 0,
        action: Optional[Callable[[List[str]], None]] = None,
    ) -> None:
        """Answer commands containing ``parts`` (latest rule wins)."""
        self._rules.append((list(parts), stdout, returncode, action))

    def find(self, *parts: str) -> List[List[str]]:
        return [c for c in self.commands if _contains(c, list(parts))]

    def ran(self, *parts: str) -> bool:
        return bool(self.find(*parts))

    def _execute(self, command, capture_output, input_text):
        self.commands.append(command)
        for parts, stdout, returncode, action in reversed(self._rules):
            if _contains(command, parts):
                if action is not None:
                    action(command)
                stderr = "" if returncode == 0 else "simulated failure"
                return subprocess.CompletedProcess(
                    command, returncode, stdout=stdout, stderr=stderr
                )
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def dry_runner() -> FakeRunner:
    return FakeRunner(dry_run=True)


@pytest.fixture
def config(tmp_path: Path) -> Config:
    home = tmp_path / "home" / "alice"
    home.mkdir(parents=True)
    return Config(
        USERNAME="alice",
        USER_HOME=home,
        LOG_FILE=str(tmp_path / "debian_setup.log"),
        APT_SOURCES_DIR=tmp_path / "sources.list.d",
        APT_KEYRINGS_DIR=tmp_path / "apt-keyrings",
        SHARE_KEYRINGS_DIR=tmp_path / "share-keyrings",
        WATERFOX_INSTALL_DIR=tmp_path / "opt" / "waterfox",
        WATERFOX_BIN_LINK=tmp_path / "bin" / "waterfox",
        WATERFOX_DESKTOP_FILE=tmp_path / "applications" / "waterfox.desktop",
    )
