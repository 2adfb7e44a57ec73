"""Error types and per-step results."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence


class SetupError(Exception):
    """Base class for failures a setup step reports instead of crashing."""


class PrivilegeError(SetupError):
    pass


class CommandError(SetupError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr or ""
        message = f"Command failed ({returncode}): {' '.join(self.command)}"
        if self.stderr.strip():
            message += f"\n{self.stderr.strip()}"
        super().__init__(message)


class DownloadError(SetupError):
    pass


class ChecksumError(SetupError):
    """A fetched file has no known checksum, or does not match it."""


class UnverifiedError(ChecksumError):
    """No checksum is pinned for a script that would be executed."""


class ArchiveNotFoundError(SetupError):
    pass


class AmbiguousArchiveError(SetupError):
    def __init__(self, directory, candidates: List):
        self.candidates = sorted(candidates)
        names = ", ".join(p.name for p in self.candidates)
        super().__init__(
            f"Found {len(self.candidates)} matching archives in {directory}: {names}. "
            "Keep exactly one and try again."
        )


class StepStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class FailurePolicy(str, Enum):
    ABORT = "abort"  # stop at the first failed step
    CONTINUE = "continue"  # run every step, report failures at the end


@dataclass
class StepResult:
    name: str
    status: StepStatus
    message: str = ""
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status is not StepStatus.FAILED

    @classmethod
    def success(cls, name: str, message: str = "") -> "StepResult":
        return cls(name, StepStatus.SUCCESS, message)

    @classmethod
    def skipped(cls, name: str, message: str = "") -> "StepResult":
        return cls(name, StepStatus.SKIPPED, message)

    @classmethod
    def failed(cls, name: str, error: BaseException) -> "StepResult":
        return cls(name, StepStatus.FAILED, str(error), error)
