import hashlib
from pathlib import Path

import pytest

from debian_setup.errors import ChecksumError, StepStatus
from debian_setup.steps.virtualbox import install_virtualbox

PAYLOAD = b"\x7fELF fake virtualbox installer"
DIGEST = hashlib.sha256(PAYLOAD).hexdigest()


@pytest.fixture
def download(config, runner):
    """Make the installer download write PAYLOAD; returns recorded paths."""
    paths = []

    def write_installer(command):
        paths.append(Path(command[-1]))
        paths[-1].write_bytes(PAYLOAD)

    runner.on("curl", "-fsSL", config.VIRTUALBOX_URL, action=write_installer)
    return paths


def _installer_runs(runner, paths):
    return [c for c in runner.commands if paths and c == [str(paths[0])]]


def test_pinned_checksum_runs_installer_then_vboxconfig(config, runner, download):
    config.VIRTUALBOX_SHA256 = DIGEST

    result = install_virtualbox(config, runner)

    assert result.status is StepStatus.SUCCESS
    assert runner.commands[0] == ["apt-get", "install", "-y", "dkms", "linux-headers-amd64"]
    assert len(_installer_runs(runner, download)) == 1
    assert runner.commands[-1] == ["/sbin/vboxconfig"]
    assert not runner.ran(config.VIRTUALBOX_SUMS_URL)
    assert not download[0].exists()


def test_checksum_from_vendor_sums(config, runner, download):
    runner.on(
        "curl", "-fsSL", config.VIRTUALBOX_SUMS_URL,
        stdout=f"{'1' * 64} *VirtualBox-7.1.8-168469-Linux_x86.run\n"
        f"{DIGEST} *{config.VIRTUALBOX_FILENAME}\n",
    )

    install_virtualbox(config, runner)

    assert len(_installer_runs(runner, download)) == 1


def test_mismatch_never_executes(config, runner, download):
    config.VIRTUALBOX_SHA256 = "f" * 64

    with pytest.raises(ChecksumError):
        install_virtualbox(config, runner)

    assert _installer_runs(runner, download) == []
    assert not runner.ran("/sbin/vboxconfig")
    assert not download[0].exists()


def test_unlisted_file_in_sums_fails(config, runner, download):
    runner.on("curl", "-fsSL", config.VIRTUALBOX_SUMS_URL, stdout="abc *other.run\n")

    with pytest.raises(ChecksumError):
        install_virtualbox(config, runner)
    assert _installer_runs(runner, download) == []
