import pytest

from debian_setup.errors import StepStatus
from debian_setup.steps.desktop import switch_desktop_environment


@pytest.fixture
def installed(runner):
    """Mark metapackages as installed for dpkg-query."""

    def mark(*packages):
        for package in packages:
            runner.on("--showformat=${Status}", package, stdout="install ok installed")

    runner.on("dpkg-query", returncode=1)
    return mark


def _answer(value):
    return lambda message: value


def test_gnome_on_clean_system_installs_without_purge(config, runner, installed):
    result = switch_desktop_environment(config, runner, ask=_answer("1"))

    assert result.status is StepStatus.SUCCESS
    assert runner.ran("apt-get", "install", "-y", "task-gnome-desktop")
    assert not runner.ran("apt-get", "purge")
    assert not runner.ran("apt-get", "autoremove")


def test_gnome_over_kde_purges_kde_first(config, runner, installed):
    installed("task-kde-desktop")

    switch_desktop_environment(config, runner, ask=_answer("1"))

    apt = [c for c in runner.commands if c[0] == "apt-get"]
    assert apt == [
        ["apt-get", "purge", "-y", "task-kde-desktop", "kde-standard", "kde-plasma-desktop", "kde-full"],
        ["apt-get", "autoremove", "--purge", "-y"],
        ["apt-get", "install", "-y", "task-gnome-desktop"],
    ]


def test_kde_over_gnome_purges_gnome(config, runner, installed):
    installed("task-gnome-desktop")

    switch_desktop_environment(config, runner, ask=_answer("2"))

    assert runner.ran("purge", "-y", "task-gnome-desktop", "gnome-core", "gnome-shell", "gnome-session")
    assert runner.ran("apt-get", "install", "-y", "task-kde-desktop")


def test_kde_with_only_kde_installed_does_not_purge(config, runner, installed):
    installed("task-kde-desktop")

    switch_desktop_environment(config, runner, ask=_answer("2"))

    assert not runner.ran("apt-get", "purge")
    assert runner.ran("apt-get", "install", "-y", "task-kde-desktop")


def test_invalid_choice_changes_nothing(config, runner, installed):
    result = switch_desktop_environment(config, runner, ask=_answer("3"))

    assert result.status is StepStatus.SKIPPED
    assert not runner.ran("apt-get")


def test_status_query_uses_long_format_option(config, runner, installed):
    switch_desktop_environment(config, runner, ask=_answer("3"))

    assert runner.ran("dpkg-query", "-W", "--showformat=${Status}", "task-kde-desktop")
    assert runner.ran("dpkg-query", "-W", "--showformat=${Status}", "task-gnome-desktop")
