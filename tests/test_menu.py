import pytest

from debian_setup.errors import FailurePolicy, SetupError, StepResult
from debian_setup.menu import QUIT_KEY, build_menu, dispatch, main_menu
from debian_setup.steps import browser, desktop, flatpak, packages, repos, shell, virtualbox

STEPS = {
    "setup_fish": shell,
    "prepare_repos": repos,
    "install_packages": packages,
    "install_flatpaks": flatpak,
    "install_virtualbox": virtualbox,
    "switch_desktop_environment": desktop,
    "install_waterfox": browser,
}


@pytest.fixture
def calls(monkeypatch):
    """Replace every step with a recorder; returns the call log."""
    log = []

    def recorder(name):
        def step(config, runner, **kwargs):
            log.append(name)
            return StepResult.success(name)

        return step

    for attr, module in STEPS.items():
        monkeypatch.setattr(module, attr, recorder(attr))
    return log

def test_menu_has_seven_options(config):
    keys = [o.key for o in build_menu(config)]
    assert keys == ["1", "2", "3", "4", "5", "6", "7"]


def test_quit_exits_zero_without_running_anything(config, runner, calls):
    assert dispatch(QUIT_KEY, config, runner) == 0
    assert calls == []
    assert runner.commands == []


@pytest.mark.parametrize("choice", ["9", "0", "", "abc"])
def test_invalid_input_exits_one(config, runner, calls, choice):
    assert dispatch(choice, config, runner) == 1
    assert calls == []


@pytest.mark.parametrize(
    "choice, expected",
    [
        ("1", ["setup_fish"]),
        ("2", ["prepare_repos", "install_packages"]),
        ("3", ["install_flatpaks"]),
        ("4", ["install_virtualbox"]),
        ("5", ["switch_desktop_environment"]),
        ("6", ["install_waterfox"]),
    ],
)
def test_each_option_routes_to_its_steps(config, runner, calls, choice, expected):
    assert dispatch(choice, config, runner) == 0
    assert calls == expected


def test_failed_step_aborts_option(config, runner, monkeypatch):
    log = []

    def broken(config, runner):
        log.append("prepare_repos")
        raise SetupError("no network")

    def install(config, runner):
        log.append("install_packages")
        return StepResult.success("install_packages")

    monkeypatch.setattr(repos, "prepare_repos", broken)
    monkeypatch.setattr(packages, "install_packages", install)

    assert dispatch("2", config, runner) == 1
    assert log == ["prepare_repos"]


def test_continue_policy_runs_remaining_steps(config, runner, monkeypatch):
    log = []

    def broken(config, runner):
        log.append("prepare_repos")
        raise SetupError("no network")

    def install(config, runner):
        log.append("install_packages")
        return StepResult.success("install_packages")

    monkeypatch.setattr(repos, "prepare_repos", broken)
    monkeypatch.setattr(packages, "install_packages", install)

    assert dispatch("2", config, runner, FailurePolicy.CONTINUE) == 1
    assert log == ["prepare_repos", "install_packages"]


def test_skipped_result_still_exits_zero(config, runner, monkeypatch):
    monkeypatch.setattr(
        flatpak,
        "install_flatpaks",
        lambda config, runner: StepResult.skipped("install_flatpaks", "nothing to do"),
    )
    assert dispatch("3", config, runner) == 0


def test_desktop_step_receives_menu_prompt(config, runner, monkeypatch):
    seen = {}

    def switch(config, runner, ask):
        seen["answer"] = ask("Enter your choice: ")
        return StepResult.success("switch_desktop_environment")

    monkeypatch.setattr(desktop, "switch_desktop_environment", switch)

    assert dispatch("5", config, runner, ask=lambda message: "2") == 0
    assert seen["answer"] == "2"


def test_main_menu_reads_one_choice(config, runner, calls):
    answers = iter(["1", "7"])
    asked = []

    def ask(message):
        asked.append(message)
        return next(answers)

    assert main_menu(config, runner, ask=ask) == 0
    assert asked == ["Choose an option: "]
    assert calls == ["setup_fish"]


def test_main_menu_preset_choice_skips_prompt(config, runner, calls):
    def ask(message):
        raise AssertionError("should not prompt")

    assert main_menu(config, runner, ask=ask, choice="7") == 0


def test_quit_prints_nothing(config, runner, capsys):
    assert dispatch(QUIT_KEY, config, runner) == 0
    out, err = capsys.readouterr()
    assert out == ""
    assert err == ""


def test_option_two_installs_packages_on_fresh_host(config, runner, monkeypatch):
    monkeypatch.setattr(repos, "command_exists", lambda name: False)
    runner.on("dpkg", "--print-architecture", stdout="amd64\n")

    assert dispatch("2", config, runner) == 0
    assert runner.ran("apt-get", "install", "-y", "gimp")
    assert not runner.ran("bash")
