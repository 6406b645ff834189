"""Tests for the missing-browser recovery flow, driven without a terminal."""

import subprocess
import sys

import pytest

from yamlrun.core.errors import (
    BrowserInstallError,
    BrowserUnavailableError,
    InstallationDeclinedError,
    LaunchError,
)
from yamlrun.runner.install_recovery import InstallRecovery, RecoveryState, install_command


class Factory:
    """Raises the queued errors first, then returns a sentinel engine."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "engine"


def unavailable():
    return BrowserUnavailableError("firefox", Exception("Executable doesn't exist at /x/firefox"))


def make(auto_install=True, answer="y", installer=None):
    output = []
    installed = []

    def default_installer(browser):
        installed.append(browser)

    recovery = InstallRecovery(
        auto_install,
        prompt=lambda _msg: answer,
        installer=installer or default_installer,
        echo=output.append,
    )
    return recovery, output, installed


def test_no_error_stays_idle():
    recovery, output, installed = make()
    assert recovery.open_engine(Factory()) == "engine"
    assert recovery.state == RecoveryState.IDLE
    assert output == [] and installed == []


@pytest.mark.parametrize("answer", ["y", "Y", "yes", " YES \n"])
def test_accept_installs_and_retries_once(answer):
    recovery, _, installed = make(answer=answer)
    factory = Factory(unavailable())
    assert recovery.open_engine(factory) == "engine"
    assert recovery.state == RecoveryState.RECOVERED
    assert installed == ["firefox"]
    assert factory.calls == 2


@pytest.mark.parametrize("answer", ["", "n", "no", "maybe"])
def test_decline_prints_manual_instructions(answer):
    recovery, output, installed = make(answer=answer)
    factory = Factory(unavailable())
    with pytest.raises(InstallationDeclinedError) as exc:
        recovery.open_engine(factory)
    assert isinstance(exc.value.__cause__, BrowserUnavailableError)
    assert recovery.state == RecoveryState.DECLINED
    assert installed == []
    assert factory.calls == 1
    assert any("playwright install firefox" in line for line in output)


def test_end_of_input_counts_as_decline():
    def no_input(_msg):
        raise EOFError

    recovery = InstallRecovery(True, prompt=no_input, installer=lambda b: None, echo=lambda s: None)
    with pytest.raises(InstallationDeclinedError):
        recovery.open_engine(Factory(unavailable()))
    assert recovery.state == RecoveryState.DECLINED


def test_installer_failure():
    def failing(browser):
        raise subprocess.CalledProcessError(1, ["playwright", "install", browser])

    recovery, _, _ = make(installer=failing)
    factory = Factory(unavailable())
    with pytest.raises(BrowserInstallError):
        recovery.open_engine(factory)
    assert recovery.state == RecoveryState.FAILED
    assert factory.calls == 1


def test_retry_failure_is_not_retried_again():
    recovery, _, installed = make()
    factory = Factory(unavailable(), unavailable())
    with pytest.raises(BrowserUnavailableError):
        recovery.open_engine(factory)
    assert recovery.state == RecoveryState.FAILED
    assert factory.calls == 2
    assert installed == ["firefox"]


def test_auto_install_disabled_fails_without_prompt():
    def prompt(_msg):
        raise AssertionError("must not prompt")

    recovery = InstallRecovery(False, prompt=prompt, installer=lambda b: None, echo=lambda s: None)
    with pytest.raises(BrowserUnavailableError):
        recovery.open_engine(Factory(unavailable()))
    assert recovery.state == RecoveryState.FAILED


def test_other_errors_are_not_recovered():
    recovery, output, _ = make()
    with pytest.raises(LaunchError):
        recovery.open_engine(Factory(LaunchError("no display")))
    assert recovery.state == RecoveryState.IDLE
    assert output == []


def test_install_command_uses_current_interpreter():
    assert install_command("webkit") == [sys.executable, "-m", "playwright", "install", "webkit"]
