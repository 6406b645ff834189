"""
Recovery when the requested browser is not installed.

If engine construction fails with ``BrowserUnavailableError`` and
auto-install is enabled, the user is asked whether to install the
browser. On "y"/"yes" the installer runs and construction is retried
once. Any other answer, an installer failure, or a failing retry ends
the run for that input.

The prompt, installer and output are injectable so the flow can be
driven without a terminal.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from enum import Enum
from typing import Callable, List, TypeVar

from yamlrun.core.errors import (
    BrowserInstallError,
    BrowserUnavailableError,
    InstallationDeclinedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecoveryState(str, Enum):
    IDLE = "idle"
    PROMPTING = "prompting"
    INSTALLING = "installing"
    RECOVERED = "recovered"
    DECLINED = "declined"
    FAILED = "failed"


def install_command(browser: str) -> List[str]:
    return [sys.executable, "-m", "playwright", "install", browser]


def install_browsers(browser: str) -> None:
    """Install the Playwright build of ``browser``. Output goes to the terminal."""
    subprocess.run(install_command(browser), check=True)


class InstallRecovery:
    def __init__(
        self,
        auto_install: bool,
        prompt: Callable[[str], str] = input,
        installer: Callable[[str], None] = install_browsers,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.auto_install = auto_install
        self.state = RecoveryState.IDLE
        self._prompt = prompt
        self._installer = installer
        self._echo = echo

    def open_engine(self, factory: Callable[[], T]) -> T:
        """
        Call ``factory`` and recover from a missing browser at most once.

        :raises BrowserUnavailableError: auto-install is disabled
        :raises InstallationDeclinedError: the user said no
        :raises BrowserInstallError: the installer failed
        """
        self.state = RecoveryState.IDLE
        try:
            return factory()
        except BrowserUnavailableError as e:
            if not self.auto_install:
                self.state = RecoveryState.FAILED
                raise
            if not self._confirm(e.browser):
                self.state = RecoveryState.DECLINED
                raise InstallationDeclinedError(e.browser) from e
            self._install(e.browser)

        self.state = RecoveryState.RECOVERED
        try:
            return factory()
        except Exception:
            self.state = RecoveryState.FAILED
            raise

    def _confirm(self, browser: str) -> bool:
        self.state = RecoveryState.PROMPTING
        self._echo(f"\nBrowser '{browser}' is not installed.")
        self._echo("yamlrun requires Playwright browsers to run tests.")
        self._echo("")
        try:
            answer = self._prompt("Would you like to install the required browsers now? (y/N) ")
        except EOFError:
            answer = ""
        if answer.strip().lower() in ("y", "yes"):
            return True
        self._echo("")
        self._echo("To install browsers manually, run:")
        self._echo(f"   python -m playwright install {browser}")
        return False

    def _install(self, browser: str) -> None:
        self.state = RecoveryState.INSTALLING
        self._echo(f"\nInstalling Playwright browser '{browser}'...")
        logger.info("running: %s", " ".join(install_command(browser)))
        try:
            self._installer(browser)
        except Exception as e:
            self.state = RecoveryState.FAILED
            self._echo(f"Failed to install browsers: {e}")
            raise BrowserInstallError(browser, e) from e
        self._echo("Browsers installed successfully!\n")
