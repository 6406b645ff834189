"""
Browser automation surface consumed by the execution engine.

The engine never talks to Playwright directly; it drives these protocols.
``playwright_provider`` is the real implementation and the test suite
swaps in an in-memory one.
"""

from __future__ import annotations

from typing import Protocol

from yamlrun.core.config import RunConfig


class Page(Protocol):
    def navigate(self, url: str) -> None: ...

    def click(self, selector: str) -> None: ...

    def fill(self, selector: str, value: str) -> None: ...

    def current_url(self) -> str: ...

    def element_exists(self, selector: str) -> bool: ...

    def element_text(self, selector: str) -> str: ...

    def element_count(self, selector: str) -> int: ...

    def input_value(self, selector: str) -> str: ...

    def set_content(self, html: str) -> None: ...

    def screenshot(self, path: str) -> None: ...

    def content(self) -> str: ...


class Session(Protocol):
    def new_page(self) -> Page: ...

    def close(self) -> None:
        """Release the browser. Called at most once per session by the engine."""
        ...


class AutomationProvider(Protocol):
    def open_session(self, config: RunConfig) -> Session:
        """
        Launch the configured browser.

        :raises BrowserUnavailableError: the browser executable is missing
        :raises LaunchError: any other launch failure
        """
        ...
