"""Assertions evaluated against the current page. None of them change page state."""

from __future__ import annotations

from yamlrun.core.errors import ElementNotFoundError, TextMismatchError, URLMismatchError
from yamlrun.runner.provider import Page


class Assertions:
    def __init__(self, page: Page) -> None:
        self._page = page

    def assert_text_content(self, selector: str, expected: str) -> None:
        """The element must exist and its text must equal ``expected`` exactly."""
        if not self._page.element_exists(selector):
            raise ElementNotFoundError(selector)
        actual = self._page.element_text(selector)
        if actual != expected:
            raise TextMismatchError(selector, expected, actual)

    def assert_url_contains(self, expected: str) -> None:
        actual = self._page.current_url()
        if expected not in actual:
            raise URLMismatchError("contains", expected, actual)

    def assert_url(self, expected: str) -> None:
        # Compared as-is: navigating to a bare domain yields a trailing slash.
        actual = self._page.current_url()
        if actual != expected:
            raise URLMismatchError("exact", expected, actual)

    def assert_exists(self, selector: str) -> None:
        if not self._page.element_exists(selector):
            raise ElementNotFoundError(selector)
