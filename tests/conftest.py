"""
Shared pytest configuration.

``--scenario`` lets ``tests/e2e/test_scenario.py`` run an arbitrary YAML
file against a real browser. The remaining fixtures provide an in-memory
automation provider so the engine can be tested without Playwright.
"""

from __future__ import annotations

import pytest

from yamlrun.core.config import RunConfig
from yamlrun.core.errors import PageActionError
from yamlrun.runner.engine import Engine


def pytest_addoption(parser):
    """Hook to add custom command-line options to pytest."""
    parser.addoption("--scenario", action="store", default=None)


@pytest.fixture(scope="session")
def scenario_path(pytestconfig):
    """Path given with ``--scenario``; tests using it are skipped without one."""
    path = pytestconfig.getoption("--scenario")
    if not path:
        pytest.skip("no --scenario given")
    return path


class FakePage:
    """Page double: selectors map to element text, every call is recorded."""

    def __init__(self, elements=None, url="about:blank"):
        self.elements = dict(elements or {})
        self.url = url
        self.values = {}
        self.calls = []
        self.fail_on = {}  # action name -> exception raised when called

    def _record(self, action, *args):
        self.calls.append((action,) + args)
        if action in self.fail_on:
            raise self.fail_on[action]

    def _require(self, action, selector):
        if selector not in self.elements:
            raise PageActionError(action, selector, Exception("element not found"))

    @property
    def actions(self):
        """Calls that drive the page, without read-only queries."""
        return [c for c in self.calls if c[0] in ("navigate", "click", "fill", "set_content")]

    def navigate(self, url):
        self._record("navigate", url)
        self.url = url

    def click(self, selector):
        self._record("click", selector)
        self._require("click element", selector)

    def fill(self, selector, value):
        self._record("fill", selector, value)
        self._require("fill element", selector)
        self.values[selector] = value

    def current_url(self):
        self._record("current_url")
        return self.url

    def element_count(self, selector):
        self._record("element_count", selector)
        return 1 if selector in self.elements else 0

    def element_exists(self, selector):
        self._record("element_exists", selector)
        return selector in self.elements

    def element_text(self, selector):
        self._record("element_text", selector)
        return self.elements[selector]

    def input_value(self, selector):
        self._record("input_value", selector)
        return self.values.get(selector, "")

    def set_content(self, html):
        self._record("set_content", html)

    def screenshot(self, path):
        self._record("screenshot", path)
        with open(path, "wb") as f:
            f.write(b"\x89PNG fake")

    def content(self):
        self._record("content")
        return "<html><body>fake</body></html>"


class FakeSession:
    def __init__(self, page, page_error=None, close_error=None):
        self.page = page
        self.page_error = page_error
        self.close_error = close_error
        self.close_calls = 0

    def new_page(self):
        if self.page_error is not None:
            raise self.page_error
        return self.page

    def close(self):
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class FakeProvider:
    def __init__(self, page=None):
        self.page = page or FakePage()
        self.launch_errors = []  # raised by successive open_session calls
        self.page_error = None
        self.close_errors = []  # raised by close() of successive sessions
        self.sessions = []
        self.configs = []

    def open_session(self, config):
        self.configs.append(config)
        if self.launch_errors:
            raise self.launch_errors.pop(0)
        close_error = self.close_errors.pop(0) if self.close_errors else None
        session = FakeSession(self.page, self.page_error, close_error)
        self.sessions.append(session)
        return session


@pytest.fixture
def config():
    return RunConfig()


@pytest.fixture
def fake_page():
    return FakePage(elements={"#title": "Welcome", "input[name=email]": ""})


@pytest.fixture
def fake_provider(fake_page):
    return FakeProvider(fake_page)


@pytest.fixture
def engine_factory(fake_provider):
    """Drop-in for ``Engine`` that always uses the fake provider."""

    def factory(config, artifacts_dir=None):
        return Engine(config, provider=fake_provider, artifacts_dir=artifacts_dir)

    return factory
