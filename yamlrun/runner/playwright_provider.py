"""
Automation provider backed by Playwright's synchronous API.

Each session owns its own Playwright driver and browser. Page actions use
the locator API so that Playwright's auto-waiting applies, and every
failure is re-raised as ``PageActionError`` naming what we tried to do.
"""

from __future__ import annotations

import logging

from playwright.sync_api import Browser, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page as PlaywrightPage

from yamlrun.core.config import RunConfig
from yamlrun.core.errors import BrowserUnavailableError, LaunchError, PageActionError, SessionCloseError

logger = logging.getLogger(__name__)

# Playwright has no error code for a missing browser build, only the message
# printed by the driver ("Executable doesn't exist at ... run playwright
# install"). These substrings are matched case-insensitively.
BROWSER_UNAVAILABLE_PATTERNS = ("executable doesn't exist", "not found", "install")


def is_browser_unavailable(error: BaseException) -> bool:
    if isinstance(error, FileNotFoundError):
        return True
    msg = str(error).lower()
    return any(p in msg for p in BROWSER_UNAVAILABLE_PATTERNS)


class PlaywrightPageAdapter:
    def __init__(self, page: PlaywrightPage) -> None:
        self._page = page

    def navigate(self, url: str) -> None:
        try:
            self._page.goto(url)
        except PlaywrightError as e:
            raise PageActionError("navigate to", url, e) from e

    def click(self, selector: str) -> None:
        try:
            self._page.locator(selector).click()
        except PlaywrightError as e:
            raise PageActionError("click element", selector, e) from e

    def fill(self, selector: str, value: str) -> None:
        try:
            self._page.locator(selector).fill(value)
        except PlaywrightError as e:
            raise PageActionError("fill element", f"{selector} with value {value}", e) from e

    def current_url(self) -> str:
        return self._page.url

    def element_count(self, selector: str) -> int:
        try:
            return self._page.locator(selector).count()
        except PlaywrightError as e:
            raise PageActionError("get element count for", selector, e) from e

    def element_exists(self, selector: str) -> bool:
        return self.element_count(selector) > 0

    def element_text(self, selector: str) -> str:
        try:
            return self._page.locator(selector).text_content() or ""
        except PlaywrightError as e:
            raise PageActionError("get text content for", selector, e) from e

    def input_value(self, selector: str) -> str:
        try:
            return self._page.locator(selector).input_value()
        except PlaywrightError as e:
            raise PageActionError("get input value for", selector, e) from e

    def set_content(self, html: str) -> None:
        try:
            self._page.set_content(html)
        except PlaywrightError as e:
            raise PageActionError("set", "content", e) from e

    def screenshot(self, path: str) -> None:
        self._page.screenshot(path=path, full_page=True)

    def content(self) -> str:
        return self._page.content()


class PlaywrightSession:
    def __init__(self, playwright: Playwright, browser: Browser, config: RunConfig) -> None:
        self._playwright = playwright
        self._browser = browser
        self._config = config
        self._closed = False

    def new_page(self) -> PlaywrightPageAdapter:
        try:
            page = self._browser.new_page()
        except PlaywrightError as e:
            raise LaunchError(f"failed to create new page: {e}") from e
        page.set_default_timeout(self._config.timeout_ms)
        return PlaywrightPageAdapter(page)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            try:
                self._browser.close()
            finally:
                self._playwright.stop()
        except PlaywrightError as e:
            raise SessionCloseError(e) from e


class PlaywrightProvider:
    def open_session(self, config: RunConfig) -> PlaywrightSession:
        try:
            pw = sync_playwright().start()
        except PlaywrightError as e:
            raise LaunchError(f"failed to run playwright: {e}") from e

        browser_type = getattr(pw, config.browser.value)
        logger.debug("launching %s (headless=%s)", config.browser.value, config.headless)
        try:
            browser = browser_type.launch(headless=config.headless, timeout=config.timeout_ms)
        except (PlaywrightError, FileNotFoundError) as e:
            pw.stop()
            if is_browser_unavailable(e):
                raise BrowserUnavailableError(config.browser.value, e) from e
            raise LaunchError(f"failed to launch browser: {e}") from e
        return PlaywrightSession(pw, browser, config)
