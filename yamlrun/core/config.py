"""
Centralised configuration using Pydantic settings.

``Settings`` supplies the defaults for the command line. Environment
variables (prefixed with ``YAMLRUN_``) or a ``.env`` file at the working
directory override the values defined here, and command-line flags
override both.

``RunConfig`` is the immutable configuration handed to one execution
engine.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT_MS = 30000


class BrowserKind(str, Enum):
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


class RunConfig(BaseModel):
    """Browser selection and limits for one engine. Frozen after creation."""

    model_config = ConfigDict(frozen=True)

    browser: BrowserKind = BrowserKind.CHROMIUM
    headless: bool = True
    # Advisory; passed through to the provider, never enforced by the engine.
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)


class Settings(BaseSettings):
    """
    Defaults loaded from the environment.

    ``YAMLRUN_BROWSER``: browser engine (chromium, firefox, webkit).
    ``YAMLRUN_HEADLESS``: run without a visible window.
    ``YAMLRUN_TIMEOUT_MS``: default timeout for browser operations.
    ``YAMLRUN_AUTO_INSTALL``: offer to install a missing browser.
    ``YAMLRUN_OUTPUT_DIR``: where step logs and reports are written.
    Reports are skipped when empty.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="YAMLRUN_", extra="ignore")

    BROWSER: BrowserKind = BrowserKind.CHROMIUM
    HEADLESS: bool = True
    TIMEOUT_MS: int = DEFAULT_TIMEOUT_MS
    AUTO_INSTALL: bool = True
    OUTPUT_DIR: str = ""


settings = Settings()
