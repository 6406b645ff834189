"""
Execution engine: runs one scenario against one browser session.

The engine opens a session and a page when it is constructed and keeps
them until ``close()``. Use it as a context manager so the browser is
released on every exit path::

    with Engine(config) as engine:
        engine.execute(scenario)

Steps run strictly in order and the first failing step aborts the run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from yamlrun.core.config import RunConfig
from yamlrun.core.errors import SessionCloseError, StepFailedError, UnknownStepTypeError, YamlRunError
from yamlrun.runner.artifact_collector import collect_failure_artifacts
from yamlrun.runner.assertions import Assertions
from yamlrun.runner.provider import AutomationProvider, Page, Session
from yamlrun.runner.scenario import (
    AssertExists,
    AssertTextContent,
    AssertURLContains,
    AssertURLExact,
    Click,
    Fill,
    Goto,
    Scenario,
    Step,
)
from yamlrun.runner.scenario_validator import validate_step

logger = logging.getLogger(__name__)


@dataclass
class StepRecord:
    index: int
    kind: str
    status: str  # PASSED | FAILED
    duration_ms: int
    error: Optional[str] = None


class Engine:
    def __init__(
        self,
        config: RunConfig,
        provider: AutomationProvider | None = None,
        artifacts_dir: str | None = None,
    ) -> None:
        if provider is None:
            from yamlrun.runner.playwright_provider import PlaywrightProvider

            provider = PlaywrightProvider()

        self.config = config
        self.artifacts_dir = artifacts_dir
        self.step_log: List[StepRecord] = []

        self._session: Session | None = provider.open_session(config)
        try:
            self._page: Page = self._session.new_page()
        except Exception:
            # The browser is up but unusable; release it before reporting.
            session, self._session = self._session, None
            try:
                session.close()
            except Exception as close_err:
                logger.warning("closing browser after page failure: %s", close_err)
            raise
        self._assertions = Assertions(self._page)

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        # A close failure never replaces the error already propagating.
        try:
            self.close()
        except YamlRunError as close_err:
            logger.warning("closing browser after failure: %s", close_err)

    @property
    def page(self) -> Page:
        return self._page

    def execute(self, scenario: Scenario) -> None:
        """
        Run every step of ``scenario`` in order.

        :raises StepFailedError: for the first step that fails; the original
            error is its ``__cause__``
        """
        if self._session is None:
            raise YamlRunError("engine is closed")

        logger.info("Executing scenario: %s", scenario.description)
        self.step_log = []
        for i, step in enumerate(scenario.steps, start=1):
            kind = getattr(step, "kind", type(step).__name__)
            logger.info("Step %d: %s", i, kind)
            started = time.monotonic()
            try:
                self._execute_step(step)
            except Exception as e:
                self.step_log.append(StepRecord(i, kind, "FAILED", _elapsed_ms(started), str(e)))
                if self.artifacts_dir:
                    self._collect_artifacts(i, kind, e)
                raise StepFailedError(i, step, e) from e
            self.step_log.append(StepRecord(i, kind, "PASSED", _elapsed_ms(started)))

        logger.info("Scenario completed successfully")

    def _execute_step(self, step: Step) -> None:
        validate_step(step)

        if isinstance(step, Goto):
            self._page.navigate(step.url)
        elif isinstance(step, Click):
            self._page.click(step.selector)
        elif isinstance(step, Fill):
            self._page.fill(step.selector, step.value)
        elif isinstance(step, AssertTextContent):
            self._assertions.assert_text_content(step.selector, step.contains)
        elif isinstance(step, AssertURLContains):
            self._assertions.assert_url_contains(step.contains)
        elif isinstance(step, AssertURLExact):
            self._assertions.assert_url(step.url)
        elif isinstance(step, AssertExists):
            self._assertions.assert_exists(step.selector)
        else:
            raise UnknownStepTypeError(step)

    def _collect_artifacts(self, index: int, kind: str, error: BaseException) -> None:
        try:
            collect_failure_artifacts(self._page, self.artifacts_dir, index, kind, error)
        except OSError as e:
            logger.warning("could not write failure artifacts for step %d: %s", index, e)

    def close(self) -> None:
        """Release the browser. Safe to call more than once."""
        session, self._session = self._session, None
        if session is None:
            return
        try:
            session.close()
        except YamlRunError:
            raise
        except Exception as e:
            raise SessionCloseError(e) from e


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
