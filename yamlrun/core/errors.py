"""
Error taxonomy for loading and running scenarios.

Every error raised by yamlrun derives from ``YamlRunError`` so callers
can tell our failures apart from bugs. The families mirror the stages a
scenario goes through:

- ``LoadError``: the document could not be turned into a scenario
- ``ValidationError``: a step is missing data it needs to run
- ``ProviderError``: the browser automation layer failed
- ``ScenarioAssertionError``: an ``assert`` step did not hold

Context (file path, step index) is added by wrapping, with the original
error kept as ``__cause__``.
"""

from __future__ import annotations

from typing import Any


class YamlRunError(Exception):
    """Base class for all yamlrun errors."""


# ---- loading ---------------------------------------------------------------


class LoadError(YamlRunError):
    pass


class EmptyDocumentError(LoadError):
    def __init__(self) -> None:
        super().__init__("empty YAML content")


class ScenarioSyntaxError(LoadError):
    """The text is not a YAML mapping we can read."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"failed to parse YAML: {detail}")
        self.detail = detail


class UnrecognizedStepError(LoadError):
    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"step {index}: {reason}")
        self.index = index
        self.reason = reason


# ---- validation ------------------------------------------------------------


class ValidationError(YamlRunError):
    pass


class MissingFieldError(ValidationError):
    def __init__(self, kind: str, field: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field


class UnknownStepTypeError(ValidationError):
    def __init__(self, step: Any) -> None:
        super().__init__(f"unknown step type: {type(step).__name__}")
        self.step = step


# ---- provider --------------------------------------------------------------


class ProviderError(YamlRunError):
    pass


class LaunchError(ProviderError):
    pass


class BrowserUnavailableError(ProviderError):
    """The requested browser executable is not installed on this host."""

    def __init__(self, browser: str, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"browser '{browser}' is not installed{detail}")
        self.browser = browser
        self.cause = cause


class SessionCloseError(ProviderError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"failed to close browser: {cause}")


class PageActionError(ProviderError):
    def __init__(self, action: str, target: str, cause: BaseException) -> None:
        super().__init__(f"failed to {action} {target}: {cause}")
        self.action = action
        self.target = target


class InstallationDeclinedError(ProviderError):
    def __init__(self, browser: str) -> None:
        super().__init__(f"browser installation required: '{browser}' is not installed")
        self.browser = browser


class BrowserInstallError(ProviderError):
    def __init__(self, browser: str, cause: BaseException) -> None:
        super().__init__(f"failed to install browser '{browser}': {cause}")
        self.browser = browser


# ---- assertions ------------------------------------------------------------


class ScenarioAssertionError(YamlRunError):
    pass


class ElementNotFoundError(ScenarioAssertionError):
    def __init__(self, selector: str) -> None:
        super().__init__(f"element with selector {selector} not found")
        self.selector = selector


class TextMismatchError(ScenarioAssertionError):
    def __init__(self, selector: str, expected: str, actual: str) -> None:
        super().__init__(
            f"text content mismatch for selector {selector}: "
            f"expected '{expected}', got '{actual}'"
        )
        self.selector = selector
        self.expected = expected
        self.actual = actual


class URLMismatchError(ScenarioAssertionError):
    def __init__(self, kind: str, expected: str, actual: str) -> None:
        if kind == "contains":
            msg = (
                "URL does not contain expected substring: "
                f"expected URL to contain '{expected}', got '{actual}'"
            )
        else:
            msg = f"URL mismatch: expected '{expected}', got '{actual}'"
        super().__init__(msg)
        self.kind = kind
        self.expected = expected
        self.actual = actual


# ---- wrapping --------------------------------------------------------------


class StepFailedError(YamlRunError):
    """A step failed; ``__cause__`` holds the reason."""

    def __init__(self, index: int, step: Any, cause: BaseException) -> None:
        super().__init__(f"step {index} failed: {cause}")
        self.index = index
        self.step = step


class PathProcessingError(YamlRunError):
    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"failed to process {path}: {cause}")
        self.path = path
