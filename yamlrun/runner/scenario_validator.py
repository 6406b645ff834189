"""
Required-field checks applied just before a step runs.

The loader accepts a recognized step even when its fields are missing;
the engine calls ``validate_step`` when it reaches the step, so a broken
step late in a file is only reported if every earlier step passed.
"""

from __future__ import annotations

from yamlrun.core.errors import MissingFieldError, UnknownStepTypeError
from yamlrun.runner.scenario import (
    AssertExists,
    AssertTextContent,
    AssertURLContains,
    AssertURLExact,
    Click,
    Fill,
    Goto,
    Step,
)

# step class -> [(attribute, message)], checked in order
REQUIRED_FIELDS: dict[type, list[tuple[str, str]]] = {
    Goto: [("url", "goto step requires URL")],
    Click: [("selector", "click step requires selector")],
    Fill: [
        ("selector", "fill step requires selector"),
        ("value", "fill step requires value"),
    ],
    AssertTextContent: [
        ("selector", "text_content assertion requires selector"),
        ("contains", "text_content assertion requires contains value"),
    ],
    AssertURLContains: [("contains", "url assertion requires contains value")],
    AssertURLExact: [("url", "url assertion requires url value")],
    AssertExists: [("selector", "exists assertion requires selector")],
}


def validate_step(step: Step) -> None:
    """
    Check that ``step`` carries every field its kind needs.

    :raises MissingFieldError: on the first empty required field
    :raises UnknownStepTypeError: if ``step`` is not a known step class
    """
    required = REQUIRED_FIELDS.get(type(step))
    if required is None:
        raise UnknownStepTypeError(step)
    for field, message in required:
        if not getattr(step, field):
            raise MissingFieldError(step.kind, field, message)
