"""
Loading of scenario definitions from YAML.

A scenario describes an end-to-end workflow to exercise in a browser.
It has an optional description (``desc``) and a list of steps. Each
step is a single-key mapping whose key names the action::

    desc: Basic login test
    steps:
      - goto: https://example.com
      - click:
          selector: a[href='/login']
      - fill:
          selector: input[name=email]
          value: test@example.com
      - assert:
          type: url
          contains: /dashboard

Loading only checks structure. A recognized step with missing fields
loads fine and is rejected when the engine reaches it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

import yaml

from yamlrun.core.errors import (
    EmptyDocumentError,
    LoadError,
    ScenarioSyntaxError,
    UnrecognizedStepError,
)


@dataclass(frozen=True)
class Goto:
    url: str
    kind = "goto"


@dataclass(frozen=True)
class Click:
    selector: str
    kind = "click"


@dataclass(frozen=True)
class Fill:
    selector: str
    value: str
    kind = "fill"


@dataclass(frozen=True)
class AssertTextContent:
    selector: str
    contains: str
    kind = "assert:text_content"


@dataclass(frozen=True)
class AssertURLContains:
    contains: str
    kind = "assert:url"


@dataclass(frozen=True)
class AssertURLExact:
    url: str
    kind = "assert:url_exact"


@dataclass(frozen=True)
class AssertExists:
    selector: str
    kind = "assert:exists"


Step = Union[Goto, Click, Fill, AssertTextContent, AssertURLContains, AssertURLExact, AssertExists]

STEP_KEYS = ("goto", "click", "fill", "assert")
ASSERT_TYPES = ("text_content", "url", "exists")


@dataclass(frozen=True)
class Scenario:
    description: str = ""
    steps: tuple[Step, ...] = ()


def _text(data: Any, key: str) -> str:
    # Missing fields become "" and are rejected at dispatch time.
    if not isinstance(data, dict):
        return ""
    v = data.get(key)
    if v is None:
        return ""
    return v if isinstance(v, str) else str(v)


def _convert_assert(index: int, payload: Any) -> Step:
    assert_type = _text(payload, "type")
    if assert_type == "text_content":
        return AssertTextContent(selector=_text(payload, "selector"), contains=_text(payload, "contains"))
    if assert_type == "url":
        if isinstance(payload, dict) and "url" in payload and "contains" not in payload:
            return AssertURLExact(url=_text(payload, "url"))
        return AssertURLContains(contains=_text(payload, "contains"))
    if assert_type == "exists":
        return AssertExists(selector=_text(payload, "selector"))
    if not assert_type:
        raise UnrecognizedStepError(index, "assert step requires a type")
    raise UnrecognizedStepError(
        index, f"unknown assertion type '{assert_type}' (expected one of: {', '.join(ASSERT_TYPES)})"
    )


def _convert_step(index: int, raw: Any) -> Step:
    if not isinstance(raw, dict):
        raise UnrecognizedStepError(index, "invalid step format (expected a mapping)")

    keys = [k for k in raw if k in STEP_KEYS]
    if not keys:
        found = ", ".join(str(k) for k in raw) or "none"
        raise UnrecognizedStepError(
            index, f"no recognized step key (found: {found}; expected one of: {', '.join(STEP_KEYS)})"
        )
    if len(keys) > 1:
        raise UnrecognizedStepError(index, f"ambiguous step with several keys: {', '.join(keys)}")

    key = keys[0]
    payload = raw[key]
    if key == "goto":
        if isinstance(payload, dict):
            return Goto(url=_text(payload, "url"))
        return Goto(url="" if payload is None else str(payload))
    if key == "click":
        return Click(selector=_text(payload, "selector"))
    if key == "fill":
        return Fill(selector=_text(payload, "selector"), value=_text(payload, "value"))
    return _convert_assert(index, payload)


def load_mapping(data: Any) -> Scenario:
    """Convert an already-parsed document into a ``Scenario``."""
    if data is None:
        raise EmptyDocumentError()
    if not isinstance(data, dict):
        raise ScenarioSyntaxError(f"top-level value must be a mapping, got {type(data).__name__}")

    desc = data.get("desc")
    raw_steps = data.get("steps")
    if raw_steps is None:
        raw_steps = []
    elif not isinstance(raw_steps, list):
        raise ScenarioSyntaxError("'steps' must be a list")

    steps = tuple(_convert_step(i, raw) for i, raw in enumerate(raw_steps, start=1))
    return Scenario(description=desc if isinstance(desc, str) else "", steps=steps)


def load_document(content: str) -> Scenario:
    if not content:
        raise EmptyDocumentError()
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ScenarioSyntaxError(str(e)) from e
    return load_mapping(data)


def load_scenario(path: str | Path) -> Scenario:
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"failed to read {path}: {e}") from e
    return load_document(content)
