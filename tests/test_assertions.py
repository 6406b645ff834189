import pytest

from yamlrun.core.errors import ElementNotFoundError, TextMismatchError, URLMismatchError
from yamlrun.runner.assertions import Assertions


@pytest.fixture
def assertions(fake_page):
    fake_page.url = "https://example.com/"
    return Assertions(fake_page)


def test_text_content_exact_match(assertions):
    assertions.assert_text_content("#title", "Welcome")


def test_text_content_is_not_substring(assertions):
    with pytest.raises(TextMismatchError) as exc:
        assertions.assert_text_content("#title", "Wel")
    assert (exc.value.selector, exc.value.expected, exc.value.actual) == ("#title", "Wel", "Welcome")


def test_text_content_checks_existence_first(assertions, fake_page):
    with pytest.raises(ElementNotFoundError):
        assertions.assert_text_content("#missing", "Welcome")
    assert ("element_text", "#missing") not in fake_page.calls


def test_url_contains(assertions):
    assertions.assert_url_contains("example.com")
    with pytest.raises(URLMismatchError) as exc:
        assertions.assert_url_contains("nonexistent.com")
    assert exc.value.kind == "contains"


def test_url_exact_keeps_trailing_slash(assertions):
    assertions.assert_url("https://example.com/")
    with pytest.raises(URLMismatchError) as exc:
        assertions.assert_url("https://example.com")
    assert exc.value.kind == "exact"


def test_exists(assertions):
    assertions.assert_exists("#title")
    with pytest.raises(ElementNotFoundError):
        assertions.assert_exists("#missing")


def test_assertions_do_not_touch_page_state(assertions, fake_page):
    assertions.assert_text_content("#title", "Welcome")
    assertions.assert_url_contains("example")
    assertions.assert_exists("#title")
    assert fake_page.actions == []
