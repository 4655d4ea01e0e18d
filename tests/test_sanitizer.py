import pytest

from feedback_desk.services.sanitizer import sanitize

SAMPLES = [
    "slow response",
    "<script>alert(1)</script>Hello",
    '<a href="javascript:alert(1)">click</a>',
    '<img src=x onerror="alert(1)">Nice doctor',
    "<style>body{display:none}</style>Visible",
    "<scr<script>ipt>alert(1)</script>",
    "javajavascript:script:alert(1)",
    "a < b & c",
    "&lt;script&gt;alert(1)&lt;/script&gt;",
    "  padded text \n second line ",
    "",
]


def test_strips_script_and_keeps_text():
    assert sanitize("<script>alert(1)</script>Hello") == "Hello"


def test_strips_style_content():
    assert sanitize("<style>body{display:none}</style>Visible") == "Visible"


def test_strips_event_handlers_and_tags():
    out = sanitize('<img src=x onerror="alert(1)">Nice <b>doctor</b>')
    assert out == "Nice doctor"
    assert "onerror" not in out


def test_strips_javascript_uris():
    assert sanitize('<a href="javascript:alert(1)">click</a>') == "click"
    assert "javascript" not in sanitize("JavaScript:alert(1)").lower()
    assert "javascript:" not in sanitize("javajavascript:script:alert(1)").lower()


def test_plain_text_unchanged():
    assert sanitize("slow response at the front desk") == "slow response at the front desk"


def test_escapes_bare_markup_characters():
    assert sanitize("a < b & c") == "a &lt; b &amp; c"


def test_none_becomes_empty():
    assert sanitize(None) == ""


@pytest.mark.parametrize("value", SAMPLES)
def test_idempotent(value):
    once = sanitize(value)
    assert sanitize(once) == once


@pytest.mark.parametrize("value", SAMPLES)
def test_no_executable_markup_survives(value):
    out = sanitize(value).lower()
    assert "<script" not in out
    assert "<style" not in out
    assert "onerror=" not in out
    assert "javascript:" not in out
