from __future__ import annotations

import base64
import json
from decimal import Decimal

import allure
import pytest
from rich.text import Text

from jack_cli import style
from jack_cli.results.render import (
    ResultRenderError,
    decode_output,
    render_result,
    stringify,
    to_yaml,
)

pytestmark = [
    allure.epic("Results"),
    allure.feature("Pretty Printer"),
]


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _plain(markup: str) -> str:
    return Text.from_markup(markup).plain


def test_output_field_becomes_yaml_block_and_scalar_stays_inline() -> None:
    raw = json.dumps({"a": {"output": _b64('{"x":1}'), "note": "hi"}})

    plain = _plain(render_result(raw))

    assert plain == "\n→ note: hi\n→ output:\n    x: 1\n"


def test_scalar_top_level_fields_become_titles_in_key_order() -> None:
    raw = json.dumps({"zeta": 1, "agent": "web-1", "body": {"b": "2", "a": "1"}})

    plain = _plain(render_result(raw))

    assert plain.index(" agent: web-1 ") < plain.index(" zeta: 1 ")
    assert plain.index("→ a: 1") < plain.index("→ b: 2")
    assert plain.index(" zeta: 1 ") < plain.index("→ a: 1")


def test_numbers_keep_their_exact_text() -> None:
    raw = '{"count": 12345678901234567890.50, "r": {"ratio": 0.1000000000000000055}}'

    plain = _plain(render_result(raw))

    assert "count: 12345678901234567890.50" in plain
    assert "→ ratio: 0.1000000000000000055" in plain


def test_output_numbers_keep_their_exact_text() -> None:
    rendering = decode_output(_b64('{"v": 1.10}'))

    assert rendering.decoded
    assert rendering.value == "v: 1.10\n"


def test_output_multiline_strings_use_literal_style() -> None:
    rendering = decode_output(_b64(json.dumps({"log": "line one\nline two"})))

    assert rendering.value == "log: |-\n  line one\n  line two\n"


@pytest.mark.parametrize(
    "value",
    [
        "not base64!!",
        _b64("plain text, not json"),
        "",
    ],
)
def test_undecodable_output_keeps_raw_value(value: str) -> None:
    raw = json.dumps({"a": {"output": value}})

    assert decode_output(value).value == value
    assert value in _plain(render_result(raw))


def test_non_string_output_is_kept() -> None:
    rendering = decode_output(42)

    assert rendering == type(rendering)(value=42, decoded=False)


def test_agent_text_with_brackets_is_printed_verbatim() -> None:
    raw = json.dumps({"a": {"error": "[red]boom[/red]"}})

    assert "→ error: [red]boom[/red]" in _plain(render_result(raw))


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"text"', b"\xff"])
def test_malformed_top_level_document_is_an_error(raw: str | bytes) -> None:
    with pytest.raises(ResultRenderError):
        render_result(raw)


def test_empty_document_renders_blank_block() -> None:
    assert render_result("{}") == "\n"


def test_stringify_uses_yaml_words_and_blocks() -> None:
    assert stringify(True) == "true"
    assert stringify(None) == "null"
    assert stringify(Decimal("2.50")) == "2.50"
    assert stringify(7) == "7"
    assert stringify(["b", "a"]) == "- b\n- a\n"


def test_to_yaml_sorts_keys() -> None:
    assert to_yaml({"b": 1, "a": {"d": 2, "c": 3}}) == "a:\n  c: 3\n  d: 2\nb: 1\n"


def test_style_block_indents_every_line() -> None:
    assert _plain(style.block("one\ntwo\n")) == "    one\n    two"
    assert style.spaced_block("\n\n") == "\n"


@pytest.mark.parametrize(
    ("payload", "expected"),
    [("true", "true\n"), ("1", "1\n"), ('"text"', "text\n"), ("null", "null\n")],
)
def test_scalar_output_has_no_document_end_marker(payload: str, expected: str) -> None:
    assert decode_output(_b64(payload)).value == expected


def test_scalar_output_renders_as_single_block_line() -> None:
    raw = json.dumps({"a": {"output": _b64("true")}})

    assert _plain(render_result(raw)) == "\n→ output:\n    true\n"
