"""Human-readable rendering of stored task results."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import yaml
from rich.markup import escape

from jack_cli import style

logger = logging.getLogger(__name__)

OUTPUT_FIELD = "output"


class ResultRenderError(ValueError):
    """The result document is not a JSON object."""


class _LiteralDumper(yaml.SafeDumper):
    """Safe dumper using literal blocks for multiline strings."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_str(data)


def _represent_decimal(dumper: yaml.SafeDumper, data: Decimal) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:float", str(data))


_LiteralDumper.add_representer(str, _represent_str)
_LiteralDumper.add_representer(Decimal, _represent_decimal)


DOCUMENT_END = "...\n"


def to_yaml(value: Any) -> str:
    text = yaml.dump(
        value,
        Dumper=_LiteralDumper,
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=True,
    )
    # Top-level scalars get an explicit document end marker.
    if text.endswith("\n" + DOCUMENT_END):
        text = text[: -len(DOCUMENT_END)]
    return text


def loads_exact(raw: str | bytes) -> Any:
    """Decode JSON keeping the exact text of non-integer numbers."""

    return json.loads(raw, parse_float=Decimal)


@dataclass(slots=True)
class FieldRendering:
    """Outcome of decoding an `output` field; `decoded` is False when the raw value was kept."""

    value: Any
    decoded: bool


def decode_output(value: Any) -> FieldRendering:
    """Turn a base64-encoded JSON payload into YAML text, or keep it as is."""

    if not isinstance(value, str):
        return FieldRendering(value=value, decoded=False)
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return FieldRendering(value=value, decoded=False)
    try:
        parsed = loads_exact(decoded)
    except ValueError:
        return FieldRendering(value=value, decoded=False)
    try:
        return FieldRendering(value=to_yaml(parsed), decoded=True)
    except yaml.YAMLError as error:
        logger.debug("YAML rendering of output failed: %s", error)
        return FieldRendering(value=decoded.decode("utf-8", errors="replace"), decoded=True)


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, dict | list):
        return to_yaml(value)
    return str(value)


def render_result(raw: str | bytes) -> str:
    """Render one stored result document as console markup.

    Scalar top-level fields become titles. Mapping fields are flattened, one
    labeled line (or block, for multiline values) per inner key, both levels
    in key order.
    """

    try:
        parsed = loads_exact(raw)
    except (TypeError, ValueError) as error:
        raise ResultRenderError(f"invalid result document: {error}") from error
    if not isinstance(parsed, dict):
        raise ResultRenderError("invalid result document: expected a JSON object")

    titles = ""
    items = ""
    for key in sorted(parsed):
        value = parsed[key]
        if not isinstance(value, dict):
            titles += style.title(f"{key}: {stringify(value)}")
            continue

        for inner_key in sorted(value):
            inner_value = value[inner_key]
            if inner_key == OUTPUT_FIELD:
                inner_value = decode_output(inner_value).value

            content = stringify(inner_value)
            if "\n" in content:
                items += style.block_title(inner_key) + style.block(content)
            else:
                items += style.inline_block_title(inner_key) + escape(content)

    return titles + style.spaced_block(items)
