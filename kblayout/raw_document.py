# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Decoding of raw layout text.

Layouts copied from keyboard-layout-editor 'Raw data' tab are not valid JSON:
object keys are unquoted and rows are listed without enclosing brackets.
Strict JSON is tried first, everything else goes through a small literal
grammar which never evaluates the input.
"""

from __future__ import annotations

import functools
import json
import logging
import re
from typing import Any, Dict, List, Tuple, Union

from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError

from .errors import FormatError, FormatErrorReason

logger = logging.getLogger(__name__)

RawLayoutDocument = Union[List[Any], Dict[str, Any]]

LITERAL_GRAMMAR = r"""
    ?start: document

    // top-level sequence of values is read as if wrapped in one outer array
    document: value ("," value)* ","?

    ?value: object
          | array
          | string
          | number
          | "true"  -> true
          | "false" -> false
          | "null"  -> null

    array: "[" (value ("," value)* ","?)? "]"
    object: "{" (pair ("," pair)* ","?)? "}"
    pair: key ":" value

    ?key: string
        | number
        | name

    name: CNAME
    string: DOUBLE_QUOTED_STRING | SINGLE_QUOTED_STRING
    number: NUMBER

    DOUBLE_QUOTED_STRING: /"(?:[^"\\\n]|\\.)*"/
    SINGLE_QUOTED_STRING: /'(?:[^'\\\n]|\\.)*'/
    NUMBER: /[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?/

    %import common.CNAME
    %import common.WS
    %ignore WS
"""

_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.)", re.DOTALL)
_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "0": "\0",
}


def _unescape(body: str) -> str:
    def _replace(match: re.Match) -> str:
        token = match.group(1)
        if len(token) > 1:
            return chr(int(token[1:], 16))
        return _ESCAPES.get(token, token)

    result = _ESCAPE_RE.sub(_replace, body)
    # join surrogate pairs produced by consecutive \uXXXX escapes
    return result.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


@v_args(inline=True)
class LiteralTransformer(Transformer):
    def document(self, *values: Any) -> Any:
        if len(values) == 1:
            return values[0]
        return list(values)

    def array(self, *values: Any) -> List[Any]:
        return list(values)

    def object(self, *pairs: Tuple[str, Any]) -> Dict[str, Any]:
        return dict(pairs)

    def pair(self, key: Any, value: Any) -> Tuple[str, Any]:
        return str(key), value

    def name(self, token) -> str:
        return str(token)

    def string(self, token) -> str:
        return _unescape(str(token)[1:-1])

    def number(self, token) -> Union[int, float]:
        text = str(token)
        if any(c in text for c in ".eE"):
            return float(text)
        return int(text)

    def true(self) -> bool:
        return True

    def false(self) -> bool:
        return False

    def null(self) -> None:
        return None


@functools.lru_cache(maxsize=None)
def _literal_parser() -> Lark:
    return Lark(
        LITERAL_GRAMMAR,
        parser="lalr",
        start="start",
        maybe_placeholders=False,
        transformer=LiteralTransformer(),
    )


def _check_structure(value: Any) -> RawLayoutDocument:
    if not isinstance(value, (list, dict)):
        msg = (
            "Invalid layout format: not array/object, "
            f"decoded '{type(value).__name__}' value"
        )
        raise FormatError(msg, FormatErrorReason.NOT_ARRAY_OR_OBJECT)
    return value


def parse_raw_document(text: str) -> RawLayoutDocument:
    if not isinstance(text, str):
        msg = f"Invalid layout format: expected text, got '{type(text).__name__}'"
        raise FormatError(msg, FormatErrorReason.NOT_ARRAY_OR_OBJECT)

    try:
        return _check_structure(json.loads(text))
    except json.JSONDecodeError as e:
        json_error = e

    trimmed = text.strip()
    if not trimmed.startswith(("[", "{")):
        msg = "Invalid layout format: not array/object, must start with '[' or '{'"
        raise FormatError(msg, FormatErrorReason.NOT_ARRAY_OR_OBJECT)

    logger.debug(f"Strict JSON decoding failed ({json_error}), using relaxed syntax")
    try:
        result = _literal_parser().parse(trimmed)
    except LarkError as e:
        first_line = str(e).strip().splitlines()[0] if str(e).strip() else repr(e)
        msg = (
            "Invalid layout format: not a valid array/object literal "
            f"(JSON error: {json_error.msg} at line {json_error.lineno} "
            f"column {json_error.colno}; literal error: {first_line})"
        )
        raise FormatError(msg, FormatErrorReason.STRUCTURE) from e

    return _check_structure(result)
