"""Value coercion helpers shared by the rule engines.

Answers arrive from the browser as loosely typed JSON, so comparisons follow
the rules the authoring UI was built around: numbers are coerced from text,
booleans are never equal to numbers, and text forms of values are lowercase
``true``/``false`` and integral floats drop their ``.0``.
"""

import math
import re
from typing import Any

_DECIMAL_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_PREFIXED_LITERAL = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")
_INFINITY_LITERAL = re.compile(r"[+-]?Infinity")


def is_number(value: Any) -> bool:
    """True for int and float values; bool is not a number here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any) -> float:
    """Coerce a value to float, returning NaN when it is not numeric.

    Rules:
    - numbers pass through, booleans become 0.0 / 1.0
    - strings are stripped; empty text is 0.0
    - text must be a decimal, 0x/0o/0b or Infinity literal; Python-only
      spellings such as "inf", "nan" and "1_000" are NaN
    - anything else (None, lists, dicts, unparseable text) is NaN

    Example:
        >>> to_number(" 12 ")
        12.0
        >>> math.isnan(to_number("twelve"))
        True
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0.0
        if _DECIMAL_LITERAL.fullmatch(text):
            return float(text)
        if _PREFIXED_LITERAL.fullmatch(text):
            return float(int(text, 0))
        if _INFINITY_LITERAL.fullmatch(text):
            return -math.inf if text.startswith("-") else math.inf
        return math.nan
    return math.nan


def to_text(value: Any) -> str:
    """Render a value the way it is displayed and matched in text.

    Example:
        >>> to_text(5.0)
        '5'
        >>> to_text(True)
        'true'
        >>> to_text(None)
        ''
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(item) for item in value)
    return str(value)


def to_js_string(value: Any, present: bool = True) -> str:
    """Text form used by substring conditions on stored logic nodes.

    Unlike to_text, a value that was never given renders as ``undefined``
    and ``None`` renders as ``null``, so an incomplete node does not match
    every answer.

    Example:
        >>> to_js_string(None)
        'null'
        >>> to_js_string(None, present=False)
        'undefined'
    """
    if not present:
        return "undefined"
    if value is None:
        return "null"
    return to_text(value)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that keeps booleans distinct from numbers.

    ``True == 1`` holds in Python but an answer of ``True`` must not match an
    expected value of ``1``.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def contains_value(items: list, needle: Any) -> bool:
    """Membership test using strict_equals."""
    return any(strict_equals(item, needle) for item in items)
