"""STEP record token helpers.

Small, regex-based helpers for picking values out of a single record body
such as ``IFCWALL('2O2Fr$t4X7Zf8NOew3FLOH',#5,'Wall:200mm',$,$,#20,#30,$)``.
None of these helpers raise on malformed input.
"""
from __future__ import annotations

import re

# Id followed by a comma, closing paren or closing bracket, so #12 never matches inside #123
REFERENCE_PATTERN = re.compile(r"#(\d+)(?=[,)\]])")

_ANY_REFERENCE = re.compile(r"#(\d+)")
_TYPE_TAG = re.compile(r"^(\w+)\s*\(")
# A doubled apostrophe inside a string is an escaped apostrophe
_QUOTED = re.compile(r"'((?:[^']|'')*)'")
_LAST_REFERENCE = re.compile(r"#(\d+)\)$")
_NUMBER = re.compile(r"(?<![\w#.$])-?\d+(?:\.\d*)?(?:[eE][+-]?\d+)?(?![\w.])")
_HEX_8 = re.compile(r"\\X\\([0-9A-Fa-f]{2})")
_HEX_16 = re.compile(r"\\X2\\((?:[0-9A-Fa-f]{4})+)\\X0\\")


def type_tag(body: str) -> str | None:
    """Get the entity type of a record body (e.g., "IFCWALL")."""
    match = _TYPE_TAG.match(body)
    return match.group(1).upper() if match else None


def unescape_quotes(text: str) -> str:
    """Turn STEP doubled apostrophes back into single ones."""
    return text.replace("''", "'")


def quoted_strings(body: str) -> list[str]:
    """Get all single-quoted string tokens in field order, unescaped."""
    return [unescape_quotes(token) for token in _QUOTED.findall(body)]


def quoted_at(body: str, *positions: int) -> str | None:
    """Get the first present quoted token among positions.

    Args:
        body: Record body
        positions: Token positions in preference order

    Returns:
        Token text, or None if no position exists
    """
    tokens = quoted_strings(body)
    for position in positions:
        if position < len(tokens):
            return tokens[position]
    return None


def references(body: str) -> list[int]:
    """Get all ``#id`` references in order of appearance."""
    return [int(ref) for ref in _ANY_REFERENCE.findall(body)]


def bounded_references(body: str) -> list[int]:
    """Get ``#id`` references that end at a field boundary."""
    return [int(ref) for ref in REFERENCE_PATTERN.findall(body)]


def last_reference(body: str) -> int | None:
    """Get the reference directly before the closing paren of the record.

    For relationship records this is the relating object (property set,
    material, classification, storey).
    """
    match = _LAST_REFERENCE.search(body)
    return int(match.group(1)) if match else None


def numeric_literals(body: str) -> list[float]:
    """Get free-floating numeric literals.

    Quoted text and ``#id`` references are not numbers.
    """
    unquoted = _QUOTED.sub("''", body)
    return [float(num) for num in _NUMBER.findall(unquoted)]


def first_in_range(body: str, low: float, high: float) -> float | None:
    """Get the first numeric literal with low < value < high."""
    for value in numeric_literals(body):
        if low < value < high:
            return value
    return None


def decode_step_text(text: str) -> str:
    """Decode STEP string escapes.

    Handles ``\\X\\HH`` (ISO 8859-1 byte) and ``\\X2\\HHHH...\\X0\\``
    (UTF-16 code units). Unknown escapes are left as they are.

    Args:
        text: Raw text from a quoted token

    Returns:
        Decoded text
    """
    if "\\X" not in text:
        return text

    def _wide(match: re.Match[str]) -> str:
        hex_digits = match.group(1)
        raw = bytes.fromhex(hex_digits)
        return raw.decode("utf-16-be", errors="replace")

    text = _HEX_16.sub(_wide, text)
    return _HEX_8.sub(lambda m: chr(int(m.group(1), 16)), text)


def parens_balanced(body: str) -> bool:
    """Check that parentheses outside quoted strings are balanced.

    An unbalanced body is the first line of a record continued on
    following lines.
    """
    depth = 0
    in_string = False
    for char in body:
        if char == "'":
            in_string = not in_string
        elif in_string:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
    return depth == 0 and not in_string
