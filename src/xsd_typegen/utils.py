# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Text helpers shared by the type model and the context.

Functions:
    to_pascal_case - split a schema name into words and join them PascalCase
    prefix_lines - indent every line of a block of text
    ts_literal - render a string as a TypeScript string literal
    literal_union - string literal, plus bare number literal when numeric
    ts_property - property name, quoted when not a valid identifier
"""

from __future__ import annotations

import json
import re

# Matched against the character class signature of a name (see _signature):
# capitalized word, acronym (kept whole before a capitalized word or a
# non-letter), lowercase run, any other letters, digits.
_WORD_RE = re.compile(
    r"Ua+"
    r"|U+(?=Ua|[^Ua]|$)"
    r"|a+"
    r"|[Ua]+"
    r"|0+"
)

_NUMERIC_RE = re.compile(r"(0|[1-9][0-9]*)(\.[0-9]+)?")

_IDENTIFIER_RE = re.compile(r"(?:[^\W\d]|\$)(?:\w|\$)*")


def _signature(name: str) -> str:
    """Map each character to U (uppercase), a (other letter), 0 (digit) or _ ."""
    out = []
    for ch in name:
        if ch.isdecimal():
            out.append("0")
        elif ch.isupper():
            out.append("U")
        elif ch.isalpha():
            out.append("a")
        else:
            out.append("_")
    return "".join(out)


def split_words(name: str) -> list[str]:
    """Split 'HTMLElement_type' into ['HTML', 'Element', 'type'].

    Letters are classified with str.isupper/str.isalpha, so non-ASCII names
    split the same way: 'GrößeType' -> ['Größe', 'Type'].
    """
    return [name[m.start():m.end()] for m in _WORD_RE.finditer(_signature(name))]


def to_pascal_case(name: str) -> str:
    """Convert a schema name to PascalCase.

    Each word is capitalized and the rest of it lowercased, so acronyms
    collapse: 'SEPAPaymentType' -> 'SepaPaymentType', 'date-time' -> 'DateTime'.
    """
    return "".join(word[:1].upper() + word[1:].lower() for word in split_words(name))


def prefix_lines(text: str, prefix: str = "  ") -> str:
    """Prefix every line of text. Blank lines get the prefix without trailing spaces."""
    return "\n".join(prefix + line if line else prefix.rstrip() for line in text.split("\n"))


def is_numeric_literal(value: str) -> bool:
    """True if value can also be written as a bare TypeScript number literal."""
    return _NUMERIC_RE.fullmatch(value) is not None


def ts_literal(value: str) -> str:
    """Render value as a double-quoted TypeScript string literal."""
    return json.dumps(value, ensure_ascii=False)


def literal_union(value: str) -> str:
    """'"abc"' for text values, '"12" | 12' for numeric-looking ones.

    Parsers keep numeric text either as a string or as a number depending on
    their configuration, so both forms are accepted.
    """
    literal = ts_literal(value)
    if is_numeric_literal(value):
        literal += f" | {value}"
    return literal


def ts_property(name: str) -> str:
    """Return name usable as an object type property key."""
    if _IDENTIFIER_RE.fullmatch(name):
        return name
    return ts_literal(name)
