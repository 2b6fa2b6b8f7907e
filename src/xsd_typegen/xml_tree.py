# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""XML to plain tree parsing.

Turns an XML document into nested dicts, the shape the schema ingestion
reads and the generated TypeScript declarations describe:

- attributes are keys prefixed with '@_' ('@_name')
- child elements are keys named after their tag
- repeated sibling tags collapse into a list
- text-only elements become their trimmed text, empty elements ''
- text next to attributes or children is stored under '#text'

Example:
    >>> parse_xml('<xs:schema xmlns:xs="x"><xs:element name="A"/></xs:schema>')
    {'schema': {'@_xmlns:xs': 'x', 'element': {'@_name': 'A'}}}
"""

from __future__ import annotations

import re
from typing import Any
from xml import sax

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"

_ENTITY_DECL_RE = re.compile(r"<!ENTITY [^>]+>")
_ENTITY_DECL_BYTES_RE = re.compile(rb"<!ENTITY [^>]+>")
_PREFIXED_KEY_RE = re.compile(r"^\w+:(.+)$")


def as_list(value: Any) -> list:
    """Normalize a 'one or many' tree value to a list ('None' -> [])."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def strip_namespaces(tree: Any) -> Any:
    """Drop 'prefix:' from element keys ('xs:element' -> 'element').

    Attribute keys start with the attribute prefix and are left alone, so
    '@_xmlns:xs' declarations survive for alias resolution.
    """
    if isinstance(tree, list):
        return [strip_namespaces(item) for item in tree]
    if not isinstance(tree, dict):
        return tree

    out: dict[str, Any] = {}
    for key, value in tree.items():
        match = _PREFIXED_KEY_RE.match(key)
        out[match.group(1) if match else key] = strip_namespaces(value)
    return out


class XmlTreeParser(sax.handler.ContentHandler):
    """SAX handler building a plain dict tree.

    Example:
        >>> XmlTreeParser.parse('<root a="1"><item>x</item><item>y</item></root>')
        {'root': {'@_a': '1', 'item': ['x', 'y']}}
    """

    def __init__(self, ignore_attributes: bool = False, attr_prefix: str = ATTRIBUTE_PREFIX):
        """Initialize the parser.

        Args:
            ignore_attributes: If True, attributes are dropped.
            attr_prefix: Prefix for attribute keys.
        """
        super().__init__()
        self.ignore_attributes = ignore_attributes
        self.attr_prefix = attr_prefix

    @classmethod
    def parse(
        cls,
        source: str | bytes,
        ignore_attributes: bool = False,
        attr_prefix: str = ATTRIBUTE_PREFIX,
    ) -> dict[str, Any]:
        """Parse XML to a dict tree.

        Args:
            source: XML string or bytes to parse.
            ignore_attributes: If True, attributes are dropped.
            attr_prefix: Prefix for attribute keys.

        Returns:
            Dict keyed by the root tag.

        Raises:
            xml.sax.SAXParseException: If the document is not well formed.
        """
        # Entity declarations are not expanded. Bytes stay bytes so the
        # parser honours the document's encoding declaration.
        if isinstance(source, bytes):
            source = _ENTITY_DECL_BYTES_RE.sub(b"", source)
        else:
            source = _ENTITY_DECL_RE.sub("", source)

        handler = cls(ignore_attributes=ignore_attributes, attr_prefix=attr_prefix)
        sax.parseString(source, handler)
        return handler.stack[0][0]

    def startDocument(self) -> None:
        self.stack: list[tuple[dict[str, Any], list[str]]] = [({}, [])]

    def startElement(self, tag_label: str, attributes: Any) -> None:
        node: dict[str, Any] = {}
        if not self.ignore_attributes:
            for k, v in attributes.items():
                node[f"{self.attr_prefix}{k}"] = v
        self.stack.append((node, []))

    def characters(self, s: str) -> None:
        self.stack[-1][1].append(s)

    def endElement(self, tag_label: str) -> None:
        node, chunks = self.stack.pop()
        text = "".join(chunks).strip()

        value: Any
        if node:
            if text:
                node[TEXT_KEY] = text
            value = node
        else:
            value = text

        self._set_into_parent(tag_label, value)

    def _set_into_parent(self, tag_label: str, value: Any) -> None:
        """Add value to parent, turning repeated tags into a list."""
        parent = self.stack[-1][0]
        if tag_label not in parent:
            parent[tag_label] = value
            return

        existing = parent[tag_label]
        if isinstance(existing, list):
            existing.append(value)
        else:
            parent[tag_label] = [existing, value]


def parse_xml(
    source: str | bytes,
    ignore_attributes: bool = False,
    preserve_namespaces: bool = False,
) -> dict[str, Any]:
    """Parse XML into a dict tree, stripping element namespace prefixes by default."""
    tree = XmlTreeParser.parse(source, ignore_attributes=ignore_attributes)
    if not preserve_namespaces:
        tree = strip_namespaces(tree)
    return tree
