# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Context - namespace registry for one conversion run.

The Context maps namespace URIs to Schemas, owns the naming policy, and
drives document loading. It is created once per run and seeded with the
XML Schema primitives and the XML digital signature namespace.

Example:
    >>> ctx = Context(strip_prefixes=['Type_'])
    >>> ctx.load_schema('invoice.xsd')        # sync context
    >>> await ctx.load_schema('invoice.xsd')  # async context
    >>> print(ctx.render())
"""

from __future__ import annotations

import logging

from genro_toolbox import smartasync

from .loader import DEFAULT_TIMEOUT, cwd_from_path, fetch_content, resolve_location
from .model import (
    MANY,
    PROLOG,
    UNKNOWN,
    XML_ELEMENT,
    XMLDSIG_NAMESPACE,
    XSD_NAMESPACE,
    Element,
    PrimitiveType,
    TypeDefinition,
    TypeReference,
)
from .schema import Schema
from .utils import to_pascal_case, ts_literal
from .xml_tree import ATTRIBUTE_PREFIX, parse_xml

logger = logging.getLogger(__name__)

XS_PRIMITIVE_TYPES: list[tuple[str, str]] = [
    ("string", "string"),
    ("int", "number | string"),
    ("short", "number | string"),
    ("long", "number | string"),
    ("decimal", "number | string"),
    ("boolean", 'boolean | "true" | "false"'),
    ("base64Binary", "string"),
    ("date", "string"),
    ("dateTime", "string"),
]

XS_PRIMITIVE_PREFIX = "Xs"


class Context:
    """Namespace registry, naming policy and loader.

    Attributes:
        schemas: Namespace URI -> Schema, in discovery order.
        strip_prefixes: Prefixes removed from type names (first match only).
        attribute_prefix: Key prefix of attribute fields in generated types.
        loaded_locations: Locators already read, to skip repeated includes.
    """

    def __init__(
        self,
        strip_prefixes: list[str] | None = None,
        attribute_prefix: str = ATTRIBUTE_PREFIX,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """Initialize the context with its built-in namespaces.

        Args:
            strip_prefixes: Prefixes to strip from type names, tried in order.
            attribute_prefix: Prefix of attribute keys in parsed documents.
            timeout: Request timeout in seconds for URL locators.
        """
        self.schemas: dict[str, Schema] = {}
        self.strip_prefixes: list[str] = list(strip_prefixes or [])
        self.attribute_prefix = attribute_prefix
        self.timeout = timeout
        self.loaded_locations: set[str] = set()

        xs = self.schema_for(XSD_NAMESPACE)
        for name, ts_type in XS_PRIMITIVE_TYPES:
            xs.add_type(PrimitiveType(self, name, ts_type, prefix=XS_PRIMITIVE_PREFIX))

        ds = self.schema_for(XMLDSIG_NAMESPACE)
        ds.add_type(PrimitiveType(self, "SignatureType", UNKNOWN))
        ds.add_element(Element(self, "Signature", TypeReference(self, ds.namespace, "SignatureType")))

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def schema_for(self, namespace: str) -> Schema:
        """Return the Schema of a namespace, creating and registering it if needed."""
        schema = self.schemas.get(namespace)
        if schema is None:
            schema = Schema(self, namespace)
            self.schemas[namespace] = schema
        return schema

    def find_type(self, namespace: str, name: str) -> TypeDefinition | None:
        schema = self.schemas.get(namespace)
        return schema.types.get(name) if schema is not None else None

    def find_element(self, namespace: str, name: str) -> Element | None:
        schema = self.schemas.get(namespace)
        return schema.elements.get(name) if schema is not None else None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @smartasync
    async def load_schema(self, locator: str, cwd: str | None = None) -> Schema:
        """Load a schema document and everything it imports.

        Works in both sync and async contexts via @smartasync.

        Args:
            locator: File path or http(s) URL.
            cwd: Directory relative paths are resolved against.

        Returns:
            The Schema of the document's target namespace.

        Raises:
            FileNotFoundError: If a file does not exist.
            httpx.HTTPError: If a URL cannot be fetched.
            xml.sax.SAXParseException: If a document is not well formed.
            ValueError: If a document is not an XSD or holds an invalid reference.
            SchemaException: If an element reference cannot be found.
        """
        return await self.load_document(resolve_location(locator, cwd))

    async def load_document(self, locator: str, default_namespace: str = "") -> Schema:
        """Read, parse and ingest one document (coroutine used for imports).

        default_namespace applies to a document without targetNamespace.
        """
        cwd = cwd_from_path(locator)
        logger.info("Loading %s (%s)", locator, cwd or ".")
        self.loaded_locations.add(locator)

        content = await fetch_content(locator, timeout=self.timeout)
        tree = parse_xml(content)
        node = tree.get("schema")
        if not isinstance(node, dict):
            raise ValueError(f"Invalid XSD: no schema root element in {locator}")
        return await Schema.ingest(self, node, cwd, default_namespace=default_namespace)

    # -------------------------------------------------------------------------
    # Naming and rendering
    # -------------------------------------------------------------------------

    def to_identifier(self, name: str) -> str:
        """Strip the first matching configured prefix, then PascalCase."""
        for prefix in self.strip_prefixes:
            if name.startswith(prefix):
                name = name[len(prefix):]
                break
        return to_pascal_case(name)

    def render_preamble(self) -> str:
        """Helper types every generated declaration builds on."""
        prefix = self.attribute_prefix
        xmlns = ts_literal(f"{prefix}xmlns")
        return (
            "/// File generated automatically from XSD\n\n"
            f"type {MANY}<T> = T | readonly T[];\n\n"
            f"type {XML_ELEMENT} = {{\n"
            f"  {xmlns}?: string;\n"
            f"  [ns: `{prefix}xmlns:${{string}}`]: string | undefined;\n"
            "};\n\n"
            f'type {PROLOG} = {{ "?xml"?: {{ "{prefix}version": string, "{prefix}encoding": string }} }};'
        )

    def render(self) -> str:
        """Render the preamble and every non-empty Schema, in registration order."""
        blocks = [self.render_preamble()]
        for schema in self.schemas.values():
            text = schema.render()
            if text:
                blocks.append(text)
        return "\n\n".join(blocks)
