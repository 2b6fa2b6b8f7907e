# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Schema - the types and elements of one target namespace.

A Schema is identified by its target namespace, not by document: every
document declaring the same targetNamespace adds to the same Schema.
Prefix declarations ('xmlns:xs="..."') of each ingested document are kept
to resolve qualified names like 'xs:string'.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .loader import resolve_location
from .model import ComplexType, Element, QualifiedRef, SimpleType, TypeDefinition
from .xml_tree import ATTRIBUTE_PREFIX, as_list

if TYPE_CHECKING:
    from .context import Context

logger = logging.getLogger(__name__)

XMLNS_ATTRIBUTE = f"{ATTRIBUTE_PREFIX}xmlns:"


class Schema:
    """Registry of Elements and Types for one namespace.

    Attributes:
        namespace: Target namespace URI ('' for no-namespace schemas).
        elements: Top-level elements by local name, in registration order.
        types: Named types by local name, in registration order.
        aliased_schemas: Prefix -> namespace URI from xmlns declarations.
    """

    def __init__(self, ctx: Context, namespace: str):
        self.ctx = ctx
        self.namespace = namespace
        self.aliased_schemas: dict[str, str] = {}
        self.elements: dict[str, Element] = {}
        self.types: dict[str, TypeDefinition] = {}

    def __repr__(self) -> str:
        return f"Schema({self.namespace!r}, types={len(self.types)}, elements={len(self.elements)})"

    # -------------------------------------------------------------------------
    # Ingestion
    # -------------------------------------------------------------------------

    @classmethod
    async def ingest(
        cls, ctx: Context, node: dict, cwd: str, default_namespace: str = ""
    ) -> Schema:
        """Add the declarations of a parsed xs:schema node.

        Imports and includes are loaded depth-first before any local
        declaration is registered. Then elements, simple types and complex
        types are registered in that order.

        Args:
            ctx: Context receiving the schema.
            node: The 'schema' node of a parsed document.
            cwd: Directory of the document, for relative schemaLocations.
            default_namespace: Namespace used when the document declares no
                targetNamespace (the includer's, for chameleon includes).

        Returns:
            The Schema of the document's target namespace.
        """
        namespace = node.get("@_targetNamespace") or default_namespace
        o = ctx.schema_for(namespace)

        for key, value in node.items():
            if key.startswith(XMLNS_ATTRIBUTE):
                o.aliased_schemas[key[len(XMLNS_ATTRIBUTE):]] = value

        for import_node in as_list(node.get("import")):
            if not isinstance(import_node, dict):
                continue
            # Already known namespaces are not reloaded, this also breaks import cycles
            if import_node.get("@_namespace") in ctx.schemas:
                continue
            location = import_node.get("@_schemaLocation")
            if not location:
                logger.warning("Import of %s without schemaLocation skipped",
                               import_node.get("@_namespace"))
                continue
            await ctx.load_document(resolve_location(location, cwd))

        for include_node in as_list(node.get("include")):
            location = include_node.get("@_schemaLocation") if isinstance(include_node, dict) else None
            if not location:
                continue
            locator = resolve_location(location, cwd)
            if locator in ctx.loaded_locations:
                continue
            await ctx.load_document(locator, default_namespace=o.namespace)

        for element_node in as_list(node.get("element")):
            o.add_element(Element.from_tree(ctx, o, element_node))

        for simple_type_node in as_list(node.get("simpleType")):
            o.add_type(SimpleType.from_tree(ctx, o, simple_type_node))

        for complex_type_node in as_list(node.get("complexType")):
            o.add_type(ComplexType.from_tree(ctx, o, complex_type_node))

        return o

    def add_element(self, element: Element) -> None:
        """Register a top-level element, replacing any previous one with the same name."""
        if element.name in self.elements:
            logger.warning("Element %s redeclared in %s, previous declaration replaced",
                           element.name, self.namespace)
        logger.debug("Adding element %s", element.name)
        self.elements[element.name] = element

    def add_type(self, type_: TypeDefinition) -> None:
        """Register a named type, replacing any previous one with the same name."""
        if type_.name in self.types:
            logger.warning("Type %s redeclared in %s, previous declaration replaced",
                           type_.name, self.namespace)
        logger.debug("Adding type %s (%s)", type_.type_name(), type_.name)
        self.types[type_.name] = type_

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    def resolve_ref(self, qualified_name: str) -> QualifiedRef | None:
        """Resolve 'alias:name' or 'name' to a namespace and local name.

        Unprefixed names belong to this schema's namespace. Returns None for
        names with more than one ':' and for undeclared prefixes.
        """
        parts = qualified_name.split(":")
        if len(parts) > 2:
            return None

        name = parts[-1]
        if len(parts) == 2:
            namespace = self.aliased_schemas.get(parts[0])
        else:
            namespace = self.namespace

        if not name or namespace is None:
            return None
        return QualifiedRef(namespace, name)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> str:
        """Render every type, then every element, blank-line separated."""
        blocks = []
        for type_ in self.types.values():
            text = type_.render_type()
            if text:
                blocks.append(text)
        for element in self.elements.values():
            text = element.render_type()
            if text:
                blocks.append(text)
        return "\n\n".join(blocks)
