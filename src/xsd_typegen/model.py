# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Type model and TypeScript emission.

The schema graph is made of:

    TypeDefinition (abstract, registered in a Schema by local name)
    ├── PrimitiveType: built-in type mapped to a literal TypeScript expression
    ├── SimpleType: restriction of a base type, with facets and enumerations
    └── ComplexType: attributes plus alternative content models (variants)
    Element: named field with occurrence bounds
    Attribute: '@_'-prefixed field
    TypeReference: lazy (namespace, name) pointer, resolved at render time

References are never followed while the graph is built, so documents can be
loaded in any order and types can refer to each other cyclically. Every
lookup goes through the Context when text is rendered.

Example:
    >>> ctx = Context()
    >>> ct = ComplexType(ctx, 'PartyType')
    >>> ct.variants.append(Variant([Element(ctx, 'Nm', TypeReference(ctx, XSD_NAMESPACE, 'string'))]))
    >>> ct.render_expr()
    'XmlElement & {\\n  Nm?: Many<XsString>;\\n}'
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable

from .annotation import Annotations
from .exceptions import SchemaException
from .utils import literal_union, prefix_lines, ts_literal, ts_property
from .xml_tree import as_list

if TYPE_CHECKING:
    from .context import Context
    from .schema import Schema

logger = logging.getLogger(__name__)

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"
XMLDSIG_NAMESPACE = "http://www.w3.org/2000/09/xmldsig#"

UNKNOWN = "unknown"
XML_ELEMENT = "XmlElement"
PROLOG = "Prolog"
MANY = "Many"
LOOSE_ATTRIBUTE_TYPE = "string | number"


def _group(node: dict, key: str) -> dict:
    """Return a child compositor node as a dict ('' for empty tags -> {})."""
    value = node.get(key)
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, dict) else {}


def _annotations(node: dict) -> Annotations | None:
    if "annotation" not in node:
        return None
    return Annotations.from_tree(node["annotation"]) or None


def _parse_facet(value: str | None, convert: Callable[[str], Any]) -> Any:
    """Convert a facet value, keeping the raw text when it is not a number."""
    if value is None:
        return None
    try:
        return convert(value.strip())
    except (ArithmeticError, ValueError):
        return value


@dataclass(frozen=True)
class QualifiedRef:
    """A (namespace, local name) pair."""

    namespace: str
    name: str


# =============================================================================
# Type definitions
# =============================================================================


class TypeDefinition(ABC):
    """A named type registered in a Schema."""

    name: str

    @abstractmethod
    def type_name(self) -> str:
        """Canonical TypeScript identifier of this type."""

    @abstractmethod
    def render_type(self) -> str | None:
        """Full declaration text, or None to leave the type out of the output."""


class PrimitiveType(TypeDefinition):
    """Built-in XSD type mapped straight to a TypeScript expression.

    The prefix keeps 'XsString' apart from a user 'String' type.
    """

    def __init__(self, ctx: Context, name: str, ts_type: str, prefix: str = ""):
        self.ctx = ctx
        self.name = name
        self.ts_type = ts_type
        self.prefix = prefix

    def type_name(self) -> str:
        return self.prefix + self.ctx.to_identifier(self.name)

    def render_expr(self) -> str:
        return self.type_name()

    def render_type(self) -> str:
        return f"export type {self.type_name()} = {self.ts_type};"


class TypeReference:
    """Deferred pointer to a named type.

    A reference built from a malformed qualified name has no namespace and
    always renders as 'unknown'.
    """

    def __init__(self, ctx: Context, namespace: str | None, name: str):
        self.ctx = ctx
        self.namespace = namespace
        self.name = name

    def __repr__(self) -> str:
        return f"TypeReference({self.namespace!r}, {self.name!r})"

    @classmethod
    def from_tree(
        cls, ctx: Context, schema: Schema, qualified_name: str, strict: bool = True
    ) -> TypeReference:
        """Build a reference from a 'prefix:name' attribute value.

        Args:
            ctx: Owning context.
            schema: Schema whose prefix declarations apply.
            qualified_name: Value of a type= or base= attribute.
            strict: If False, a malformed name yields an unresolvable
                reference instead of raising.

        Raises:
            ValueError: If the name is malformed and strict is True.
        """
        ref = schema.resolve_ref(qualified_name)
        if ref is None:
            if strict:
                raise ValueError(f"Invalid type reference: {qualified_name}")
            logger.warning("Invalid type reference %s in %s, rendering as %s",
                           qualified_name, schema.namespace, UNKNOWN)
            return cls(ctx, None, qualified_name)
        return cls(ctx, ref.namespace, ref.name)

    def resolve(self) -> TypeDefinition | None:
        if self.namespace is None:
            return None
        return self.ctx.find_type(self.namespace, self.name)

    def render_expr(self) -> str:
        target = self.resolve()
        return target.type_name() if target is not None else UNKNOWN


@dataclass
class EnumerationValue:
    """One xs:enumeration facet."""

    value: str
    annotations: Annotations | None = None


class SimpleType(TypeDefinition):
    """Restriction of a base type.

    Enumeration values replace the base type with a union of literals.
    Other facets only show up in the doc comment.
    """

    def __init__(self, ctx: Context, name: str, base: TypeReference | None):
        self.ctx = ctx
        self.name = name
        self.base = base
        self.annotations: Annotations | None = None
        # Facet text that is not a number (e.g. a date bound) is kept as is
        self.min_inclusive: Decimal | str | None = None
        self.total_digits: int | str | None = None
        self.fraction_digits: int | str | None = None
        self.min_length: int | str | None = None
        self.max_length: int | str | None = None
        self.pattern: str | None = None
        self.enumeration: list[EnumerationValue] = []

    @classmethod
    def from_tree(
        cls, ctx: Context, schema: Schema, node: dict, name: str | None = None
    ) -> SimpleType:
        """Parse an xs:simpleType node.

        Simple types without a restriction (xs:list, xs:union) get no base
        and render as 'unknown'.

        Raises:
            ValueError: If the restriction base is malformed.
        """
        restriction = _group(node, "restriction")
        base = None
        if "@_base" in restriction:
            base = TypeReference.from_tree(ctx, schema, restriction["@_base"])

        o = cls(ctx, name or node.get("@_name", ""), base)
        o.annotations = _annotations(node)

        o.min_inclusive = _parse_facet(cls._facet(restriction, "minInclusive"), Decimal)
        o.total_digits = _parse_facet(cls._facet(restriction, "totalDigits"), int)
        o.fraction_digits = _parse_facet(cls._facet(restriction, "fractionDigits"), int)
        o.min_length = _parse_facet(cls._facet(restriction, "minLength"), int)
        o.max_length = _parse_facet(cls._facet(restriction, "maxLength"), int)

        # Several patterns in one restriction are alternatives
        patterns = [p["@_value"] for p in as_list(restriction.get("pattern"))
                    if isinstance(p, dict) and "@_value" in p]
        if patterns:
            o.pattern = "|".join(patterns)

        for facet in as_list(restriction.get("enumeration")):
            if isinstance(facet, dict) and "@_value" in facet:
                o.enumeration.append(EnumerationValue(facet["@_value"], _annotations(facet)))
        return o

    @staticmethod
    def _facet(restriction: dict, facet_name: str) -> str | None:
        facets = [f for f in as_list(restriction.get(facet_name)) if isinstance(f, dict)]
        if not facets:
            return None
        return facets[0].get("@_value")

    def type_name(self) -> str:
        return self.ctx.to_identifier(self.name)

    def render_expr(self) -> str:
        if self.enumeration:
            return " | ".join(literal_union(variant.value) for variant in self.enumeration)
        if self.base is None:
            return UNKNOWN
        return self.base.render_expr()

    def render_type(self) -> str:
        sections = []
        if self.annotations:
            sections.append(self.annotations.render_doc())
        if any(variant.annotations for variant in self.enumeration):
            sections.append(self._render_possible_values())
        facets = self._render_facets()
        if facets:
            sections.append(facets)

        docs = ""
        if sections:
            docs = "/**\n" + "\n *\n".join(sections) + "\n */\n"
        return f"{docs}export type {self.type_name()} = {self.render_expr()};"

    def _render_possible_values(self) -> str:
        lines = [" * Possible values:"]
        for variant in self.enumeration:
            doc_lines = []
            if variant.annotations:
                for text in variant.annotations.documentation:
                    doc_lines.extend(text.replace("*/", "*\\/").split("\n"))
            first = doc_lines[0] if doc_lines else ""
            lines.append(f" * - {variant.value}: {first}".rstrip())
            # continuation lines align with the text after '- value: '
            indent = " " * (len(variant.value) + 4)
            lines.extend(f" * {indent}{line}".rstrip() for line in doc_lines[1:])
        return "\n".join(lines)

    def _render_facets(self) -> str:
        facets = [
            ("Min", self.min_inclusive),
            ("Total digits", self.total_digits),
            ("Fraction digits", self.fraction_digits),
            ("Min length", self.min_length),
            ("Max length", self.max_length),
        ]
        lines = [f" * {label}: {value}" for label, value in facets if value is not None]
        if self.pattern is not None:
            pattern = self.pattern.replace("/", "\\/")
            lines.append(f" * Pattern: /{pattern}/")
        return "\n".join(lines)


@dataclass
class Variant:
    """One alternative content model of a complex type."""

    elements: list[Element] = field(default_factory=list)


class ComplexType(TypeDefinition):
    """Element shape: attributes plus one or more alternative content models.

    A sequence contributes a single variant with all its elements, each
    element of a choice contributes a one-element variant of its own.
    """

    def __init__(self, ctx: Context, name: str):
        self.ctx = ctx
        self.name = name
        self.annotations: Annotations | None = None
        self.variants: list[Variant] = []
        self.attributes: list[Attribute] = []

    @classmethod
    def from_tree(
        cls, ctx: Context, schema: Schema, node: dict, name: str | None = None
    ) -> ComplexType:
        """Parse an xs:complexType node (named, or inline with the element's name)."""
        o = cls(ctx, name or node.get("@_name", ""))
        o.annotations = _annotations(node)

        sequence = [
            Element.from_tree(ctx, schema, element_node)
            for element_node in as_list(_group(node, "sequence").get("element"))
        ]
        if sequence:
            o.variants.append(Variant(sequence))

        for element_node in as_list(_group(node, "choice").get("element")):
            o.variants.append(Variant([Element.from_tree(ctx, schema, element_node)]))

        for attribute_node in as_list(node.get("attribute")):
            o.attributes.append(Attribute.from_tree(ctx, schema, attribute_node))

        return o

    def type_name(self) -> str:
        return self.ctx.to_identifier(self.name)

    def render_expr(self) -> str:
        expr = XML_ELEMENT
        if self.attributes:
            fields = "\n".join(attribute.render_field() for attribute in self.attributes)
            expr += f" & {{\n{prefix_lines(fields)}\n}}"
        if self.variants:
            body = " | ".join(self._render_variant(variant) for variant in self.variants)
            expr += " & " + (f"({body})" if len(self.variants) > 1 else body)
        return expr

    def _render_variant(self, variant: Variant) -> str:
        """Render one arm, marking every other variant's fields as absent."""
        lines = [element.render_field() for element in variant.elements]
        seen = {element.name for element in variant.elements}
        for other in self.variants:
            if other is variant:
                continue
            for element in other.elements:
                if element.name in seen:
                    continue
                seen.add(element.name)
                lines.append(f"{ts_property(element.name)}?: undefined;")
        body = prefix_lines("\n".join(lines))
        return f"{{\n{body}\n}}"

    def render_type(self) -> str:
        docs = self.annotations.render_comment() if self.annotations else ""
        return f"{docs}export type {self.type_name()} = {self.render_expr()};"


# =============================================================================
# Fields
# =============================================================================


class Element:
    """A named element with occurrence bounds.

    Defaults follow the generated shape rather than XSD: an element is
    optional and repeatable unless minOccurs/maxOccurs say otherwise.
    """

    def __init__(
        self,
        ctx: Context,
        name: str,
        type_: TypeReference | ComplexType | SimpleType,
        min_occurs: int = 0,
        max_occurs: float = math.inf,
        annotations: Annotations | None = None,
    ):
        self.ctx = ctx
        self.name = name
        self.type = type_
        self.min_occurs = min_occurs
        self.max_occurs = max_occurs
        self.annotations = annotations

    def __repr__(self) -> str:
        return f"Element({self.name!r}, {self.type!r})"

    @classmethod
    def from_tree(cls, ctx: Context, schema: Schema, node: dict) -> Element:
        """Parse an xs:element node.

        A ref= is looked up immediately and borrows the name and type of the
        referenced element; occurrence bounds and documentation stay local.

        Raises:
            ValueError: If ref= is malformed or the element has no name.
            SchemaException: If ref= points to an element never registered.
        """
        type_: TypeReference | ComplexType | SimpleType
        if "@_ref" in node:
            ref = schema.resolve_ref(node["@_ref"])
            if ref is None:
                raise ValueError(f"Invalid element reference: {node['@_ref']}")
            target = ctx.find_element(ref.namespace, ref.name)
            if target is None:
                raise SchemaException(f"Element not found: {ref.namespace}:{ref.name}")
            name = target.name
            type_ = target.type
        else:
            name = node.get("@_name")
            if not name:
                raise ValueError(f"Element without name or ref in {schema.namespace}")
            if "@_type" in node:
                type_ = TypeReference.from_tree(ctx, schema, node["@_type"], strict=False)
            elif "simpleType" in node:
                type_ = SimpleType.from_tree(ctx, schema, _group(node, "simpleType"), name=name)
            else:
                type_ = ComplexType.from_tree(ctx, schema, _group(node, "complexType"), name=name)

        o = cls(ctx, name, type_, annotations=_annotations(node))
        if node.get("@_minOccurs"):
            o.min_occurs = int(node["@_minOccurs"])
        max_occurs = node.get("@_maxOccurs")
        if max_occurs and max_occurs != "unbounded":
            o.max_occurs = int(max_occurs)
        return o

    def type_name(self) -> str:
        return self.ctx.to_identifier(self.name) + "Element"

    def render_field(self, omit_docs: bool = False) -> str:
        """Render 'name?: Many<T>;' with its doc comment."""
        expr = self.type.render_expr()
        if self.max_occurs > 1:
            expr = f"{MANY}<{expr}>"
        docs = ""
        if self.annotations and not omit_docs:
            docs = self.annotations.render_comment()
        optional = "?" if self.min_occurs == 0 else ""
        return f"{docs}{ts_property(self.name)}{optional}: {expr};"

    def render_type(self) -> str:
        """Render the document type for a top-level element."""
        docs = self.annotations.render_comment() if self.annotations else ""
        field_text = prefix_lines(self.render_field(omit_docs=True))
        return f"{docs}export type {self.type_name()} = {PROLOG} & {{\n{field_text}\n}};"


class Attribute:
    """An attribute field, keyed with the context's attribute prefix."""

    def __init__(
        self,
        ctx: Context,
        name: str,
        type_: TypeReference | SimpleType | None,
        required: bool = False,
        fixed: str | None = None,
        annotations: Annotations | None = None,
    ):
        self.ctx = ctx
        self.name = name
        self.type = type_
        self.required = required
        self.fixed = fixed
        self.annotations = annotations

    def __repr__(self) -> str:
        return f"Attribute({self.name!r}, {self.type!r})"

    @classmethod
    def from_tree(cls, ctx: Context, schema: Schema, node: Any) -> Attribute:
        """Parse an xs:attribute node.

        A ref= attribute (e.g. 'xml:lang') keeps its qualified name, which is
        how parsers report it, and gets the loose attribute type.
        """
        if not isinstance(node, dict):
            raise ValueError(f"Invalid attribute declaration in {schema.namespace}")

        type_: TypeReference | SimpleType | None = None
        if "@_ref" in node:
            name = node["@_ref"]
        else:
            name = node.get("@_name")
            if not name:
                raise ValueError(f"Attribute without name or ref in {schema.namespace}")
            if "@_type" in node:
                type_ = TypeReference.from_tree(ctx, schema, node["@_type"], strict=False)
            elif "simpleType" in node:
                type_ = SimpleType.from_tree(ctx, schema, _group(node, "simpleType"), name=name)

        return cls(
            ctx,
            name,
            type_,
            required=node.get("@_use") == "required",
            fixed=node.get("@_fixed") or None,
            annotations=_annotations(node),
        )

    def render_field(self) -> str:
        """Render '"@_name"?: T;' with its doc comment."""
        field_name = ts_literal(f"{self.ctx.attribute_prefix}{self.name}")
        if self.fixed:
            expr = literal_union(self.fixed)
        elif self.type is not None:
            expr = self.type.render_expr()
        else:
            expr = LOOSE_ATTRIBUTE_TYPE
        docs = self.annotations.render_comment() if self.annotations else ""
        optional = "" if self.required else "?"
        return f"{docs}{field_name}{optional}: {expr};"
