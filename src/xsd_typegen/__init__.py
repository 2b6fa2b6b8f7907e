# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""xsd-typegen - TypeScript declarations from XML Schema documents.

Loads XSD documents (and everything they import) into a namespace-aware
schema graph, then renders one TypeScript type per named type and per
top-level element. The generated types describe documents parsed into
plain trees, attributes as '@_'-prefixed keys and repeated elements as
arrays.

Example:
    >>> from xsd_typegen import Context
    >>>
    >>> ctx = Context(strip_prefixes=['Tp'])
    >>> ctx.load_schema('pain.001.001.12.xsd')
    >>> print(ctx.render())
"""

from .annotation import Annotations
from .context import Context
from .exceptions import SchemaException
from .model import (
    Attribute,
    ComplexType,
    Element,
    EnumerationValue,
    PrimitiveType,
    QualifiedRef,
    SimpleType,
    TypeDefinition,
    TypeReference,
    Variant,
)
from .schema import Schema
from .xml_tree import parse_xml

__version__ = "0.1.0"

__all__ = [
    "Annotations",
    "Attribute",
    "ComplexType",
    "Context",
    "Element",
    "EnumerationValue",
    "PrimitiveType",
    "QualifiedRef",
    "Schema",
    "SchemaException",
    "SimpleType",
    "TypeDefinition",
    "TypeReference",
    "Variant",
    "parse_xml",
]
