# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the type model and its TypeScript emission.

Types are built programmatically against a fresh Context, so each test
checks the exact text one node renders.
"""

import math
from decimal import Decimal

import pytest

from xsd_typegen import (
    Annotations,
    Attribute,
    ComplexType,
    Context,
    Element,
    EnumerationValue,
    PrimitiveType,
    SimpleType,
    TypeReference,
    Variant,
)
from xsd_typegen.model import XMLDSIG_NAMESPACE, XSD_NAMESPACE


@pytest.fixture
def ctx():
    return Context()


def xs(ctx, name):
    return TypeReference(ctx, XSD_NAMESPACE, name)


# =============================================================================
# References and primitives
# =============================================================================


class TestTypeReference:
    """Tests for lazy type references."""

    def test_resolves_primitive(self, ctx):
        """xs:string renders as its prefixed primitive name."""
        assert xs(ctx, "string").render_expr() == "XsString"

    def test_unresolved_renders_unknown(self, ctx):
        """A reference to an undeclared type renders as unknown."""
        assert TypeReference(ctx, "urn:none", "Missing").render_expr() == "unknown"

    def test_malformed_renders_unknown(self, ctx):
        """A reference without namespace never resolves."""
        ref = TypeReference(ctx, None, "a:b:c")

        assert ref.resolve() is None
        assert ref.render_expr() == "unknown"

    def test_resolution_is_lazy(self, ctx):
        """A type registered after the reference was built is found."""
        ref = TypeReference(ctx, "urn:late", "LateType")
        assert ref.render_expr() == "unknown"

        ctx.schema_for("urn:late").add_type(ComplexType(ctx, "LateType"))

        assert ref.render_expr() == "LateType"


class TestPrimitiveType:
    """Tests for PrimitiveType."""

    def test_render_type(self, ctx):
        """A primitive renders as an alias of its TypeScript expression."""
        primitive = PrimitiveType(ctx, "dateTime", "string", prefix="Xs")

        assert primitive.type_name() == "XsDateTime"
        assert primitive.render_type() == "export type XsDateTime = string;"

    def test_signature_type(self, ctx):
        """The digital signature type is opaque."""
        signature = ctx.find_type(XMLDSIG_NAMESPACE, "SignatureType")

        assert signature.render_type() == "export type SignatureType = unknown;"


# =============================================================================
# SimpleType
# =============================================================================


class TestSimpleType:
    """Tests for SimpleType emission."""

    def test_plain_restriction(self, ctx):
        """Without facets the type aliases its base."""
        simple = SimpleType(ctx, "Max35Text", xs(ctx, "string"))

        assert simple.render_type() == "export type Max35Text = XsString;"

    def test_no_base_renders_unknown(self, ctx):
        """A simple type without restriction base renders as unknown."""
        assert SimpleType(ctx, "ListType", None).render_expr() == "unknown"

    def test_enumeration_union(self, ctx):
        """Enumerations replace the base with literal unions."""
        simple = SimpleType(ctx, "CodeType", xs(ctx, "string"))
        simple.enumeration = [EnumerationValue("1"), EnumerationValue("2"), EnumerationValue("CRED")]

        assert simple.render_expr() == '"1" | 1 | "2" | 2 | "CRED"'

    def test_length_and_pattern_facets(self, ctx):
        """Facets are documented in a fixed order; '/' is escaped in patterns."""
        simple = SimpleType(ctx, "CodeType", xs(ctx, "string"))
        simple.pattern = "[A-Z]{2}/[0-9]+"
        simple.max_length = 35
        simple.min_length = 1

        assert simple.render_type() == (
            "/**\n"
            " * Min length: 1\n"
            " * Max length: 35\n"
            " * Pattern: /[A-Z]{2}\\/[0-9]+/\n"
            " */\n"
            "export type CodeType = XsString;"
        )

    def test_numeric_facets(self, ctx):
        """Numeric facets are listed before length facets."""
        simple = SimpleType(ctx, "AmountType", xs(ctx, "decimal"))
        simple.min_inclusive = Decimal("0")
        simple.total_digits = 18
        simple.fraction_digits = 5

        assert simple.render_type() == (
            "/**\n"
            " * Min: 0\n"
            " * Total digits: 18\n"
            " * Fraction digits: 5\n"
            " */\n"
            "export type AmountType = XsDecimal;"
        )

    def test_annotations_and_facets(self, ctx):
        """Documentation comes first, separated from facets by an empty doc line."""
        simple = SimpleType(ctx, "Max35Text", xs(ctx, "string"))
        simple.annotations = Annotations(["Text of at most 35 characters."])
        simple.max_length = 35

        assert simple.render_type() == (
            "/**\n"
            " * Text of at most 35 characters.\n"
            " *\n"
            " * Max length: 35\n"
            " */\n"
            "export type Max35Text = XsString;"
        )

    def test_possible_values(self, ctx):
        """Documented enumerations are listed with aligned continuation lines."""
        simple = SimpleType(ctx, "CodeType", xs(ctx, "string"))
        simple.enumeration = [
            EnumerationValue("A", Annotations(["Alpha"])),
            EnumerationValue("BB", Annotations(["Beta\nsecond line"])),
            EnumerationValue("C"),
        ]

        assert simple.render_type() == (
            "/**\n"
            " * Possible values:\n"
            " * - A: Alpha\n"
            " * - BB: Beta\n"
            " *       second line\n"
            " * - C:\n"
            " */\n"
            'export type CodeType = "A" | "BB" | "C";'
        )

    def test_undocumented_enumeration_has_no_comment(self, ctx):
        """Without any documentation no comment is emitted."""
        simple = SimpleType(ctx, "CodeType", xs(ctx, "string"))
        simple.enumeration = [EnumerationValue("X")]

        assert simple.render_type() == 'export type CodeType = "X";'


# =============================================================================
# Element and Attribute fields
# =============================================================================


class TestElementField:
    """Tests for Element.render_field and render_type."""

    def test_defaults_optional_many(self, ctx):
        """Default bounds are minOccurs 0 and maxOccurs unbounded."""
        element = Element(ctx, "Nm", xs(ctx, "string"))

        assert element.min_occurs == 0
        assert element.max_occurs == math.inf
        assert element.render_field() == "Nm?: Many<XsString>;"

    def test_required_single(self, ctx):
        """minOccurs 1 and maxOccurs 1 give a required plain field."""
        element = Element(ctx, "Nm", xs(ctx, "string"), min_occurs=1, max_occurs=1)

        assert element.render_field() == "Nm: XsString;"

    def test_required_many(self, ctx):
        """maxOccurs above one wraps the type in Many."""
        element = Element(ctx, "Nm", xs(ctx, "string"), min_occurs=1, max_occurs=5)

        assert element.render_field() == "Nm: Many<XsString>;"

    def test_documented_field(self, ctx):
        """Documentation is rendered before the field unless omitted."""
        element = Element(
            ctx, "Nm", xs(ctx, "string"), max_occurs=1, annotations=Annotations(["Name."])
        )

        assert element.render_field() == "/**\n * Name.\n */\nNm?: XsString;"
        assert element.render_field(omit_docs=True) == "Nm?: XsString;"

    def test_quoted_field_name(self, ctx):
        """Names that are not identifiers are quoted."""
        element = Element(ctx, "my-field", xs(ctx, "string"), max_occurs=1)

        assert element.render_field() == '"my-field"?: XsString;'

    def test_render_document_type(self, ctx):
        """A top-level element renders a Prolog-based document type."""
        element = Element(
            ctx, "Document", xs(ctx, "string"), annotations=Annotations(["Root."])
        )

        assert element.type_name() == "DocumentElement"
        assert element.render_type() == (
            "/**\n"
            " * Root.\n"
            " */\n"
            "export type DocumentElement = Prolog & {\n"
            "  Document?: Many<XsString>;\n"
            "};"
        )


class TestAttributeField:
    """Tests for Attribute.render_field."""

    def test_required_attribute(self, ctx):
        """Required attributes have no '?'."""
        attribute = Attribute(ctx, "Ccy", xs(ctx, "string"), required=True)

        assert attribute.render_field() == '"@_Ccy": XsString;'

    def test_optional_attribute(self, ctx):
        attribute = Attribute(ctx, "Ccy", xs(ctx, "string"))

        assert attribute.render_field() == '"@_Ccy"?: XsString;'

    def test_fixed_value(self, ctx):
        """A fixed value renders as its literal union."""
        attribute = Attribute(ctx, "version", xs(ctx, "string"), fixed="1.0")

        assert attribute.render_field() == '"@_version"?: "1.0" | 1.0;'

    def test_untyped_attribute(self, ctx):
        """Attributes without type accept strings and numbers."""
        attribute = Attribute(ctx, "xml:lang", None)

        assert attribute.render_field() == '"@_xml:lang"?: string | number;'

    def test_custom_prefix(self):
        """The context attribute prefix is used for field names."""
        ctx = Context(attribute_prefix="$")
        attribute = Attribute(ctx, "Ccy", xs(ctx, "string"), required=True)

        assert attribute.render_field() == '"$Ccy": XsString;'

    def test_documented_attribute(self, ctx):
        attribute = Attribute(ctx, "Ccy", None, annotations=Annotations(["Currency."]))

        assert attribute.render_field() == '/**\n * Currency.\n */\n"@_Ccy"?: string | number;'


# =============================================================================
# ComplexType
# =============================================================================


def required(ctx, name, type_name="string"):
    return Element(ctx, name, xs(ctx, type_name), min_occurs=1, max_occurs=1)


class TestComplexType:
    """Tests for ComplexType emission."""

    def test_empty(self, ctx):
        """A complex type without content is a bare XmlElement."""
        assert ComplexType(ctx, "EmptyType").render_expr() == "XmlElement"

    def test_sequence(self, ctx):
        """A single variant is rendered without parentheses."""
        complex_type = ComplexType(ctx, "PartyType")
        complex_type.variants.append(
            Variant([required(ctx, "Nm"), Element(ctx, "Adr", xs(ctx, "string"))])
        )

        assert complex_type.render_type() == (
            "export type PartyType = XmlElement & {\n"
            "  Nm: XsString;\n"
            "  Adr?: Many<XsString>;\n"
            "};"
        )

    def test_attributes_only(self, ctx):
        """Attributes form their own intersection member."""
        complex_type = ComplexType(ctx, "AmountType")
        complex_type.attributes.append(Attribute(ctx, "Ccy", xs(ctx, "string"), required=True))

        assert complex_type.render_expr() == 'XmlElement & {\n  "@_Ccy": XsString;\n}'

    def test_attributes_and_sequence(self, ctx):
        """Attributes come before the content model."""
        complex_type = ComplexType(ctx, "DocumentType")
        complex_type.attributes.append(Attribute(ctx, "version", xs(ctx, "string"), required=True))
        complex_type.variants.append(Variant([required(ctx, "Title")]))

        assert complex_type.render_expr() == (
            'XmlElement & {\n  "@_version": XsString;\n} & {\n  Title: XsString;\n}'
        )

    def test_two_variant_choice(self, ctx):
        """Each arm marks the other arm's element as absent."""
        complex_type = ComplexType(ctx, "PartyChoice")
        complex_type.variants.append(Variant([required(ctx, "OrgId")]))
        complex_type.variants.append(Variant([required(ctx, "PrvtId")]))

        assert complex_type.render_expr() == (
            "XmlElement & ({\n"
            "  OrgId: XsString;\n"
            "  PrvtId?: undefined;\n"
            "} | {\n"
            "  PrvtId: XsString;\n"
            "  OrgId?: undefined;\n"
            "})"
        )

    def test_three_variant_choice(self, ctx):
        """Every arm lists the two other names as undefined."""
        complex_type = ComplexType(ctx, "Choice3")
        for name in ("A", "B", "C"):
            complex_type.variants.append(Variant([required(ctx, name)]))

        expr = complex_type.render_expr()

        assert expr.count(" | {") == 2
        assert expr.count("?: undefined;") == 6
        assert "  B: XsString;\n  A?: undefined;\n  C?: undefined;\n" in expr

    def test_shared_names_marked_once(self, ctx):
        """Names already present in an arm are not marked as undefined."""
        complex_type = ComplexType(ctx, "Overlap")
        complex_type.variants.append(Variant([required(ctx, "X")]))
        complex_type.variants.append(Variant([required(ctx, "X"), required(ctx, "Y")]))

        assert complex_type.render_expr() == (
            "XmlElement & ({\n"
            "  X: XsString;\n"
            "  Y?: undefined;\n"
            "} | {\n"
            "  X: XsString;\n"
            "  Y: XsString;\n"
            "})"
        )

    def test_nested_documented_field(self, ctx):
        """Field documentation is indented with the field."""
        complex_type = ComplexType(ctx, "PartyType")
        complex_type.variants.append(
            Variant([Element(ctx, "Nm", xs(ctx, "string"), max_occurs=1,
                             annotations=Annotations(["Name."]))])
        )

        assert complex_type.render_expr() == (
            "XmlElement & {\n  /**\n   * Name.\n   */\n  Nm?: XsString;\n}"
        )

    def test_documented_type(self, ctx):
        """Type documentation precedes the declaration."""
        complex_type = ComplexType(ctx, "EmptyType")
        complex_type.annotations = Annotations(["Nothing inside."])

        assert complex_type.render_type() == (
            "/**\n * Nothing inside.\n */\nexport type EmptyType = XmlElement;"
        )

    def test_type_name_uses_strip_prefixes(self):
        """Type names go through the context naming policy."""
        ctx = Context(strip_prefixes=["Type_"])

        assert ComplexType(ctx, "Type_party_info").type_name() == "PartyInfo"
