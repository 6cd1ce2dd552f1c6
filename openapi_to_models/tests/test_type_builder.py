"""
Tests for fragment classification and the type / field model builder.
"""

from __future__ import annotations

import pytest

from openapi_to_models.pipeline import GenerationContext, GeneratorConfig, SchemaOverride
from openapi_to_models.pipeline.analyzer import SchemaAnalyzer, TypeBuilder, TypeKind
from openapi_to_models.pipeline.loader import SpecVersion
from openapi_to_models.pipeline.schema_ast import (
    AllOfNode,
    ArrayNode,
    EnumNode,
    MapNode,
    ObjectNode,
    PrimitiveNode,
    RefNode,
    SchemaParser,
    UnionNode,
    UnknownNode,
)
from openapi_to_models.utils import to_enum_member_name, to_pascal_case, to_python_identifier, to_snake_case


def make_context(schemas, config=None):
    document = {"openapi": "3.0.0", "components": {"schemas": schemas}}
    return GenerationContext(document, SpecVersion.OPENAPI3, config)


class TestSchemaParser:
    """Tests for SchemaParser."""

    @pytest.mark.parametrize(
        "fragment,node_type",
        [
            ({"$ref": "#/components/schemas/User", "type": "object"}, RefNode),
            ({"type": "string", "enum": ["a", "b"]}, EnumNode),
            ({"allOf": [{"type": "object"}]}, AllOfNode),
            ({"oneOf": [{"type": "string"}]}, UnionNode),
            ({"anyOf": [{"type": "string"}]}, UnionNode),
            ({"type": "array", "items": {"type": "string"}}, ArrayNode),
            ({"type": "object", "additionalProperties": {"type": "integer"}}, MapNode),
            ({"type": "object", "properties": {"a": {"type": "string"}}}, ObjectNode),
            ({"properties": {"a": {"type": "string"}}}, ObjectNode),
            ({"type": "integer", "format": "int64"}, PrimitiveNode),
            ({"description": "no type"}, UnknownNode),
            (None, UnknownNode),
        ],
    )
    def test_classification(self, fragment, node_type):
        """Test that fragments are classified by priority."""
        assert isinstance(SchemaParser().parse(fragment), node_type)

    def test_empty_enum_is_not_an_enum(self):
        """Test that an empty enum list falls through to the declared type."""
        assert isinstance(SchemaParser().parse({"type": "string", "enum": []}), PrimitiveNode)

    def test_nullability_markers(self):
        """Test the three ways of declaring nullability."""
        parser = SchemaParser()
        assert parser.parse({"type": "string", "nullable": True}).is_nullable
        assert parser.parse({"type": "string", "x-nullable": True}).is_nullable
        assert parser.parse({"type": ["string", "null"]}).is_nullable
        assert not parser.parse({"type": "string"}).is_nullable

    def test_discriminator_forms(self):
        """Test OpenAPI 3 and Swagger 2.0 discriminators."""
        parser = SchemaParser()
        node = parser.parse(
            {
                "oneOf": [{"$ref": "#/components/schemas/Cat"}],
                "discriminator": {"propertyName": "kind", "mapping": {"cat": "#/components/schemas/Cat"}},
            }
        )
        assert node.discriminator == "kind"
        assert node.mapping == {"cat": "#/components/schemas/Cat"}

        swagger = parser.parse({"oneOf": [], "discriminator": "kind"})
        assert swagger.discriminator == "kind"
        assert swagger.mapping == {}

    def test_enum_value_types_and_names(self):
        """Test enum value type detection and x-enumNames."""
        parser = SchemaParser()
        node = parser.parse({"enum": [1, 2], "x-enumNames": ["Low", "High"]})
        assert node.value_type == "integer"
        assert node.member_names == ["Low", "High"]
        assert parser.parse({"type": "number", "enum": [1.5]}).value_type == "number"
        assert parser.parse({"enum": ["a", 1]}).value_type == "string"


class TestNaming:
    """Tests for the name conversions."""

    def test_pascal_case(self):
        assert to_pascal_case("user_profile") == "UserProfile"
        assert to_pascal_case("BaseEntity") == "BaseEntity"
        assert to_pascal_case("order-item") == "OrderItem"
        assert to_pascal_case("pet.v2") == "PetV2"

    def test_snake_case(self):
        assert to_snake_case("userId") == "user_id"
        assert to_snake_case("HTTPServer") == "http_server"
        assert to_snake_case("created-at") == "created_at"

    def test_python_identifier(self):
        """Test keywords, soft keywords and leading digits."""
        assert to_python_identifier("class") == "class_"
        assert to_python_identifier("type") == "type_"
        assert to_python_identifier("2fa") == "field_2fa"
        assert to_python_identifier("$") == "field_"

    def test_enum_member_name(self):
        assert to_enum_member_name("in_progress") == "IN_PROGRESS"
        assert to_enum_member_name("darkBlue") == "DARK_BLUE"
        assert to_enum_member_name(1) == "VALUE_1"
        assert to_enum_member_name("") == "EMPTY"


class TestTypeBuilder:
    """Tests for TypeBuilder."""

    def test_required_unless_nullable(self):
        """Test a record with required and nullable fields."""
        context = make_context(
            {
                "Contact": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer"},
                        "name": {"type": "string"},
                        "email": {"type": "string", "nullable": True},
                    },
                }
            }
        )
        class_def = SchemaAnalyzer(context).analyze("Contact", context.schemas["Contact"])

        fields = {f.name: f for f in class_def.fields}
        assert [f.name for f in class_def.fields] == ["id", "name", "email"]
        assert fields["id"].type_ref.name == "int" and fields["id"].is_required
        assert fields["name"].type_ref.name == "str" and fields["name"].is_required
        assert fields["email"].type_ref.name == "str" and not fields["email"].is_required
        assert fields["email"].type_ref.is_nullable

    @pytest.mark.parametrize("type_name", ["integer", "number", "boolean", "string", "array", "object"])
    def test_required_flag_ignores_required_list(self, type_name):
        """Test that required-ness depends on nullability for every kind."""
        builder = TypeBuilder(make_context({}))
        assert builder.field_for("x", {"type": type_name}, "Owner").is_required
        assert not builder.field_for("x", {"type": type_name, "nullable": True}, "Owner").is_required

    def test_primitive_and_datetime_types(self):
        """Test primitive and timestamp mappings."""
        builder = TypeBuilder(make_context({}))
        assert builder.type_for({"type": "number"}, "O", "p").name == "float"
        assert builder.type_for({"type": "boolean"}, "O", "p").name == "bool"
        timestamp = builder.type_for({"type": "string", "format": "date-time"}, "O", "p")
        assert timestamp.kind == TypeKind.DATETIME and timestamp.name == "datetime"
        assert builder.type_for({"type": "string", "format": "date"}, "O", "p").name == "date"
        assert builder.type_for({"type": "string", "format": "uuid"}, "O", "p").name == "str"

    def test_containers(self):
        """Test arrays and maps, with and without element types."""
        builder = TypeBuilder(make_context({}))
        array = builder.type_for({"type": "array", "items": {"type": "integer"}}, "O", "p")
        assert array.kind == TypeKind.ARRAY and array.type_args[0].name == "int"

        untyped = builder.type_for({"type": "array"}, "O", "p")
        assert untyped.type_args[0].kind == TypeKind.ANY

        mapping = builder.type_for({"type": "object", "additionalProperties": {"type": "string"}}, "O", "p")
        assert mapping.kind == TypeKind.MAP and mapping.type_args[0].name == "str"

        open_map = builder.type_for({"type": "object", "additionalProperties": True}, "O", "p")
        assert open_map.kind == TypeKind.MAP and open_map.type_args[0].kind == TypeKind.ANY

    def test_unknown_type_is_any(self):
        """Test that fragments without a usable type become Any."""
        builder = TypeBuilder(make_context({}))
        assert builder.type_for({"description": "?"}, "O", "p").kind == TypeKind.ANY

    def test_ref_to_record_and_enum(self):
        """Test references to named records and enumerations."""
        context = make_context(
            {
                "Status": {"type": "string", "enum": ["open", "closed"]},
                "user_profile": {"type": "object", "properties": {"id": {"type": "integer"}}},
            }
        )
        builder = TypeBuilder(context)

        status = builder.type_for({"$ref": "#/components/schemas/Status"}, "O", "p")
        assert status.kind == TypeKind.ENUM and status.name == "Status" and status.schema_name == "Status"

        profile = builder.type_for({"$ref": "#/components/schemas/user_profile"}, "O", "p")
        assert profile.kind == TypeKind.CLASS and profile.name == "UserProfile"

    def test_unresolved_ref_uses_literal_name(self):
        """Test that a dangling reference is typed by its final segment."""
        builder = TypeBuilder(make_context({}))
        missing = builder.type_for({"$ref": "#/components/schemas/Missing"}, "O", "p")
        assert missing.kind == TypeKind.CLASS
        assert missing.name == "Missing"
        assert missing.schema_name is None

    def test_alias_schemas_are_inlined(self):
        """Test that references to named primitives and arrays are typed by their target."""
        context = make_context(
            {
                "Email": {"type": "string"},
                "Tags": {"type": "array", "items": {"type": "string"}},
                "Loop": {"$ref": "#/components/schemas/Loop"},
            }
        )
        builder = TypeBuilder(context)
        assert builder.type_for({"$ref": "#/components/schemas/Email"}, "O", "p").name == "str"
        tags = builder.type_for({"$ref": "#/components/schemas/Tags"}, "O", "p")
        assert tags.kind == TypeKind.ARRAY and tags.type_args[0].name == "str"
        assert builder.type_for({"$ref": "#/components/schemas/Loop"}, "O", "p").kind == TypeKind.ANY

    def test_single_ref_all_of(self):
        """Test that allOf wrapping one reference is typed as that reference."""
        context = make_context({"Address": {"type": "object", "properties": {"city": {"type": "string"}}}})
        builder = TypeBuilder(context)
        wrapped = builder.type_for({"allOf": [{"$ref": "#/components/schemas/Address"}], "nullable": True}, "O", "p")
        assert wrapped.name == "Address"
        assert wrapped.is_nullable

    def test_inline_enum_names_are_disambiguated(self):
        """Test that inline enums get unique names."""
        context = make_context({"OrderStatus": {"type": "string", "enum": ["x"]}})
        builder = TypeBuilder(context)

        first = builder.type_for({"enum": ["new", "paid"]}, "Order", "status")
        again = builder.type_for({"enum": ["new", "paid"]}, "Order", "status")
        other = builder.type_for({"enum": ["a"]}, "Other", "status")

        assert first.kind == TypeKind.ENUM
        assert first.name == "OrderStatus1"
        assert again.name == "OrderStatus1"
        assert other.name == "OtherStatus"
        assert [e.name for e in context.inline_enums_for("Order")] == ["OrderStatus1"]

    def test_overrides(self):
        """Test field name and type mapping overrides."""
        override = SchemaOverride(field_names={"e-mail": "contact_email"}, type_mapping={"integer": "Decimal"})
        builder = TypeBuilder(make_context({}))

        email = builder.field_for("e-mail", {"type": "string", "nullable": True}, "O", override)
        assert email.attr_name == "contact_email"
        assert not email.is_required

        amount = builder.field_for("amount", {"type": "integer"}, "O", override)
        assert amount.type_ref.override_type == "Decimal"
        assert amount.is_required

    def test_class_name_override(self):
        """Test that class name overrides apply to references."""
        config = GeneratorConfig(schema_overrides={"user": SchemaOverride(class_name="Account")})
        context = make_context({"user": {"type": "object", "properties": {"id": {"type": "integer"}}}}, config)
        builder = TypeBuilder(context)
        assert builder.type_for({"$ref": "#/components/schemas/user"}, "O", "p").name == "Account"
