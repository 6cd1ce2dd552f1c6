"""
dataclasses-json backend.

Generates dataclasses decorated with @dataclass_json. The library takes
care of (de)serialization through from_dict / to_dict; fields whose JSON
form differs from what the library produces on its own (datetimes as ISO
strings, unions, map wrappers) get an explicit encoder and decoder.
"""

from __future__ import annotations

from ..analyzer.ir_nodes import FieldDef, TypeKind, TypeRef
from .base import ExpressionBuilder, ModelBackend, python_literal


def needs_codec(type_ref: TypeRef) -> bool:
    """Whether dataclasses-json cannot convert the type by itself."""
    return type_ref.contains(
        lambda t: t.override_type is None
        and (t.kind in (TypeKind.DATETIME, TypeKind.UNION) or (t.kind == TypeKind.CLASS and t.custom_codec))
    )


class DataclassesJsonBackend(ModelBackend):
    """Renders records as @dataclass_json dataclasses."""

    TEMPLATE_STYLE = "dataclasses_json"

    DECODE_CALL = "{name}.from_dict({source})"
    ENCODE_CALL = "{source}.to_dict()"
    DECODE_METHOD = "from_dict"
    ENCODE_METHOD = "to_dict"

    def render_class(
        self,
        class_name: str,
        fields: list[FieldDef],
        from_json_expression: ExpressionBuilder,
        to_json_expression: ExpressionBuilder,
        use_json_key: bool = False,
        doc: str | None = None,
    ) -> str:
        self.add_import("dataclasses", "dataclass")
        self.add_import("dataclasses_json", "dataclass_json")

        field_contexts = []
        for field in self._order_fields(fields):
            ctx = self._prepare_field_context(field, from_json_expression, to_json_expression)
            ctx["declaration"] = self._declaration(field, ctx["type"], use_json_key, from_json_expression, to_json_expression)
            field_contexts.append(ctx)

        return self._render(
            self.class_template,
            class_name=class_name,
            docstring=self._docstring(doc),
            fields=field_contexts,
        )

    def _declaration(
        self,
        field: FieldDef,
        type_str: str,
        use_json_key: bool,
        from_json_expression: ExpressionBuilder,
        to_json_expression: ExpressionBuilder,
    ) -> str:
        options = []
        if use_json_key or field.name != field.attr_name:
            options.append(f"field_name={python_literal(field.name)}")
        if needs_codec(field.type_ref):
            options.append(f"encoder=lambda v: {to_json_expression(field.type_ref, 'v')}")
            options.append(f"decoder=lambda v: {from_json_expression(field.type_ref, 'v')}")

        if not options:
            if field.is_required:
                return f"{field.attr_name}: {type_str}"
            return f"{field.attr_name}: {type_str} = None"

        self.add_import("dataclasses", "field")
        self.add_import("dataclasses_json", "config")
        metadata = f"metadata=config({', '.join(options)})"
        if field.is_required:
            return f"{field.attr_name}: {type_str} = field({metadata})"
        return f"{field.attr_name}: {type_str} = field(default=None, {metadata})"
