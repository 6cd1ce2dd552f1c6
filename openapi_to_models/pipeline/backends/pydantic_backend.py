"""
pydantic backend.

Generates pydantic models. Validation and serialization are left to
pydantic; JSON keys that differ from the attribute names become aliases.
"""

from __future__ import annotations

from ..analyzer.ir_nodes import FieldDef, MapDef, OpaqueDef, TypeKind, TypeRef, UnionDef
from .base import ExpressionBuilder, ModelBackend, python_literal


class PydanticBackend(ModelBackend):
    """Renders records as pydantic BaseModel subclasses."""

    TEMPLATE_STYLE = "pydantic"

    DECODE_CALL = "{name}.model_validate({source})"
    ENCODE_CALL = '{source}.model_dump(mode="json", by_alias=True)'
    DECODE_METHOD = "model_validate"
    ENCODE_METHOD = "model_dump"

    def render_class(
        self,
        class_name: str,
        fields: list[FieldDef],
        from_json_expression: ExpressionBuilder,
        to_json_expression: ExpressionBuilder,
        use_json_key: bool = False,
        doc: str | None = None,
    ) -> str:
        self.add_import("pydantic", "BaseModel")
        self.add_import("pydantic", "ConfigDict")

        field_contexts = []
        for field in self._order_fields(fields):
            ctx = self._prepare_field_context(field, from_json_expression, to_json_expression)
            ctx["declaration"] = self._declaration(field, ctx["type"], use_json_key)
            field_contexts.append(ctx)

        return self._render(
            self.class_template,
            class_name=class_name,
            docstring=self._docstring(doc),
            fields=field_contexts,
        )

    def _declaration(self, field: FieldDef, type_str: str, use_json_key: bool) -> str:
        if use_json_key or field.name != field.attr_name:
            self.add_import("pydantic", "Field")
            alias = f"alias={python_literal(field.name)}"
            if field.is_required:
                return f"{field.attr_name}: {type_str} = Field({alias})"
            return f"{field.attr_name}: {type_str} = Field(default=None, {alias})"
        if field.is_required:
            return f"{field.attr_name}: {type_str}"
        return f"{field.attr_name}: {type_str} = None"

    def render_union(self, union_def: UnionDef) -> str:
        self.add_import("collections.abc", "Callable")
        self.add_import("typing", "Any")
        self.add_import("typing", "TypeVar")
        self.add_import("pydantic", "BaseModel")
        self.add_import("pydantic", "model_serializer")
        self.add_import("pydantic", "model_validator")
        variants = [
            {
                "token": python_literal(v.token),
                "class_name": v.class_name,
                "field": v.field_name,
                "encode": self.to_json_expression(TypeRef(kind=TypeKind.CLASS, name=v.class_name), f"self.{v.field_name}"),
            }
            for v in union_def.variants
        ]
        return self._render(
            self.union_template,
            name=union_def.name,
            docstring=self._docstring(union_def.doc, "Exactly one of the variant fields is set."),
            discriminator=python_literal(union_def.discriminator),
            variants=variants,
        )

    def render_opaque(self, opaque_def: OpaqueDef) -> str:
        self.add_import("typing", "Any")
        self.add_import("pydantic", "RootModel")
        note = f"One of: {', '.join(opaque_def.possible_types) or 'unknown'} ({opaque_def.combinator}). The value is kept as raw JSON."
        return self._render(
            self.opaque_template,
            name=opaque_def.name,
            docstring=self._docstring(opaque_def.doc, note),
        )

    def render_map(self, map_def: MapDef) -> str:
        self.add_import("pydantic", "RootModel")
        map_type = TypeRef(kind=TypeKind.MAP, name="dict", type_args=[map_def.value_type])
        return self._render(
            self.map_template,
            name=map_def.name,
            docstring=self._docstring(map_def.doc),
            type=self.translate_type(map_type),
        )
