"""
Plain dataclass backend.

Generates standard library dataclasses with hand-written from_json and
to_json methods.
"""

from __future__ import annotations

from ..analyzer.ir_nodes import FieldDef
from .base import ExpressionBuilder, ModelBackend, python_literal


class DataclassBackend(ModelBackend):
    """Renders records as @dataclass classes."""

    TEMPLATE_STYLE = "dataclass"

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
        self.add_import("typing", "Any")

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
        """Field declaration; the JSON key is kept in the field metadata when requested."""
        if use_json_key:
            self.add_import("dataclasses", "field")
            metadata = f'metadata={{"json_key": {python_literal(field.name)}}}'
            if field.is_required:
                return f"{field.attr_name}: {type_str} = field({metadata})"
            return f"{field.attr_name}: {type_str} = field(default=None, {metadata})"
        if field.is_required:
            return f"{field.attr_name}: {type_str}"
        return f"{field.attr_name}: {type_str} = None"
