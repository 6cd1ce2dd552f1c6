"""
Base class for rendering backends.

A backend ("style") turns IR descriptors into Python source. Each style
ships its own class template; enum, union, opaque value and map wrapper
templates are shared from ``templates/common`` unless the style overrides
them.
"""

from __future__ import annotations

import collections
import json
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

import jinja2

from ..analyzer import expressions
from ..analyzer.ir_nodes import (
    ClassDef,
    EnumDef,
    FieldDef,
    MapDef,
    ModelDef,
    OpaqueDef,
    TypeKind,
    TypeRef,
    UnionDef,
)
from ..config import GeneratorConfig

# Callback building a conversion expression for a type and a source expression
ExpressionBuilder = Callable[[TypeRef, str], str]

TEMPLATE_ROOT = Path(__file__).parent.parent.parent / "templates"

STDLIB_MODULES = {"collections.abc", "dataclasses", "datetime", "enum", "typing"}

ENUM_MIXINS = {
    "string": "str",
    "integer": "int",
    "number": "float",
}


def python_literal(value: Any) -> str:
    """Render a JSON scalar as a Python literal (double-quoted strings)."""
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return repr(value)


class ModelBackend(ABC):
    """Abstract base class for rendering backends."""

    # Template directory of the style
    TEMPLATE_STYLE: str = ""

    # How a generated class decodes / encodes itself
    DECODE_CALL: str = "{name}.from_json({source})"
    ENCODE_CALL: str = "{source}.to_json()"

    # Names of those methods, used by the shared templates
    DECODE_METHOD: str = "from_json"
    ENCODE_METHOD: str = "to_json"

    def __init__(self, config: GeneratorConfig | None = None):
        """
        Initialize the backend.

        Args:
            config: Generation configuration
        """
        self.config = config or GeneratorConfig()
        self.python_imports: set[tuple[str, str]] = set()
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates; the style directory shadows the common one."""
        search_path = [str(TEMPLATE_ROOT / self.TEMPLATE_STYLE), str(TEMPLATE_ROOT / "common")]
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(search_path),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=False,
        )
        self.jinja_env.filters["literal"] = python_literal

        self.class_template = self.jinja_env.get_template("class.py.jinja2")
        self.enum_template = self.jinja_env.get_template("enum.py.jinja2")
        self.union_template = self.jinja_env.get_template("union.py.jinja2")
        self.opaque_template = self.jinja_env.get_template("opaque.py.jinja2")
        self.map_template = self.jinja_env.get_template("map.py.jinja2")

    # Imports

    def reset_imports(self) -> None:
        self.python_imports = set()

    def add_import(self, module: str, name: str) -> None:
        self.python_imports.add((module, name))

    def preamble(self) -> list[str]:
        """Lines written above the generated region of a new artifact.

        Only the __future__ import lives there: it has to stay the first
        statement of the module, and the region may be preceded by code
        the user adds later.
        """
        return ["from __future__ import annotations"]

    def import_lines(self, model_imports: dict[str, str] | None = None) -> list[str]:
        """
        Import lines placed at the top of the generated region.

        Must be called after the artifact was rendered, since rendering
        records the imports it needs.

        Args:
            model_imports: Module name -> class name of the generated models to import

        Returns:
            Import lines; groups are separated by an empty string
        """
        lines = self._assemble_imports()
        if model_imports:
            if lines:
                lines.append("")
            for module in sorted(model_imports):
                lines.append(f"from .{module} import {model_imports[module]}")
        return lines

    def _assemble_imports(self) -> list[str]:
        """Assemble import statements: standard library first, then third party."""
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)

        stdlib_groups = {m: import_groups[m] for m in import_groups if m in STDLIB_MODULES}
        third_party_groups = {m: import_groups[m] for m in import_groups if m not in STDLIB_MODULES}

        assembled: list[str] = []
        for group in (stdlib_groups, third_party_groups):
            if not group:
                continue
            if assembled:
                assembled.append("")
            for module in sorted(group):
                assembled.append(f"from {module} import {', '.join(sorted(group[module]))}")
        return assembled

    # Types and expressions

    def translate_type(self, type_ref: TypeRef) -> str:
        """Translate an IR type to a Python annotation, recording its imports."""
        if type_ref.override_type:
            result = type_ref.override_type
            if "Any" in result:
                self.add_import("typing", "Any")
        else:
            result = self._translate_type_inner(type_ref)

        if type_ref.is_nullable:
            result = f"{result} | None"
        return result

    def _translate_type_inner(self, type_ref: TypeRef) -> str:
        kind = type_ref.kind
        if kind == TypeKind.DATETIME:
            self.add_import("datetime", type_ref.name)
            return type_ref.name
        if kind == TypeKind.ARRAY:
            item = type_ref.type_args[0] if type_ref.type_args else TypeRef(kind=TypeKind.ANY)
            return f"list[{self.translate_type(item)}]"
        if kind == TypeKind.MAP:
            value = type_ref.type_args[0] if type_ref.type_args else TypeRef(kind=TypeKind.ANY)
            return f"dict[str, {self.translate_type(value)}]"
        if kind == TypeKind.ANY:
            self.add_import("typing", "Any")
            return "Any"
        return type_ref.name

    def from_json_expression(self, type_ref: TypeRef, source: str) -> str:
        return expressions.from_json_expression(type_ref, source, self.DECODE_CALL)

    def to_json_expression(self, type_ref: TypeRef, source: str) -> str:
        return expressions.to_json_expression(type_ref, source, self.ENCODE_CALL)

    # Rendering

    def render_region(self, model: ModelDef, model_imports: dict[str, str] | None = None) -> str:
        """
        Render the full generated region of an artifact: imports, then definitions.

        Args:
            model: The artifact descriptor
            model_imports: Module name -> class name of the generated models it uses

        Returns:
            The region text, without surrounding blank lines
        """
        self.reset_imports()
        body = self.render_model(model)
        imports = self.import_lines(model_imports)
        if not imports:
            return body
        return "\n".join(imports) + "\n\n\n" + body

    def render_model(self, model: ModelDef) -> str:
        """
        Render the generated region of an artifact.

        Args:
            model: The artifact descriptor

        Returns:
            Python source of all the definitions of the artifact
        """
        if isinstance(model, EnumDef):
            return self.render_enum(model.name, model.members, model.doc, model.value_type)
        if isinstance(model, UnionDef):
            return self.render_union(model)
        if isinstance(model, OpaqueDef):
            return self.render_opaque(model)

        parts = []
        for enum_def in getattr(model, "inline_enums", []):
            parts.append(self.render_enum(enum_def.name, enum_def.members, enum_def.doc, enum_def.value_type))
        if isinstance(model, MapDef):
            parts.append(self.render_map(model))
        elif isinstance(model, ClassDef):
            parts.append(
                self.render_class(
                    model.name,
                    model.fields,
                    self.from_json_expression,
                    self.to_json_expression,
                    use_json_key=model.use_json_key,
                    doc=model.doc,
                )
            )
        else:
            raise TypeError(f"Cannot render {type(model).__name__}")
        return "\n\n\n".join(parts)

    @abstractmethod
    def render_class(
        self,
        class_name: str,
        fields: list[FieldDef],
        from_json_expression: ExpressionBuilder,
        to_json_expression: ExpressionBuilder,
        use_json_key: bool = False,
        doc: str | None = None,
    ) -> str:
        """
        Render a record class.

        Args:
            class_name: Name of the class
            fields: Field descriptors in schema order
            from_json_expression: Builds the expression decoding a JSON value of a field
            to_json_expression: Builds the expression encoding a field value
            use_json_key: Emit serialization-key annotations for every field
            doc: Class description

        Returns:
            Python source of the class
        """

    def render_enum(self, name: str, members: dict[str, Any], doc: str | None = None, value_type: str = "string") -> str:
        """Render an enumeration with a lenient from_json and a to_json."""
        self.add_import("enum", "Enum")
        self.add_import("typing", "Any")
        mixin = ENUM_MIXINS.get(value_type, "str")
        return self._render(
            self.enum_template,
            name=name,
            mixin=mixin,
            members=members,
            docstring=self._docstring(doc),
        )

    def render_union(self, union_def: UnionDef) -> str:
        self.add_import("dataclasses", "dataclass")
        self.add_import("collections.abc", "Callable")
        self.add_import("typing", "Any")
        self.add_import("typing", "TypeVar")
        variants = [
            {
                "token": python_literal(v.token),
                "class_name": v.class_name,
                "field": v.field_name,
                "decode": self.from_json_expression(TypeRef(kind=TypeKind.CLASS, name=v.class_name), "data"),
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
            decode_method=self.DECODE_METHOD,
            encode_method=self.ENCODE_METHOD,
        )

    def render_opaque(self, opaque_def: OpaqueDef) -> str:
        self.add_import("dataclasses", "dataclass")
        self.add_import("typing", "Any")
        note = f"One of: {', '.join(opaque_def.possible_types) or 'unknown'} ({opaque_def.combinator}). The value is kept as raw JSON."
        return self._render(
            self.opaque_template,
            name=opaque_def.name,
            docstring=self._docstring(opaque_def.doc, note),
            decode_method=self.DECODE_METHOD,
            encode_method=self.ENCODE_METHOD,
        )

    def render_map(self, map_def: MapDef) -> str:
        self.add_import("dataclasses", "dataclass")
        self.add_import("dataclasses", "field")
        self.add_import("typing", "Any")
        map_type = TypeRef(kind=TypeKind.MAP, name="dict", type_args=[map_def.value_type])
        return self._render(
            self.map_template,
            name=map_def.name,
            docstring=self._docstring(map_def.doc),
            type=self.translate_type(map_type),
            decode=self.from_json_expression(map_type, "data"),
            encode=self.to_json_expression(map_type, "self.data"),
            decode_method=self.DECODE_METHOD,
            encode_method=self.ENCODE_METHOD,
        )

    def _render(self, template: jinja2.Template, **context: Any) -> str:
        return template.render(**context).rstrip("\n")

    # Helpers shared by the class templates

    def _order_fields(self, fields: list[FieldDef]) -> list[FieldDef]:
        """
        Order fields for dataclass compatibility.

        Required fields (without defaults) must come before optional fields
        (with a None default); the schema order is kept inside each group.
        """
        required_fields = [f for f in fields if f.is_required]
        optional_fields = [f for f in fields if not f.is_required]
        return required_fields + optional_fields

    def _prepare_field_context(
        self,
        field: FieldDef,
        from_json_expression: ExpressionBuilder,
        to_json_expression: ExpressionBuilder,
    ) -> dict[str, Any]:
        """
        Prepare the template context for a field.

        Args:
            field: The field definition
            from_json_expression: Decoding expression builder
            to_json_expression: Encoding expression builder

        Returns:
            Dictionary of template variables
        """
        key = python_literal(field.name)
        source = f"data[{key}]" if field.is_required else f"data.get({key})"
        return {
            "attr": field.attr_name,
            "key": key,
            "type": self.translate_type(field.type_ref),
            "decode": from_json_expression(field.type_ref, source),
            "encode": to_json_expression(field.type_ref, f"self.{field.attr_name}"),
            "comments": self._field_comments(field),
        }

    def _field_comments(self, field: FieldDef) -> list[str]:
        if not self.config.generate_docs:
            return []
        lines = []
        if field.description:
            lines.extend(line.rstrip() for line in str(field.description).strip().splitlines())
        if field.example is not None:
            example = field.example if isinstance(field.example, str) else json.dumps(field.example, default=str)
            lines.append(f"Example: {example}")
        return lines

    def _docstring(self, doc: str | None, *extra: str, indent: str = "    ") -> str:
        """Indented class docstring, or an empty string when there is nothing to say."""
        paragraphs = []
        if doc and self.config.generate_docs:
            paragraphs.append(str(doc).strip())
        paragraphs.extend(e for e in extra if e)
        if not paragraphs:
            return ""
        text = "\n\n".join(paragraphs).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
        if text.endswith('"') and not text.endswith('\\"'):
            text = text[:-1] + '\\"'
        lines = text.splitlines()
        if len(lines) == 1:
            return f'{indent}"""{lines[0]}"""'
        body = "\n".join(f"{indent}{line}".rstrip() for line in lines[1:])
        return f'{indent}"""{lines[0]}\n{body}\n{indent}"""'
