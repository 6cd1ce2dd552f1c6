"""
(De)serialization expressions.

Builds the Python expressions converting one JSON value into its model
value and back. Backends pass these builders to their templates so that
nested containers, enums, datetimes and generated classes are converted
the same way by every style.
"""

from __future__ import annotations

from .ir_nodes import TypeKind, TypeRef

# Python types whose JSON value needs an explicit conversion
_NUMERIC_CASTS = {
    "int": "int",
    "float": "float",
}


def _var(depth: int, prefix: str) -> str:
    return f"{prefix}{depth}"


def _guard(expression: str, source: str, type_ref: TypeRef) -> str:
    """Skip the conversion of None values for nullable types."""
    if expression == source or not type_ref.is_nullable:
        return expression
    return f"{expression} if {source} is not None else None"


def from_json_expression(
    type_ref: TypeRef,
    source: str,
    decode_call: str = "{name}.from_json({source})",
    _depth: int = 0,
) -> str:
    """
    Expression converting the JSON value `source` to a value of `type_ref`.

    Args:
        type_ref: Target type
        source: Python expression producing the JSON value
        decode_call: Template calling the decoder of a generated class

    Returns:
        A Python expression
    """
    if type_ref.override_type:
        return source

    kind = type_ref.kind
    if kind == TypeKind.PRIMITIVE:
        cast = _NUMERIC_CASTS.get(type_ref.name)
        expression = f"{cast}({source})" if cast else source
    elif kind == TypeKind.DATETIME:
        expression = f"{type_ref.name}.fromisoformat({source})"
    elif kind == TypeKind.ENUM:
        # from_json maps None and unknown values to None
        if type_ref.is_nullable:
            return f"{type_ref.name}.from_json({source})"
        expression = f"{type_ref.name}({source})"
    elif kind in (TypeKind.CLASS, TypeKind.UNION):
        expression = decode_call.format(name=type_ref.name, source=source)
    elif kind == TypeKind.ARRAY:
        item = type_ref.type_args[0] if type_ref.type_args else TypeRef(kind=TypeKind.ANY)
        var = _var(_depth, "e")
        inner = from_json_expression(item, var, decode_call, _depth + 1)
        expression = source if inner == var else f"[{inner} for {var} in {source}]"
    elif kind == TypeKind.MAP:
        value = type_ref.type_args[0] if type_ref.type_args else TypeRef(kind=TypeKind.ANY)
        key, var = _var(_depth, "k"), _var(_depth, "v")
        inner = from_json_expression(value, var, decode_call, _depth + 1)
        expression = source if inner == var else f"{{{key}: {inner} for {key}, {var} in {source}.items()}}"
    else:
        expression = source

    return _guard(expression, source, type_ref)


def to_json_expression(
    type_ref: TypeRef,
    source: str,
    encode_call: str = "{source}.to_json()",
    _depth: int = 0,
) -> str:
    """
    Expression converting the model value `source` back to its JSON value.

    Args:
        type_ref: Type of the value
        source: Python expression producing the model value
        encode_call: Template calling the encoder of a generated class

    Returns:
        A Python expression
    """
    if type_ref.override_type:
        return source

    kind = type_ref.kind
    if kind == TypeKind.DATETIME:
        expression = f"{source}.isoformat()"
    elif kind == TypeKind.ENUM:
        expression = f"{source}.value"
    elif kind in (TypeKind.CLASS, TypeKind.UNION):
        expression = encode_call.format(source=source)
    elif kind == TypeKind.ARRAY:
        item = type_ref.type_args[0] if type_ref.type_args else TypeRef(kind=TypeKind.ANY)
        var = _var(_depth, "e")
        inner = to_json_expression(item, var, encode_call, _depth + 1)
        expression = source if inner == var else f"[{inner} for {var} in {source}]"
    elif kind == TypeKind.MAP:
        value = type_ref.type_args[0] if type_ref.type_args else TypeRef(kind=TypeKind.ANY)
        key, var = _var(_depth, "k"), _var(_depth, "v")
        inner = to_json_expression(value, var, encode_call, _depth + 1)
        expression = source if inner == var else f"{{{key}: {inner} for {key}, {var} in {source}.items()}}"
    else:
        expression = source

    return _guard(expression, source, type_ref)
