"""
Utility functions for the OpenAPI to models generator.
"""

import keyword
import re

# Runs of characters that cannot appear in an identifier
_SEPARATOR_PATTERN = re.compile(r"[^0-9A-Za-z]+")

# Acronym followed by a capitalized word: "HTTPServer" -> "HTTP_Server"
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")

# Lowercase or digit followed by uppercase: "userId" -> "user_Id"
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def to_pascal_case(text: str) -> str:
    """Convert a schema or property name to PascalCase.

    Words are split on any non-alphanumeric character. The first letter of
    each word is upper-cased, the rest of the word is kept as written, so
    names that are already PascalCase pass through unchanged.

    Examples:
        "user_profile" -> "UserProfile"
        "BaseEntity" -> "BaseEntity"
        "order-item" -> "OrderItem"
        "pet.v2" -> "PetV2"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    words = [w for w in _SEPARATOR_PATTERN.split(text) if w]
    return "".join(w[0].upper() + w[1:] for w in words)


def to_snake_case(text: str) -> str:
    """Convert camelCase, PascalCase or kebab-case text to snake_case.

    Examples:
        "BaseEntity" -> "base_entity"
        "userId" -> "user_id"
        "HTTPServer" -> "http_server"
        "created-at" -> "created_at"

    Args:
        text: The text to convert

    Returns:
        snake_case string
    """
    if not text:
        return ""
    result = _SEPARATOR_PATTERN.sub("_", text)
    result = _ACRONYM_BOUNDARY.sub(r"\1_\2", result)
    result = _CAMEL_BOUNDARY.sub(r"\1_\2", result)
    return result.strip("_").lower()


def to_python_identifier(text: str) -> str:
    """Turn a JSON property name into a valid snake_case Python identifier.

    Keywords get a trailing underscore and names starting with a digit
    are prefixed with "field_".
    """
    name = to_snake_case(text)
    if not name:
        return "field_"
    if name[0].isdigit():
        name = f"field_{name}"
    if keyword.iskeyword(name) or keyword.issoftkeyword(name):
        name = f"{name}_"
    return name


def to_enum_member_name(value: object) -> str:
    """Derive an UPPER_SNAKE enum member name from an enum literal.

    Examples:
        "in_progress" -> "IN_PROGRESS"
        "darkBlue" -> "DARK_BLUE"
        1 -> "VALUE_1"
        "" -> "EMPTY"
    """
    name = to_snake_case(str(value)).upper()
    if not name:
        return "EMPTY"
    if name[0].isdigit():
        name = f"VALUE_{name}"
    return name


def to_module_name(schema_name: str) -> str:
    """Module (file stem) used for the artifact of a schema."""
    return to_python_identifier(schema_name)
