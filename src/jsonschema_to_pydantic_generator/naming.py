"""Naming helpers that turn JSON keys into legal Python identifiers."""

from __future__ import annotations

import keyword
import re
from collections.abc import Iterable
from typing import Optional

from pydantic import BaseModel

_LEADING_DIGITS_RE = re.compile(r"^\d+")
_WORD_SEPARATOR_RE = re.compile(r"[_\-\s]+")
_WORD_BOUNDARY_RE = re.compile(
    r"(?<=[a-z])(?=[A-Z])"
    r"|(?<=[A-Z])(?=[A-Z][a-z])"
    r"|(?<=[A-Za-z])(?=[0-9])"
    r"|(?<=[0-9])(?=[A-Za-z])"
)
_NON_IDENTIFIER_RE = re.compile(r"[^0-9a-zA-Z_]+")
_NON_ALPHANUMERIC_RE = re.compile(r"[^0-9a-zA-Z]+")

RESERVED_MARKER = "_"

# Names bound at module level by every generated module.
GENERATED_MODULE_NAMES: frozenset[str] = frozenset(
    {
        "BaseModel",
        "ConfigDict",
        "Enum",
        "Field",
        "Optional",
    }
)

_BUILTIN_IDENTIFIER_RESERVED = {
    "bool",
    "bytes",
    "complex",
    "dict",
    "float",
    "frozenset",
    "int",
    "list",
    "set",
    "str",
    "tuple",
    "type",
}
_METHOD_NAMES = {"cls", "from_json", "self", "to_json"}
_BASEMODEL_RESERVED = {name for name in dir(BaseModel) if not name.startswith("_")}

_FIELD_RESERVED = _BASEMODEL_RESERVED | _BUILTIN_IDENTIFIER_RESERVED | _METHOD_NAMES
_TYPE_RESERVED = set(GENERATED_MODULE_NAMES) | {"False", "None", "True"}


def _words(text: str) -> list[str]:
    words: list[str] = []
    for chunk in _WORD_SEPARATOR_RE.split(text):
        words.extend(part for part in _WORD_BOUNDARY_RE.split(chunk) if part)
    return words


def snake_case(text: str) -> str:
    """Join the words of ``text`` in lower snake_case."""
    return "_".join(word.lower() for word in _words(text))


def pascal_case(text: str) -> str:
    """Join the words of ``text`` in PascalCase."""
    return "".join(word[:1].upper() + word[1:].lower() for word in _words(text))


def _escape(text: str, *, fallback: str, digit_prefix: str, reserved: set[str]) -> str:
    if not text:
        text = fallback
    if text[0].isdigit():
        text = f"{digit_prefix}{text}"
    if keyword.iskeyword(text) or text in reserved:
        text = f"{text}{RESERVED_MARKER}"
    return text


def field_name(name: str) -> tuple[str, Optional[str]]:
    """Convert a JSON property name into a model attribute name.

    Args:
        name (str): Original JSON key.

    Returns:
        tuple[str, Optional[str]]: The attribute name, and the original key when
            the two differ and a wire alias is needed.
    """
    text = _LEADING_DIGITS_RE.sub("", name)
    text = snake_case(text)
    text = _NON_IDENTIFIER_RE.sub("", text)
    # Leading underscores would turn the attribute into a pydantic private attribute.
    text = text.lstrip("_")
    text = _escape(text, fallback="field", digit_prefix="x_", reserved=_FIELD_RESERVED)
    return text, (None if text == name else name)


def type_name(name: str) -> str:
    """Convert a JSON name into a class or type alias name."""
    text = _LEADING_DIGITS_RE.sub("", name)
    text = pascal_case(text)
    text = _NON_ALPHANUMERIC_RE.sub("", text)
    text = pascal_case(text)
    return _escape(text, fallback="Model", digit_prefix="X", reserved=_TYPE_RESERVED)


def enum_variant_name(name: str) -> tuple[str, Optional[str]]:
    """Convert an enum string into a member name, paired with its wire value on mismatch."""
    text = _LEADING_DIGITS_RE.sub("", name)
    text = pascal_case(text)
    text = _NON_ALPHANUMERIC_RE.sub("", text)
    text = pascal_case(text)
    text = _escape(text, fallback="Variant", digit_prefix="X", reserved=_TYPE_RESERVED)
    return text, (None if text == name else name)


def default_fn_name(prefix: str, attribute: str) -> str:
    """Name the default-producer function of one model attribute."""
    return "_".join(part for part in (prefix, attribute, "default") if part)


def unique_name(candidate: str, used: set[str], *, separator: str = "_") -> str:
    """Return ``candidate`` or a numbered variant not yet in ``used``, and record it."""
    if candidate not in used:
        used.add(candidate)
        return candidate
    suffix = 2
    while f"{candidate}{separator}{suffix}" in used:
        suffix += 1
    name = f"{candidate}{separator}{suffix}"
    used.add(name)
    return name


def model_field_names(keys: Iterable[str]) -> list[tuple[str, Optional[str]]]:
    """Sanitize sibling property names of one object, keeping them distinct.

    Args:
        keys (Iterable[str]): JSON property names in declaration order.

    Returns:
        list[tuple[str, Optional[str]]]: Attribute name and optional wire alias
            for each key, in the same order.
    """
    used: set[str] = set()
    names: list[tuple[str, Optional[str]]] = []
    for key in keys:
        candidate, _ = field_name(key)
        attribute = unique_name(candidate, used)
        names.append((attribute, None if attribute == key else key))
    return names


def enum_member_names(variants: Iterable[str]) -> list[tuple[str, Optional[str]]]:
    """Sanitize the variant strings of one enum, keeping member names distinct."""
    used: set[str] = set()
    names: list[tuple[str, Optional[str]]] = []
    for variant in variants:
        candidate, _ = enum_variant_name(variant)
        member = unique_name(candidate, used, separator="")
        names.append((member, None if member == variant else variant))
    return names
