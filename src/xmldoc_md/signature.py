"""Type names, parameter lists and member identifiers."""

from __future__ import annotations

from typing import Sequence, Union

from xmldoc_md.metadata import (
    ConstructorInfo,
    EventInfo,
    FieldInfo,
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
    TypeInfo,
    TypeRef,
)

Member = Union[ConstructorInfo, MethodInfo, PropertyInfo, FieldInfo, EventInfo]

PRIMITIVE_NAMES = {
    "System.SByte": "sbyte",
    "System.Byte": "byte",
    "System.Int16": "short",
    "System.UInt16": "ushort",
    "System.Int32": "int",
    "System.UInt32": "uint",
    "System.Int64": "long",
    "System.UInt64": "ulong",
    "System.Single": "float",
    "System.Double": "double",
    "System.Decimal": "decimal",
    "System.Boolean": "bool",
    "System.Char": "char",
    "System.String": "string",
    "System.Object": "object",
    "System.Void": "void",
}

VOID = "System.Void"


def _split_suffix(name: str) -> tuple[str, str]:
    """Separate array and pointer suffixes such as ``[]`` or ``*``."""
    index = len(name)
    while index > 0 and name[index - 1] in "[],*&":
        index -= 1
    return name[:index], name[index:]


def _strip_arity(name: str) -> str:
    index = name.find("`")
    return name if index < 0 else name[:index]


def human_type_name(ref: TypeRef) -> str:
    """Readable name of *ref*, with keywords for primitive types."""
    base, suffix = _split_suffix(ref.name)
    base = base.replace("+", ".")
    if ref.is_generic:
        arguments = ", ".join(human_type_name(arg) for arg in ref.arguments)
        return f"{_strip_arity(base)}&lt;{arguments}&gt;{suffix}"
    return PRIMITIVE_NAMES.get(base, base) + suffix


def canonical_type_name(ref: TypeRef) -> str:
    """Name of *ref* as written in documentation identifiers.

    By-reference types end in ``@`` instead of ``&``.
    """
    base, suffix = _split_suffix(ref.name)
    suffix = suffix.replace("&", "@")
    base = base.replace("+", ".")
    if ref.is_generic:
        arguments = ",".join(canonical_type_name(arg) for arg in ref.arguments)
        return f"{_strip_arity(base)}{{{arguments}}}{suffix}"
    return base + suffix


def format_parameters(parameters: Sequence[ParameterInfo], human_readable: bool = True) -> str:
    """Render a parameter list.

    The human-readable form is ``(int count, [string name])`` with optional
    parameters in brackets. The canonical form is ``(System.Int32,System.String)``
    and is only used to build identifiers.
    """
    if not human_readable:
        return "(" + ",".join(canonical_type_name(param.type) for param in parameters) + ")"
    rendered = []
    for param in parameters:
        item = f"{human_type_name(param.type)} {param.name}"
        rendered.append(f"[{item}]" if param.optional else item)
    return "(" + ", ".join(rendered) + ")"


def member_name(member: Member) -> str:
    """Name used in identifiers; constructors use ``#ctor`` or ``#cctor``."""
    if isinstance(member, ConstructorInfo):
        return "#cctor" if member.static else "#ctor"
    return member.name


def member_parameters(member: Member) -> list[ParameterInfo]:
    return list(getattr(member, "parameters", []))


def member_id(declaring_type: TypeInfo, member: Member) -> str:
    """Identifier of *member*, matching the documentation file's names.

    Callables with parameters carry the canonical parameter list; those
    without parameters have no parentheses at all.
    """
    identifier = f"{declaring_type.doc_name}.{member_name(member)}"
    parameters = member_parameters(member)
    if parameters:
        identifier += format_parameters(parameters, human_readable=False)
    return identifier


def value_type_name(member: Member) -> str | None:
    """Human name of the return or value type; ``None`` for constructors."""
    if isinstance(member, ConstructorInfo):
        return None
    if isinstance(member, MethodInfo):
        if member.returns is None or member.returns.name == VOID:
            return "void"
        return human_type_name(member.returns)
    return human_type_name(member.type)
