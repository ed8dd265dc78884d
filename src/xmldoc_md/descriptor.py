"""Descriptor parsing and name shortening.

Descriptors are the ``"<kind-letter>:<fully-qualified-name>"`` strings used by
``member/@name`` and ``see/@cref`` in documentation files.
"""

from __future__ import annotations

from enum import Enum

from xmldoc_md.errors import MalformedDescriptorError, UnknownDescriptorKindError


class MemberKind(Enum):
    """Kind of a documented symbol."""

    NAMESPACE = "namespace"
    TYPE = "type"
    METHOD = "method"
    FIELD = "field"
    PROPERTY = "property"
    EVENT = "event"
    CONSTRUCTOR = "constructor"


_KIND_LETTERS = {
    "T": MemberKind.TYPE,
    "M": MemberKind.METHOD,
    "E": MemberKind.EVENT,
    "F": MemberKind.FIELD,
    "P": MemberKind.PROPERTY,
}


def kind_from_letter(letter: str) -> MemberKind:
    """Return the member kind for a descriptor *letter*."""
    try:
        return _KIND_LETTERS[letter]
    except KeyError:
        raise UnknownDescriptorKindError(f"unknown member descriptor: {letter!r}") from None


def parse_descriptor(text: str) -> tuple[MemberKind, str]:
    """Split *text* into its member kind and fully-qualified name."""
    parts = text.split(":")
    if len(parts) != 2 or not parts[1]:
        raise MalformedDescriptorError(f"invalid name descriptor: {text!r}")
    letter, name = parts
    if len(letter) != 1:
        raise UnknownDescriptorKindError(f"unknown member descriptor: {letter!r}")
    return kind_from_letter(letter), name


def strip_parameters(name: str) -> str:
    """Drop a trailing ``(...)`` parameter list from *name*."""
    index = name.find("(")
    return name if index < 0 else name[:index]


def common_namespace(first: str, second: str) -> list[str]:
    """Return the leading dot-separated segments shared by both names."""
    common: list[str] = []
    for left, right in zip(first.split("."), second.split(".")):
        if left != right:
            break
        common.append(left)
    return common


def shorten_name(full_name: str, context_name: str) -> str:
    """Shorten *full_name* relative to the member named *context_name*.

    The common namespace prefix of both names is removed together with its
    trailing dot. A name that is entirely covered by the prefix keeps its last
    segment, so the result is never empty. Without a common prefix the name
    is returned unchanged.
    """
    name = strip_parameters(full_name)
    segments = name.split(".")
    common = common_namespace(name, strip_parameters(context_name))
    if not common:
        return full_name
    keep_from = min(len(common), len(segments) - 1)
    return ".".join(segments[keep_from:])
