"""Documentation index built from a documentation XML file."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterator

from xmldoc_md.config import RenderConfig
from xmldoc_md.descriptor import MemberKind, parse_descriptor, strip_parameters
from xmldoc_md.doctext import DocTextTransformer
from xmldoc_md.errors import DocumentationFormatError, MalformedDescriptorError, XmlDocError
from xmldoc_md.xmlsource import Element, load_xml

logger = logging.getLogger(__name__)

_SECTIONS = ("summary", "remarks", "returns", "example")
_CONSTRUCTOR_NAMES = {"#ctor", "#cctor"}


@dataclass
class MemberDocumentation:
    """Parsed documentation of one symbol."""

    kind: MemberKind
    full_name: str
    importance: int = 0
    summary: str | None = None
    remarks: str | None = None
    returns: str | None = None
    example: str | None = None
    parameter_descriptions: dict[str, str] = field(default_factory=dict)


class DocumentationIndex(Mapping):
    """Read-only mapping from fully-qualified names to documentation entries."""

    def __init__(self, entries: dict[str, MemberDocumentation]) -> None:
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, key: str) -> MemberDocumentation:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def importance(self, full_name: str) -> int:
        """Return the importance of *full_name*, 0 when undocumented."""
        entry = self._entries.get(full_name)
        return entry.importance if entry is not None else 0


def parse_importance(element: Element | None) -> int:
    """Read an ``importance`` element; absent or non-numeric values count as 0."""
    if element is None:
        return 0
    try:
        return int(element.text.strip())
    except ValueError:
        logger.debug("ignoring non-numeric importance in line %d", element.line)
        return 0


def member_descriptor(member: Element) -> tuple[MemberKind, str]:
    """Return the kind and fully-qualified name of a ``member`` element."""
    descriptor = member.get("name")
    if descriptor is None:
        raise MalformedDescriptorError(f"member in line {member.line} has no 'name'")
    try:
        kind, full_name = parse_descriptor(descriptor)
    except XmlDocError as err:
        raise type(err)(f"{err} (line {member.line})") from err

    local_name = strip_parameters(full_name).rsplit(".", 1)[-1]
    if kind is MemberKind.METHOD and local_name in _CONSTRUCTOR_NAMES:
        kind = MemberKind.CONSTRUCTOR
    return kind, full_name


def parse_member(
    member: Element,
    transformer: DocTextTransformer,
    descriptor: tuple[MemberKind, str] | None = None,
) -> MemberDocumentation:
    """Parse one ``member`` element.

    *descriptor* is the already parsed ``name`` attribute, if available.
    """
    kind, full_name = descriptor or member_descriptor(member)
    doc = MemberDocumentation(
        kind=kind,
        full_name=full_name,
        importance=parse_importance(member.find("importance")),
    )
    for section in _SECTIONS:
        element = member.find(section)
        if element is not None:
            setattr(doc, section, transformer.transform(element, full_name))

    for param in member.iter_elements("param"):
        name = param.get("name")
        if name is None:
            raise DocumentationFormatError(
                f"param of '{full_name}' in line {param.line} has no 'name'"
            )
        doc.parameter_descriptions[name] = transformer.transform(param, full_name)
    return doc


def build_index(root: Element, config: RenderConfig | None = None) -> DocumentationIndex:
    """Build a :class:`DocumentationIndex` from a parsed ``doc`` element.

    Later members with the same name replace earlier ones.
    """
    config = config or RenderConfig()
    if root.tag != "doc":
        raise DocumentationFormatError(f"expected root element 'doc', found '{root.tag}'")
    members = root.find("members")
    if members is None:
        raise DocumentationFormatError("documentation has no 'members' element")

    transformer = DocTextTransformer(code_language=config.code_language)
    entries: dict[str, MemberDocumentation] = {}
    for member in members.iter_elements("member"):
        descriptor = member_descriptor(member)
        try:
            doc = parse_member(member, transformer, descriptor)
        except MalformedDescriptorError as err:
            if config.strict:
                raise
            logger.warning("skipping documentation of %s: %s", descriptor[1], err)
            continue
        if doc.full_name in entries:
            logger.debug("duplicate documentation for %s, keeping the last", doc.full_name)
        entries[doc.full_name] = doc

    logger.info("loaded documentation for %d members", len(entries))
    return DocumentationIndex(entries)


def load_documentation(path: str | Path, config: RenderConfig | None = None) -> DocumentationIndex:
    """Load and index the documentation XML file at *path*."""
    return build_index(load_xml(path), config)
