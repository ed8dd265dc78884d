"""Markdown documentation generation."""

from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from xmldoc_md.config import RenderConfig
from xmldoc_md.docindex import DocumentationIndex, MemberDocumentation
from xmldoc_md.metadata import (
    ConstructorInfo,
    MetadataProvider,
    MethodInfo,
    ParameterInfo,
    TypeInfo,
    TypeKind,
)
from xmldoc_md.signature import (
    Member,
    format_parameters,
    human_type_name,
    member_id,
    member_parameters,
    value_type_name,
)

logger = logging.getLogger(__name__)

_TEMPLATE_ENV = Environment(
    loader=FileSystemLoader(Path(__file__).resolve().parent / "templates"),
    trim_blocks=True,
    lstrip_blocks=False,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)

# Base types that carry no information for the reader.
_TRIVIAL_BASE_TYPES = frozenset(
    {
        "System.Object",
        "System.ValueType",
        "System.Enum",
        "System.Delegate",
        "System.MulticastDelegate",
    }
)

_BODY_INDENT = "  "


@dataclass
class MemberEntry:
    """A rendered entry of a member list."""

    anchor: str
    name: str
    type_name: str | None
    signature: str | None
    body: str


@dataclass
class MemberCategory:
    title: str
    members: list[MemberEntry]


@dataclass
class TypeSection:
    """Everything the type template needs for one type."""

    anchor: str
    keyword: str
    title: str
    base_name: str | None
    blocks: list[str] = field(default_factory=list)
    enum_values: list[str] = field(default_factory=list)
    categories: list[MemberCategory] = field(default_factory=list)


def type_keyword(type_info: TypeInfo) -> str:
    """Return ``enum``, ``struct``, ``interface`` or ``class``."""
    if type_info.is_enum:
        return "enum"
    if type_info.is_value_type:
        return "struct"
    if type_info.is_interface:
        return "interface"
    return "class"


def format_default(value: Any) -> str:
    """Render a parameter default value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


class MarkdownRenderer:
    """Render documented types as one Markdown document.

    Parameters
    ----------
    index:
        Documentation entries keyed by fully-qualified name.
    config:
        Rendering options; defaults apply when omitted.
    """

    def __init__(self, index: DocumentationIndex, config: RenderConfig | None = None) -> None:
        self.index = index
        self.config = config or RenderConfig()
        self._template = _TEMPLATE_ENV.get_template("type.md.j2")

    def order_types(self, types: Sequence[TypeInfo]) -> list[TypeInfo]:
        """Sort by descending importance, keeping provider order on ties."""
        return sorted(types, key=lambda type_info: -self.index.importance(type_info.doc_name))

    def render(self, provider: MetadataProvider) -> str:
        """Render every documented exported type of *provider*."""
        output: list[str] = []
        for type_info in self.order_types(provider.exported_types()):
            markdown = self.render_type(type_info)
            if markdown:
                output.append(markdown.rstrip("\n") + "\n\n---\n\n")
        return "".join(output)

    def render_type(self, type_info: TypeInfo) -> str | None:
        """Render one type, or return ``None`` when it is not documented."""
        if type_info.kind is TypeKind.DELEGATE and self.config.skip_delegates:
            logger.debug("skipping delegate type %s", type_info.doc_name)
            return None
        doc = self.index.get(type_info.doc_name)
        if doc is None:
            logger.debug("skipping undocumented type %s", type_info.doc_name)
            return None
        return self._template.render(section=self.build_section(type_info, doc))

    def build_section(self, type_info: TypeInfo, doc: MemberDocumentation) -> TypeSection:
        section = TypeSection(
            anchor=type_info.doc_name,
            keyword=type_keyword(type_info),
            title=type_info.doc_name,
            base_name=self._base_name(type_info),
        )
        if doc.summary:
            section.blocks.append(doc.summary)
        if doc.remarks:
            section.blocks.append(doc.remarks)
        if doc.example:
            section.blocks.append(f"**Examples**\n\n{doc.example}")

        if type_info.is_enum:
            section.enum_values = list(type_info.enum_values)
        else:
            section.categories = self._categories(type_info)
        return section

    def _base_name(self, type_info: TypeInfo) -> str | None:
        if not (type_info.is_class or type_info.is_interface):
            return None
        base = type_info.base_type
        if base is None or base.name in _TRIVIAL_BASE_TYPES:
            return None
        return human_type_name(base)

    def _categories(self, type_info: TypeInfo) -> list[MemberCategory]:
        def methods(static: bool) -> list[Member]:
            return [
                method
                for method in type_info.methods
                if method.static == static
                and not type_info.is_accessor(method)
                and method.name not in (".ctor", ".cctor")
            ]

        def values(static: bool) -> list[Member]:
            properties: list[Member] = [p for p in type_info.properties if p.static == static]
            fields: list[Member] = [f for f in type_info.fields if f.static == static]
            return properties + fields

        def events(static: bool) -> list[Member]:
            return [event for event in type_info.events if event.static == static]

        groups: list[tuple[str, list[Member]]] = [
            ("Constructors", list(type_info.constructors)),
            ("Methods", methods(static=False)),
            ("Events", events(static=False)),
            ("Properties and Fields", values(static=False)),
            ("Static Methods", methods(static=True)),
            ("Static Properties and Fields", values(static=True)),
            ("Static Events", events(static=True)),
        ]
        return [
            MemberCategory(title, [self.member_entry(type_info, member) for member in members])
            for title, members in groups
            if members
        ]

    def member_entry(self, type_info: TypeInfo, member: Member) -> MemberEntry:
        """Build the list entry for *member* of *type_info*."""
        anchor = member_id(type_info, member)
        parameters = member_parameters(member)
        if isinstance(member, ConstructorInfo):
            name = type_info.name
        else:
            name = member.name
        if isinstance(member, (ConstructorInfo, MethodInfo)) or parameters:
            signature: str | None = format_parameters(parameters)
        else:
            signature = None

        doc = self.index.get(anchor)
        if doc is None:
            logger.debug("no documentation for member %s", anchor)
        return MemberEntry(
            anchor=anchor,
            name=name,
            type_name=value_type_name(member),
            signature=signature,
            body=self._member_body(doc, parameters) if doc is not None else "",
        )

    def _member_body(self, doc: MemberDocumentation, parameters: list[ParameterInfo]) -> str:
        blocks: list[str] = []
        if doc.summary:
            blocks.append(doc.summary + "  ")
        if doc.remarks:
            blocks.append(doc.remarks)
        if self.config.member_details:
            if doc.returns:
                blocks.append(f"**Returns:** {doc.returns}")
            described = [param for param in parameters if param.name in doc.parameter_descriptions]
            if described:
                lines = ["**Parameters:**"]
                for param in described:
                    line = f"* *{human_type_name(param.type)}* **{param.name}**"
                    if param.optional:
                        line += f" *(optional, default: {format_default(param.default)})*"
                    description = doc.parameter_descriptions[param.name]
                    lines.append(f"{line}: {description}" if description else line)
                blocks.append("\n".join(lines))
        return "\n".join(textwrap.indent(block, _BODY_INDENT) for block in blocks)


def generate_docs(
    index: DocumentationIndex,
    provider: MetadataProvider,
    output: str | Path,
    config: RenderConfig | None = None,
) -> None:
    """Render the documented types of *provider* to Markdown at *output*."""
    rendered = MarkdownRenderer(index, config).render(provider)

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered, encoding="utf-8")
