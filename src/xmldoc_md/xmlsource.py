"""Documentation XML loading with source positions."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Union
from xml.parsers import expat

from xmldoc_md.errors import DocumentationFormatError


@dataclass(eq=False)
class Text:
    """Character data between tags."""

    value: str
    parent: Element | None = field(default=None, repr=False)


@dataclass(eq=False)
class Other:
    """A comment or processing instruction."""

    value: str
    parent: Element | None = field(default=None, repr=False)


@dataclass(eq=False)
class Element:
    """An element with the position of its opening ``<``.

    ``line`` is 1-based and ``column`` is 0-based, as reported by expat.
    """

    tag: str
    attrib: dict[str, str]
    line: int
    column: int
    children: list[Node] = field(default_factory=list, repr=False)
    parent: Element | None = field(default=None, repr=False)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attrib.get(name, default)

    def iter_elements(self, tag: str | None = None) -> Iterator[Element]:
        """Yield child elements, optionally only those named *tag*."""
        for child in self.children:
            if isinstance(child, Element) and (tag is None or child.tag == tag):
                yield child

    def find(self, tag: str) -> Element | None:
        return next(self.iter_elements(tag), None)

    @property
    def text(self) -> str:
        """Concatenated text of all descendants."""
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, Text):
                parts.append(child.value)
            elif isinstance(child, Element):
                parts.append(child.text)
        return "".join(parts)


Node = Union[Text, Element, Other]


class _TreeBuilder:
    def __init__(self) -> None:
        self.parser = expat.ParserCreate()
        self.parser.buffer_text = True
        self.parser.StartElementHandler = self._start
        self.parser.EndElementHandler = self._end
        self.parser.CharacterDataHandler = self._data
        self.parser.CommentHandler = self._other
        self.parser.ProcessingInstructionHandler = self._pi
        self.root: Element | None = None
        self._stack: list[Element] = []

    def _start(self, tag: str, attrib: dict[str, str]) -> None:
        parent = self._stack[-1] if self._stack else None
        element = Element(
            tag=tag,
            attrib=dict(attrib),
            line=self.parser.CurrentLineNumber,
            column=self.parser.CurrentColumnNumber,
            parent=parent,
        )
        if parent is None:
            self.root = element
        else:
            parent.children.append(element)
        self._stack.append(element)

    def _end(self, _tag: str) -> None:
        self._stack.pop()

    def _data(self, data: str) -> None:
        if not self._stack:
            return
        parent = self._stack[-1]
        if parent.children and isinstance(parent.children[-1], Text):
            parent.children[-1].value += data
        else:
            parent.children.append(Text(data, parent))

    def _other(self, data: str) -> None:
        if self._stack:
            self._stack[-1].children.append(Other(data, self._stack[-1]))

    def _pi(self, target: str, data: str) -> None:
        self._other(f"{target} {data}")


def parse_xml(data: bytes | str) -> Element:
    """Parse *data* into an :class:`Element` tree."""
    builder = _TreeBuilder()
    try:
        builder.parser.Parse(data, True)
    except expat.ExpatError as err:
        raise DocumentationFormatError(
            f"invalid documentation XML in line {err.lineno}: {expat.ErrorString(err.code)}"
        ) from err
    if builder.root is None:  # pragma: no cover - expat rejects empty documents
        raise DocumentationFormatError("documentation XML has no root element")
    return builder.root


def load_xml(path: str | Path) -> Element:
    """Load the documentation XML file at *path*."""
    try:
        data = Path(path).read_bytes()
    except OSError as err:
        raise DocumentationFormatError(f"cannot read documentation file '{path}': {err}") from err
    return parse_xml(data)
