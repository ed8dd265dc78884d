"""Conversion of documentation XML fragments into Markdown."""

from __future__ import annotations

from typing import Callable

from xmldoc_md.descriptor import parse_descriptor, shorten_name
from xmldoc_md.errors import MalformedDescriptorError
from xmldoc_md.xmlsource import Element, Node, Text


def indentation_width(element: Element | None) -> int:
    """Return the source indentation carried by text inside *element*."""
    if element is None:
        return 0
    return element.column


def fix_indentation(text: str, width: int) -> str:
    """Remove *width* spaces of source indentation from each continuation line.

    Only lines starting with a newline followed by exactly *width* spaces are
    touched, so indentation beyond the element's own column survives. The
    result is stripped.
    """
    if width > 0:
        text = text.replace("\n" + " " * width, "\n")
    return text.strip()


class DocTextTransformer:
    """Render documentation XML nodes as Markdown prose.

    Parameters
    ----------
    code_language:
        Info string attached to fenced code blocks.
    """

    def __init__(self, code_language: str = "csharp") -> None:
        self.code_language = code_language
        self._element_handlers: dict[str, Callable[[Element, str], str]] = {
            "see": self._see,
            "code": self._code,
        }

    def transform(self, node: Node, context_name: str) -> str:
        """Convert *node* into Markdown.

        *context_name* is the fully-qualified name of the member being
        documented; cross-reference labels are shortened relative to it.
        """
        if isinstance(node, Text):
            return fix_indentation(node.value, indentation_width(node.parent))
        if isinstance(node, Element):
            handler = self._element_handlers.get(node.tag, self._container)
            return handler(node, context_name)
        return ""

    def _container(self, element: Element, context_name: str) -> str:
        return "".join(
            self.transform(child, context_name)
            for child in element.children
            if isinstance(child, (Text, Element))
        )

    def _see(self, element: Element, context_name: str) -> str:
        cref = element.get("cref")
        if cref is None:
            langword = element.get("langword")
            if langword is not None:
                return f" `{langword}` "
            raise MalformedDescriptorError(f"'see' element in line {element.line} has no 'cref'")
        _kind, target = parse_descriptor(cref)
        label = element.text
        if not label.strip():
            label = shorten_name(target, context_name)
        return f" [{label}](#{target}) "

    def _code(self, element: Element, _context_name: str) -> str:
        code = fix_indentation(element.text, indentation_width(element.parent))
        return f"\n```{self.code_language}\n{code}\n```\n"
