"""Exception types raised by xmldoc-md."""

from __future__ import annotations


class XmlDocError(Exception):
    """Base class for all errors reported to the user."""


class MalformedDescriptorError(XmlDocError, ValueError):
    """A descriptor does not split into a kind letter and a name."""


class UnknownDescriptorKindError(XmlDocError, ValueError):
    """A descriptor uses a kind letter outside ``T``, ``M``, ``E``, ``F``, ``P``."""


class DocumentationFormatError(XmlDocError, ValueError):
    """The documentation file is not a usable ``doc/members`` document."""


class MetadataLoadError(XmlDocError):
    """The type metadata could not be loaded or enumerated."""


class UsageError(XmlDocError):
    """The command line was used incorrectly."""
