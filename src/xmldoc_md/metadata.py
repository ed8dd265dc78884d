"""Type metadata consumed by the Markdown renderer.

The renderer only relies on :class:`MetadataProvider`. The bundled
:class:`YamlMetadataProvider` reads an interface description written in YAML
(or JSON), one entry per exported type.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from xmldoc_md.errors import MetadataLoadError

logger = logging.getLogger(__name__)

_ACCESSOR_PREFIXES = {
    "property": ("get_", "set_"),
    "event": ("add_", "remove_", "raise_"),
}


class TypeKind(Enum):
    """Classification of an exported type."""

    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    ENUM = "enum"
    DELEGATE = "delegate"


@dataclass(frozen=True)
class TypeRef:
    """Reference to a type, possibly a constructed generic type."""

    name: str
    arguments: tuple[TypeRef, ...] = ()

    @property
    def is_generic(self) -> bool:
        return bool(self.arguments)


@dataclass
class ParameterInfo:
    name: str
    type: TypeRef
    optional: bool = False
    default: Any = None


@dataclass
class MethodInfo:
    name: str
    returns: TypeRef | None = None
    parameters: list[ParameterInfo] = field(default_factory=list)
    static: bool = False
    special_name: bool = False


@dataclass
class ConstructorInfo:
    parameters: list[ParameterInfo] = field(default_factory=list)
    static: bool = False


@dataclass
class PropertyInfo:
    name: str
    type: TypeRef
    parameters: list[ParameterInfo] = field(default_factory=list)
    static: bool = False


@dataclass
class FieldInfo:
    name: str
    type: TypeRef
    static: bool = False


@dataclass
class EventInfo:
    name: str
    type: TypeRef
    static: bool = False


@dataclass
class TypeInfo:
    """An exported type and its public members."""

    full_name: str
    kind: TypeKind
    base_type: TypeRef | None = None
    enum_values: list[str] = field(default_factory=list)
    constructors: list[ConstructorInfo] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    properties: list[PropertyInfo] = field(default_factory=list)
    fields: list[FieldInfo] = field(default_factory=list)
    events: list[EventInfo] = field(default_factory=list)

    @property
    def doc_name(self) -> str:
        """Name used for anchors and documentation lookup."""
        return self.full_name.replace("+", ".")

    @property
    def name(self) -> str:
        """Simple name without namespace or enclosing types."""
        return self.doc_name.rsplit(".", 1)[-1]

    @property
    def is_value_type(self) -> bool:
        return self.kind in (TypeKind.STRUCT, TypeKind.ENUM)

    @property
    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE

    @property
    def is_class(self) -> bool:
        return self.kind in (TypeKind.CLASS, TypeKind.DELEGATE)

    @property
    def is_enum(self) -> bool:
        return self.kind is TypeKind.ENUM

    def is_accessor(self, method: MethodInfo) -> bool:
        """Return whether *method* implements a property or event of this type."""
        if method.special_name:
            return True
        targets = {
            "property": {prop.name for prop in self.properties},
            "event": {event.name for event in self.events},
        }
        for category, prefixes in _ACCESSOR_PREFIXES.items():
            for prefix in prefixes:
                if not method.name.startswith(prefix):
                    continue
                if method.name[len(prefix):] in targets[category]:
                    return True
        return False


class MetadataProvider(abc.ABC):
    """Read-only source of exported types."""

    @abc.abstractmethod
    def exported_types(self) -> list[TypeInfo]:
        """Return all exported types in enumeration order."""


class StaticMetadataProvider(MetadataProvider):
    """Provider over an already built list of types."""

    def __init__(self, types: list[TypeInfo]) -> None:
        self._types = list(types)

    def exported_types(self) -> list[TypeInfo]:
        return list(self._types)


class YamlMetadataProvider(MetadataProvider):
    """Provider backed by a YAML or JSON interface description file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._types: list[TypeInfo] | None = None

    def exported_types(self) -> list[TypeInfo]:
        if self._types is None:
            self._types = load_metadata(self.path)
        return list(self._types)


def load_metadata(path: str | Path) -> list[TypeInfo]:
    """Load the exported types described in the file at *path*."""
    try:
        with Path(path).open(encoding="utf-8") as handle:
            document = yaml.safe_load(handle)
    except OSError as err:
        raise MetadataLoadError(f"cannot read metadata '{path}': {err}") from err
    except yaml.YAMLError as err:
        raise MetadataLoadError(f"invalid metadata '{path}': {err}") from err
    try:
        types = parse_metadata(document)
    except (TypeError, ValueError, KeyError) as err:
        raise MetadataLoadError(f"invalid metadata '{path}': {err}") from err
    logger.info("loaded metadata for %d exported types", len(types))
    return types


def parse_metadata(document: Any) -> list[TypeInfo]:
    """Convert a decoded metadata document into :class:`TypeInfo` objects."""
    if not isinstance(document, dict) or not isinstance(document.get("types"), list):
        raise ValueError("metadata must define a 'types' list")
    types: list[TypeInfo] = []
    for entry in document["types"]:
        _require_mapping(entry, "type entry")
        if not entry.get("public", True):
            logger.debug("skipping non-public type %s", entry.get("name"))
            continue
        types.append(_parse_type(entry))
    return types


def parse_type_ref(value: Any) -> TypeRef:
    """Parse a type reference given as a name or as ``{name, arguments}``."""
    if isinstance(value, str):
        return TypeRef(value)
    _require_mapping(value, "type reference")
    arguments = value.get("arguments", [])
    if not isinstance(arguments, list):
        raise ValueError(f"type '{value.get('name')}' arguments must be a list")
    return TypeRef(_require_str(value, "name"), tuple(parse_type_ref(arg) for arg in arguments))


def _parse_type(entry: dict[str, Any]) -> TypeInfo:
    full_name = _require_str(entry, "name")
    try:
        kind = TypeKind(entry.get("kind", "class"))
    except ValueError:
        raise ValueError(
            f"type '{full_name}' has unsupported kind '{entry.get('kind')}'"
        ) from None

    base = entry.get("base")
    values = entry.get("values", [])
    if not isinstance(values, list) or not all(isinstance(value, str) for value in values):
        raise ValueError(f"enum values of '{full_name}' must be a list of names")

    return TypeInfo(
        full_name=full_name,
        kind=kind,
        base_type=parse_type_ref(base) if base is not None else None,
        enum_values=list(values),
        constructors=[
            ConstructorInfo(
                parameters=_parse_parameters(item),
                static=bool(item.get("static", False)),
            )
            for item in _public_members(entry, "constructors")
        ],
        methods=[
            MethodInfo(
                name=_require_str(item, "name"),
                returns=parse_type_ref(item["returns"]) if item.get("returns") else None,
                parameters=_parse_parameters(item),
                static=bool(item.get("static", False)),
                special_name=bool(item.get("special_name", False)),
            )
            for item in _public_members(entry, "methods")
        ],
        properties=[
            PropertyInfo(
                name=_require_str(item, "name"),
                type=parse_type_ref(item["type"]),
                parameters=_parse_parameters(item),
                static=bool(item.get("static", False)),
            )
            for item in _public_members(entry, "properties")
        ],
        fields=[
            FieldInfo(
                name=_require_str(item, "name"),
                type=parse_type_ref(item["type"]),
                static=bool(item.get("static", False)),
            )
            for item in _public_members(entry, "fields")
        ],
        events=[
            EventInfo(
                name=_require_str(item, "name"),
                type=parse_type_ref(item["type"]),
                static=bool(item.get("static", False)),
            )
            for item in _public_members(entry, "events")
        ],
    )


def _public_members(entry: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = entry.get(key, [])
    if not isinstance(items, list):
        raise ValueError(f"'{key}' of type '{entry.get('name')}' must be a list")
    members = []
    for item in items:
        _require_mapping(item, f"{key} entry")
        if item.get("public", True):
            members.append(item)
    return members


def _parse_parameters(item: dict[str, Any]) -> list[ParameterInfo]:
    raw = item.get("parameters", [])
    if not isinstance(raw, list):
        raise ValueError("'parameters' must be a list")
    parameters: list[ParameterInfo] = []
    for param in raw:
        _require_mapping(param, "parameter")
        parameters.append(
            ParameterInfo(
                name=_require_str(param, "name"),
                type=parse_type_ref(param["type"]),
                optional=bool(param.get("optional", False)),
                default=param.get("default"),
            )
        )
    return parameters


def _require_mapping(value: Any, description: str) -> None:
    if not isinstance(value, dict):
        raise ValueError(f"{description} must be a mapping")


def _require_str(entry: dict[str, Any], key: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"missing string '{key}'")
    return value
