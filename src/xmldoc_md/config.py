"""Configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - python<3.11
    import tomli as tomllib

CONFIG_TABLE = "xmldoc-md"


@dataclass(frozen=True)
class RenderConfig:
    """Options shared by the documentation index and the Markdown renderer."""

    code_language: str = "csharp"
    member_details: bool = True
    strict: bool = True
    skip_delegates: bool = True


_KEYS: dict[str, tuple[str, type]] = {
    "code-language": ("code_language", str),
    "member-details": ("member_details", bool),
    "strict": ("strict", bool),
    "skip-delegates": ("skip_delegates", bool),
}


def config_from_mapping(data: dict[str, Any]) -> RenderConfig:
    """Build a :class:`RenderConfig` from the ``[xmldoc-md]`` table *data*."""
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key not in _KEYS:
            raise ValueError(f"unknown config key '{key}'")
        attribute, expected = _KEYS[key]
        if not isinstance(value, expected):
            raise ValueError(f"config key '{key}' must be of type {expected.__name__}")
        values[attribute] = value
    return RenderConfig(**values)


def load_config(path: str | Path | None) -> RenderConfig:
    """Load configuration from the TOML file at *path*.

    Returns the defaults when *path* is ``None``. A file without an
    ``[xmldoc-md]`` table also yields the defaults.
    """
    if path is None:
        return RenderConfig()
    with Path(path).open("rb") as handle:
        document = tomllib.load(handle)
    table = document.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ValueError(f"config '{CONFIG_TABLE}' must be a table")
    return config_from_mapping(table)
