"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from xmldoc_md.config import RenderConfig, config_from_mapping, load_config

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "01_shapes"


def test_load_config_defaults() -> None:
    assert load_config(None) == RenderConfig()


def test_load_config_fixture() -> None:
    config = load_config(FIXTURES / "xmldoc-md.toml")

    assert config.code_language == "cs"
    assert config.member_details is False
    assert config.strict is True


def test_load_config_without_table(tmp_path: Path) -> None:
    path = tmp_path / "other.toml"
    path.write_text('[tool]\nname = "x"\n')

    assert load_config(path) == RenderConfig()


def test_config_rejects_unknown_key() -> None:
    with pytest.raises(ValueError, match="unknown config key 'colour'"):
        config_from_mapping({"colour": "red"})


def test_config_rejects_wrong_type() -> None:
    with pytest.raises(ValueError, match="'strict' must be of type bool"):
        config_from_mapping({"strict": "yes"})
