from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from termslides import DEFAULT_ADVANCE_KEYS, PresentationConfig, load_config


def test_defaults_without_source() -> None:
    config = load_config()
    assert config == PresentationConfig()
    assert config.advance_keys == DEFAULT_ADVANCE_KEYS


def test_load_from_mapping_fills_defaults() -> None:
    config = load_config({"default_delay": 0.05, "advance_keys": ["q"], "color_system": None})
    assert config.default_delay == 0.05
    assert config.advance_keys == ("q",)
    assert config.color_system is None
    assert config.clear_screen is True


def test_load_from_json_file(artifact_dir: Path) -> None:
    path = artifact_dir / "talk.json"
    path.write_text(
        json.dumps({"advance_keys": None, "clear_screen": False, "precise_sleep": True}),
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.advance_keys is None
    assert config.clear_screen is False
    assert config.precise_sleep is True


@pytest.mark.parametrize(
    "payload",
    [
        {"default_delay": -1},
        {"advance_keys": []},
        {"color_system": "sepia"},
        {"slides": []},
    ],
)
def test_invalid_config_raises_validation_error(payload: dict) -> None:
    with pytest.raises(jsonschema.ValidationError):
        load_config(payload)
