from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import jsonschema

from .sequencer import DEFAULT_ADVANCE_KEYS

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "default_delay": {"type": "number", "minimum": 0},
        "advance_keys": {
            "oneOf": [
                {"type": "null"},
                {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1},
                    "minItems": 1,
                    "uniqueItems": True,
                },
            ]
        },
        "clear_screen": {"type": "boolean"},
        "color_system": {
            "enum": ["auto", "standard", "256", "truecolor", "windows", None],
        },
        "precise_sleep": {"type": "boolean"},
    },
    "additionalProperties": False,
}


@dataclass(slots=True)
class PresentationConfig:
    default_delay: float = 0.03
    advance_keys: tuple[str, ...] | None = DEFAULT_ADVANCE_KEYS
    clear_screen: bool = True
    color_system: str | None = "auto"
    precise_sleep: bool = False


def validate_config(payload: Mapping[str, Any]) -> None:
    jsonschema.validate(instance=dict(payload), schema=CONFIG_SCHEMA)


def load_config(source: Path | Mapping[str, Any] | None = None) -> PresentationConfig:
    if source is None:
        return PresentationConfig()
    if isinstance(source, Path):
        data = json.loads(source.read_text(encoding="utf-8"))
    else:
        data = dict(source)
    validate_config(data)

    defaults = PresentationConfig()
    advance_keys = data.get("advance_keys", defaults.advance_keys)
    return PresentationConfig(
        default_delay=float(data.get("default_delay", defaults.default_delay)),
        advance_keys=tuple(advance_keys) if advance_keys is not None else None,
        clear_screen=bool(data.get("clear_screen", defaults.clear_screen)),
        color_system=data.get("color_system", defaults.color_system),
        precise_sleep=bool(data.get("precise_sleep", defaults.precise_sleep)),
    )
