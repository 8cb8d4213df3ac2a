from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from .constants import DEFAULT_SUMMARY
from .errors import ConfigError
from .utils import _read_jsonc, _read_yaml

ENVIRONMENT_KEY_PATTERN = r"^[^{}\s:]+$"

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "prefix": {"type": "boolean"},
        "summary": {"type": "string", "minLength": 1},
        "custom_environments": {
            "type": "array",
            "items": {
                "type": "array",
                "prefixItems": [
                    {"type": "string", "pattern": ENVIRONMENT_KEY_PATTERN},
                    {"type": "string", "minLength": 1},
                    {"type": "string"},
                ],
                "minItems": 3,
                "maxItems": 3,
            },
        },
        # set by mdBook itself on every preprocessor table
        "command": {"type": "string"},
        "renderer": {"type": "array", "items": {"type": "string"}},
        "before": {"type": "array", "items": {"type": "string"}},
        "after": {"type": "array", "items": {"type": "string"}},
        "optional": {"type": "boolean"},
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class NumThmConfig:
    prefix: bool = False
    custom_environments: tuple[tuple[str, str, str], ...] = field(default=())
    summary: str = DEFAULT_SUMMARY


def _schema_errors(payload: Any) -> list[str]:
    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(
        validator.iter_errors(payload), key=lambda err: list(err.absolute_path)
    )
    messages = []
    for err in errors:
        location = "/".join(str(part) for part in err.absolute_path) or "<root>"
        messages.append(f"{location}: {err.message}")
    return messages


def config_from_mapping(
    payload: Mapping[str, Any] | None, source: str = "<config>"
) -> NumThmConfig:
    data = dict(payload or {})
    messages = _schema_errors(data)
    if messages:
        details = "\n".join(f"- {message}" for message in messages)
        raise ConfigError(f"invalid numthm configuration in {source}:\n{details}")

    return NumThmConfig(
        prefix=data.get("prefix", False),
        custom_environments=tuple(
            (key, name, emphasis)
            for key, name, emphasis in data.get("custom_environments", [])
        ),
        summary=data.get("summary", DEFAULT_SUMMARY),
    )


def config_from_mdbook_context(context: Mapping[str, Any]) -> NumThmConfig:
    preprocessor = context.get("config", {}).get("preprocessor", {})
    return config_from_mapping(
        preprocessor.get("numthm", {}), "book.toml [preprocessor.numthm]"
    )


def load_config_file(path: Path) -> NumThmConfig:
    if not path.exists():
        raise ConfigError(f"config file missing: {path}")
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            payload = _read_yaml(path)
        else:
            payload = _read_jsonc(path)
    except Exception as exc:
        raise ConfigError(f"failed to parse config {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(f"config root must be a mapping/object: {path}")
    return config_from_mapping(payload, str(path))
