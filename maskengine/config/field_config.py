"""Field configuration loading utilities."""

from __future__ import annotations

from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from maskengine.config.models import FieldConfigFile, MaskFieldConfig
from maskengine.field.state import FieldState, new_field
from maskengine.mask.presets import resolve_pattern
from maskengine.utils.errors import FieldConfigError


def default_config_path() -> Path:
    return Path(__file__).with_name("fields.yaml")


def load_field_config(path: Path | None = None) -> FieldConfigFile:
    """Load and validate field configuration from YAML.

    Preset references are checked eagerly so a bad name fails at load time.
    """

    config_path = path or default_config_path()

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise FieldConfigError(f"Field config not found: {config_path}", path=config_path) from exc
    except UnicodeDecodeError as exc:
        raise FieldConfigError(
            f"Field config is not valid UTF-8: {config_path}", path=config_path
        ) from exc
    except yaml.YAMLError as exc:
        raise FieldConfigError(
            f"Invalid YAML in field config: {config_path}", path=config_path
        ) from exc

    if not isinstance(raw, dict):
        raise FieldConfigError(
            f"Field config must contain a mapping: {config_path}", path=config_path
        )

    try:
        config = FieldConfigFile.model_validate(raw)
    except ValidationError as exc:
        raise FieldConfigError(f"Invalid field config schema: {config_path}", path=config_path) from exc

    for name, field_config in config.fields.items():
        try:
            resolve_pattern(field_config.mask)
        except ValueError as exc:
            raise FieldConfigError(
                f"Field '{name}' in {config_path}: {exc}", path=config_path
            ) from exc

    return config


def get_field_config(config: FieldConfigFile, name: str) -> MaskFieldConfig:
    try:
        return config.fields[name]
    except KeyError as exc:
        raise FieldConfigError(f"Unknown field: {name}") from exc


def build_field_state(field_config: MaskFieldConfig, *, focused: bool = False) -> FieldState:
    """Create an empty field state from one field configuration."""

    return new_field(
        resolve_pattern(field_config.mask),
        prompt_char=field_config.prompt_char,
        include_literals=field_config.include_literals,
        focused=focused,
    )
