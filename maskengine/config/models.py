"""Data models for masked field configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from maskengine.field.state import DEFAULT_REQUIRED_MESSAGE


class MaskFieldConfig(BaseModel):
    """Configuration of one masked field.

    ``mask`` is either a literal pattern or a ``preset:<name>`` reference.
    """

    model_config = ConfigDict(extra="forbid")

    mask: str
    prompt_char: str = Field(default="_", min_length=1, max_length=1)
    include_literals: bool = False
    required: bool = False
    required_message: str = DEFAULT_REQUIRED_MESSAGE


class FieldConfigFile(BaseModel):
    """On-disk YAML structure for field configuration."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    fields: dict[str, MaskFieldConfig] = Field(default_factory=dict)
