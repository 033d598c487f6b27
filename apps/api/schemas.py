"""Request bodies accepted by the maskedit API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MaskRequest(BaseModel):
    """Fields shared by every mask operation."""

    model_config = ConfigDict(extra="forbid")

    mask: str
    prompt_char: str = Field(default="_", min_length=1, max_length=1)

    def text_fields(self) -> list[str]:
        return [self.mask]


class FormatRequest(MaskRequest):
    raw: str
    focused: bool = True

    def text_fields(self) -> list[str]:
        return [self.mask, self.raw]


class UnformatRequest(MaskRequest):
    display: str

    def text_fields(self) -> list[str]:
        return [self.mask, self.display]


class CompleteRequest(MaskRequest):
    raw: str

    def text_fields(self) -> list[str]:
        return [self.mask, self.raw]


class ProjectRequest(MaskRequest):
    value: str
    strip: bool = False

    def text_fields(self) -> list[str]:
        return [self.mask, self.value]


class MobileInputRequest(MaskRequest):
    """One IME notification plus the field state the client keeps between calls."""

    old_display: str = ""
    new_display: str
    expected_display: str = ""
    current_raw: str = ""
    show_optional_prompts: bool = True

    def text_fields(self) -> list[str]:
        return [
            self.mask,
            self.old_display,
            self.new_display,
            self.expected_display,
            self.current_raw,
        ]
