"""Data models for recorded IME traces and their replay reports."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TraceEvent(BaseModel):
    """One native text-change notification as recorded on a device.

    ``old`` defaults to the display the engine wrote after the previous event.
    """

    model_config = ConfigDict(extra="forbid")

    old: str | None = None
    new: str
    expected_raw: str | None = None
    note: str | None = None


class Trace(BaseModel):
    """A recorded sequence of IME notifications for one field."""

    model_config = ConfigDict(extra="forbid")

    mask: str
    prompt_char: str = Field(default="_", min_length=1, max_length=1)
    show_optional_prompts: bool = True
    initial_raw: str = ""
    device: str | None = None
    events: list[TraceEvent] = Field(default_factory=list)


class ReplayStep(BaseModel):
    """Engine decision for one trace event."""

    model_config = ConfigDict(extra="forbid")

    index: int
    old: str
    new: str
    rule: str
    raw_text: str
    display_text: str
    cursor_position: int
    expected_raw: str | None = None
    matched: bool | None = None
    reparse_raw: str | None = None


class ReplayReport(BaseModel):
    """Replay outcome.

    Rules:
    - passed == (mismatch_count == 0)
    - mismatch_count counts steps whose expected_raw differs from raw_text
    - accumulated_divergences lists steps where the accumulated-input rule
      chose a different raw text than a plain re-parse would have
    """

    model_config = ConfigDict(extra="forbid")

    mask: str
    device: str | None = None
    passed: bool
    mismatch_count: int
    final_raw: str
    final_display: str
    rule_counts: dict[str, int] = Field(default_factory=dict)
    accumulated_divergences: list[int] = Field(default_factory=list)
    steps: list[ReplayStep] = Field(default_factory=list)
