"""Replay recorded IME event traces through the mobile reconciler."""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path

from pydantic import ValidationError

from maskengine.mask.converter import extract_raw_text, masked_text, trim_to_capacity
from maskengine.mask.mobile import process_mobile_input
from maskengine.mask.models import MobileRule
from maskengine.mask.presets import resolve_pattern
from maskengine.mask.tokenizer import compile_mask
from maskengine.trace.models import ReplayReport, ReplayStep, Trace
from maskengine.utils.errors import TraceFormatError

logger = logging.getLogger("maskedit.trace")


def load_trace(path: Path) -> Trace:
    """Load and validate one JSON trace file."""

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise TraceFormatError(f"Trace file not found: {path}", path=path) from exc
    except UnicodeDecodeError as exc:
        raise TraceFormatError(f"Trace file is not valid UTF-8: {path}", path=path) from exc
    except json.JSONDecodeError as exc:
        raise TraceFormatError(f"Invalid JSON in trace file: {path}", path=path) from exc

    if not isinstance(raw, dict):
        raise TraceFormatError(f"Trace JSON must be an object: {path}", path=path)

    try:
        trace = Trace.model_validate(raw)
    except ValidationError as exc:
        event_index = _first_event_index(exc)
        location = f" (event {event_index})" if event_index is not None else ""
        raise TraceFormatError(
            f"Invalid trace schema{location}: {path}", path=path, event_index=event_index
        ) from exc

    try:
        resolve_pattern(trace.mask)
    except ValueError as exc:
        raise TraceFormatError(f"{exc} in {path}", path=path) from exc
    return trace


def replay_trace(trace: Trace) -> ReplayReport:
    """Feed every event through the reconciler, threading raw and expected display."""

    mask = compile_mask(resolve_pattern(trace.mask), trace.prompt_char)
    raw = trim_to_capacity(mask, trace.initial_raw)
    expected_display = masked_text(mask, raw, focused=trace.show_optional_prompts)

    steps: list[ReplayStep] = []
    rule_counts: Counter[str] = Counter()
    divergences: list[int] = []
    mismatch_count = 0

    for index, event in enumerate(trace.events):
        old = event.old if event.old is not None else expected_display
        result = process_mobile_input(
            mask,
            old,
            event.new,
            expected_display,
            raw,
            show_optional_prompts=trace.show_optional_prompts,
        )
        rule_counts[result.rule.value] += 1

        reparse_raw: str | None = None
        if result.rule is MobileRule.ACCUMULATED:
            reparse_raw = trim_to_capacity(mask, extract_raw_text(mask, event.new)) or raw
            if reparse_raw != result.raw_text:
                divergences.append(index)
                logger.debug(
                    "accumulated rule diverges from reparse at step %d: %r vs %r",
                    index,
                    result.raw_text,
                    reparse_raw,
                )

        matched: bool | None = None
        if event.expected_raw is not None:
            matched = event.expected_raw == result.raw_text
            if not matched:
                mismatch_count += 1
                logger.debug(
                    "step %d expected raw %r, got %r (rule=%s)",
                    index,
                    event.expected_raw,
                    result.raw_text,
                    result.rule.value,
                )

        steps.append(
            ReplayStep(
                index=index,
                old=old,
                new=event.new,
                rule=result.rule.value,
                raw_text=result.raw_text,
                display_text=result.display_text,
                cursor_position=result.cursor_position,
                expected_raw=event.expected_raw,
                matched=matched,
                reparse_raw=reparse_raw,
            )
        )
        raw = result.raw_text
        expected_display = result.display_text

    return ReplayReport(
        mask=trace.mask,
        device=trace.device,
        passed=mismatch_count == 0,
        mismatch_count=mismatch_count,
        final_raw=raw,
        final_display=expected_display,
        rule_counts=dict(sorted(rule_counts.items())),
        accumulated_divergences=divergences,
        steps=steps,
    )


def _first_event_index(exc: ValidationError) -> int | None:
    for error in exc.errors():
        loc = error.get("loc", ())
        if len(loc) >= 2 and loc[0] == "events" and isinstance(loc[1], int):
            return loc[1]
    return None
