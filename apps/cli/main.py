"""Typer CLI entrypoint for maskedit."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal, cast

import typer

from apps.cli.format_human import render_replay_summary
from apps.cli.io import build_report_path, write_fallback_json_atomic, write_replay_report_atomic
from maskengine.config.field_config import build_field_state, get_field_config, load_field_config
from maskengine.field.state import apply_desktop_text, get_value, is_mask_complete, validate_field
from maskengine.mask.completeness import is_complete
from maskengine.mask.converter import extract_raw_text, masked_text
from maskengine.mask.literals import insert_literals_into_raw, remove_literals_from_raw
from maskengine.mask.models import CompiledMask
from maskengine.mask.presets import MASK_PRESETS, keyboard_hint, list_presets, resolve_pattern
from maskengine.mask.tokenizer import compile_mask
from maskengine.trace.models import ReplayReport
from maskengine.trace.replay import load_trace, replay_trace
from maskengine.utils.errors import FieldConfigError, TraceFormatError

app = typer.Typer(help="Masked text input engine CLI", rich_markup_mode=None)
ReplayReportMode = Literal["human", "json", "both"]

MaskArg = Annotated[str, typer.Argument(help="Mask pattern or preset:<name> reference.")]
PromptCharOption = Annotated[str, typer.Option("--prompt-char", help="Prompt glyph for empty slots.")]


@app.callback()
def cli_callback() -> None:
    """CLI root callback to keep subcommands explicit."""


@app.command("tokens")
def tokens_command(mask: MaskArg) -> None:
    """Print the parsed token list as JSON."""

    compiled = _compile_or_exit(mask, "_")
    payload = {
        "pattern": compiled.pattern,
        "capacity": compiled.capacity,
        "keyboard": keyboard_hint(compiled),
        "tokens": [
            {"kind": token.kind.value, "character": token.character} for token in compiled.tokens
        ],
    }
    typer.echo(_dump_json(payload))


@app.command("format")
def format_command(
    mask: MaskArg,
    raw: Annotated[str, typer.Argument(help="Raw input without literals.")],
    focused: Annotated[bool, typer.Option("--focused/--unfocused")] = True,
    prompt_char: PromptCharOption = "_",
) -> None:
    """Render raw input into display text."""

    compiled = _compile_or_exit(mask, prompt_char)
    typer.echo(masked_text(compiled, raw, focused))


@app.command("unformat")
def unformat_command(
    mask: MaskArg,
    display: Annotated[str, typer.Argument(help="Display or pasted text.")],
    prompt_char: PromptCharOption = "_",
) -> None:
    """Extract raw input from display text."""

    compiled = _compile_or_exit(mask, prompt_char)
    typer.echo(extract_raw_text(compiled, display))


@app.command("check")
def check_command(mask: MaskArg, raw: Annotated[str, typer.Argument()]) -> None:
    """Exit 0 when raw input fills every required slot, 2 otherwise."""

    compiled = _compile_or_exit(mask, "_")
    if is_complete(compiled, raw):
        typer.echo("complete")
        raise typer.Exit(code=0)
    typer.echo("incomplete")
    raise typer.Exit(code=2)


@app.command("project")
def project_command(
    mask: MaskArg,
    value: Annotated[str, typer.Argument()],
    strip: Annotated[
        bool, typer.Option("--strip", help="Remove literals instead of inserting them.")
    ] = False,
) -> None:
    """Insert mask literals into raw input, or strip them with --strip."""

    compiled = _compile_or_exit(mask, "_")
    if strip:
        typer.echo(remove_literals_from_raw(compiled, value))
    else:
        typer.echo(insert_literals_into_raw(compiled, value))


@app.command("presets")
def presets_command() -> None:
    """List built-in mask presets."""

    for name in list_presets():
        typer.echo(f"{name}\t{MASK_PRESETS[name]}")


@app.command("field")
def field_command(
    name: Annotated[str, typer.Argument(help="Configured field name.")],
    text: Annotated[str, typer.Argument(help="Text typed or pasted into the field.")],
    config: Annotated[Path | None, typer.Option(exists=True, dir_okay=False)] = None,
) -> None:
    """Run text through a configured field and validate the result."""

    try:
        config_file = load_field_config(config)
        field_config = get_field_config(config_file, name)
    except FieldConfigError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=3) from exc

    state = build_field_state(field_config, focused=False)
    edit = apply_desktop_text(state, text)
    validation = validate_field(
        edit.state,
        required=field_config.required,
        required_message=field_config.required_message,
    )
    payload: dict[str, Any] = {
        "field": name,
        "raw": edit.state.raw_text,
        "display": edit.state.expected_display,
        "value": get_value(edit.state),
        "complete": is_mask_complete(edit.state),
        "valid": validation.is_valid,
        "errors": list(validation.errors),
    }
    typer.echo(_dump_json(payload))
    raise typer.Exit(code=0 if validation.is_valid else 2)


@app.command("replay")
def replay_command(
    trace: Annotated[Path, typer.Argument(exists=True, dir_okay=False, file_okay=True)],
    out: Annotated[Path | None, typer.Option(help="Replay report JSON path.")] = None,
    report: Annotated[str, typer.Option()] = "human",
) -> None:
    """Replay a recorded IME trace through the mobile reconciler."""

    normalized_report = report.lower().strip()
    if normalized_report not in {"human", "json", "both"}:
        typer.echo("ERROR: --report must be one of: human, json, both.")
        raise typer.Exit(code=1)
    report_mode = cast(ReplayReportMode, normalized_report)

    report_path = out if out is not None else build_report_path(trace)

    try:
        loaded = load_trace(trace)
    except TraceFormatError as exc:
        typer.echo(f"ERROR: {exc}")
        _safe_write_fallback(report_path, type(exc).__name__, str(exc), "load_trace")
        raise typer.Exit(code=3) from exc

    replay_report = replay_trace(loaded)

    if report_mode in {"human", "both"}:
        typer.echo(render_replay_summary(replay_report))
    if report_mode in {"json", "both"}:
        typer.echo(_dump_json(replay_report.model_dump(mode="json")))

    try:
        write_replay_report_atomic(report_path, replay_report)
    except OSError as exc:
        typer.echo(f"ERROR: write report failed: {exc}")
        raise typer.Exit(code=1) from exc

    raise typer.Exit(code=_replay_exit_code(replay_report))


def _replay_exit_code(replay_report: ReplayReport) -> int:
    return 0 if replay_report.passed else 4


def _compile_or_exit(mask: str, prompt_char: str) -> CompiledMask:
    if len(prompt_char) != 1:
        typer.echo("ERROR: --prompt-char must be exactly one character.")
        raise typer.Exit(code=1)
    try:
        pattern = resolve_pattern(mask)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=3) from exc
    return compile_mask(pattern, prompt_char)


def _safe_write_fallback(path: Path, error_type: str, error_message: str, stage: str) -> None:
    try:
        write_fallback_json_atomic(
            path,
            error_type=error_type,
            error_message=error_message,
            stage=stage,
        )
    except Exception:  # noqa: BLE001
        pass


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True)


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
