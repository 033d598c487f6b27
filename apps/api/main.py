"""FastAPI wrapper exposing the mask engine as stateless JSON operations."""

from __future__ import annotations

import importlib.metadata
import json
import logging
import os
import time
import uuid
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from apps.api.schemas import (
    CompleteRequest,
    FormatRequest,
    MaskRequest,
    MobileInputRequest,
    ProjectRequest,
    UnformatRequest,
)
from maskengine.config.field_config import load_field_config
from maskengine.mask.completeness import is_complete
from maskengine.mask.converter import extract_raw_text, masked_text
from maskengine.mask.cursor import display_cursor_for_raw_length
from maskengine.mask.literals import insert_literals_into_raw, remove_literals_from_raw
from maskengine.mask.mobile import process_mobile_input
from maskengine.mask.models import CompiledMask
from maskengine.mask.presets import MASK_PRESETS, keyboard_hint, resolve_pattern
from maskengine.mask.tokenizer import PLACEHOLDER_SYMBOLS, compile_mask
from maskengine.utils.errors import FieldConfigError

app = FastAPI(title="maskedit API", version="0.1.0")
logger = logging.getLogger("maskedit.api")

_DEFAULT_MAX_INPUT_CHARS = 4096
_REQUEST_ID_HEADER = "X-Maskedit-Request-Id"

RequestModel = TypeVar("RequestModel", bound=MaskRequest)


class ApiRequestError(Exception):
    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail or {}


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Ensure every response has a request id header."""

    request_id = uuid.uuid4().hex
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception:  # noqa: BLE001
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="INTERNAL_ERROR",
            status_code=500,
            failure_stage="middleware",
        )
        response = _error_response(
            status_code=500,
            error_code="INTERNAL_ERROR",
            message="internal server error",
            request_id=request_id,
            detail={"path": request.url.path},
        )
    response.headers.setdefault(_REQUEST_ID_HEADER, request_id)
    return response


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    """Liveness endpoint."""

    return {"status": "ok"}


@app.get("/v1/meta")
async def meta_v1(request: Request) -> JSONResponse:
    """Mask grammar and preset metadata for client bootstrapping."""

    request_id = _request_id_from_request(request)
    if not _meta_enabled():
        return _error_response(
            status_code=404,
            error_code="NOT_FOUND",
            message="meta endpoint is disabled",
            request_id=request_id,
            detail={"path": request.url.path},
        )

    payload = {
        "symbols": {symbol: kind.value for symbol, kind in PLACEHOLDER_SYMBOLS.items()},
        "escape": "\\",
        "default_prompt_char": "_",
        "presets": dict(sorted(MASK_PRESETS.items())),
        "max_input_chars": _max_input_chars(),
        "version": _package_version(),
    }
    return JSONResponse(status_code=200, headers={_REQUEST_ID_HEADER: request_id}, content=payload)


@app.get("/v1/fields")
async def fields_v1(request: Request) -> JSONResponse:
    """List configured fields from ``MASKEDIT_FIELD_CONFIG`` (or the bundled defaults)."""

    request_id = _request_id_from_request(request)
    config_env = os.getenv("MASKEDIT_FIELD_CONFIG")
    config_path = Path(config_env) if config_env else None
    try:
        config = load_field_config(config_path)
    except FieldConfigError as exc:
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="CONFIG_ERROR",
            status_code=500,
            failure_stage="load_field_config",
        )
        return _error_response(
            status_code=500,
            error_code="CONFIG_ERROR",
            message=str(exc),
            request_id=request_id,
        )

    fields: dict[str, dict[str, Any]] = {}
    for name in sorted(config.fields):
        field_config = config.fields[name]
        pattern = resolve_pattern(field_config.mask)
        fields[name] = {
            "mask": field_config.mask,
            "pattern": pattern,
            "prompt_char": field_config.prompt_char,
            "include_literals": field_config.include_literals,
            "required": field_config.required,
            "keyboard": keyboard_hint(compile_mask(pattern)),
        }
    return JSONResponse(
        status_code=200,
        headers={_REQUEST_ID_HEADER: request_id},
        content={"fields": fields},
    )


@app.post("/v1/format")
async def format_v1(request: Request) -> JSONResponse:
    """Render raw input into display text."""

    def handle(mask: CompiledMask, body: FormatRequest) -> dict[str, Any]:
        display = masked_text(mask, body.raw, body.focused)
        return {
            "display": display,
            "cursor_position": display_cursor_for_raw_length(mask, len(body.raw), display),
            "complete": is_complete(mask, body.raw),
        }

    return await _run_operation(request, "format", FormatRequest, handle)


@app.post("/v1/unformat")
async def unformat_v1(request: Request) -> JSONResponse:
    """Extract raw input from display or pasted text."""

    def handle(mask: CompiledMask, body: UnformatRequest) -> dict[str, Any]:
        return {"raw": extract_raw_text(mask, body.display)}

    return await _run_operation(request, "unformat", UnformatRequest, handle)


@app.post("/v1/complete")
async def complete_v1(request: Request) -> JSONResponse:
    """Report whether raw input fills every required slot."""

    def handle(mask: CompiledMask, body: CompleteRequest) -> dict[str, Any]:
        return {
            "complete": is_complete(mask, body.raw),
            "capacity": mask.capacity,
            "keyboard": keyboard_hint(mask),
        }

    return await _run_operation(request, "complete", CompleteRequest, handle)


@app.post("/v1/project")
async def project_v1(request: Request) -> JSONResponse:
    """Insert or strip mask literals at the value-storage boundary."""

    def handle(mask: CompiledMask, body: ProjectRequest) -> dict[str, Any]:
        if body.strip:
            return {"value": remove_literals_from_raw(mask, body.value)}
        return {"value": insert_literals_into_raw(mask, body.value)}

    return await _run_operation(request, "project", ProjectRequest, handle)


@app.post("/v1/mobile-input")
async def mobile_input_v1(request: Request) -> JSONResponse:
    """Reconcile one IME text-change notification; clients keep the field state."""

    def handle(mask: CompiledMask, body: MobileInputRequest) -> dict[str, Any]:
        result = process_mobile_input(
            mask,
            body.old_display,
            body.new_display,
            body.expected_display,
            body.current_raw,
            show_optional_prompts=body.show_optional_prompts,
        )
        return {
            "raw": result.raw_text,
            "display": result.display_text,
            "cursor_position": result.cursor_position,
            "rule": result.rule.value,
            "changed": result.raw_text != body.current_raw,
        }

    return await _run_operation(request, "mobile_input", MobileInputRequest, handle)


async def _run_operation(
    request: Request,
    operation: str,
    model_type: type[RequestModel],
    handler: Callable[[CompiledMask, RequestModel], dict[str, Any]],
) -> JSONResponse:
    request_started = time.perf_counter()
    request_id = _request_id_from_request(request)
    failure_stage = "parse_body"

    try:
        raw_body = await _read_json_body(request)
        failure_stage = "validate_inputs"
        body = _validate_body(model_type, raw_body)
        _check_input_size(body)
        mask = _compile_request_mask(body)
        _log_event(
            logging.INFO,
            "start",
            request_id,
            operation=operation,
            mask=body.mask,
        )
        failure_stage = "engine"
        content = handler(mask, body)
    except ApiRequestError as exc:
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            operation=operation,
            error_code=exc.error_code,
            status_code=exc.status_code,
            failure_stage=failure_stage,
        )
        return _error_response(
            status_code=exc.status_code,
            error_code=exc.error_code,
            message=exc.message,
            request_id=request_id,
            detail=exc.detail,
        )

    log_fields: dict[str, Any] = {}
    if "rule" in content:
        log_fields["rule"] = content["rule"]
    _log_event(
        logging.INFO,
        "done",
        request_id,
        operation=operation,
        outcome="ok",
        http_status=200,
        timing={"total_ms": _elapsed_ms(request_started)},
        **log_fields,
    )
    return JSONResponse(status_code=200, headers={_REQUEST_ID_HEADER: request_id}, content=content)


async def _read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_JSON",
            message="request body must be valid JSON",
        ) from exc


def _validate_body(model_type: type[RequestModel], raw_body: Any) -> RequestModel:
    if not isinstance(raw_body, dict):
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_ARGUMENT",
            message="request body must be a JSON object",
        )
    try:
        return model_type.model_validate(raw_body)
    except ValidationError as exc:
        errors = [
            {"loc": [str(part) for part in error["loc"]], "msg": error["msg"]}
            for error in exc.errors(include_url=False, include_context=False, include_input=False)
        ]
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_ARGUMENT",
            message="invalid request body",
            detail={"errors": errors},
        ) from exc


def _check_input_size(body: MaskRequest) -> None:
    limit = _max_input_chars()
    longest = max(len(text) for text in body.text_fields())
    if longest > limit:
        raise ApiRequestError(
            status_code=413,
            error_code="INPUT_TOO_LARGE",
            message="input text too large",
            detail={"max_input_chars": limit, "actual_chars": longest},
        )


def _compile_request_mask(body: MaskRequest) -> CompiledMask:
    try:
        pattern = resolve_pattern(body.mask)
    except ValueError as exc:
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_ARGUMENT",
            message=str(exc),
            detail={"field": "mask", "value": body.mask},
        ) from exc
    return compile_mask(pattern, body.prompt_char)


def _request_id_from_request(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str) and request_id:
        return request_id
    generated = uuid.uuid4().hex
    request.state.request_id = generated
    return generated


def _meta_enabled() -> bool:
    raw = os.getenv("MASKEDIT_META_ENABLED", "1")
    return raw.strip().lower() not in {"0", "false", "no", "off"}


def _max_input_chars() -> int:
    raw = os.getenv("MASKEDIT_MAX_INPUT_CHARS")
    if raw is None:
        return _DEFAULT_MAX_INPUT_CHARS
    try:
        parsed = int(raw)
    except ValueError:
        return _DEFAULT_MAX_INPUT_CHARS
    return parsed if parsed > 0 else _DEFAULT_MAX_INPUT_CHARS


def _package_version() -> str:
    try:
        return importlib.metadata.version("maskedit")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def _error_response(
    *,
    status_code: int,
    error_code: str,
    message: str,
    request_id: str,
    detail: dict[str, Any] | None = None,
) -> JSONResponse:
    payload_detail = dict(detail or {})
    payload_detail["request_id"] = request_id

    return JSONResponse(
        status_code=status_code,
        headers={_REQUEST_ID_HEADER: request_id},
        content={
            "error_code": error_code,
            "message": message,
            "detail": payload_detail,
        },
    )


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def _log_event(level: int, event: str, request_id: str, **fields: Any) -> None:
    payload = {
        "event": event,
        "request_id": request_id,
        **fields,
    }
    logger.log(level, _dump_json(payload))
