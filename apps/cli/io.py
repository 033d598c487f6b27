"""CLI I/O helpers for atomic report writing."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from maskengine.trace.models import ReplayReport


def build_report_path(trace_path: Path, out_dir: Path | None = None) -> Path:
    """Build the default replay report path next to (or under ``out_dir`` for) a trace."""

    directory = out_dir if out_dir is not None else trace_path.parent
    return directory / f"{trace_path.stem}.replay.json"


def write_replay_report_atomic(path: Path, report: ReplayReport) -> None:
    """Write the replay report JSON atomically using a temporary file + replace."""

    path.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_json(path, report.model_dump(mode="json"))


def write_fallback_json_atomic(
    path: Path,
    *,
    error_type: str,
    error_message: str,
    stage: str,
) -> None:
    """Write a replay report stub carrying error metadata."""

    payload: dict[str, Any] = {
        "passed": False,
        "mismatch_count": 0,
        "steps": [],
        "error": {
            "error_type": error_type,
            "error_message": error_message,
            "stage": stage,
        },
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_json(path, payload)


def _atomic_write_json(path: Path, payload: dict[str, Any]) -> None:
    fd, raw_tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f"{path.name}.",
        suffix=".tmp",
    )
    tmp_path = Path(raw_tmp_path)

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(payload, tmp, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
        raise
