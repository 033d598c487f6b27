from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path


def _write_log(path: Path) -> None:
    path.write_text(
        "\n".join(
            [
                json.dumps({"event": "start", "operation": "format", "request_id": "a"}),
                json.dumps(
                    {
                        "event": "done",
                        "operation": "format",
                        "outcome": "ok",
                        "http_status": 200,
                        "timing": {"total_ms": 3},
                    }
                ),
                json.dumps(
                    {
                        "event": "done",
                        "operation": "mobile_input",
                        "outcome": "ok",
                        "http_status": 200,
                        "rule": "single_char",
                        "timing": {"total_ms": 7},
                    }
                ),
                json.dumps(
                    {
                        "event": "error",
                        "operation": "format",
                        "error_code": "INPUT_TOO_LARGE",
                        "status_code": 413,
                    }
                ),
                "not-json-line",
                "",
            ]
        ),
        encoding="utf-8",
    )


def test_log_summarizer_json_output(tmp_path: Path) -> None:
    log_path = tmp_path / "app.log"
    _write_log(log_path)

    result = subprocess.run(
        [sys.executable, "scripts/summarize_logs.py", "--json", str(log_path)],
        cwd=Path(__file__).resolve().parents[1],
        check=False,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0

    payload = json.loads(result.stdout)
    assert payload["parse_errors"] == 1
    assert payload["outcome_counts"] == {"ok": 2}
    assert payload["http_status_counts"] == {"200": 2, "413": 1}
    assert payload["operation_counts"] == {"format": 1, "mobile_input": 1}
    assert payload["rule_counts"] == {"single_char": 1}
    assert payload["error_code_counts"] == {"INPUT_TOO_LARGE": 1}
    assert payload["total_ms_p50"] == 3
    assert payload["total_ms_p95"] == 7


def test_log_summarizer_text_output(tmp_path: Path) -> None:
    log_path = tmp_path / "app.log"
    _write_log(log_path)

    result = subprocess.run(
        [sys.executable, "scripts/summarize_logs.py", str(log_path)],
        cwd=Path(__file__).resolve().parents[1],
        check=False,
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0
    assert result.stdout.splitlines()[0] == "maskedit Log Summary"
    assert "rule_counts={'single_char': 1}" in result.stdout


def test_log_summarizer_counts_unreadable_file(tmp_path: Path) -> None:
    result = subprocess.run(
        [sys.executable, "scripts/summarize_logs.py", "--json", str(tmp_path / "missing.log")],
        cwd=Path(__file__).resolve().parents[1],
        check=False,
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0
    payload = json.loads(result.stdout)
    assert payload["parse_errors"] == 1
    assert payload["lines_total"] == 0
    assert payload["total_ms_p50"] is None


def test_log_summarizer_combines_files_and_skips_undecodable(tmp_path: Path) -> None:
    log_path = tmp_path / "app.log"
    _write_log(log_path)
    binary_path = tmp_path / "binary.log"
    binary_path.write_bytes(b"\xff\xfe\x00garbage\n")

    result = subprocess.run(
        [sys.executable, "scripts/summarize_logs.py", "--json", str(log_path), str(binary_path)],
        cwd=Path(__file__).resolve().parents[1],
        check=False,
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0
    payload = json.loads(result.stdout)
    assert payload["files"] == [str(log_path), str(binary_path)]
    assert payload["lines_total"] == 5
    assert payload["parse_errors"] == 2
    assert payload["outcome_counts"] == {"ok": 2}
