#!/usr/bin/env python3
"""Summarize maskedit API JSON line logs for ops/CI usage.

Each line the API logs is one JSON object. The summary tallies reconciler
rules, error codes and HTTP statuses, and reports p50/p95 request timings.
"""

from __future__ import annotations

import argparse
import json
import math
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Payload key -> summary counter, for string-valued keys tallied verbatim.
_TALLIED_KEYS = {
    "outcome": "outcome_counts",
    "rule": "rule_counts",
    "error_code": "error_code_counts",
}


@dataclass
class LogSummary:
    files: list[str]
    lines_total: int = 0
    parse_errors: int = 0
    counters: dict[str, Counter[str]] = field(
        default_factory=lambda: {
            name: Counter()
            for name in (
                "outcome_counts",
                "http_status_counts",
                "operation_counts",
                "rule_counts",
                "error_code_counts",
            )
        }
    )
    total_ms: list[int] = field(default_factory=list)

    def add(self, payload: dict[str, Any]) -> None:
        for key, counter_name in _TALLIED_KEYS.items():
            value = payload.get(key)
            if isinstance(value, str):
                self.counters[counter_name][value] += 1

        operation = payload.get("operation")
        if payload.get("event") == "done" and isinstance(operation, str):
            self.counters["operation_counts"][operation] += 1

        # Middleware records use http_status; error handlers use status_code.
        status = payload.get("http_status", payload.get("status_code"))
        if status is not None:
            self.counters["http_status_counts"][str(status)] += 1

        timing = payload.get("timing")
        if isinstance(timing, dict) and isinstance(timing.get("total_ms"), int | float):
            self.total_ms.append(int(timing["total_ms"]))

    def as_dict(self) -> dict[str, Any]:
        summary: dict[str, Any] = {
            "files": self.files,
            "lines_total": self.lines_total,
            "parse_errors": self.parse_errors,
        }
        for name, counter in self.counters.items():
            summary[name] = dict(sorted(counter.items()))
        summary["total_ms_p50"] = _percentile(self.total_ms, 50)
        summary["total_ms_p95"] = _percentile(self.total_ms, 95)
        return summary


def _percentile(values: list[int], p: float) -> int | None:
    """Nearest-rank percentile; None when nothing was timed."""

    if not values:
        return None
    ordered = sorted(values)
    rank = math.ceil(p / 100 * len(ordered))
    return ordered[min(len(ordered), max(rank, 1)) - 1]


def _iter_payloads(paths: Iterable[Path], summary: LogSummary) -> Iterator[dict[str, Any]]:
    for path in paths:
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError):
            summary.parse_errors += 1
            continue

        summary.lines_total += len(lines)
        for line in filter(None, (item.strip() for item in lines)):
            try:
                payload = json.loads(line)
            except json.JSONDecodeError:
                payload = None
            if isinstance(payload, dict):
                yield payload
            else:
                summary.parse_errors += 1


def summarize_log_files(paths: list[Path]) -> dict[str, Any]:
    summary = LogSummary(files=[str(path) for path in paths])
    for payload in _iter_payloads(paths, summary):
        summary.add(payload)
    return summary.as_dict()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarize maskedit structured logs.")
    parser.add_argument("files", nargs="+", type=Path, help="One or more JSONL log files.")
    parser.add_argument("--json", action="store_true", help="Output JSON.")
    return parser


def main() -> None:
    args = _build_parser().parse_args()
    summary = summarize_log_files([path.expanduser() for path in args.files])

    if args.json:
        print(json.dumps(summary, ensure_ascii=False, indent=2, sort_keys=True))
        return

    print("maskedit Log Summary")
    for key, value in summary.items():
        print(f"{key}={len(value) if key == 'files' else value}")


if __name__ == "__main__":
    main()
