"""Custom exceptions for configuration and trace boundaries.

The mask engine itself never raises; these only cover loading external input.
"""

from __future__ import annotations

from pathlib import Path


class FieldConfigError(ValueError):
    """Raised when a field configuration file cannot be loaded or validated."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class TraceFormatError(ValueError):
    """Raised when a recorded IME trace is malformed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        event_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.event_index = event_index
