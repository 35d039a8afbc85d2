"""UTC-focused helpers for deterministic run metadata."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_current_year() -> int:
    return datetime.now(tz=timezone.utc).year


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")
