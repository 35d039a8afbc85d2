"""Run report aggregation."""

from __future__ import annotations

from pathlib import Path

from isdhourly.common.fs import read_csv_rows, read_json, write_json
from isdhourly.pipeline.decode_stage import DECODE_REPORT_PATH


def _file_status_counts(path: Path) -> dict[str, int]:
    counts: dict[str, int] = {}
    if not path.exists():
        return counts
    for row in read_csv_rows(path):
        status = row.get("STATUS", "")
        counts[status] = counts.get(status, 0) + 1
    return dict(sorted(counts.items()))


def write_run_summary(
    data_dir: Path,
    run_id: str,
    *,
    file_report_filename: str,
    stage_failures: list[str],
) -> Path:
    decode_report_path = data_dir / DECODE_REPORT_PATH
    decode_report = read_json(decode_report_path) if decode_report_path.exists() else {}
    counts = decode_report.get("counts", {})

    warnings: list[str] = []
    if int(counts.get("malformed", 0)) > 0:
        warnings.append("MALFORMED_RECORDS_PRESENT")
    if decode_report.get("empty_files"):
        warnings.append("EMPTY_STATION_FILES")
    transfers = _file_status_counts(data_dir / "out" / "reports" / file_report_filename)
    if transfers.get("missing") or transfers.get("failed"):
        warnings.append("ARCHIVES_UNAVAILABLE")

    status = "success"
    if stage_failures:
        status = "error"
    elif warnings:
        status = "partial"

    payload = {
        "run_id": run_id,
        "status": status,
        "transfers": transfers,
        "decode": counts,
        "warnings": warnings,
        "stage_failures": stage_failures,
    }
    summary_path = data_dir / "out" / "reports" / "run_summary.json"
    write_json(summary_path, payload)
    return summary_path
