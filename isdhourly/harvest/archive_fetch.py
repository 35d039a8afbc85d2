"""Yearly per-station archive transfer with fail-soft semantics."""

from __future__ import annotations

import logging
from pathlib import Path

from isdhourly.common.config_loader import RunConfig
from isdhourly.common.constants import FILE_REPORT_HEADERS
from isdhourly.common.errors import StageError
from isdhourly.common.fs import write_csv
from isdhourly.common.http import ArchiveNotFound, HttpClient, HttpRequestError, TimeoutConfig
from isdhourly.common.logging import get_logger, log_event
from isdhourly.common.models import ArchiveFile, StationRecord
from isdhourly.discovery.station_catalog import load_selected_stations

ARCHIVE_DIR = "raw/archives"
STATUS_AVAILABLE = "available"
STATUS_MISSING = "missing"
STATUS_FAILED = "failed"


def archive_url(base_url: str, station: StationRecord, year: int) -> str:
    return f"{base_url.rstrip('/')}/{year}/{station.archive_name(year)}.gz"


def archive_path(data_dir: Path, station: StationRecord, year: int) -> Path:
    return data_dir / ARCHIVE_DIR / str(year) / f"{station.archive_name(year)}.gz"


def planned_transfers(stations: list[StationRecord], years: list[int]) -> list[tuple[StationRecord, int]]:
    return [
        (station, year)
        for year in years
        for station in stations
        if station.begin_year <= year <= station.end_year
    ]


def run_archive_fetch(
    config: RunConfig,
    data_dir: Path,
    run_id: str,
    http_client: HttpClient | None = None,
    logger: logging.Logger | None = None,
) -> dict:
    logger = logger or get_logger(run_id)
    stations = load_selected_stations(data_dir)
    transfers = planned_transfers(stations, config.fetch_years)
    timeout = TimeoutConfig(connect=20, read=float(config.sources.get("timeout_seconds", 120)))

    files: list[ArchiveFile] = []
    owns_client = http_client is None
    client = http_client or HttpClient()
    try:
        for station, year in transfers:
            dest = archive_path(data_dir, station, year)
            name = dest.name
            if dest.exists():
                files.append(ArchiveFile(station=station, year=year, file=name, status=STATUS_AVAILABLE))
                continue
            try:
                client.download(archive_url(config.sources["archive_base_url"], station, year), dest, timeout=timeout)
                status = STATUS_AVAILABLE
            except ArchiveNotFound:
                status = STATUS_MISSING
            except HttpRequestError as exc:
                status = STATUS_FAILED
                log_event(
                    logger,
                    f"archive transfer failed: {exc}",
                    level=logging.WARNING,
                    run_id=run_id,
                    stage="fetch",
                    station=station.archive_name(year),
                    event="FETCH_FAIL",
                    status="error",
                    error_code=exc.error_code,
                )
            files.append(ArchiveFile(station=station, year=year, file=name, status=status))
    finally:
        if owns_client:
            client.close()

    report_path = data_dir / "out" / "reports" / config.output["file_report_filename"]
    write_csv(report_path, FILE_REPORT_HEADERS, [item.to_row() for item in files])

    counts = {
        status: sum(1 for item in files if item.status == status)
        for status in (STATUS_AVAILABLE, STATUS_MISSING, STATUS_FAILED)
    }
    if files and counts[STATUS_FAILED] == len(files):
        raise StageError("Every archive transfer failed")

    log_event(
        logger,
        "archive transfers complete",
        run_id=run_id,
        stage="fetch",
        event="FETCH_DONE",
        status="ok",
        rows_in=len(transfers),
        rows_out=counts[STATUS_AVAILABLE],
    )
    return {
        "run_id": run_id,
        "planned": len(transfers),
        "counts": counts,
        "report_path": str(report_path),
    }
