"""Decode stage: extracted station files to observation and station tables."""

from __future__ import annotations

import logging
from pathlib import Path

from isdhourly.common.config_loader import RunConfig
from isdhourly.common.errors import EmptySequence, StageError
from isdhourly.common.fs import iter_text_lines, write_json
from isdhourly.common.logging import get_logger, log_event
from isdhourly.common.models import StationSummary
from isdhourly.decode.aggregate import summarize_station
from isdhourly.decode.observations import DecodeResult, decode_lines
from isdhourly.harvest.extract import EXTRACTED_DIR
from isdhourly.pipeline.export import write_observations_csv, write_stations_csv

DECODE_REPORT_PATH = "out/reports/decode_report.json"


def extracted_files(data_dir: Path) -> list[Path]:
    directory = data_dir / EXTRACTED_DIR
    if not directory.exists():
        return []
    return sorted(path for path in directory.iterdir() if path.is_file() and not path.name.endswith(".part"))


def _log_failures(logger: logging.Logger, run_id: str, result: DecodeResult) -> None:
    for failure in result.failures:
        log_event(
            logger,
            f"malformed record: {failure}",
            level=logging.WARNING,
            run_id=run_id,
            stage="decode",
            station=result.source,
            line=failure.line_number,
            event="MALFORMED_RECORD",
            status="error",
            error_code=failure.error_code,
        )


def decode_station_file(path: Path, *, workers: int = 1) -> DecodeResult:
    return decode_lines(iter_text_lines(path), source=path.name, workers=workers)


def run_decode(
    config: RunConfig,
    data_dir: Path,
    run_id: str,
    logger: logging.Logger | None = None,
) -> dict:
    logger = logger or get_logger(run_id)
    files = extracted_files(data_dir)

    summaries: list[StationSummary] = []
    file_reports: dict[str, dict] = {}
    empty_sources: list[str] = []

    for path in files:
        result = decode_station_file(path, workers=config.workers)
        _log_failures(logger, run_id, result)
        write_observations_csv(data_dir, path.name, result.observations)

        report = result.stats()
        try:
            summaries.append(summarize_station(result.observations, source=path.name))
            report["summary"] = True
        except EmptySequence as exc:
            empty_sources.append(path.name)
            report["summary"] = False
            log_event(
                logger,
                str(exc),
                level=logging.WARNING,
                run_id=run_id,
                stage="decode",
                station=path.name,
                event="STATION_SKIPPED",
                status="error",
                error_code=exc.error_code,
            )
        file_reports[path.name] = report
        log_event(
            logger,
            "station file decoded",
            run_id=run_id,
            stage="decode",
            station=path.name,
            event="FILE_DECODED",
            status="ok",
            rows_in=result.line_count,
            rows_out=len(result.observations),
        )

    stations_path = data_dir / "out" / config.output["stations_filename"]
    write_stations_csv(stations_path, summaries)

    payload = {
        "run_id": run_id,
        "files": file_reports,
        "counts": {
            "files": len(files),
            "stations": len(summaries),
            "lines": sum(item["lines"] for item in file_reports.values()),
            "observations": sum(item["decoded"] for item in file_reports.values()),
            "malformed": sum(item["malformed"] for item in file_reports.values()),
        },
        "empty_files": empty_sources,
    }
    write_json(data_dir / DECODE_REPORT_PATH, payload)

    if files and not summaries:
        raise StageError("No station file produced a single observation")
    return payload
