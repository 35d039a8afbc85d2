"""Observation and station CSV export."""

from __future__ import annotations

from pathlib import Path

from isdhourly.common.constants import OBSERVATION_HEADERS, STATION_HEADERS
from isdhourly.common.fs import write_csv
from isdhourly.common.models import Observation, StationSummary

OBSERVATIONS_DIR = "out/observations"


def _serialize_row(row: dict, headers: list[str]) -> dict:
    out = {}
    for key in headers:
        value = row.get(key)
        out[key] = "" if value is None else value
    return out


def write_observations_csv(data_dir: Path, source: str, observations: list[Observation]) -> Path:
    out_path = data_dir / OBSERVATIONS_DIR / f"{source}.csv"
    rows = [_serialize_row(obs.to_row(), OBSERVATION_HEADERS) for obs in observations]
    write_csv(out_path, OBSERVATION_HEADERS, rows)
    return out_path


def write_stations_csv(out_path: Path, summaries: list[StationSummary]) -> Path:
    rows = [_serialize_row(summary.to_row(), STATION_HEADERS) for summary in summaries]
    write_csv(out_path, STATION_HEADERS, rows)
    return out_path
