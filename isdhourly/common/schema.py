"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from isdhourly.common.constants import EARLIEST_ISD_YEAR
from isdhourly.common.errors import ConfigError
from isdhourly.common.time_utils import utc_current_year


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_year_range(start_year, end_year, *, current_year: int | None = None) -> tuple[int, int]:
    if start_year is None or end_year is None:
        raise ConfigError("Both start and end years are required for surface station data")
    if isinstance(start_year, bool) or isinstance(end_year, bool):
        raise ConfigError("Start and end years must be integers")
    if not isinstance(start_year, int) or not isinstance(end_year, int):
        raise ConfigError("Start and end years must be integers")
    if start_year > end_year:
        raise ConfigError(f"Start year {start_year} is after end year {end_year}")
    latest = current_year if current_year is not None else utc_current_year()
    for year in (start_year, end_year):
        if year < EARLIEST_ISD_YEAR or year > latest:
            raise ConfigError(f"Year {year} outside {EARLIEST_ISD_YEAR}..{latest}")
    return start_year, end_year


def _validate_bbox(bbox: dict) -> None:
    _assert_required_keys(bbox, {"min_lat", "max_lat", "min_lon", "max_lon"}, "bbox")
    _assert_no_unknown_keys(bbox, {"min_lat", "max_lat", "min_lon", "max_lon", "epsg"}, "bbox", False)
    if bbox["min_lat"] > bbox["max_lat"] or bbox["min_lon"] > bbox["max_lon"]:
        raise ConfigError("bbox minimums must not exceed maximums")


def validate_run_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"years", "bbox", "sources", "decode", "output"}
    _assert_required_keys(cfg, top_required, "run config")
    _assert_no_unknown_keys(cfg, top_required, "run config", allow_unknown)

    years = cfg["years"]
    _assert_required_keys(years, {"start", "end"}, "years")
    validate_year_range(years["start"], years["end"])
    pad_years = years.get("pad_years", 1)
    if not isinstance(pad_years, int) or pad_years < 0:
        raise ConfigError("years.pad_years must be a non-negative integer")

    _validate_bbox(cfg["bbox"])
    _assert_required_keys(cfg["sources"], {"catalog_url", "archive_base_url"}, "sources")
    _assert_required_keys(cfg["decode"], {"workers"}, "decode")
    if not isinstance(cfg["decode"]["workers"], int) or cfg["decode"]["workers"] < 1:
        raise ConfigError("decode.workers must be a positive integer")
    _assert_required_keys(cfg["output"], {"stations_filename", "file_report_filename"}, "output")

    return cfg
