"""ISD station catalog retrieval and domain filtering."""

from __future__ import annotations

import csv
import io
from pathlib import Path

from pyproj import CRS, Transformer

from isdhourly.common.config_loader import RunConfig
from isdhourly.common.errors import ConfigError
from isdhourly.common.fs import ensure_dir, read_json, write_json
from isdhourly.common.http import HttpClient, TimeoutConfig
from isdhourly.common.models import StationRecord
from isdhourly.common.schema import validate_year_range

CATALOG_RAW_PATH = "raw/catalog/isd-history.csv"
CATALOG_OUT_PATH = "intermediate/station_catalog.json"


def _safe_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _year_of(value: str | None) -> int | None:
    if not value or len(value.strip()) < 4:
        return None
    try:
        return int(value.strip()[:4])
    except ValueError:
        return None


def parse_catalog(text: str) -> list[StationRecord]:
    """Parse ``isd-history.csv``; rows without numeric ids or years are dropped."""
    stations: list[StationRecord] = []
    for row in csv.DictReader(io.StringIO(text)):
        try:
            usaf = int(row["USAF"])
            wban = int(row["WBAN"])
        except (KeyError, TypeError, ValueError):
            continue
        begin = _year_of(row.get("BEGIN"))
        end = _year_of(row.get("END"))
        if begin is None or end is None:
            continue
        stations.append(
            StationRecord(
                usaf=usaf,
                wban=wban,
                name=(row.get("STATION NAME") or "").strip(),
                lat=_safe_float(row.get("LAT")),
                lon=_safe_float(row.get("LON")),
                elev=_safe_float(row.get("ELEV(M)")),
                begin_year=begin,
                end_year=end,
            )
        )
    return stations


def bbox_to_wgs84(bbox: dict) -> dict:
    epsg = int(bbox.get("epsg", 4326))
    if epsg == 4326:
        return {key: float(bbox[key]) for key in ("min_lat", "max_lat", "min_lon", "max_lon")}
    try:
        transformer = Transformer.from_crs(CRS.from_epsg(epsg), CRS.from_epsg(4326), always_xy=True)
    except Exception as exc:
        raise ConfigError(f"Unsupported bbox CRS EPSG:{epsg}") from exc
    # Projected boxes use min/max_lon as x and min/max_lat as y.
    corners = [
        transformer.transform(bbox[x_key], bbox[y_key])
        for x_key in ("min_lon", "max_lon")
        for y_key in ("min_lat", "max_lat")
    ]
    lons = [lon for lon, _lat in corners]
    lats = [lat for _lon, lat in corners]
    return {"min_lat": min(lats), "max_lat": max(lats), "min_lon": min(lons), "max_lon": max(lons)}


def _within_bbox(station: StationRecord, bbox: dict) -> bool:
    if station.lat is None or station.lon is None:
        return False
    return (
        bbox["min_lat"] <= station.lat <= bbox["max_lat"]
        and bbox["min_lon"] <= station.lon <= bbox["max_lon"]
    )


def filter_stations(
    stations: list[StationRecord],
    *,
    bbox: dict,
    start_year: int,
    end_year: int,
    pad_years: int = 1,
) -> list[StationRecord]:
    """Keep stations inside ``bbox`` that cover the padded year range."""
    start_year, end_year = validate_year_range(start_year, end_year)
    wgs84_bbox = bbox_to_wgs84(bbox)
    return [
        station
        for station in stations
        if _within_bbox(station, wgs84_bbox)
        and station.begin_year <= start_year - pad_years
        and station.end_year >= end_year + pad_years
    ]


def load_selected_stations(data_dir: Path) -> list[StationRecord]:
    path = data_dir / CATALOG_OUT_PATH
    if not path.exists():
        return []
    payload = read_json(path)
    return [StationRecord(**row) for row in payload.get("stations", [])]


def run_catalog(
    config: RunConfig,
    data_dir: Path,
    run_id: str,
    http_client: HttpClient | None = None,
) -> dict:
    timeout = TimeoutConfig(connect=20, read=float(config.sources.get("timeout_seconds", 120)))
    owns_client = http_client is None
    client = http_client or HttpClient()
    try:
        text = client.get_text(config.sources["catalog_url"], timeout=timeout)
    finally:
        if owns_client:
            client.close()

    raw_path = data_dir / CATALOG_RAW_PATH
    ensure_dir(raw_path.parent)
    raw_path.write_text(text, encoding="utf-8")

    stations = parse_catalog(text)
    selected = filter_stations(
        stations,
        bbox=config.bbox,
        start_year=config.start_year,
        end_year=config.end_year,
        pad_years=config.pad_years,
    )
    payload = {
        "run_id": run_id,
        "catalog_rows": len(stations),
        "selected_count": len(selected),
        "stations": [station.to_dict() for station in selected],
    }
    write_json(data_dir / CATALOG_OUT_PATH, payload)
    return payload
