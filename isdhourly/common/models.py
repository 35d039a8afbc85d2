"""Data models used across the pipeline.

Missing measurements are ``None`` inside the pipeline. The ISD-style sentinels
(999 / 999.9 / 9999) only appear once a record is serialised with ``to_row``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Union

from isdhourly.common.constants import (
    MISSING_VALUE,
    MISSING_WIND_DIR,
    NO_PRECIP_CODE,
    OBSERVATION_HEADERS,
    STATION_HEADERS,
)


@dataclass(frozen=True)
class StationRecord:
    usaf: int
    wban: int
    name: str
    lat: float | None
    lon: float | None
    elev: float | None
    begin_year: int
    end_year: int

    def archive_name(self, year: int) -> str:
        return f"{self.usaf:06d}-{self.wban:05d}-{year}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ArchiveFile:
    station: StationRecord
    year: int
    file: str
    status: str

    def to_row(self) -> dict[str, Any]:
        return {
            "USAFID": self.station.usaf,
            "WBAN": self.station.wban,
            "NAME": self.station.name,
            "YEAR": self.year,
            "FILE": self.file,
            "STATUS": self.status,
        }


@dataclass(frozen=True)
class MandatoryFields:
    usaf: int
    wban: int
    year: int
    month: int
    day: int
    hour: int
    minute: int
    lat: float
    lon: float
    elev: int
    wind_dir: int | None
    wind_speed: float | None
    ceiling_height: int | None
    temp_k: float | None
    dew_point_c: float | None
    pressure_hpa: float | None


@dataclass(frozen=True)
class SkyCover:
    coverage_code: int


@dataclass(frozen=True)
class Precipitation:
    period_hours: int
    depth_mm: float


AdditionalGroup = Union[SkyCover, Precipitation]


@dataclass(frozen=True)
class DerivedFields:
    relative_humidity: float | None
    precip_rate: float | None
    precip_code: int | None


def _or_sentinel(value, sentinel):
    return sentinel if value is None else value


@dataclass(frozen=True)
class Observation:
    mandatory: MandatoryFields
    derived: DerivedFields

    def to_row(self) -> dict[str, Any]:
        m = self.mandatory
        d = self.derived
        values = [
            m.usaf,
            m.wban,
            m.year,
            m.month,
            m.day,
            m.hour,
            m.minute,
            m.lat,
            m.lon,
            m.elev,
            _or_sentinel(m.wind_dir, MISSING_WIND_DIR),
            _or_sentinel(m.wind_speed, MISSING_VALUE),
            _or_sentinel(m.ceiling_height, MISSING_VALUE),
            _or_sentinel(m.temp_k, MISSING_VALUE),
            _or_sentinel(m.dew_point_c, MISSING_VALUE),
            _or_sentinel(m.pressure_hpa, MISSING_VALUE),
            d.precip_rate,
            d.relative_humidity,
            _or_sentinel(d.precip_code, NO_PRECIP_CODE),
        ]
        return dict(zip(OBSERVATION_HEADERS, values))


@dataclass(frozen=True)
class StationSummary:
    usaf: int
    wban: int
    year: int
    lat: float
    lon: float
    elev: int

    def to_row(self) -> dict[str, Any]:
        values = [self.usaf, self.wban, self.year, self.lat, self.lon, self.elev]
        return dict(zip(STATION_HEADERS, values))
