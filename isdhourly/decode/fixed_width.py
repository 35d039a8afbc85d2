"""Decoding of the fixed-width ISD mandatory data section.

Every ISD hourly record starts with 105 characters laid out by column width.
Only sixteen of the 34 columns are kept. Each kept value is checked against its
missing-value threshold before it is scaled; a value past the threshold becomes
``None`` and is only turned back into a sentinel when the observation is
written out.
"""

from __future__ import annotations

import re
from typing import Callable, Sequence

from isdhourly.common.errors import MalformedRecord
from isdhourly.common.models import MandatoryFields

INTEGER_RE = re.compile(r"[+-]?[0-9]+")

COLUMN_WIDTHS = (
    4, 6, 5, 4, 2, 2, 2, 2, 1, 6,
    7, 5, 5, 5, 4, 3, 1, 1, 4, 1,
    5, 1, 1, 1, 6, 1, 1, 1, 5, 1,
    5, 1, 5, 1,
)
MANDATORY_WIDTH = sum(COLUMN_WIDTHS)

# 1-based column position -> MandatoryFields attribute
RETAINED_COLUMNS = {
    2: "usaf",
    3: "wban",
    4: "year",
    5: "month",
    6: "day",
    7: "hour",
    8: "minute",
    10: "lat",
    11: "lon",
    13: "elev",
    16: "wind_dir",
    19: "wind_speed",
    21: "ceiling_height",
    29: "temp_k",
    31: "dew_point_c",
    33: "pressure_hpa",
}

FEET_PER_METER = 3.28084
KELVIN_OFFSET = 273.2


def split_fixed_width(line: str, widths: Sequence[int] = COLUMN_WIDTHS) -> list[str]:
    total = sum(widths)
    if len(line) < total:
        raise MalformedRecord(f"Line has {len(line)} characters, mandatory section needs {total}")
    columns = []
    offset = 0
    for width in widths:
        columns.append(line[offset : offset + width])
        offset += width
    return columns


def _to_int(raw: str, field: str) -> int:
    value = raw.strip()
    if not INTEGER_RE.fullmatch(value):
        raise MalformedRecord(f"Non-numeric value {raw!r} in column {field}")
    return int(value)


def _wind_dir(raw: int) -> int | None:
    return None if raw == 999 else raw


def _wind_speed(raw: int) -> float | None:
    return None if raw > 100 else raw / 10


def _ceiling_height(raw: int) -> int | None:
    # Meters scaled to hundreds of feet, kept as-is for compatibility with existing outputs.
    if raw == 99999:
        return None
    return int(round(raw * FEET_PER_METER / 100, 0))


def _temperature(raw: int) -> float | None:
    return None if raw > 900 else round(raw / 10 + KELVIN_OFFSET, 1)


def _dew_point(raw: int) -> float | None:
    # A real dew point above +10.0 C also lands here and reads as missing.
    return None if raw > 100 else raw / 10


def _pressure(raw: int) -> float | None:
    # Sea-level pressure is stored in tenths of hPa, so every real reading
    # (about 8700 to 10850) is above this threshold and reads as missing.
    return None if raw > 2000 else raw / 10


def _thousandths(raw: int) -> float:
    return raw / 1000


def _identity(raw: int) -> int:
    return raw


TRANSFORMS: dict[str, Callable[[int], object]] = {
    "lat": _thousandths,
    "lon": _thousandths,
    "wind_dir": _wind_dir,
    "wind_speed": _wind_speed,
    "ceiling_height": _ceiling_height,
    "temp_k": _temperature,
    "dew_point_c": _dew_point,
    "pressure_hpa": _pressure,
}


def decode_raw_values(line: str) -> dict[str, int]:
    """Return the retained columns as raw integers, before any sentinel or scaling."""
    columns = split_fixed_width(line)
    return {field: _to_int(columns[position - 1], field) for position, field in RETAINED_COLUMNS.items()}


def decode_mandatory(line: str) -> MandatoryFields:
    raw_values = decode_raw_values(line)
    values = {
        field: TRANSFORMS.get(field, _identity)(raw)
        for field, raw in raw_values.items()
    }
    return MandatoryFields(**values)
