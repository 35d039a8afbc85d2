from __future__ import annotations

import pytest

MANDATORY_DEFAULTS = {
    "usaf": "722950",
    "wban": "23174",
    "date": "20100101",
    "time": "0053",
    "lat": "+33938",
    "lon": "-118389",
    "elev": "+0030",
    "call": "KLAX ",
    "wind_dir": "250",
    "wind_spd": "0036",
    "ceil": "22000",
    "temp": "+0150",
    "dew": "-0011",
    "pres": "10149",
}


def build_isd_line(tail: str = "", **overrides: str) -> str:
    values = {**MANDATORY_DEFAULTS, **overrides}
    line = (
        "0216"
        + values["usaf"]
        + values["wban"]
        + values["date"]
        + values["time"]
        + "4"
        + values["lat"]
        + values["lon"]
        + "FM-15"
        + values["elev"]
        + values["call"]
        + "V020"
        + values["wind_dir"]
        + "1N"
        + values["wind_spd"]
        + "1"
        + values["ceil"]
        + "19N"
        + "016093"
        + "199"
        + values["temp"]
        + "1"
        + values["dew"]
        + "1"
        + values["pres"]
        + "1"
    )
    assert len(line) == 105
    return line + tail


@pytest.fixture
def isd_line():
    return build_isd_line
