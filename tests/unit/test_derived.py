import pytest

from isdhourly.common.models import Precipitation, SkyCover
from isdhourly.decode.derived import (
    PRECIP_CODES,
    derive,
    precipitation_code,
    precipitation_rate,
    relative_humidity,
)
from isdhourly.decode.fixed_width import decode_mandatory


def test_relative_humidity_undefined_when_either_input_missing():
    assert relative_humidity(None, 5.0) is None
    assert relative_humidity(288.2, None) is None


def test_relative_humidity_saturated_when_dew_point_equals_temperature():
    assert relative_humidity(288.2, 15.0) == 100.0


def test_relative_humidity_magnus_value():
    assert relative_humidity(288.2, -1.1) == 33.1


@pytest.mark.parametrize("temp_k,dew_c", [(300.2, 27.0), (273.2, -10.0), (253.2, -35.5), (310.2, 0.0)])
def test_relative_humidity_in_range_when_dew_point_below_temperature(temp_k, dew_c):
    assert 0 <= relative_humidity(temp_k, dew_c) <= 100


def test_precipitation_rate_from_first_group():
    groups = [SkyCover(coverage_code=4), Precipitation(period_hours=6, depth_mm=2.5), Precipitation(period_hours=1, depth_mm=9.0)]

    assert precipitation_rate(groups) == 0.4


def test_precipitation_rate_undefined_without_groups():
    assert precipitation_rate([SkyCover(coverage_code=1)]) is None
    assert precipitation_rate([]) is None


@pytest.mark.parametrize(
    "group",
    [
        Precipitation(period_hours=99, depth_mm=1.0),
        Precipitation(period_hours=3, depth_mm=999.9),
        Precipitation(period_hours=0, depth_mm=1.0),
    ],
)
def test_precipitation_rate_undefined_for_missing_markers(group):
    assert precipitation_rate([group]) is None


@pytest.mark.parametrize(
    "rate,temp_k,expected",
    [
        (None, 280.0, None),
        (None, 260.0, None),
        (0.0, 280.0, None),
        (0.4, 280.0, 1),
        (2.4, 280.0, 1),
        (2.5, 280.0, 2),
        (7.5, 280.0, 2),
        (7.6, 280.0, 3),
        (25.0, 280.0, 3),
        (0.4, 268.0, 19),
        (2.5, 268.0, 20),
        (7.6, 268.0, 21),
        (0.4, 273.2, 1),
        (0.4, None, 1),
    ],
)
def test_precipitation_code(rate, temp_k, expected):
    assert precipitation_code(rate, temp_k) == expected


def test_precipitation_codes_are_within_known_set():
    for rate in (0.1, 1.0, 3.0, 8.0):
        for temp_k in (250.0, 290.0, None):
            assert precipitation_code(rate, temp_k) in PRECIP_CODES


def test_derive_combines_line_inputs(isd_line):
    mandatory = decode_mandatory(isd_line(temp="-0052", dew="-0080"))

    derived = derive(mandatory, [Precipitation(period_hours=6, depth_mm=2.5)])

    assert derived.precip_rate == 0.4
    assert derived.precip_code == 19
    assert derived.relative_humidity is not None
