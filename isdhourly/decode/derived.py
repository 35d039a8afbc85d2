"""Secondary quantities computed from one decoded line."""

from __future__ import annotations

import math
from typing import Sequence

from isdhourly.common.models import AdditionalGroup, DerivedFields, MandatoryFields
from isdhourly.decode.additional import precipitation_groups
from isdhourly.decode.fixed_width import KELVIN_OFFSET

MAGNUS_A = 17.625
MAGNUS_B = 243.04

MISSING_PERIOD_HOURS = 99
MISSING_DEPTH_MM = 999.9

LIGHT_UPPER_MM_HR = 2.5
MODERATE_UPPER_MM_HR = 7.6
SNOW_CODE_OFFSET = 18

# Precipitation category codes
#
# Category        Temperature   Rate (mm/hr)    Code
# -------------   -----------   -------------   ----
# Light Rain      >0 deg C      R < 2.5         1
# Moderate Rain   >0 deg C      2.5 <= R < 7.6  2
# Heavy Rain      >0 deg C      R >= 7.6        3
# Light Snow      <=0 deg C     R < 2.5         19
# Moderate Snow   <=0 deg C     2.5 <= R < 7.6  20
# Heavy Snow      <=0 deg C     R >= 7.6        21
PRECIP_CODES = (1, 2, 3, 19, 20, 21)


def relative_humidity(temp_k: float | None, dew_point_c: float | None) -> float | None:
    """August-Roche-Magnus relative humidity in percent, rounded to 0.1."""
    if temp_k is None or dew_point_c is None:
        return None
    temp_c = temp_k - KELVIN_OFFSET
    saturation_dew = math.exp((MAGNUS_A * dew_point_c) / (MAGNUS_B + dew_point_c))
    saturation_air = math.exp((MAGNUS_A * temp_c) / (MAGNUS_B + temp_c))
    return round(100 * saturation_dew / saturation_air, 1)


def precipitation_rate(groups: Sequence[AdditionalGroup]) -> float | None:
    """Rate in mm/hr from the first AA1 group on the line.

    A period of 99 or a depth of 999.9 mm is the ISD missing marker and a
    zero-hour period has no rate; all three leave the rate undefined.
    """
    precipitation = precipitation_groups(list(groups))
    if not precipitation:
        return None
    group = precipitation[0]
    if group.period_hours in (0, MISSING_PERIOD_HOURS) or group.depth_mm == MISSING_DEPTH_MM:
        return None
    return round(group.depth_mm / group.period_hours, 1)


def precipitation_code(rate: float | None, temp_k: float | None) -> int | None:
    """Intensity/phase code for a rate; ``None`` means no precipitation data."""
    if rate is None:
        return None
    if 0 < rate < LIGHT_UPPER_MM_HR:
        code = 1
    elif LIGHT_UPPER_MM_HR <= rate < MODERATE_UPPER_MM_HR:
        code = 2
    elif rate >= MODERATE_UPPER_MM_HR:
        code = 3
    else:
        return None
    if temp_k is not None and temp_k < KELVIN_OFFSET:
        code += SNOW_CODE_OFFSET
    return code


def derive(mandatory: MandatoryFields, groups: Sequence[AdditionalGroup]) -> DerivedFields:
    rate = precipitation_rate(groups)
    return DerivedFields(
        relative_humidity=relative_humidity(mandatory.temp_k, mandatory.dew_point_c),
        precip_rate=rate,
        precip_code=precipitation_code(rate, mandatory.temp_k),
    )
