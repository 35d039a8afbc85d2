"""Scanner for tagged groups in the ISD additional data section.

The tail after the mandatory section holds optional groups, each introduced by a
3-character identifier. Only sky cover (GF1) and liquid precipitation (AA1) are
extracted. The scan walks a cursor through the section: at every known group code
the cursor jumps over that group's full ISD width, whether or not the group is
one we extract, so text inside another group is never read as a new tag. Remarks (REM), element quality (EQD) and
original-value (QNN) sections are free-form and end the scan.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from isdhourly.common.models import AdditionalGroup, Precipitation, SkyCover
from isdhourly.decode.fixed_width import MANDATORY_WIDTH

ADDITIONAL_MARKER = "ADD"
TERMINAL_MARKERS = ("REM", "EQD", "QNN")

SKY_COVER_RE = re.compile(r"GF1(\d{2})")
PRECIPITATION_RE = re.compile(r"AA1(\d{2})(\d{4})")

# Data width following the 3-character tag for every group in the ISD format
# document. A group code not listed here cannot be stepped over by width.
GROUP_WIDTHS = {
    "AA1": 8, "AA2": 8, "AA3": 8, "AA4": 8, "AB1": 7, "AC1": 3, "AD1": 19, "AE1": 12,
    "AG1": 4, "AH1": 15, "AH2": 15, "AH3": 15, "AH4": 15, "AH5": 15, "AH6": 15,
    "AI1": 15, "AI2": 15, "AI3": 15, "AI4": 15, "AI5": 15, "AI6": 15, "AJ1": 14,
    "AK1": 12, "AL1": 7, "AL2": 7, "AL3": 7, "AL4": 7, "AM1": 18, "AN1": 9, "AO1": 8,
    "AO2": 8, "AO3": 8, "AO4": 8, "AP1": 6, "AP2": 6, "AP3": 6, "AP4": 6, "AT1": 9,
    "AT2": 9, "AT3": 9, "AT4": 9, "AT5": 9, "AT6": 9, "AT7": 9, "AT8": 9, "AU1": 8,
    "AU2": 8, "AU3": 8, "AU4": 8, "AU5": 8, "AU6": 8, "AU7": 8, "AU8": 8, "AU9": 8,
    "AW1": 3, "AW2": 3, "AW3": 3, "AW4": 3, "AX1": 6, "AX2": 6, "AX3": 6, "AX4": 6,
    "AX5": 6, "AX6": 6, "AY1": 5, "AY2": 5, "AZ1": 5, "AZ2": 5,
    "BA1": 8,
    "CB1": 10, "CB2": 10, "CF1": 6, "CF2": 6, "CF3": 6, "CG1": 8, "CG2": 8, "CG3": 8,
    "CH1": 15, "CH2": 15, "CI1": 28, "CN1": 18, "CN2": 18, "CN3": 16, "CN4": 14,
    "CO1": 5, "CO2": 8, "CO3": 8, "CO4": 8, "CO5": 8, "CO6": 8, "CO7": 8, "CO8": 8,
    "CO9": 8, "CR1": 7, "CT1": 7, "CT2": 7, "CT3": 7, "CU1": 13, "CU2": 13, "CU3": 13,
    "CV1": 26, "CV2": 26, "CV3": 26, "CW1": 14, "CX1": 26, "CX2": 26, "CX3": 26,
    "ED1": 8,
    "GA1": 13, "GA2": 13, "GA3": 13, "GA4": 13, "GA5": 13, "GA6": 13, "GD1": 12,
    "GD2": 12, "GD3": 12, "GD4": 12, "GD5": 12, "GD6": 12, "GE1": 19, "GF1": 23,
    "GG1": 15, "GG2": 15, "GG3": 15, "GG4": 15, "GG5": 15, "GG6": 15, "GH1": 28,
    "GJ1": 5, "GK1": 4, "GL1": 6, "GM1": 30, "GN1": 31, "GO1": 19, "GP1": 31, "GQ1": 14,
    "GR1": 14,
    "HL1": 4,
    "IA1": 3, "IA2": 9, "IB1": 27, "IB2": 13, "IC1": 25,
    "KA1": 10, "KA2": 10, "KA3": 10, "KA4": 10, "KB1": 10, "KB2": 10, "KB3": 10,
    "KB4": 10, "KC1": 14, "KC2": 14, "KD1": 9, "KD2": 9, "KE1": 12, "KF1": 6, "KG1": 11,
    "KG2": 11,
    "MA1": 12, "MD1": 11, "ME1": 6, "MF1": 12, "MG1": 12, "MH1": 12, "MK1": 24,
    "MV1": 3, "MV2": 3, "MV3": 3, "MV4": 3, "MV5": 3, "MV6": 3, "MV7": 3, "MW1": 3,
    "MW2": 3, "MW3": 3, "MW4": 3, "MW5": 3, "MW6": 3, "MW7": 3,
    "OA1": 8, "OA2": 8, "OA3": 8, "OB1": 29, "OB2": 29, "OC1": 5, "OD1": 11, "OD2": 11,
    "OD3": 11, "OE1": 16, "OE2": 16, "OE3": 16,
    "RH1": 9, "RH2": 9, "RH3": 9,
    "SA1": 5, "ST1": 17,
    "UA1": 10, "UG1": 9, "UG2": 9,
    "WA1": 6, "WD1": 22, "WG1": 11, "WJ1": 19,
}


@dataclass(frozen=True)
class SectionFlags:
    has_additional: bool
    has_sky_cover: bool
    has_precipitation: bool


def additional_section(line: str) -> str:
    """Return the part of ``line`` that may hold GF1/AA1 groups."""
    tail = line[MANDATORY_WIDTH:].rstrip("\r\n")
    if tail.startswith(ADDITIONAL_MARKER):
        tail = tail[len(ADDITIONAL_MARKER) :]
    end = len(tail)
    for marker in TERMINAL_MARKERS:
        index = tail.find(marker)
        if index != -1:
            end = min(end, index)
    return tail[:end]


def _parse_group(section: str, pos: int) -> AdditionalGroup | None:
    tag = section[pos : pos + 3]
    if tag == "GF1":
        match = SKY_COVER_RE.match(section, pos)
        if match:
            return SkyCover(coverage_code=int(match.group(1)))
    elif tag == "AA1":
        match = PRECIPITATION_RE.match(section, pos)
        if match:
            return Precipitation(
                period_hours=int(match.group(1)),
                depth_mm=int(match.group(2)) / 10,
            )
    return None


def scan_additional(line: str) -> list[AdditionalGroup]:
    """Extract GF1 and AA1 groups from a raw line in order of appearance.

    Absence of either tag is the usual case and yields an empty list.
    """
    section = additional_section(line)
    groups: list[AdditionalGroup] = []
    pos = 0
    while pos <= len(section) - 3:
        width = GROUP_WIDTHS.get(section[pos : pos + 3])
        if width is None:
            # Unknown code: resync one character at a time.
            pos += 1
            continue
        group = _parse_group(section, pos)
        if group is not None:
            groups.append(group)
        pos += 3 + width
    return groups


def sky_cover_groups(groups: list[AdditionalGroup]) -> list[SkyCover]:
    return [group for group in groups if isinstance(group, SkyCover)]


def precipitation_groups(groups: list[AdditionalGroup]) -> list[Precipitation]:
    return [group for group in groups if isinstance(group, Precipitation)]


def section_flags(line: str) -> SectionFlags:
    return SectionFlags(
        has_additional=ADDITIONAL_MARKER in line[MANDATORY_WIDTH:],
        has_sky_cover="GF1" in line,
        has_precipitation="AA1" in line,
    )
