"""Line-level pipeline: mandatory decode, group scan, derivation."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable

from isdhourly.common.errors import MalformedRecord
from isdhourly.common.models import Observation
from isdhourly.decode.additional import scan_additional, section_flags
from isdhourly.decode.derived import derive
from isdhourly.decode.fixed_width import decode_mandatory


@dataclass
class DecodeResult:
    source: str
    observations: list[Observation] = field(default_factory=list)
    failures: list[MalformedRecord] = field(default_factory=list)
    line_count: int = 0
    additional_lines: int = 0
    sky_cover_lines: int = 0
    precipitation_lines: int = 0

    def _percent(self, count: int) -> float:
        return 0.0 if self.line_count == 0 else round((count / self.line_count) * 100, 2)

    def stats(self) -> dict:
        return {
            "lines": self.line_count,
            "decoded": len(self.observations),
            "malformed": len(self.failures),
            "additional_percent": self._percent(self.additional_lines),
            "sky_cover_percent": self._percent(self.sky_cover_lines),
            "precipitation_percent": self._percent(self.precipitation_lines),
        }


def decode_observation(line: str) -> Observation:
    mandatory = decode_mandatory(line)
    groups = scan_additional(line)
    return Observation(mandatory=mandatory, derived=derive(mandatory, groups))


def _decode_numbered(item: tuple[int, str]) -> Observation | MalformedRecord:
    _line_number, line = item
    try:
        return decode_observation(line)
    except MalformedRecord as exc:
        return exc


def decode_lines(lines: Iterable[str], *, source: str, workers: int = 1) -> DecodeResult:
    """Decode one station file. Malformed lines are collected, not raised.

    Output keeps file order regardless of ``workers``.
    """
    numbered = [(idx, line.rstrip("\r\n")) for idx, line in enumerate(lines, start=1)]
    numbered = [(idx, line) for idx, line in numbered if line.strip()]
    result = DecodeResult(source=source, line_count=len(numbered))

    for _idx, line in numbered:
        flags = section_flags(line)
        result.additional_lines += flags.has_additional
        result.sky_cover_lines += flags.has_sky_cover
        result.precipitation_lines += flags.has_precipitation

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(_decode_numbered, numbered))
    else:
        outcomes = [_decode_numbered(item) for item in numbered]

    for (line_number, _line), outcome in zip(numbered, outcomes):
        if isinstance(outcome, MalformedRecord):
            outcome.source = source
            outcome.line_number = line_number
            result.failures.append(outcome)
        else:
            result.observations.append(outcome)
    return result
