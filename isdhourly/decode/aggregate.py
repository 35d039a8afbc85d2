"""Per-station summary built from decoded observations."""

from __future__ import annotations

from typing import Sequence

from isdhourly.common.errors import EmptySequence
from isdhourly.common.models import Observation, StationSummary


def summarize_station(observations: Sequence[Observation], *, source: str | None = None) -> StationSummary:
    """Copy identity and location from the first observation in file order."""
    if not observations:
        raise EmptySequence(f"No observations to summarise for {source or 'station'}", source=source)
    first = observations[0].mandatory
    return StationSummary(
        usaf=first.usaf,
        wban=first.wban,
        year=first.year,
        lat=first.lat,
        lon=first.lon,
        elev=first.elev,
    )
