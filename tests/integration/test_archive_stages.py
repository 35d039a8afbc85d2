from __future__ import annotations

import csv
import gzip
from pathlib import Path

import pytest
import requests

from isdhourly.common.config_loader import load_run_config
from isdhourly.common.errors import StageError
from isdhourly.common.fs import write_json
from isdhourly.common.http import ArchiveNotFound, HttpClient, HttpRequestError, RetryConfig
from isdhourly.discovery.station_catalog import run_catalog
from isdhourly.harvest.archive_fetch import run_archive_fetch
from isdhourly.harvest.extract import run_extract

CATALOG_TEXT = """"USAF","WBAN","STATION NAME","CTRY","STATE","ICAO","LAT","LON","ELEV(M)","BEGIN","END"
"727930","24233","SEATTLE-TACOMA INTERNATIONAL A","US","WA","KSEA","+47.444","-122.314","+0112.8","19480101","20251231"
"727935","24234","BOEING FIELD/KING COUNTY INTL","US","WA","KBFI","+47.530","-122.301","+0005.5","19480101","20251231"
"""


class FakeClient:
    def __init__(self, catalog_text: str = CATALOG_TEXT, missing=(), failing=()):
        self.catalog_text = catalog_text
        self.missing = set(missing)
        self.failing = set(failing)
        self.downloaded: list[str] = []

    def get_text(self, url, *, timeout=None):
        return self.catalog_text

    def download(self, url, dest: Path, *, timeout=None):
        name = url.rsplit("/", 1)[-1]
        if name in self.missing:
            raise ArchiveNotFound(f"Not found: {url}")
        if name in self.failing:
            raise HttpRequestError("HTTP status: 403")
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(gzip.compress(b"line\n"))
        self.downloaded.append(name)
        return dest

    def close(self):
        pass


def _station_rows():
    return [
        {"usaf": 727930, "wban": 24233, "name": "SEA", "lat": 47.444, "lon": -122.314, "elev": 112.8, "begin_year": 1948, "end_year": 2025},
    ]


@pytest.mark.integration
def test_catalog_stage_selects_stations_in_repo_bbox(tmp_path: Path):
    config = load_run_config(Path("config"))

    payload = run_catalog(config, tmp_path, "run-1", http_client=FakeClient())

    assert payload["catalog_rows"] == 2
    assert payload["selected_count"] == 2
    assert (tmp_path / "raw" / "catalog" / "isd-history.csv").exists()
    assert (tmp_path / "intermediate" / "station_catalog.json").exists()


@pytest.mark.integration
def test_fetch_marks_missing_and_failed_archives(tmp_path: Path):
    config = load_run_config(Path("config"))
    write_json(tmp_path / "intermediate" / "station_catalog.json", {"stations": _station_rows()})
    client = FakeClient(missing={"727930-24233-2009.gz"}, failing={"727930-24233-2011.gz"})

    result = run_archive_fetch(config, tmp_path, "run-2", http_client=client)

    assert result["counts"] == {"available": 1, "missing": 1, "failed": 1}
    with (tmp_path / "out" / "reports" / "file_report.csv").open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [(row["YEAR"], row["STATUS"]) for row in rows] == [("2009", "missing"), ("2010", "available"), ("2011", "failed")]
    assert rows[0]["FILE"] == "727930-24233-2009.gz"


@pytest.mark.integration
def test_fetch_raises_when_every_transfer_fails(tmp_path: Path):
    config = load_run_config(Path("config"))
    write_json(tmp_path / "intermediate" / "station_catalog.json", {"stations": _station_rows()})
    names = {f"727930-24233-{year}.gz" for year in (2009, 2010, 2011)}

    with pytest.raises(StageError):
        run_archive_fetch(config, tmp_path, "run-3", http_client=FakeClient(failing=names))


class StreamResponse:
    def __init__(self, body: bytes, interrupted: bool = False):
        self.status_code = 200
        self.body = body
        self.interrupted = interrupted

    def iter_content(self, chunk_size: int):
        yield self.body[:4]
        if self.interrupted:
            raise requests.exceptions.ChunkedEncodingError("Connection broken: IncompleteRead")
        yield self.body[4:]

    def close(self):
        pass


@pytest.mark.integration
def test_fetch_continues_after_interrupted_stream(monkeypatch, tmp_path: Path):
    config = load_run_config(Path("config"))
    write_json(tmp_path / "intermediate" / "station_catalog.json", {"stations": _station_rows()})
    client = HttpClient(retry=RetryConfig(max_attempts=1), rate_per_sec=1000.0)
    body = gzip.compress(b"line\n")

    def fake_request(**kwargs):
        return StreamResponse(body, interrupted=kwargs["url"].endswith("-2009.gz"))

    monkeypatch.setattr(client.session, "request", fake_request)

    result = run_archive_fetch(config, tmp_path, "run-5", http_client=client)

    assert result["counts"] == {"available": 2, "missing": 0, "failed": 1}
    archives = tmp_path / "raw" / "archives"
    assert not (archives / "2009" / "727930-24233-2009.gz").exists()
    assert list((archives / "2009").glob("*.part")) == []
    assert (archives / "2011" / "727930-24233-2011.gz").read_bytes() == body


@pytest.mark.integration
def test_extract_decompresses_and_skips_corrupt_archives(tmp_path: Path):
    archive_dir = tmp_path / "raw" / "archives" / "2010"
    archive_dir.mkdir(parents=True)
    (archive_dir / "727930-24233-2010.gz").write_bytes(gzip.compress(b"first\nsecond\n"))
    (archive_dir / "727935-24234-2010.gz").write_bytes(b"not gzip at all")

    result = run_extract(tmp_path, "run-4")

    assert result["extracted"] == ["727930-24233-2010"]
    assert result["corrupt"] == ["727935-24234-2010.gz"]
    assert (tmp_path / "raw" / "extracted" / "727930-24233-2010").read_text() == "first\nsecond\n"
    assert not (tmp_path / "raw" / "extracted" / "727935-24234-2010").exists()
