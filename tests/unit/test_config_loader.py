from pathlib import Path

import pytest

from isdhourly.common.config_loader import load_run_config
from isdhourly.common.errors import ConfigError

BASE_YAML = """years:
  start: 2010
  end: 2010
  pad_years: 1
bbox:
  min_lat: 1
  max_lat: 2
  min_lon: 3
  max_lon: 4
sources:
  catalog_url: "https://example.test/isd-history.csv"
  archive_base_url: "https://example.test/noaa"
decode:
  workers: 1
output:
  stations_filename: stations.csv
  file_report_filename: file_report.csv
"""


def test_load_run_config_from_repo_config_dir():
    config = load_run_config(Path("config"))
    assert config.start_year <= config.end_year
    assert config.sources["archive_base_url"].startswith("https://")


def test_fetch_years_are_padded(tmp_path: Path):
    (tmp_path / "isd.yml").write_text(BASE_YAML, encoding="utf-8")

    config = load_run_config(tmp_path)

    assert config.fetch_years == [2009, 2010, 2011]
    assert config.workers == 1


def test_load_run_config_applies_overlay_values(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "isd.yml").write_text(BASE_YAML, encoding="utf-8")
    (overlay / "isd.yml").write_text("years:\n  end: 2012\ndecode:\n  workers: 8\n", encoding="utf-8")

    config = load_run_config(base, overlay_config_dir=overlay)

    assert config.start_year == 2010
    assert config.end_year == 2012
    assert config.workers == 8
    assert config.bbox["max_lon"] == 4


def test_load_run_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_run_config(tmp_path)


def test_load_run_config_overlay_can_break_validation(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "isd.yml").write_text(BASE_YAML, encoding="utf-8")
    (overlay / "isd.yml").write_text("years:\n  start: 2015\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_run_config(base, overlay_config_dir=overlay)
