"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from isdhourly.common.errors import ConfigError
from isdhourly.common.fs import read_yaml
from isdhourly.common.schema import validate_run_config

RUN_CONFIG_FILENAME = "isd.yml"


@dataclass(frozen=True)
class RunConfig:
    raw: dict

    @property
    def start_year(self) -> int:
        return int(self.raw["years"]["start"])

    @property
    def end_year(self) -> int:
        return int(self.raw["years"]["end"])

    @property
    def pad_years(self) -> int:
        return int(self.raw["years"].get("pad_years", 1))

    @property
    def fetch_years(self) -> list[int]:
        return list(range(self.start_year - self.pad_years, self.end_year + self.pad_years + 1))

    @property
    def bbox(self) -> dict:
        return self.raw["bbox"]

    @property
    def sources(self) -> dict:
        return self.raw["sources"]

    @property
    def workers(self) -> int:
        return int(self.raw["decode"]["workers"])

    @property
    def output(self) -> dict:
        return self.raw["output"]


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path) or {}
    return _deep_merge(base, overlay)


def load_run_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> RunConfig:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / RUN_CONFIG_FILENAME
    cfg = _load_yaml_with_overlay(config_dir / RUN_CONFIG_FILENAME, overlay_path)
    return RunConfig(raw=validate_run_config(cfg, allow_unknown=allow_unknown))
