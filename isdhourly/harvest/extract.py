"""Decompression of downloaded yearly archives."""

from __future__ import annotations

import gzip
import logging
import shutil
import zlib
from pathlib import Path

from isdhourly.common.fs import ensure_dir
from isdhourly.common.logging import get_logger, log_event
from isdhourly.harvest.archive_fetch import ARCHIVE_DIR

EXTRACTED_DIR = "raw/extracted"


def extract_archive(src: Path, dest_dir: Path) -> Path:
    ensure_dir(dest_dir)
    dest = dest_dir / src.name.removesuffix(".gz")
    partial = dest.with_name(dest.name + ".part")
    try:
        with gzip.open(src, "rb") as fin, partial.open("wb") as fout:
            shutil.copyfileobj(fin, fout)
        partial.replace(dest)
    finally:
        if partial.exists():
            partial.unlink()
    return dest


def run_extract(data_dir: Path, run_id: str, logger: logging.Logger | None = None) -> dict:
    logger = logger or get_logger(run_id)
    archives = sorted((data_dir / ARCHIVE_DIR).glob("*/*.gz"))
    dest_dir = data_dir / EXTRACTED_DIR

    extracted: list[str] = []
    corrupt: list[str] = []
    for archive in archives:
        try:
            extracted.append(extract_archive(archive, dest_dir).name)
        except (OSError, EOFError, zlib.error) as exc:
            corrupt.append(archive.name)
            log_event(
                logger,
                f"could not decompress {archive.name}: {exc}",
                level=logging.WARNING,
                run_id=run_id,
                stage="extract",
                station=archive.name,
                event="EXTRACT_FAIL",
                status="error",
                error_code="CORRUPT_ARCHIVE",
            )

    return {"run_id": run_id, "extracted": extracted, "corrupt": corrupt}
