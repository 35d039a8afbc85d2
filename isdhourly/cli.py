"""CLI entrypoint for the ISD hourly surface observation pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from isdhourly.common.config_loader import RunConfig, load_run_config
from isdhourly.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from isdhourly.common.errors import ConfigError, ContractError, PipelineError
from isdhourly.common.ids import generate_run_id
from isdhourly.common.logging import build_logger, log_event
from isdhourly.discovery.station_catalog import run_catalog
from isdhourly.harvest.archive_fetch import run_archive_fetch
from isdhourly.harvest.extract import run_extract
from isdhourly.pipeline.decode_stage import run_decode
from isdhourly.pipeline.reports import write_run_summary

HARD_FAIL_CODES = {ConfigError.error_code, ContractError.error_code}


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def execute_stage(stage: str, config: RunConfig, data_dir: Path, run_id: str, logger: logging.Logger):
    if stage == "catalog":
        return run_catalog(config, data_dir, run_id)
    if stage == "fetch":
        return run_archive_fetch(config, data_dir, run_id, logger=logger)
    if stage == "extract":
        return run_extract(data_dir, run_id, logger=logger)
    if stage == "decode":
        return run_decode(config, data_dir, run_id, logger=logger)
    raise ValueError(f"Unknown stage: {stage}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    try:
        config = load_run_config(config_dir, overlay_config_dir=overlay_config_dir)
    except ConfigError as exc:
        log_event(logger, str(exc), level=logging.ERROR, run_id=run_id, event="CONFIG_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    stages = STAGES if args.command == "all" else (args.command,)

    stage_failures: list[str] = []

    for stage in stages:
        log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
        try:
            execute_stage(stage, config, data_dir, run_id, logger)
        except PipelineError as exc:
            stage_failures.append(stage)
            log_event(
                logger,
                f"stage failed: {exc}",
                level=logging.ERROR,
                run_id=run_id,
                stage=stage,
                event="STAGE_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            if exc.error_code in HARD_FAIL_CODES or args.strict:
                return EXIT_HARD_FAIL
            continue
        except Exception:
            stage_failures.append(stage)
            logger.exception(
                "unexpected stage failure",
                extra={"run_id": run_id, "stage": stage, "event": "STAGE_FAIL", "status": "error", "error_code": "UNEXPECTED_ERROR"},
            )
            if args.strict:
                return EXIT_HARD_FAIL
            continue
        log_event(logger, "stage end", run_id=run_id, stage=stage, event="STAGE_END", status="ok")

    write_run_summary(
        data_dir,
        run_id,
        file_report_filename=config.output["file_report_filename"],
        stage_failures=stage_failures,
    )
    if stage_failures:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
