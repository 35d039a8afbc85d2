import json
from pathlib import Path

import pytest

from isdhourly.cli import parse_args, run_command
from isdhourly.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS


@pytest.mark.integration
def test_cli_decode_generates_expected_artifacts(tmp_path: Path, isd_line):
    data_dir = tmp_path / "data"
    extracted = data_dir / "raw" / "extracted"
    extracted.mkdir(parents=True)
    (extracted / "722950-23174-2010").write_text(isd_line() + "\n", encoding="ascii")

    args = parse_args(["decode", "--config-dir", "config", "--data-dir", str(data_dir), "--run-id", "run-test"])
    exit_code = run_command(args)

    assert exit_code == EXIT_SUCCESS
    assert (data_dir / "out" / "observations" / "722950-23174-2010.csv").exists()
    assert (data_dir / "out" / "stations.csv").exists()
    assert (data_dir / "run_meta" / "run-test.log.jsonl").exists()
    summary = json.loads((data_dir / "out" / "reports" / "run_summary.json").read_text(encoding="utf-8"))
    assert summary["status"] == "success"


@pytest.mark.integration
def test_cli_decode_reports_partial_on_stage_failure(tmp_path: Path):
    data_dir = tmp_path / "data"
    extracted = data_dir / "raw" / "extracted"
    extracted.mkdir(parents=True)
    (extracted / "722950-23174-2010").write_text("garbage\n", encoding="ascii")

    args = parse_args(["decode", "--config-dir", "config", "--data-dir", str(data_dir), "--run-id", "run-bad"])
    assert run_command(args) == EXIT_PARTIAL

    strict = parse_args(["decode", "--config-dir", "config", "--data-dir", str(data_dir), "--run-id", "run-bad", "--strict"])
    assert run_command(strict) == EXIT_HARD_FAIL


@pytest.mark.integration
def test_cli_missing_config_is_hard_fail(tmp_path: Path):
    args = parse_args(["decode", "--config-dir", str(tmp_path / "nope"), "--data-dir", str(tmp_path / "data")])
    assert run_command(args) == EXIT_HARD_FAIL
