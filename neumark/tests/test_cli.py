import json
import os

import pytest

from neumark import cli
from neumark.curve.constants import CAP, SATURATION_THRESHOLD, UINT256_MAX


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("NEUMARK_"):
            monkeypatch.delenv(key)


def run(capsys, *argv):
    exit_code = cli.main(list(argv))
    captured = capsys.readouterr()
    return exit_code, captured.out, captured.err


def test_cli_help_exits_zero():
    with pytest.raises(SystemExit) as exc:
        cli.main(["cumulative", "--help"])
    assert exc.value.code == 0


def test_cli_constants(capsys):
    code, out, _ = run(capsys, "constants")
    assert code == 0
    payload = json.loads(out)
    assert payload["cap"] == CAP
    assert payload["saturation_threshold"] == SATURATION_THRESHOLD
    assert payload["decay_step"] == 230_769_230_769_230_769_230_769_231


def test_cli_cumulative(capsys):
    code, out, _ = run(capsys, "cumulative", "1")
    assert code == 0
    assert json.loads(out) == {"contributed": 1, "issued": 6}


def test_cli_cumulative_trace(capsys):
    code, out, _ = run(capsys, "cumulative", "1", "--trace")
    assert code == 0
    payload = json.loads(out)
    assert payload["pairs"] == 1
    assert payload["saturated"] is False


def test_cli_whole_units_input(capsys):
    code, out, _ = run(capsys, "--whole", "cumulative", "1")
    assert code == 0
    assert json.loads(out)["issued"] == 6_499_999_985_916_666_686


def test_cli_whole_units_output(capsys, monkeypatch):
    monkeypatch.setenv("NEUMARK_OUTPUT_UNITS", "whole")
    code, out, _ = run(capsys, "--whole", "cumulative", "1")
    assert code == 0
    assert json.loads(out) == {"contributed": "1", "issued": "6.499999985916666686"}


def test_cli_inverse_rounds_up(capsys):
    code, out, _ = run(capsys, "inverse", "7", "--max", "100", "--trace")
    assert code == 0
    payload = json.loads(out)
    assert payload["contributed"] == 2
    assert payload["exact"] is False
    assert payload["steps"] > 0


def test_cli_inverse_default_bracket(capsys):
    code, out, _ = run(capsys, "inverse", str(CAP))
    assert code == 0
    assert json.loads(out)["contributed"] == SATURATION_THRESHOLD


def test_cli_incremental(capsys):
    code, out, _ = run(capsys, "incremental", "0", "3")
    assert code == 0
    assert json.loads(out)["issued"] == 19


def test_cli_incremental_inverse(capsys):
    code, out, _ = run(capsys, "incremental-inverse", "2", "6")
    assert code == 0
    assert json.loads(out)["contributed_delta"] == 1


@pytest.mark.parametrize("argv", [
    ("incremental-inverse", "2", "13"),
    ("incremental", str(UINT256_MAX), "1"),
    ("cumulative", "abc"),
    ("cumulative", "-5"),
    ("inverse", "13", "--max", "2"),
    ("--whole", "cumulative", "0.0000000000000000001"),
])
def test_cli_domain_errors_exit_two(capsys, argv):
    code, out, err = run(capsys, *argv)
    assert code == 2
    assert out == ""
    assert "rejected" in err


def test_cli_schedule_json(capsys):
    code, out, _ = run(capsys, "schedule", "--step", "1", "--count", "3")
    assert code == 0
    assert json.loads(out) == [
        {"contributed": 0, "issued": 0, "marginal": 0},
        {"contributed": 1, "issued": 6, "marginal": 6},
        {"contributed": 2, "issued": 12, "marginal": 6},
    ]


def test_cli_schedule_csv(capsys):
    code, out, _ = run(capsys, "schedule", "--start", "1", "--step", "1", "--count", "2", "--csv")
    assert code == 0
    assert out.splitlines() == ["contributed,issued,marginal", "1,6,0", "2,12,6"]


def test_cli_invalid_config(capsys, tmp_path):
    cfg = tmp_path / "neumark.json"
    cfg.write_text(json.dumps({"output": {"units": "satoshi"}}), encoding="utf-8")
    code, _, err = run(capsys, "--config", str(cfg), "constants")
    assert code == 1
    assert "Invalid configuration" in err


@pytest.mark.parametrize("argv", [
    ("inverse", "1000"),
    ("incremental", str(10**24), str(10**24)),
    ("incremental-inverse", str(10**25), str(10**18)),
    ("schedule", "--step", str(10**24), "--count", "2"),
])
def test_cli_series_guard_applies_to_every_command(capsys, monkeypatch, argv):
    monkeypatch.setenv("NEUMARK_CURVE_MAX_SERIES_PAIRS", "1")
    code, _, err = run(capsys, *argv)
    assert code == 1
    assert "did not converge" in err


def test_cli_single_ulp_in_noisy_region_fails(capsys):
    code, out, err = run(capsys, "incremental", "4686890323292186001628098372", "1")
    assert code == 1
    assert out == ""
    assert "cumulative decreased" in err
