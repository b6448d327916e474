"""
Tests for the command-line interface.
"""

import json

import pytest

from patrimoine.cli import EXAMPLE_SCENARIO, build_parser, main


def _run(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_example(capsys):
    assert _run(["example"]) == 0
    assert "family:" in capsys.readouterr().out


def test_validate_example(capsys):
    assert _run(["validate", "-i", str(EXAMPLE_SCENARIO), "--format", "json"]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["valid"] is True
    assert report["members"] == ["Paul", "Claire", "Lea", "Hugo"]


def test_validate_missing_file(tmp_path, capsys):
    assert _run(["validate", "-i", str(tmp_path / "absent.yaml")]) == 1
    assert "Validation failed" in capsys.readouterr().err


def test_run_example(capsys):
    assert _run(["run", "-i", str(EXAMPLE_SCENARIO), "--years", "5"]) == 0

    out = capsys.readouterr().out
    assert "Years: 2025-2029" in out
    assert "minimum_asset" in out


def test_run_monte_carlo_export(tmp_path):
    output = tmp_path / "results.json"
    code = _run(
        ["run", "-i", str(EXAMPLE_SCENARIO), "--years", "5", "--runs", "3", "--seed", "1", "-o", str(output)]
    )

    assert code == 0
    results = json.loads(output.read_text(encoding="utf-8"))
    assert results["mode"] == "random"
    assert len(results["runs"]) == 3
    assert results["last_run"]["state"] in {"completed", "failed"}


def test_irpp(capsys):
    assert _run(["irpp", "40000"]) == 0
    assert "IRPP: 6,005.86" in capsys.readouterr().out


def test_inheritance(capsys):
    assert _run(["inheritance", "200000"]) == 0

    out = capsys.readouterr().out
    assert "Tax: 18,194.35" in out
    assert "Net: 181,805.65" in out


def test_life_insurance_inheritance(capsys):
    assert _run(["inheritance", "200000", "--life-insurance"]) == 0
    assert "Tax: 9,500.00" in capsys.readouterr().out
