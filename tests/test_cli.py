from __future__ import annotations

import re

from main import build_parser, main


def test_parser_run_options():
    args = build_parser().parse_args(["run", "inst.txt", "-a", "0.5", "-n", "7", "-r", "3", "-f", "rail", "-q"])
    assert args.command == "run"
    assert args.file == "inst.txt"
    assert args.alpha == 0.5
    assert args.runs == 7
    assert args.random == 3
    assert args.format == "rail"
    assert args.quiet is True
    assert args.baseline is None


def test_gen_then_quiet_run(tmp_path, capsys):
    path = tmp_path / "rand.txt"
    assert main(["gen", "--requirements", "15", "--items", "25", "--density", "0.15", "--seed", "4", "--output", str(path)]) == 0
    assert path.exists()
    capsys.readouterr()

    assert main(["run", str(path), "-n", "3", "-r", "1", "--no-baseline", "-q"]) == 0
    fields = capsys.readouterr().out.split()
    assert len(fields) == 4
    assert float(fields[0]) == 0.0


def test_verbose_run_prints_trials(tmp_path, capsys, scenario_text):
    path = tmp_path / "scenario.txt"
    path.write_text(scenario_text, encoding="utf-8")
    assert main(["run", str(path), "-a", "1", "-n", "2", "-r", "0", "--no-baseline", "--moves", "drop,swap_1_1"]) == 0
    out = capsys.readouterr().out
    assert "alpha   = 1.0" in out
    assert "[1] GRASP: 2 | GRASP+LS: 2" in out
    assert "[2] GRASP: 2 | GRASP+LS: 2" in out
    assert "Gap: min = 0%" in out


def test_run_reports_infeasible_instance(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("2 1\n1\n1\n1\n0\n", encoding="utf-8")
    assert main(["run", str(path), "-n", "1", "-r", "0", "--no-baseline", "-q"]) == 1
    assert "Infeasible" in capsys.readouterr().err


def test_run_reports_bad_alpha(tmp_path, capsys, scenario_text):
    path = tmp_path / "scenario.txt"
    path.write_text(scenario_text, encoding="utf-8")
    assert main(["run", str(path), "-a", "2", "--no-baseline"]) == 1
    assert "alpha" in capsys.readouterr().err


def test_run_without_seed_prints_the_seed_used(tmp_path, capsys, scenario_text):
    path = tmp_path / "scenario.txt"
    path.write_text(scenario_text, encoding="utf-8")
    assert main(["run", str(path), "-n", "2", "--no-baseline"]) == 0
    out = capsys.readouterr().out
    match = re.search(r"^random  = (\d+)$", out, re.MULTILINE)
    assert match is not None
    seed = int(match.group(1))

    assert main(["run", str(path), "-n", "2", "-r", str(seed), "--no-baseline"]) == 0
    again = capsys.readouterr().out
    assert f"random  = {seed}" in again
    trials = [line for line in out.splitlines() if line.startswith("[")]
    assert trials == [line for line in again.splitlines() if line.startswith("[")]


def test_run_without_reference_explains_gaps(tmp_path, capsys, scenario_text):
    path = tmp_path / "scenario.txt"
    path.write_text(scenario_text, encoding="utf-8")
    assert main(["run", str(path), "-n", "1", "-r", "0", "--no-baseline"]) == 0
    out = capsys.readouterr().out
    assert "per-trial gap = n/a" in out
    assert "gap = n/a" in out
    assert "Best cost found: 2" in out
