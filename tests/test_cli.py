import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import cli


def test_main_reports_summary_and_stores_gfsr_state(tmp_path: Path, monkeypatch, capsys, raw_stats_flags):
    monkeypatch.chdir(tmp_path)
    status = cli.main(["onesamp"] + raw_stats_flags.split())

    assert status == 0
    out = capsys.readouterr().out
    assert "Mode: raw-stats" in out
    assert "Iterations: 1" in out
    assert "Draws (first 1 of 1):" in out
    assert "bottleneck_size" in out
    assert "theta" not in out
    assert (tmp_path / "INTEGER_GFSR.json").exists()


def test_main_syntax_check(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert cli.main(["./onesamp", "-l5", "-x"]) == 0
    assert "./onesamp: syntax check passed." in capsys.readouterr().out


def test_main_prints_error_and_returns_1(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    status = cli.main(["./onesamp", "-l10", "-i10", "-s", "-t5", "-o0.9"])

    assert status == 1
    err = capsys.readouterr().err
    assert err.startswith("ONESAMP ERROR\n./onesamp: missing an operation")
    assert err.endswith("Exiting...\n")


def test_main_rejects_forbidden_motif_lengths(tmp_path: Path, monkeypatch, capsys, single_generation_flags):
    monkeypatch.chdir(tmp_path)
    argv = ["onesamp"] + single_generation_flags.replace("-m2,3", "-m2,5").split()
    assert cli.main(argv) == 1
    assert "motif lengths" in capsys.readouterr().err


def test_main_uses_sys_argv(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["onesamp", "-rC", "-x"])
    assert cli.main() == 0


def test_main_reports_corrupt_gfsr_state(tmp_path: Path, monkeypatch, capsys, raw_stats_flags):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "INTEGER_GFSR.json").write_text("{not json", encoding="utf-8")

    assert cli.main(["./onesamp"] + raw_stats_flags.split()) == 1
    err = capsys.readouterr().err
    assert err.startswith("ONESAMP ERROR\n./onesamp: cannot restore the GFSR register from INTEGER_GFSR.json")
    assert err.endswith("Exiting...\n")
