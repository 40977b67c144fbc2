"""End-to-end tests for the command-line interface against a SQLite file."""

import pandas as pd
import pytest

from careplan.cli import main

DAY = "2025-03-03"


@pytest.fixture
def db_args(tmp_path):
    return ["--db", f"sqlite:///{tmp_path / 'careplan.db'}"]


@pytest.fixture
def offline_config(tmp_path):
    path = tmp_path / "careplan.yaml"
    path.write_text("narrative:\n  enabled: false\n")
    return ["--config", str(path)]


@pytest.mark.integration
def test_plan_allocate_export_flow(db_args, tmp_path, capsys):
    main(db_args + ["init-db"])
    main(db_args + ["add-child", "Ava"])
    main(db_args + ["add-child", "Leo"])
    main(db_args + ["add-staff", "Maya"])
    main(db_args + ["add-template", "Circle Time", "--duration", "30"])
    main(db_args + ["add-template", "Sensory Play", "--duration", "20"])

    main(db_args + ["plan", "--child", "1", "--date", DAY, "--start", "09:00", "--end", "10:00"])
    out = capsys.readouterr().out
    assert "09:00-09:30  Circle Time" in out
    assert "09:30-09:50  Sensory Play" in out

    main(db_args + ["plan", "--child", "2", "--date", DAY, "--start", "09:00", "--end", "09:30"])
    main(db_args + ["allocate", "--date", DAY])
    out = capsys.readouterr().out
    assert "Conflicts: 1" in out

    alloc_csv = tmp_path / "alloc.csv"
    tt_csv = tmp_path / "tt.csv"
    main(db_args + ["export", "--allocations", str(alloc_csv), "--timetable", str(tt_csv), "--date", DAY])
    allocations = pd.read_csv(alloc_csv)
    assert len(allocations) == 3
    assert allocations["conflict"].sum() == 1
    assert set(pd.read_csv(tt_csv)["staff_id"]) == {1}


@pytest.mark.integration
def test_import_csv_command(db_args, tmp_path, capsys):
    children = tmp_path / "children.csv"
    children.write_text("name\nAva\nLeo\n")
    templates = tmp_path / "templates.csv"
    templates.write_text("title,duration_mins\nCircle Time,30\n")

    main(db_args + ["import-csv", "--children", str(children), "--templates", str(templates)])
    out = capsys.readouterr().out
    assert "[OK] Imported 2 children" in out
    assert "[OK] Imported 1 activity templates" in out


def test_plan_rejects_bad_window(db_args):
    with pytest.raises(ValueError):
        main(db_args + ["plan", "--child", "1", "--start", "11:00", "--end", "10:00"])


def test_plan_unknown_child(db_args, capsys):
    with pytest.raises(RuntimeError):
        main(db_args + ["plan", "--child", "42", "--date", DAY])
    assert "[ERROR] Planning failed" in capsys.readouterr().out


def test_log_progress_validates_engagement(db_args):
    main(db_args + ["add-child", "Ava"])
    with pytest.raises(ValueError):
        main(db_args + ["log-progress", "--child", "1", "--engagement", "12"])


def test_narrative_offline_fallback(db_args, offline_config, capsys):
    main(db_args + ["add-child", "Ava"])
    main(db_args + ["log-progress", "--child", "1", "--date", DAY, "--engagement", "6", "--completed"])
    capsys.readouterr()

    main(db_args + offline_config + ["narrative", "summary", "--child", "1", "--date", DAY])
    out = capsys.readouterr().out
    assert "[WARN] Showing fallback text" in out
    assert "Today we focused on routine and engagement." in out


def test_narrative_mapping_offline(db_args, offline_config, capsys):
    main(db_args + ["add-child", "Ava"])
    main(db_args + ["add-staff", "Maya"])
    main(db_args + ["add-template", "Circle Time", "--duration", "30"])
    main(db_args + ["plan", "--child", "1", "--date", DAY, "--start", "09:00", "--end", "10:00"])
    main(db_args + ["allocate", "--date", DAY])
    capsys.readouterr()

    main(db_args + offline_config + ["narrative", "mapping", "--date", DAY])
    out = capsys.readouterr().out
    assert "[WARN] Showing fallback text" in out
    assert "Give one clear instruction and praise specific effort." in out


def test_narrative_summary_requires_child(db_args, offline_config):
    with pytest.raises(SystemExit, match="--child is required"):
        main(db_args + offline_config + ["narrative", "summary", "--date", DAY])
