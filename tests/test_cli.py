import textwrap

import yaml

from timeline_planner.__main__ import main


def test_parse_command_prints_yaml(capsys):
    assert main(["parse", "Robin Jan-Sept; Task 12/12-24/12", "--year", "2025"]) == 0

    out = yaml.safe_load(capsys.readouterr().out)
    assert out == [
        {"name": "Robin", "start_date": "2025-01-01", "end_date": "2025-09-30"},
        {"name": "Task", "start_date": "2025-12-12", "end_date": "2025-12-24"},
    ]


def test_parse_command_reports_no_match(capsys):
    assert main(["parse", "gibberish", "--year", "2025"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "no date ranges" in captured.err


def test_layout_command_prints_rows(tmp_path, capsys):
    path = tmp_path / "records.yaml"
    path.write_text(
        textwrap.dedent(
            """
            records:
              - {id: a, name: A, start_date: 2025-01-01, end_date: 2025-01-11}
              - {id: b, name: B, start_date: 2025-01-06, end_date: 2025-01-16}
              - {id: c, name: C, start_date: 2025-01-21, end_date: 2025-01-31}
              - {id: z, name: Z, start_date: 2023-01-01, end_date: 2023-02-01}
            """
        ),
        encoding="utf-8",
    )

    assert main(["layout", str(path), "--year", "2025", "--view", "quarter", "--quarter", "1"]) == 0

    rows = yaml.safe_load(capsys.readouterr().out)
    assert [(row["row"], [bar["id"] for bar in row["bars"]]) for row in rows] == [(0, ["a", "c"]), (1, ["b"])]


def test_layout_command_rejects_invalid_document(tmp_path, capsys):
    path = tmp_path / "records.yaml"
    path.write_text("records: 3\n", encoding="utf-8")

    assert main(["layout", str(path)]) == 2
    assert "Error" in capsys.readouterr().err


def test_layout_command_reports_missing_file(tmp_path, capsys):
    assert main(["layout", str(tmp_path / "missing.yaml")]) == 1
    assert "not found" in capsys.readouterr().err
