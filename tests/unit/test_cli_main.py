from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from csv_link_editor.cli import main as cli_main


def test_inspect_prints_link_rows(sample_csv_file: Path, clean_logging, capsys):
    code = cli_main(["inspect", str(sample_csv_file)])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: pages.csv" in out
    assert "link_columns=['Content', 'Content 2'] link_rows=2" in out
    assert "row=0 hrefs=['https://example.com/a']" in out
    assert "row=2 hrefs=['https://example.com/b', '/c']" in out
    assert "SUMMARY file=pages.csv rows=3 link_rows=2" in out


def test_inspect_explicit_columns_and_limit(sample_csv_file: Path, clean_logging, capsys):
    code = cli_main(["inspect", str(sample_csv_file), "--columns", "Content 2", "--limit", "0"])
    out = capsys.readouterr().out
    assert code == 0
    assert "link_columns=['Content 2'] link_rows=1" in out
    assert "row=" not in out


def test_inspect_unknown_column_is_fatal(sample_csv_file: Path, clean_logging, capsys):
    code = cli_main(["inspect", str(sample_csv_file), "--columns", "Nope"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR inspect: unknown columns" in out


def test_inspect_missing_file(temp_workdir: Path, clean_logging, capsys):
    code = cli_main(["inspect", "data/missing.csv"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR file not found:" in out


def test_inspect_empty_file_is_parse_error(temp_workdir: Path, clean_logging, capsys):
    f = temp_workdir / "data" / "empty.csv"
    f.write_text("", encoding="utf-8")
    code = cli_main(["inspect", str(f)])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR parse: no columns found" in out


def test_relink_writes_output_and_audit_log(sample_csv_file: Path, temp_workdir: Path, clean_logging, capsys):
    mapping = temp_workdir / "map.yml"
    mapping.write_text('"/c": "/c-new"\n', encoding="utf-8")

    code = cli_main(["relink", str(sample_csv_file), "--mapping", str(mapping)])
    out = capsys.readouterr().out

    assert code == 0
    output = temp_workdir / "data" / "pages-modified.csv"
    assert output.exists()
    assert '<a href=""/c-new"">C</a>' in output.read_text(encoding="utf-8")
    logs = list((temp_workdir / "logs").glob("changes-*.log"))
    assert len(logs) == 1
    entry = json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])
    assert (entry["row"], entry["column"]) == (2, "Content 2")
    assert "SUMMARY file=pages.csv rows=3 link_rows=2 scanned=2 links_rewritten=1 cells_updated=1 unmatched=0" in out


def test_relink_no_audit_log(sample_csv_file: Path, temp_workdir: Path, clean_logging, capsys):
    mapping = temp_workdir / "map.yml"
    mapping.write_text('"/c": "/c-new"\n', encoding="utf-8")
    target = temp_workdir / "out.csv"

    code = cli_main([
        "relink", str(sample_csv_file), "--mapping", str(mapping),
        "--output", str(target), "--no-audit-log",
    ])

    assert code == 0
    assert target.exists()
    assert list((temp_workdir / "logs").glob("changes-*.log")) == []


def test_relink_bad_mapping(sample_csv_file: Path, temp_workdir: Path, clean_logging, capsys):
    code = cli_main(["relink", str(sample_csv_file), "--mapping", str(temp_workdir / "none.yml")])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR relink: mapping file not found" in out


def test_explicit_config_must_exist(temp_workdir: Path, sample_csv_file: Path, clean_logging, capsys):
    code = cli_main(["--config", "config/missing.yml", "inspect", str(sample_csv_file)])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config: config file not found" in out


def test_default_config_file_is_used(write_config: Path, sample_csv_file: Path, clean_logging, capsys):
    (write_config).write_text("editor:\n  default_link_columns: [Content]\n", encoding="utf-8")
    code = cli_main(["inspect", str(sample_csv_file)])
    out = capsys.readouterr().out
    assert code == 0
    assert "link_columns=['Content'] link_rows=1" in out


def test_debug_flag_enables_debug_output(sample_csv_file: Path, clean_logging, capsys):
    code = cli_main(["--debug", "inspect", str(sample_csv_file)])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out


def test_serve_runs_app_with_config(write_config: Path, clean_logging, capsys):
    with patch("flask.Flask.run") as mock_run:
        code = cli_main(["serve", "--port", "5005"])
    out = capsys.readouterr().out
    assert code == 0
    mock_run.assert_called_once_with(host="0.0.0.0", port=5005, debug=False)
    assert "INFO CSV link editor API running on http://0.0.0.0:5005" in out
