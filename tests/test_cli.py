# tests/test_cli.py

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from gedcom_spans.cli.app import app
from gedcom_spans.utils import tests_data_path

runner = CliRunner()

MINIMAL = str(tests_data_path("minimal_555.ged"))


def _write(tmp_path: Path, data: bytes) -> str:
    path = tmp_path / "input.ged"
    path.write_bytes(data)
    return str(path)


def test_validate_clean_file() -> None:
    result = runner.invoke(app, ["validate", MINIMAL, "--no-color"])
    assert result.exit_code == 0, result.output
    assert "GEDCOM Validation" in result.output
    assert "Validation was successful: 5 top-level records" in result.output


def test_validate_reports_errors(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        b"0 HEAD\n1 GEDC\n2 VERS 5.5.1\n1 CHAR UTF-8\n0 @I1@ INDI\n2 NAME x\n0 TRLR\n",
    )
    result = runner.invoke(app, ["validate", path, "--no-color"])
    assert result.exit_code == 1
    assert "Invalid child level 2, expected 1 or less" in result.output
    assert "6 │ 2 NAME x" in result.output
    assert "Validation was unsuccessful" in result.output


def test_validate_warnings_do_not_fail(tmp_path: Path) -> None:
    path = _write(tmp_path, b"0 HEAD\n1 GEDC\n2 VERS 5.5.1\n1 CHAR UTF-8\n")
    result = runner.invoke(app, ["validate", path, "--no-color"])
    assert result.exit_code == 0
    assert "Missing TRLR record" in result.output
    assert "successful (with warnings)" in result.output


def test_decoding_error_is_rendered_against_raw_bytes(tmp_path: Path) -> None:
    path = _write(tmp_path, b"Hello there\n")
    result = runner.invoke(app, ["validate", path])
    assert result.exit_code == 1
    assert "Input file does not appear to be valid GEDCOM" in result.output
    assert "1 │ Hello there" in result.output


def test_decode_command() -> None:
    result = runner.invoke(app, ["decode", MINIMAL])
    assert result.exit_code == 0, result.output
    assert "UTF-8" in result.output
    assert "5.5.5" in result.output


def test_decode_with_forced_encoding(tmp_path: Path) -> None:
    path = _write(tmp_path, b"0 HEAD\n1 NAME H\xe2ello\n")
    result = runner.invoke(
        app,
        ["decode", path, "--force-encoding", "ansel", "--force-version", "5.5.1"],
    )
    assert result.exit_code == 0, result.output
    assert "ANSEL" in result.output
    assert "5.5.1" in result.output


def test_unknown_forced_encoding_is_a_usage_error() -> None:
    result = runner.invoke(app, ["decode", MINIMAL, "--force-encoding", "ebcdic"])
    assert result.exit_code == 2


def test_export_to_stdout() -> None:
    result = runner.invoke(app, ["export", MINIMAL])
    assert result.exit_code == 0, result.output

    data = json.loads(result.stdout)
    assert data["version"] == "5.5.5"
    assert data["encoding"] == "UTF-8"
    assert data["record_count"] == 5
    assert [r["tag"] for r in data["records"]] == ["HEAD", "INDI", "INDI", "FAM", "TRLR"]

    john = data["records"][1]
    assert john["xref"] == "@I1@"
    assert john["span"]["offset"] > 0
    note = next(c for c in john["children"] if c["tag"] == "NOTE")
    assert note["value"] == "First line"
    assert note["text"] == "First line\nsecond line, continued"

    fams = next(c for c in john["children"] if c["tag"] == "FAMS")
    assert fams["pointer"] == "@F1@"


def test_export_to_file(tmp_path: Path) -> None:
    out = tmp_path / "tree.json"
    result = runner.invoke(app, ["export", MINIMAL, "--out", str(out), "--pretty"])
    assert result.exit_code == 0, result.output

    text = out.read_text(encoding="utf-8")
    assert text.startswith("{\n  ")
    assert json.loads(text)["records"][0]["tag"] == "HEAD"


def test_export_has_no_verbose_option() -> None:
    result = runner.invoke(app, ["export", MINIMAL, "--verbose"])
    assert result.exit_code == 2


def test_missing_file_is_rejected() -> None:
    result = runner.invoke(app, ["validate", "does-not-exist.ged"])
    assert result.exit_code == 2
