"""Tests for the command-line front end."""

from __future__ import annotations

import json

import ezdxf
import pytest
from typer.testing import CliRunner

from pyborelog.cli import app

runner = CliRunner()


def _records():
    return [
        {
            "hole_id": "sp-01",
            "z": 731.2,
            "water_level": 1.5,
            "depths": [0, 1, 2, 3],
            "geology": ["a" * 10, "b" * 200, "c" * 10],
            "nspt": {"start_depth": 1, "interval": 1, "values": ["3", "5"]},
        },
        {
            "hole_id": "sp-02",
            "depths": [0, 2, 4.5],
            "geology": ["areia", "argila"],
            "interp": ["aterro", None],
        },
    ]


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "sp10.json"
    path.write_text(json.dumps(_records()), encoding="utf-8")
    return path


class TestRender:
    def test_writes_sheet(self, input_file, tmp_path):
        output = tmp_path / "palitos.dxf"
        result = runner.invoke(app, ["render", str(input_file), "-o", str(output)])
        assert result.exit_code == 0
        assert "Wrote" in result.output
        assert output.exists()
        doc = ezdxf.readfile(output)
        titles = [e.dxf.text for e in doc.modelspace().query("TEXT")]
        assert "SP-01" in titles

    def test_gap_option(self, input_file, tmp_path):
        output = tmp_path / "wide.dxf"
        result = runner.invoke(
            app, ["render", str(input_file), "-o", str(output), "--gap", "30"]
        )
        assert result.exit_code == 0
        doc = ezdxf.readfile(output)
        title = next(e for e in doc.modelspace().query("TEXT")
                     if e.dxf.text == "SP-02")
        assert title.dxf.insert.x == pytest.approx(30.0 - 0.18)

    def test_reports_failed(self, tmp_path):
        records = _records()
        records.append({"hole_id": "bad", "depths": [0, 1, 2], "geology": ["argila"]})
        path = tmp_path / "mixed.json"
        path.write_text(json.dumps(records), encoding="utf-8")
        output = tmp_path / "mixed.dxf"
        result = runner.invoke(app, ["render", str(path), "-o", str(output)])
        assert result.exit_code == 0
        assert "Failed: bad" in result.output
        assert output.exists()

    def test_unparseable_record_does_not_abort(self, tmp_path):
        records = _records()
        records.insert(0, {"hole_id": "bad", "depths": 5, "nspt": ["3"]})
        path = tmp_path / "mixed.json"
        path.write_text(json.dumps(records), encoding="utf-8")
        output = tmp_path / "mixed.dxf"
        result = runner.invoke(app, ["render", str(path), "-o", str(output)])
        assert result.exit_code == 0
        assert "Failed: bad" in result.output
        titles = [e.dxf.text for e in ezdxf.readfile(output).modelspace().query("TEXT")]
        assert "SP-01" in titles
        assert "SP-02" in titles

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["render", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"hole_id": "sp-01"}), encoding="utf-8")
        result = runner.invoke(app, ["render", str(path)])
        assert result.exit_code == 1

    def test_empty_batch(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("[]", encoding="utf-8")
        output = tmp_path / "empty.dxf"
        result = runner.invoke(app, ["render", str(path), "-o", str(output)])
        assert result.exit_code == 0
        assert not output.exists()


class TestInspect:
    def test_all_boreholes(self, input_file):
        result = runner.invoke(app, ["inspect", str(input_file)])
        assert result.exit_code == 0
        assert "sp-01" in result.output
        assert "sp-02" in result.output

    def test_single_hole(self, input_file):
        result = runner.invoke(app, ["inspect", str(input_file), "--hole", "sp-02"])
        assert result.exit_code == 0
        assert "sp-02" in result.output
        assert "sp-01" not in result.output

    def test_unknown_hole(self, input_file):
        result = runner.invoke(app, ["inspect", str(input_file), "--hole", "sp-99"])
        assert result.exit_code == 1
