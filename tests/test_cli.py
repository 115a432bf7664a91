"""Tests for the command line entry point."""

from __future__ import annotations

import json
import logging

import pytest

from heightify.cli import main


@pytest.fixture(autouse=True)
def _detach_log_handlers():
    """main() binds a handler to the captured stderr; drop it afterwards."""
    yield
    logging.getLogger("heightify").handlers.clear()


class TestCalculatorCommands:
    def test_recommend_text(self, capsys) -> None:
        assert main(["recommend", "--height", "180"]) == 0

        out = capsys.readouterr().out
        assert "Chair height: 40.7 cm" in out
        assert "Desk height: 65.7 cm" in out

    def test_recommend_json(self, capsys) -> None:
        assert main(["--json", "recommend", "--height", "170"]) == 0

        assert json.loads(capsys.readouterr().out) == {"chair_height": 38.6, "desk_height": 63.6}

    def test_ranges_json(self, capsys) -> None:
        assert main(["--json", "ranges", "--height", "200"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["chair"]["minimum"] == pytest.approx(43.0)
        assert data["desk"]["maximum"] == pytest.approx(72.5)

    def test_analyze_text(self, capsys) -> None:
        assert main(["analyze", "--height", "200", "--chair", "46", "--desk", "67"]) == 0

        out = capsys.readouterr().out
        assert "Consider adjusting your chair lower by 1.0 cm" in out
        assert "Your desk is too low by 3.0 cm" in out

    def test_invalid_number_exits_with_2(self, capsys) -> None:
        assert main(["analyze", "--height", "tall", "--chair", "46", "--desk", "67"]) == 2

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "height is not a number" in captured.err

    def test_config_override(self, tmp_path, capsys) -> None:
        path = tmp_path / "c.json"
        path.write_text(json.dumps({"ergonomics": {"desk_offset_cm": 30}}), encoding="utf-8")

        assert main(["--json", "--config", str(path), "recommend", "--height", "200"]) == 0

        assert json.loads(capsys.readouterr().out)["desk_height"] == 75.0

    def test_missing_config_exits_with_2(self, tmp_path, capsys) -> None:
        assert main(["--config", str(tmp_path / "nope.json"), "recommend", "--height", "180"]) == 2

    def test_directory_config_exits_with_2(self, tmp_path, capsys) -> None:
        assert main(["--config", str(tmp_path), "recommend", "--height", "180"]) == 2

        assert "Cannot read config file" in capsys.readouterr().err

    def test_non_utf8_config_exits_with_2(self, tmp_path, capsys) -> None:
        path = tmp_path / "c.json"
        path.write_bytes(b'{"log_level": "\xff"}')

        assert main(["--config", str(path), "recommend", "--height", "180"]) == 2

    def test_negative_history_size_exits_with_2(self, tmp_path, capsys) -> None:
        path = tmp_path / "c.json"
        path.write_text(json.dumps({"measurement": {"history_size": -1}}), encoding="utf-8")

        assert main(["--config", str(path), "measure", "--points", "0,0,0;0,0.4,0"]) == 2

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "history_size" in captured.err


class TestMeasureCommand:
    def test_two_points(self, capsys) -> None:
        assert main(["measure", "--points", "0,0,0;5,0.38,5"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["state"] == "completed"
        assert data["measurement_result_cm"] == pytest.approx(38.0)
        assert data["measurement_type"] == "chair"

    def test_miss_in_between(self, capsys) -> None:
        assert main(["measure", "--type", "desk", "--points", "0,0,0;;0,0.7,0"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["state"] == "completed"
        assert data["measurement_type"] == "desk"
        assert data["measurement_result_cm"] == pytest.approx(70.0)

    def test_trailing_miss_reports_no_target(self, capsys) -> None:
        assert main(["measure", "--points", "0,0,0;"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["state"] == "waiting_for_end_point"
        assert data["status"] == "no_target"

    def test_bad_point(self, capsys) -> None:
        assert main(["measure", "--points", "0,0"]) == 2

    def test_event_log_directory(self, tmp_path, capsys) -> None:
        config = tmp_path / "c.json"
        config.write_text(json.dumps({"event_log_directory": str(tmp_path / "events")}), encoding="utf-8")

        assert main(["--config", str(config), "measure", "--points", "0,0,0;0,0.4,0"]) == 0

        assert len(list((tmp_path / "events").glob("*.json"))) == 3
