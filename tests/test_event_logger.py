"""Tests for the event journal."""

from __future__ import annotations

import json
import time
from datetime import date, timedelta

import pytest

from heightify.event_logger import EventLogger, EventType
from heightify.measurement import MeasurementSession
from heightify.models import Point3D


def _completed_snapshot(height_m: float):
    session = MeasurementSession()
    session.pick(Point3D(0.0, 0.0, 0.0))
    return session.pick(Point3D(0.0, height_m, 0.0))


class TestEventLogger:
    def test_memory_only_writes_nothing(self, tmp_path) -> None:
        journal = EventLogger()

        event = journal.log_event(EventType.MEASUREMENT_RESET, note="x")

        assert event["event_id"] == 1
        assert event["data"] == {"note": "x"}
        assert list(tmp_path.iterdir()) == []

    def test_ids_increase(self) -> None:
        journal = EventLogger()

        ids = [journal.log_event(EventType.POINT_PLACED)["event_id"] for _ in range(3)]

        assert ids == [1, 2, 3]

    def test_buffer_is_bounded(self) -> None:
        journal = EventLogger(buffer_size=2)

        for _ in range(5):
            journal.log_event(EventType.POINT_PLACED)

        assert len(journal.get_recent_events(n=10)) == 2

    def test_result_statistics(self) -> None:
        journal = EventLogger()

        journal.log_snapshot(EventType.MEASUREMENT_COMPLETED, _completed_snapshot(0.40))
        journal.log_snapshot(EventType.MEASUREMENT_COMPLETED, _completed_snapshot(0.50))

        metrics = journal.get_session_metrics()
        assert metrics["measurements"]["completed"] == 2
        assert metrics["measurements"]["avg_result_cm"] == pytest.approx(45.0)
        assert metrics["measurements"]["min_result_cm"] == pytest.approx(40.0)
        assert metrics["measurements"]["max_result_cm"] == pytest.approx(50.0)

    def test_metrics_are_a_copy(self) -> None:
        journal = EventLogger()
        journal.log_snapshot(EventType.MEASUREMENT_COMPLETED, _completed_snapshot(0.40))

        metrics = journal.get_session_metrics()
        metrics["picks"]["placed"] = 99

        assert journal.session_metrics["picks"]["placed"] == 1
        assert journal.session_metrics["measurements"]["results"] == [pytest.approx(40.0)]

    def test_empty_metrics(self) -> None:
        metrics = EventLogger().get_session_metrics()

        assert metrics["measurements"]["avg_result_cm"] is None
        assert metrics["picks"]["miss_rate"] == 0.0

    def test_clear_buffer_resets_metrics(self) -> None:
        journal = EventLogger()
        journal.log_snapshot(EventType.MEASUREMENT_COMPLETED, _completed_snapshot(0.40))

        journal.clear_buffer()

        assert journal.get_recent_events() == []
        assert journal.get_session_metrics()["measurements"]["completed"] == 0

    def test_export_by_date(self) -> None:
        journal = EventLogger()
        journal.log_event(EventType.POINT_PLACED, timestamp=time.time() - 3 * 86400)
        journal.log_event(EventType.POINT_PLACED)

        today = date.today()
        assert len(journal.export_events()) == 2
        assert len(journal.export_events(start_date=today)) == 1
        assert len(journal.export_events(end_date=today - timedelta(days=1))) == 1


class TestDiskPersistence:
    def test_events_written_as_json(self, tmp_path) -> None:
        journal = EventLogger(str(tmp_path / "events"))

        journal.log_snapshot(EventType.MEASUREMENT_COMPLETED, _completed_snapshot(0.38))

        files = list((tmp_path / "events").glob("*.json"))
        assert len(files) == 1
        record = json.loads(files[0].read_text(encoding="utf-8"))
        assert record["event_type"] == "measurement_completed"
        assert record["data"]["snapshot"]["state"] == "completed"

    def test_reload_from_disk(self, tmp_path) -> None:
        directory = str(tmp_path)
        writer = EventLogger(directory)
        writer.log_event(EventType.MEASUREMENT_STARTED, timestamp=time.time() - 10)
        writer.log_event(EventType.POINT_PLACED, timestamp=time.time())
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

        reader = EventLogger(directory)
        loaded = reader.load_events_from_disk()

        assert loaded == 2
        assert [e["event_type"] for e in reader.get_recent_events()] == [
            "measurement_started",
            "point_placed",
        ]
        assert reader.log_event(EventType.POINT_PLACED)["event_id"] == 3

    def test_reload_respects_limit(self, tmp_path) -> None:
        writer = EventLogger(str(tmp_path))
        now = time.time()
        for i in range(4):
            writer.log_event(EventType.POINT_PLACED, timestamp=now - 40 + i * 10, n=i)

        reader = EventLogger(str(tmp_path))
        assert reader.load_events_from_disk(max_events=2) == 2
        assert [e["data"]["n"] for e in reader.get_recent_events()] == [2, 3]
