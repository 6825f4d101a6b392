from datetime import datetime, timedelta

import pytest

from actionkit.testing.results import LogEntry, Measurement, MemoryCheckpoint, Profile, QueryRecord


class TestMeasurement:
    def test_duration(self) -> None:
        measurement = Measurement("ChildAction", start=100.0, end=100.5)

        assert measurement.duration() == timedelta(milliseconds=500)
        assert measurement.duration_ms == pytest.approx(500.0)

    def test_str(self) -> None:
        assert str(Measurement("ChildAction", 1.0, 1.25)) == "ChildAction took 250.00ms"

    def test_is_immutable(self) -> None:
        measurement = Measurement("ChildAction", 1.0, 2.0)

        with pytest.raises(AttributeError):
            measurement.end = 3.0


class TestProfile:
    def test_memory_accessors(self) -> None:
        profile = Profile(
            "MemoryAction",
            start=10.0,
            end=10.1,
            start_memory=1024,
            end_memory=3072,
            peak_memory=4096,
        )

        assert profile.memory_used() == "2 KB"
        assert profile.memory_used("B") == 2048
        assert profile.memory_used("KB") == 2.0
        assert profile.start_memory_formatted() == "1 KB"
        assert profile.end_memory_formatted("KB") == 3.0
        assert profile.peak_memory_formatted() == "4 KB"

    def test_invalid_unit(self) -> None:
        with pytest.raises(ValueError, match="Invalid unit"):
            Profile("X", 0.0, 1.0).memory_used("XB")

    def test_records_are_relative_to_start(self) -> None:
        profile = Profile(
            "MemoryAction",
            start=10.0,
            end=11.0,
            memory_records=(
                MemoryCheckpoint("start", 512, 10.25),
                MemoryCheckpoint("allocated", 2048, 10.5),
            ),
        )

        records = profile.records()

        assert [record["name"] for record in records] == ["start", "allocated"]
        assert records[0]["relative_time"] == pytest.approx(0.25)
        assert records[1]["memory_formatted"] == "2 KB"

    def test_str_with_memory(self) -> None:
        profile = Profile("MemoryAction", 0.0, 0.002, start_memory=0, end_memory=1024, peak_memory=2048)

        assert str(profile) == "MemoryAction took 2.00ms (memory: 1 KB, peak: 2 KB)"

    def test_str_without_memory(self) -> None:
        assert str(Profile("MemoryAction", 0.0, 0.001)) == "MemoryAction took 1.00ms"


class TestQueryRecord:
    def test_defaults(self) -> None:
        record = QueryRecord("select 1")

        assert record.bindings == ()
        assert record.connection == "default"
        assert record.action is None

    def test_duration(self) -> None:
        assert QueryRecord("select 1", duration_ms=12.5).duration() == timedelta(milliseconds=12.5)

    def test_str(self) -> None:
        record = QueryRecord("select * from users where id = ?", (1,), 1.5, "primary", "DatabaseAction")

        assert str(record) == (
            "Query: select * from users where id = ? | Bindings: [1] | Time: 1.5ms"
            " | Action: DatabaseAction"
        )

    def test_str_without_action(self) -> None:
        assert str(QueryRecord("select 1")) == "Query: select 1 | Bindings: [] | Time: 0.0ms"


class TestLogEntry:
    def test_str(self) -> None:
        entry = LogEntry(
            level="INFO",
            message="user created",
            context={"user_id": 7},
            timestamp=datetime(2024, 5, 1, 12, 30, 0),
            channel="tests.app",
        )

        assert str(entry) == '[2024-05-01 12:30:00] tests.app.INFO: user created {"user_id": 7}'

    def test_str_without_context(self) -> None:
        entry = LogEntry("ERROR", "failed", timestamp=datetime(2024, 5, 1, 0, 0, 0))

        assert str(entry) == "[2024-05-01 00:00:00] default.ERROR: failed"
