"""Tests for identifier and timestamp utilities."""

from datetime import datetime, timedelta, timezone

from cuaderno.data.ids import Clock, format_timestamp, new_id, now_iso, parse_timestamp


class TestNewId:
    def test_returns_non_empty_string(self):
        assert isinstance(new_id(), str)
        assert new_id()

    def test_ids_are_unique(self):
        ids = {new_id() for _ in range(2000)}
        assert len(ids) == 2000

    def test_only_hex_characters(self):
        assert all(c in "0123456789abcdef" for c in new_id())


class TestTimestamps:
    def test_format_has_milliseconds_and_z(self):
        moment = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "2024-05-01T10:00:00.123Z"

    def test_format_converts_to_utc(self):
        moment = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "2024-05-01T10:00:00.000Z"

    def test_now_iso_shape(self):
        value = now_iso()
        assert value.endswith("Z")
        assert len(value) == len("2024-05-01T10:00:00.000Z")


class TestClock:
    def test_uses_source(self):
        fixed = datetime(2024, 1, 1, tzinfo=timezone.utc)
        clock = Clock(lambda: fixed)
        assert clock.now() == "2024-01-01T00:00:00.000Z"

    def test_strictly_increasing_on_frozen_time(self):
        fixed = datetime(2024, 1, 1, tzinfo=timezone.utc)
        clock = Clock(lambda: fixed)
        first = clock.now()
        second = clock.now()
        third = clock.now()
        assert first < second < third
        assert second == "2024-01-01T00:00:00.001Z"

    def test_strictly_increasing_when_time_goes_back(self):
        times = iter([
            datetime(2024, 1, 1, 12, tzinfo=timezone.utc),
            datetime(2024, 1, 1, 11, tzinfo=timezone.utc),
        ])
        clock = Clock(lambda: next(times))
        first = clock.now()
        second = clock.now()
        assert second > first

    def test_sub_millisecond_ticks_still_increase(self):
        times = iter([
            datetime(2024, 1, 1, 0, 0, 0, 100, tzinfo=timezone.utc),
            datetime(2024, 1, 1, 0, 0, 0, 900, tzinfo=timezone.utc),
        ])
        clock = Clock(lambda: next(times))
        assert clock.now() < clock.now()

    def test_real_clock_increases(self):
        clock = Clock()
        values = [clock.now() for _ in range(50)]
        assert values == sorted(values)
        assert len(set(values)) == 50

    def test_after_previous_timestamp(self):
        fixed = datetime(2024, 1, 1, tzinfo=timezone.utc)
        clock = Clock(lambda: fixed)
        assert clock.now(after="2024-06-01T00:00:00.000Z") == "2024-06-01T00:00:00.001Z"
        assert clock.now() == "2024-06-01T00:00:00.002Z"

    def test_after_ignores_older_and_garbage(self):
        fixed = datetime(2024, 1, 1, tzinfo=timezone.utc)
        clock = Clock(lambda: fixed)
        assert clock.now(after="2023-01-01T00:00:00.000Z") == "2024-01-01T00:00:00.000Z"
        assert clock.now(after="not a date") == "2024-01-01T00:00:00.001Z"


class TestParseTimestamp:
    def test_round_trips_format(self):
        moment = datetime(2024, 5, 1, 10, 0, 0, 123000, tzinfo=timezone.utc)
        assert parse_timestamp(format_timestamp(moment)) == moment

    def test_naive_is_utc(self):
        assert parse_timestamp("2024-05-01T10:00:00") == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)

    def test_unparseable(self):
        assert parse_timestamp("ayer") is None
        assert parse_timestamp(None) is None
