"""Tests for the week cache and interval query engine."""

from datetime import datetime, timedelta

import pytest

from protoschedule.domain.decoding import decode_definition
from protoschedule.domain.errors import ParseError, StaleScheduleError
from protoschedule.domain.models import MaterializedInterval
from protoschedule.scheduling.materializer import Materializer
from protoschedule.scheduling.query import IntervalQueryEngine, ScheduleConfig, WeekCache

from conftest import MONDAY, read_fixture


class FailingAfterMaterializer(Materializer):
    """Materializer that refuses weeks after a cutoff."""

    def __init__(self, cutoff: datetime):
        self.cutoff = cutoff
        self.calls = 0

    def materialize(self, prototype, reference):
        self.calls += 1
        if reference >= self.cutoff:
            raise ParseError("simulated failure", field="start", value="????")
        return super().materialize(prototype, reference)


class OverflowingMaterializer(Materializer):
    """Materializer that lets date arithmetic overflow escape."""

    def materialize(self, prototype, reference):
        raise OverflowError("date value out of range")


class TestContainment:
    """Tests for second-precision inclusive containment."""

    @pytest.fixture
    def interval(self):
        return MaterializedInterval(
            start=datetime(2024, 1, 15, 8),
            end=datetime(2024, 1, 15, 16, 59, 59),
            label="day",
        )

    def test_boundaries_are_inclusive(self, interval):
        assert interval.contains(interval.start)
        assert interval.contains(interval.end)

    def test_sub_second_inside_end_second(self, interval):
        assert interval.contains(interval.end + timedelta(milliseconds=999))

    def test_sub_second_inside_start_second(self, interval):
        assert interval.contains(interval.start + timedelta(microseconds=1))

    def test_outside(self, interval):
        assert not interval.contains(interval.start - timedelta(microseconds=1))
        assert not interval.contains(interval.end + timedelta(seconds=1))
        assert not interval.contains(datetime(2024, 1, 16, 10))

    def test_str(self, interval):
        assert str(interval) == "day: 2024-01-15 08:00:00 ---> 2024-01-15 16:59:59"


class TestWeekCache:
    """Tests for WeekCache.refresh_if_stale."""

    @pytest.fixture
    def cache(self, normal_json):
        cache = WeekCache(decode_definition(normal_json))
        cache.load(MONDAY)
        return cache

    def test_fresh_instant_does_not_refresh(self, cache):
        result = cache.refresh_if_stale(datetime(2024, 1, 17, 12))

        assert result.ok
        assert not result.refreshed
        assert cache.week.anchor == MONDAY

    def test_span_boundaries_are_fresh(self, cache):
        assert not cache.refresh_if_stale(cache.week.span_start).refreshed
        assert not cache.refresh_if_stale(cache.week.span_end).refreshed

    def test_instant_after_span_refreshes(self, cache):
        result = cache.refresh_if_stale(datetime(2024, 1, 24, 9))

        assert result.ok and result.refreshed
        assert cache.week.anchor == datetime(2024, 1, 22)

    def test_instant_before_span_refreshes(self, cache):
        result = cache.refresh_if_stale(datetime(2024, 1, 15, 7, 59, 59))

        # same calendar week, rebuilt anyway because it precedes the span
        assert result.refreshed
        assert cache.week.anchor == MONDAY

    def test_failed_refresh_marks_cache(self, normal_json):
        cache = WeekCache(
            decode_definition(normal_json),
            FailingAfterMaterializer(cutoff=datetime(2024, 1, 22)),
        )
        cache.load(MONDAY)
        result = cache.refresh_if_stale(datetime(2024, 1, 23, 10))

        assert not result.ok
        assert isinstance(result.error, ParseError)
        assert cache.needs_reconstruction
        with pytest.raises(StaleScheduleError):
            cache.week

        # stays failed even for instants in the old week
        assert not cache.refresh_if_stale(datetime(2024, 1, 16, 10)).ok

    def test_overflow_marks_cache(self, normal_json):
        cache = WeekCache(decode_definition(normal_json), OverflowingMaterializer())

        with pytest.raises(ParseError):
            cache.load(MONDAY)
        assert cache.needs_reconstruction
        with pytest.raises(StaleScheduleError):
            cache.week


class TestIntervalQueryEngine:
    """Tests for within and matching_intervals."""

    @pytest.fixture
    def engine(self, normal_json):
        cache = WeekCache(decode_definition(normal_json))
        cache.load(MONDAY)
        return IntervalQueryEngine(cache)

    def test_within_current_week(self, engine):
        assert engine.within(datetime(2024, 1, 16, 10, 15))
        assert not engine.within(datetime(2024, 1, 16, 23, 30))
        assert not engine.within(datetime(2024, 1, 20, 10, 15))

    def test_within_refreshes_other_week(self, engine):
        assert engine.within(datetime(2024, 2, 7, 18))
        assert engine.cache.week.anchor == datetime(2024, 2, 5)

    def test_matching_intervals_is_read_only_by_default(self, engine):
        next_week = datetime(2024, 1, 23, 10, 15)

        assert engine.matching_intervals(next_week) == []
        assert engine.cache.week.anchor == MONDAY

    def test_matching_intervals_after_within(self, engine):
        next_week = datetime(2024, 1, 23, 10, 15)

        assert engine.within(next_week)
        matches = engine.matching_intervals(next_week)
        assert [v.label for v in matches] == ["day-shift"]
        assert matches[0].start == datetime(2024, 1, 23, 8)

    def test_refresh_on_match_config(self, normal_json):
        cache = WeekCache(decode_definition(normal_json))
        cache.load(MONDAY)
        engine = IntervalQueryEngine(cache, ScheduleConfig(refresh_on_match=True))
        matches = engine.matching_intervals(datetime(2024, 1, 23, 18))

        assert [v.label for v in matches] == ["evening-shift"]
        assert cache.week.anchor == datetime(2024, 1, 22)

    def test_queries_fail_after_failed_refresh(self, normal_json):
        materializer = FailingAfterMaterializer(cutoff=datetime(2024, 1, 22))
        cache = WeekCache(decode_definition(normal_json), materializer)
        cache.load(MONDAY)
        engine = IntervalQueryEngine(cache)

        with pytest.raises(StaleScheduleError):
            engine.within(datetime(2024, 1, 30, 9))
        with pytest.raises(StaleScheduleError):
            engine.within(datetime(2024, 1, 16, 9))
        with pytest.raises(StaleScheduleError):
            engine.matching_intervals(datetime(2024, 1, 16, 9))
        assert materializer.calls == 2

    def test_within_last_representable_week(self, engine):
        assert engine.within(datetime(9999, 12, 31, 10, 15))
        assert engine.cache.week.anchor == datetime(9999, 12, 27)

    def test_week_past_last_date_needs_reconstruction(self):
        cache = WeekCache(decode_definition(read_fixture("schedule_overnight")))
        cache.load(MONDAY)
        engine = IntervalQueryEngine(cache)

        with pytest.raises(StaleScheduleError):
            engine.within(datetime(9999, 12, 31))
        assert cache.needs_reconstruction
        assert isinstance(cache.refresh_if_stale(MONDAY).error, ParseError)
