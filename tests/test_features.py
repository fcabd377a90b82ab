"""Tests for pure filtering / dashboard functions."""

from datetime import date, timedelta

from app.tracker.activity import ActivityKind
from app.tracker.features import (
    active_goals,
    count_on,
    current_streak,
    distance_by_unit,
    filter_workouts,
    summarize,
    total_minutes,
    workouts_by_kind,
)
from app.tracker.models import GoalView, StructuredMetrics, WorkoutView

TODAY = date(2026, 2, 15)


def _workout(
    kind: ActivityKind | None = ActivityKind.running,
    day: date | None = TODAY,
    title: str = "Run",
    **metrics,
) -> WorkoutView:
    return WorkoutView(
        id="w",
        user_id="u",
        kind=kind,
        title=title,
        date=day,
        metrics=StructuredMetrics(**metrics),
    )


def _goal(completed: bool = False) -> GoalView:
    return GoalView(id="g", user_id="u", title="Goal", marker="🎯", completed=completed)


class TestFilterWorkouts:
    def test_by_kind(self):
        ws = [_workout(ActivityKind.running), _workout(ActivityKind.hiking)]
        assert [w.kind for w in filter_workouts(ws, kind=ActivityKind.hiking)] == [ActivityKind.hiking]

    def test_search_title_notes_location(self):
        ws = [
            _workout(title="Trail Loop"),
            _workout(notes="felt strong on the trail"),
            _workout(location="Boulder"),
            _workout(title="Track"),
        ]
        assert len(filter_workouts(ws, search="TRAIL")) == 2
        assert len(filter_workouts(ws, search="boulder")) == 1

    def test_no_filters_keeps_all(self):
        ws = [_workout(), _workout()]
        assert filter_workouts(ws) == ws
        assert filter_workouts(ws, search="   ") == ws

    def test_empty(self):
        assert filter_workouts([], kind=ActivityKind.running, search="x") == []


class TestAggregates:
    def test_count_on(self):
        ws = [_workout(day=TODAY), _workout(day=TODAY), _workout(day=TODAY - timedelta(days=1))]
        assert count_on(ws, TODAY) == 2

    def test_total_minutes(self):
        ws = [_workout(duration_hours=1, duration_minutes=15), _workout(duration_minutes=30)]
        assert total_minutes(ws) == 105

    def test_distance_by_unit_includes_legacy_mileage(self):
        ws = [
            _workout(distance_value="5.2"),
            _workout(distance_value="10", distance_unit="km"),
            _workout(mileage="3.1"),
            _workout(),
        ]
        assert distance_by_unit(ws) == {"miles": 8.3, "km": 10.0}

    def test_workouts_by_kind_skips_unknown(self):
        ws = [_workout(ActivityKind.running), _workout(ActivityKind.running), _workout(None)]
        assert workouts_by_kind(ws) == {"running": 2}

    def test_active_goals(self):
        assert len(active_goals([_goal(), _goal(completed=True)])) == 1


class TestCurrentStreak:
    def test_ending_today(self):
        days = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2), TODAY - timedelta(days=4)]
        assert current_streak(days, TODAY) == 3

    def test_ending_yesterday(self):
        days = [TODAY - timedelta(days=1), TODAY - timedelta(days=2)]
        assert current_streak(days, TODAY) == 2

    def test_broken(self):
        assert current_streak([TODAY - timedelta(days=2)], TODAY) == 0

    def test_duplicates_and_missing_dates(self):
        assert current_streak([TODAY, TODAY, None], TODAY) == 1

    def test_empty(self):
        assert current_streak([], TODAY) == 0


class TestSummarize:
    def test_zero_data(self):
        s = summarize([], [], TODAY)
        assert s.total_workouts == 0
        assert s.streak_days == 0
        assert s.distance_by_unit == {}

    def test_with_data(self):
        ws = [
            _workout(day=TODAY, duration_minutes=45, distance_value="5"),
            _workout(ActivityKind.cycling, day=TODAY - timedelta(days=1), duration_hours=1),
        ]
        s = summarize(ws, [_goal(), _goal(), _goal(completed=True)], TODAY)
        assert s.workouts_today == 1
        assert s.active_goals == 2
        assert s.total_workouts == 2
        assert s.total_minutes == 105
        assert s.distance_by_unit == {"miles": 5.0}
        assert s.workouts_by_kind == {"running": 1, "cycling": 1}
        assert s.streak_days == 2
