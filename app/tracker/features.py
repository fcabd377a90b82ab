"""Pure stateless functions over fetched records — filtering and dashboard math, never raises."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from app.tracker.activity import ActivityKind
from app.tracker.models import DashboardSummary, DistanceUnit, GoalView, WorkoutView, is_number


def filter_workouts(
    workouts: list[WorkoutView],
    kind: ActivityKind | None = None,
    search: str | None = None,
) -> list[WorkoutView]:
    """Keep workouts of `kind` whose title, notes or location contain `search` (case-insensitive)."""
    needle = (search or "").strip().lower()
    out: list[WorkoutView] = []
    for w in workouts:
        if kind is not None and w.kind != kind:
            continue
        if needle:
            haystack = " ".join((w.title, w.metrics.notes, w.metrics.location)).lower()
            if needle not in haystack:
                continue
        out.append(w)
    return out


def active_goals(goals: list[GoalView]) -> list[GoalView]:
    return [g for g in goals if not g.completed]


def count_on(workouts: list[WorkoutView], day: date) -> int:
    return sum(1 for w in workouts if w.date == day)


def total_minutes(workouts: list[WorkoutView]) -> int:
    return sum(w.metrics.total_minutes for w in workouts)


def distance_by_unit(workouts: list[WorkoutView]) -> dict[str, float]:
    """Sum distances per unit. Legacy mileage counts as miles."""
    totals: dict[str, float] = {}
    for w in workouts:
        m = w.metrics
        if m.distance_value and is_number(m.distance_value):
            unit, value = m.distance_unit.value, float(m.distance_value)
        elif m.mileage and is_number(m.mileage):
            unit, value = DistanceUnit.miles.value, float(m.mileage)
        else:
            continue
        totals[unit] = round(totals.get(unit, 0.0) + value, 2)
    return totals


def workouts_by_kind(workouts: list[WorkoutView]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for w in workouts:
        if w.kind is None:
            continue
        counts[w.kind.value] = counts.get(w.kind.value, 0) + 1
    return counts


def current_streak(days: Iterable[date | None], today: date) -> int:
    """Consecutive days with activity, ending today (or yesterday if today is still open)."""
    active = {d for d in days if d is not None}
    if today in active:
        cursor = today
    elif today - timedelta(days=1) in active:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in active:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def summarize(workouts: list[WorkoutView], goals: list[GoalView], today: date) -> DashboardSummary:
    return DashboardSummary(
        workouts_today=count_on(workouts, today),
        active_goals=len(active_goals(goals)),
        total_workouts=len(workouts),
        total_minutes=total_minutes(workouts),
        distance_by_unit=distance_by_unit(workouts),
        workouts_by_kind=workouts_by_kind(workouts),
        streak_days=current_streak((w.date for w in workouts), today),
    )
