"""Tracker data contracts — Pydantic v2 models."""

from __future__ import annotations

import datetime as dt
import re
from enum import Enum
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, Field, field_validator

from app.tracker.activity import DEFAULT_GOAL_MARKER, ActivityKind, canonical_goal_marker

NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def is_number(token: str) -> bool:
    """Non-negative decimal as typed by a user ("5", "5.2", ".5")."""
    return NUMBER_RE.fullmatch(token) is not None


class DistanceUnit(str, Enum):
    miles = "miles"
    km = "km"


class Priority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class StructuredMetrics(BaseModel):
    """Workout metrics packed into a record's description.

    Numeric metrics are kept as the text the user typed so that encoding
    never rounds or reformats them. Empty string means absent.
    """

    duration_hours: int = Field(default=0, ge=0)
    duration_minutes: int = Field(default=0, ge=0, le=59)
    distance_value: str = ""
    distance_unit: DistanceUnit = DistanceUnit.miles
    average_speed: str = ""
    fastest_speed: str = ""
    mileage: str = ""  # legacy "3.1 miles" free text
    location: str = ""
    notes: str = ""

    @field_validator("distance_value", "average_speed", "fastest_speed", "mileage", mode="before")
    @classmethod
    def _numeric_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, bool):
            raise ValueError("expected a number")
        if isinstance(value, (int, float)):
            if value < 0:
                raise ValueError("must be non-negative")
            value = str(value)
        if isinstance(value, str):
            value = value.strip()
            if value and not is_number(value):
                raise ValueError(f"not a number: {value!r}")
        return value

    @property
    def total_minutes(self) -> int:
        return self.duration_hours * 60 + self.duration_minutes


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


class WorkoutIn(BaseModel):
    kind: ActivityKind = ActivityKind.running
    title: str = Field(min_length=1)
    date: dt.date | None = None
    metrics: StructuredMetrics = Field(default_factory=StructuredMetrics)
    priority: Priority = Priority.medium
    completed: bool = True
    starred: bool = False


class WorkoutPatch(BaseModel):
    kind: ActivityKind | None = None
    title: str | None = Field(default=None, min_length=1)
    date: dt.date | None = None
    metrics: StructuredMetrics | None = None
    priority: Priority | None = None
    completed: bool | None = None
    starred: bool | None = None


class WorkoutView(BaseModel):
    id: str
    user_id: str
    kind: ActivityKind | None = None
    title: str
    date: dt.date | None = None
    metrics: StructuredMetrics
    priority: str | None = None
    completed: bool = False
    starred: bool = False
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


def _check_goal_marker(value: str) -> str:
    marker = canonical_goal_marker(value)
    if marker is None:
        raise ValueError(f"not a goal marker: {value!r}")
    return marker


GoalMarker = Annotated[str, AfterValidator(_check_goal_marker)]


class GoalIn(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    marker: GoalMarker = DEFAULT_GOAL_MARKER
    target_date: dt.date | None = None
    priority: Priority = Priority.medium
    completed: bool = False
    starred: bool = False


class GoalPatch(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    marker: GoalMarker | None = None
    target_date: dt.date | None = None
    priority: Priority | None = None
    completed: bool | None = None
    starred: bool | None = None


class GoalView(BaseModel):
    id: str
    user_id: str
    title: str
    description: str = ""
    marker: str
    target_date: dt.date | None = None
    priority: str | None = None
    completed: bool = False
    starred: bool = False
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


# ---------------------------------------------------------------------------
# Daily check-ins
# ---------------------------------------------------------------------------


class CheckIn(BaseModel):
    score: int = Field(default=5, ge=1, le=10)
    notes: str = ""
    emotions: list[str] = Field(default_factory=list)


class CheckInView(CheckIn):
    id: str | None = None
    date: dt.date
    label: str


# ---------------------------------------------------------------------------
# Dashboard / codec payloads
# ---------------------------------------------------------------------------


class DashboardSummary(BaseModel):
    workouts_today: int = 0
    active_goals: int = 0
    total_workouts: int = 0
    total_minutes: int = 0
    distance_by_unit: dict[str, float] = Field(default_factory=dict)
    workouts_by_kind: dict[str, int] = Field(default_factory=dict)
    streak_days: int = 0


class EncodeRequest(BaseModel):
    metrics: StructuredMetrics
    kind: ActivityKind | None = None


class EncodeResponse(BaseModel):
    description: str


class DecodeRequest(BaseModel):
    description: str | None = None
