"""
Activity kinds and the category markers that stand for them in the store.

The record store has no dedicated column for the kind of a record. Workouts,
goals and check-ins share one table and are told apart by the emoji kept in
the `emoji` column:

  - workouts: one marker per ActivityKind (see ACTIVITY_CONFIG)
  - goals: any of GOAL_MARKERS
  - daily check-ins: CHECKIN_MARKER

Each ActivityKind also says which metrics apply to it; speed lines are only
written for kinds with tracks_speed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ActivityKind(str, Enum):
    running = "running"
    climbing = "climbing"
    hiking = "hiking"
    snowboarding = "snowboarding"
    cycling = "cycling"
    swimming = "swimming"
    strength = "strength"
    yoga = "yoga"


@dataclass(frozen=True, slots=True)
class ActivityConfig:
    marker: str
    label: str
    tracks_distance: bool = False
    tracks_speed: bool = False


ACTIVITY_CONFIG: dict[ActivityKind, ActivityConfig] = {
    ActivityKind.running: ActivityConfig(marker="🏃", label="Running", tracks_distance=True, tracks_speed=True),
    ActivityKind.climbing: ActivityConfig(marker="🧗", label="Climbing"),
    ActivityKind.hiking: ActivityConfig(marker="🥾", label="Hiking", tracks_distance=True),
    ActivityKind.snowboarding: ActivityConfig(marker="🏂", label="Snowboarding"),
    ActivityKind.cycling: ActivityConfig(marker="🚴", label="Cycling", tracks_distance=True, tracks_speed=True),
    ActivityKind.swimming: ActivityConfig(marker="🏊", label="Swimming", tracks_distance=True),
    ActivityKind.strength: ActivityConfig(marker="💪", label="Strength"),
    ActivityKind.yoga: ActivityConfig(marker="🧘", label="Yoga"),
}

_KIND_BY_MARKER: dict[str, ActivityKind] = {cfg.marker: kind for kind, cfg in ACTIVITY_CONFIG.items()}

WORKOUT_MARKERS: list[str] = [cfg.marker for cfg in ACTIVITY_CONFIG.values()]
GOAL_MARKERS: list[str] = ["🎯", "🏆", "📚", "💡", "🌟", "🔥", "⚡", "🚀"]
DEFAULT_GOAL_MARKER = "🎯"
CHECKIN_MARKER = "\u2764\ufe0f"  # ❤️


def _normalize_marker(marker: str) -> str:
    # Some clients send emoji without the presentation selector.
    return marker.strip().replace("\ufe0f", "")


def get_activity_config(kind: ActivityKind | str) -> ActivityConfig:
    return ACTIVITY_CONFIG[ActivityKind(kind)]


def kind_for_marker(marker: str | None) -> ActivityKind | None:
    """Map a stored emoji marker to its ActivityKind. None for non-workout markers."""
    if not marker:
        return None
    return _KIND_BY_MARKER.get(_normalize_marker(marker))


def marker_for_kind(kind: ActivityKind | str) -> str:
    return get_activity_config(kind).marker


def is_goal_marker(marker: str | None) -> bool:
    return canonical_goal_marker(marker) is not None


def canonical_goal_marker(marker: str | None) -> str | None:
    """The GOAL_MARKERS entry `marker` spells, with or without the presentation selector."""
    if not marker:
        return None
    wanted = _normalize_marker(marker)
    for candidate in GOAL_MARKERS:
        if _normalize_marker(candidate) == wanted:
            return candidate
    return None


def marker_spellings(markers: list[str]) -> list[str]:
    """Every stored spelling of `markers`: bare and with U+FE0F appended."""
    spellings: list[str] = []
    for marker in markers:
        bare = _normalize_marker(marker)
        for spelling in (bare, bare + "\ufe0f"):
            if spelling not in spellings:
                spellings.append(spelling)
    return spellings


def tracks_speed(kind: ActivityKind | str | None) -> bool:
    if kind is None:
        return False
    try:
        return get_activity_config(kind).tracks_speed
    except ValueError:
        return False


def tracks_distance(kind: ActivityKind | str | None) -> bool:
    if kind is None:
        return False
    try:
        return get_activity_config(kind).tracks_distance
    except ValueError:
        return False
