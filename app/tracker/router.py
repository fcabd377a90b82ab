"""Tracker HTTP router — workouts, goals, daily check-ins, dashboard."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import current_user_id, verify_api_key
from app.config import settings
from app.db import get_session
from app.tracker import codec, features, store
from app.tracker.activity import (
    ACTIVITY_CONFIG,
    CHECKIN_MARKER,
    GOAL_MARKERS,
    WORKOUT_MARKERS,
    ActivityKind,
    canonical_goal_marker,
    is_goal_marker,
    kind_for_marker,
    marker_for_kind,
    marker_spellings,
    tracks_distance,
    tracks_speed,
)
from app.tracker.checkin import EMOTION_OPTIONS, decode_checkin, encode_checkin, score_label
from app.tracker.models import (
    CheckIn,
    CheckInView,
    DashboardSummary,
    DecodeRequest,
    EncodeRequest,
    EncodeResponse,
    GoalIn,
    GoalPatch,
    GoalView,
    StructuredMetrics,
    WorkoutIn,
    WorkoutPatch,
    WorkoutView,
)

router = APIRouter(prefix="/tracker", tags=["tracker"])

# Older clients stored the heart without the emoji presentation selector.
CHECKIN_MARKERS = [CHECKIN_MARKER, CHECKIN_MARKER.replace("\ufe0f", "")]
GOAL_QUERY_MARKERS = marker_spellings(GOAL_MARKERS)


def _today(tz: str | None) -> date:
    tz_name = tz or settings.default_tz
    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=422, detail=f"Unknown timezone: {tz_name}")
    return datetime.now(zone).date()


def _workout_view(row: dict[str, Any]) -> WorkoutView:
    return WorkoutView(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        kind=kind_for_marker(row.get("emoji")),
        title=row.get("title") or "",
        date=row.get("due_date"),
        metrics=codec.decode(row.get("description")),
        priority=row.get("priority"),
        completed=bool(row.get("completed")),
        starred=bool(row.get("starred")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _goal_view(row: dict[str, Any]) -> GoalView:
    return GoalView(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        title=row.get("title") or "",
        description=row.get("description") or "",
        marker=canonical_goal_marker(row.get("emoji")) or row.get("emoji") or "",
        target_date=row.get("due_date"),
        priority=row.get("priority"),
        completed=bool(row.get("completed")),
        starred=bool(row.get("starred")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _checkin_view(row: dict[str, Any] | None, day: date, checkin: CheckIn | None = None) -> CheckInView:
    if checkin is None:
        checkin = decode_checkin(row.get("description") if row else None)
    return CheckInView(
        id=str(row["id"]) if row else None,
        date=day,
        label=score_label(checkin.score),
        **checkin.model_dump(),
    )


async def _get_workout_row(session: AsyncSession, user_id: str, workout_id: str) -> dict[str, Any]:
    row = await store.get(session, user_id, workout_id)
    if row is None or kind_for_marker(row.get("emoji")) is None:
        raise HTTPException(status_code=404, detail=f"Workout not found: {workout_id}")
    return row


async def _get_goal_row(session: AsyncSession, user_id: str, goal_id: str) -> dict[str, Any]:
    row = await store.get(session, user_id, goal_id)
    if row is None or not is_goal_marker(row.get("emoji")):
        raise HTTPException(status_code=404, detail=f"Goal not found: {goal_id}")
    return row


# ---------------------------------------------------------------------------
# /tracker/activities
# ---------------------------------------------------------------------------


@router.get("/activities")
async def activities_list(
    _: str = Depends(verify_api_key),
) -> list[dict]:
    return [
        {
            "kind": kind.value,
            "label": cfg.label,
            "marker": cfg.marker,
            "tracks_distance": tracks_distance(kind),
            "tracks_speed": tracks_speed(kind),
        }
        for kind, cfg in ACTIVITY_CONFIG.items()
    ]


@router.get("/goals/markers")
async def goal_markers_list(
    _: str = Depends(verify_api_key),
) -> list[str]:
    return GOAL_MARKERS


# ---------------------------------------------------------------------------
# /tracker/workouts
# ---------------------------------------------------------------------------


@router.get("/workouts", response_model=list[WorkoutView])
async def list_workouts(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
    kind: ActivityKind | None = Query(default=None, description="Only this activity kind"),
    q: str | None = Query(default=None, description="Search title, notes and location"),
) -> list[WorkoutView]:
    markers = [marker_for_kind(kind)] if kind is not None else WORKOUT_MARKERS
    rows = await store.query(session, user_id, markers=markers)
    return features.filter_workouts([_workout_view(r) for r in rows], kind=kind, search=q)


@router.post("/workouts", response_model=WorkoutView, status_code=201)
async def create_workout(
    payload: WorkoutIn,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
    tz: str | None = Query(default=None, description="Timezone used for the default date"),
) -> WorkoutView:
    record = {
        "title": payload.title,
        "description": codec.encode(payload.metrics, payload.kind),
        "emoji": marker_for_kind(payload.kind),
        "due_date": payload.date or _today(tz),
        "priority": payload.priority.value,
        "completed": payload.completed,
        "starred": payload.starred,
    }
    row = await store.create(session, user_id, record)
    return _workout_view(row)


@router.get("/workouts/{workout_id}", response_model=WorkoutView)
async def get_workout(
    workout_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
) -> WorkoutView:
    return _workout_view(await _get_workout_row(session, user_id, workout_id))


@router.patch("/workouts/{workout_id}", response_model=WorkoutView)
async def update_workout(
    workout_id: str,
    payload: WorkoutPatch,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
) -> WorkoutView:
    existing = await _get_workout_row(session, user_id, workout_id)
    changes: dict[str, Any] = {}

    kind = payload.kind or kind_for_marker(existing.get("emoji"))
    if payload.kind is not None:
        changes["emoji"] = marker_for_kind(payload.kind)
    if payload.metrics is not None or payload.kind is not None:
        # Re-encode so speed lines follow the (possibly new) kind.
        metrics = payload.metrics or codec.decode(existing.get("description"))
        changes["description"] = codec.encode(metrics, kind)
    if payload.title is not None:
        changes["title"] = payload.title
    if payload.date is not None:
        changes["due_date"] = payload.date
    if payload.priority is not None:
        changes["priority"] = payload.priority.value
    if payload.completed is not None:
        changes["completed"] = payload.completed
    if payload.starred is not None:
        changes["starred"] = payload.starred

    row = await store.update(session, user_id, workout_id, changes)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Workout not found: {workout_id}")
    return _workout_view(row)


@router.delete("/workouts/{workout_id}")
async def delete_workout(
    workout_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
) -> dict:
    await _get_workout_row(session, user_id, workout_id)
    if not await store.delete(session, user_id, workout_id):
        raise HTTPException(status_code=404, detail=f"Workout not found: {workout_id}")
    return {"id": workout_id, "deleted": True}


# ---------------------------------------------------------------------------
# /tracker/goals
# ---------------------------------------------------------------------------


@router.get("/goals", response_model=list[GoalView])
async def list_goals(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
    active: bool = Query(default=False, description="Only goals not yet completed"),
) -> list[GoalView]:
    rows = await store.query(session, user_id, markers=GOAL_QUERY_MARKERS)
    goals = [_goal_view(r) for r in rows]
    return features.active_goals(goals) if active else goals


@router.post("/goals", response_model=GoalView, status_code=201)
async def create_goal(
    payload: GoalIn,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
) -> GoalView:
    record = {
        "title": payload.title,
        "description": payload.description,
        "emoji": payload.marker,
        "due_date": payload.target_date,
        "priority": payload.priority.value,
        "completed": payload.completed,
        "starred": payload.starred,
    }
    return _goal_view(await store.create(session, user_id, record))


@router.patch("/goals/{goal_id}", response_model=GoalView)
async def update_goal(
    goal_id: str,
    payload: GoalPatch,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
) -> GoalView:
    await _get_goal_row(session, user_id, goal_id)
    fields = payload.model_dump(exclude_none=True)
    if "marker" in fields:
        fields["emoji"] = fields.pop("marker")
    if "target_date" in fields:
        fields["due_date"] = fields.pop("target_date")
    if "priority" in fields:
        fields["priority"] = payload.priority.value

    row = await store.update(session, user_id, goal_id, fields)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Goal not found: {goal_id}")
    return _goal_view(row)


@router.post("/goals/{goal_id}/toggle", response_model=GoalView)
async def toggle_goal(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
) -> GoalView:
    existing = await _get_goal_row(session, user_id, goal_id)
    row = await store.update(session, user_id, goal_id, {"completed": not existing.get("completed")})
    if row is None:
        raise HTTPException(status_code=404, detail=f"Goal not found: {goal_id}")
    return _goal_view(row)


@router.delete("/goals/{goal_id}")
async def delete_goal(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
) -> dict:
    await _get_goal_row(session, user_id, goal_id)
    if not await store.delete(session, user_id, goal_id):
        raise HTTPException(status_code=404, detail=f"Goal not found: {goal_id}")
    return {"id": goal_id, "deleted": True}


# ---------------------------------------------------------------------------
# /tracker/checkins
# ---------------------------------------------------------------------------


@router.get("/checkins/emotions")
async def emotions_list(
    _: str = Depends(verify_api_key),
) -> list[str]:
    return EMOTION_OPTIONS


@router.get("/checkins/today", response_model=CheckInView)
async def get_todays_checkin(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
    tz: str | None = Query(default=None, description="Timezone (e.g. US/Mountain)"),
) -> CheckInView:
    today = _today(tz)
    rows = await store.query(session, user_id, markers=CHECKIN_MARKERS, due_date=today, order_by="created_at")
    if not rows:
        raise HTTPException(status_code=404, detail=f"No check-in for {today.isoformat()}")
    return _checkin_view(rows[0], today)


@router.put("/checkins/today", response_model=CheckInView)
async def save_todays_checkin(
    payload: CheckIn,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
    tz: str | None = Query(default=None, description="Timezone (e.g. US/Mountain)"),
) -> CheckInView:
    today = _today(tz)
    record = {
        "title": f"Daily Check-in - {today.isoformat()}",
        "description": encode_checkin(payload),
        "emoji": CHECKIN_MARKER,
        "due_date": today,
        "completed": True,
        "priority": "medium",
    }

    rows = await store.query(session, user_id, markers=CHECKIN_MARKERS, due_date=today, order_by="created_at")
    row = None
    if rows:
        row = await store.update(session, user_id, str(rows[0]["id"]), record)
    if row is None:
        row = await store.create(session, user_id, record)
    return _checkin_view(row, today, payload)


# ---------------------------------------------------------------------------
# /tracker/dashboard
# ---------------------------------------------------------------------------


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Depends(current_user_id),
    tz: str | None = Query(default=None, description="Timezone (e.g. US/Mountain)"),
) -> DashboardSummary:
    today = _today(tz)
    workout_rows = await store.query(session, user_id, markers=WORKOUT_MARKERS)
    goal_rows = await store.query(session, user_id, markers=GOAL_QUERY_MARKERS)
    return features.summarize(
        [_workout_view(r) for r in workout_rows],
        [_goal_view(r) for r in goal_rows],
        today,
    )


# ---------------------------------------------------------------------------
# /tracker/codec
# ---------------------------------------------------------------------------


@router.post("/codec/encode", response_model=EncodeResponse)
async def encode_description(
    payload: EncodeRequest,
    _: str = Depends(verify_api_key),
) -> EncodeResponse:
    return EncodeResponse(description=codec.encode(payload.metrics, payload.kind))


@router.post("/codec/decode", response_model=StructuredMetrics)
async def decode_description(
    payload: DecodeRequest,
    _: str = Depends(verify_api_key),
) -> StructuredMetrics:
    return codec.decode(payload.description)
