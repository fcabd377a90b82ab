from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.log import setup_logger
from app.tracker.router import router as tracker_router

setup_logger()

app = FastAPI(title="Trail Tracker", version="0.1.0")
app.include_router(tracker_router)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Record store failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Record store unavailable"})


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "tracker": {
            "activities": "/tracker/activities",
            "workouts": "/tracker/workouts",
            "workout_detail": "/tracker/workouts/{id}",
            "goals": "/tracker/goals",
            "goal_markers": "/tracker/goals/markers",
            "goal_toggle": "/tracker/goals/{id}/toggle",
            "checkin_today": "/tracker/checkins/today",
            "checkin_emotions": "/tracker/checkins/emotions",
            "dashboard": "/tracker/dashboard",
            "codec_encode": "/tracker/codec/encode",
            "codec_decode": "/tracker/codec/decode",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
