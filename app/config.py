from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/trailtracker"
    default_tz: str = "UTC"
    tracker_api_key: str | None = None

    # Single table shared by workouts, goals and check-ins (told apart by emoji marker)
    records_table: str = "todos"

    log_level: str = "INFO"
    log_file: str | None = None  # e.g. "logs/tracker.log"; console only when unset
    log_rotation: str = "10 MB"
    log_retention: str = "7 days"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
