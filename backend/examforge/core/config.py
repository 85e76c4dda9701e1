from functools import lru_cache
import json
from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from examforge.models.exam import RoomType


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(env_file=str(BACKEND_ENV_FILE), env_file_encoding="utf-8")

    project_name: str = "ExamForge API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    max_request_size_bytes: int = 2_500_000
    security_enable_hsts: bool = False
    security_hsts_max_age_seconds: int = 31536000

    exam_max_tries_per_request: int = 12
    exam_fairness_rotation_span: int = 3
    exam_min_travel_minutes: int = 8
    exam_buffer_before_minutes: int = 5
    exam_buffer_after_minutes: int = 5
    exam_default_travel_minutes: int = 10
    exam_allowed_room_types: Annotated[list[RoomType], NoDecode] = [
        RoomType.auditorium,
        RoomType.standard,
        RoomType.online,
    ]

    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("cors_origins", "exam_allowed_room_types", mode="before")
    @classmethod
    def split_list_values(cls, value):
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("exam_max_tries_per_request", "exam_fairness_rotation_span")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Value must be at least 1")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
