from __future__ import annotations

from dataclasses import dataclass

from examforge.core.config import Settings
from examforge.core.exceptions import ConfigurationError
from examforge.models.exam import RoomType


@dataclass(frozen=True)
class ExamSchedulingPolicy:
    max_tries_per_request: int = 12
    fairness_rotation_span: int = 3
    min_travel_minutes: int = 8
    buffer_before_minutes: int = 5
    buffer_after_minutes: int = 5
    default_travel_minutes: int = 10
    allowed_room_types: frozenset[RoomType] = frozenset(
        {RoomType.auditorium, RoomType.standard, RoomType.online}
    )

    def __post_init__(self) -> None:
        if self.max_tries_per_request < 1:
            raise ConfigurationError("max_tries_per_request must be at least 1")
        if self.fairness_rotation_span < 1:
            raise ConfigurationError("fairness_rotation_span must be at least 1")
        if min(
            self.min_travel_minutes,
            self.buffer_before_minutes,
            self.buffer_after_minutes,
            self.default_travel_minutes,
        ) < 0:
            raise ConfigurationError("Travel and buffer minutes cannot be negative")
        # accept any iterable of room types from callers
        object.__setattr__(self, "allowed_room_types", frozenset(self.allowed_room_types))

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExamSchedulingPolicy":
        return cls(
            max_tries_per_request=settings.exam_max_tries_per_request,
            fairness_rotation_span=settings.exam_fairness_rotation_span,
            min_travel_minutes=settings.exam_min_travel_minutes,
            buffer_before_minutes=settings.exam_buffer_before_minutes,
            buffer_after_minutes=settings.exam_buffer_after_minutes,
            default_travel_minutes=settings.exam_default_travel_minutes,
            allowed_room_types=frozenset(settings.exam_allowed_room_types),
        )


DEFAULT_EXAM_POLICY = ExamSchedulingPolicy()
