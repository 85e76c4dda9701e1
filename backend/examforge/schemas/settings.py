from __future__ import annotations

import re

from pydantic import BaseModel

from examforge.models.exam import RoomType
from examforge.services.exam_policy import ExamSchedulingPolicy

TIME_PATTERN: re.Pattern[str] = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def validate_time_value(value: str) -> str:
    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return value


class ExamSchedulingPolicyOut(BaseModel):
    max_tries_per_request: int
    fairness_rotation_span: int
    min_travel_minutes: int
    buffer_before_minutes: int
    buffer_after_minutes: int
    default_travel_minutes: int
    allowed_room_types: list[RoomType]

    @classmethod
    def from_policy(cls, policy: ExamSchedulingPolicy) -> "ExamSchedulingPolicyOut":
        return cls(
            max_tries_per_request=policy.max_tries_per_request,
            fairness_rotation_span=policy.fairness_rotation_span,
            min_travel_minutes=policy.min_travel_minutes,
            buffer_before_minutes=policy.buffer_before_minutes,
            buffer_after_minutes=policy.buffer_after_minutes,
            default_travel_minutes=policy.default_travel_minutes,
            # frozenset order is arbitrary
            allowed_room_types=sorted(policy.allowed_room_types, key=lambda item: item.value),
        )
