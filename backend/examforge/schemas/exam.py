from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from examforge.models.exam import (
    BuildingCode,
    DayPart,
    DaySlot,
    Department,
    ExamPlacement,
    ExamRequest,
    ExamRoom,
    ExamSchedule,
    ExamWindow,
    RoomType,
    minutes_to_time,
)
from examforge.schemas.settings import parse_time_to_minutes, validate_time_value


class TimeRangePayload(BaseModel):
    day: DaySlot
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return validate_time_value(value)

    @model_validator(mode="after")
    def validate_time_order(self) -> "TimeRangePayload":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def start_minutes(self) -> int:
        return parse_time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_time_to_minutes(self.end_time)


class ExamRequestPayload(BaseModel):
    section_id: str = Field(min_length=1, max_length=64)
    course_id: str = Field(min_length=1, max_length=64)
    department: Department
    expected_headcount: int = Field(ge=0, le=5000)
    duration_minutes: int = Field(ge=1, le=24 * 60)
    preferred_day_part: DayPart = DayPart.morning
    needs_accessibility: bool = False
    requires_computers: bool = False
    previous_instructor_section_id: str | None = Field(default=None, max_length=64)

    def to_domain(self) -> ExamRequest:
        return ExamRequest(
            section_id=self.section_id,
            course_id=self.course_id,
            department=self.department,
            expected_headcount=self.expected_headcount,
            duration_minutes=self.duration_minutes,
            preferred_day_part=self.preferred_day_part,
            needs_accessibility=self.needs_accessibility,
            requires_computers=self.requires_computers,
            previous_instructor_section_id=self.previous_instructor_section_id or None,
        )


class ExamRoomPayload(BaseModel):
    room_id: str = Field(min_length=1, max_length=64)
    building: BuildingCode
    room_type: RoomType
    capacity: int = Field(ge=0, le=5000)
    has_computers: bool = False
    is_accessible: bool = False

    def to_domain(self) -> ExamRoom:
        return ExamRoom(
            room_id=self.room_id,
            building=self.building,
            room_type=self.room_type,
            capacity=self.capacity,
            has_computers=self.has_computers,
            is_accessible=self.is_accessible,
        )


class ExamWindowPayload(TimeRangePayload):
    day_part: DayPart

    def to_domain(self) -> ExamWindow:
        return ExamWindow(
            day=self.day,
            day_part=self.day_part,
            start=self.start_minutes,
            end=self.end_minutes,
        )


class ResourceBlockPayload(TimeRangePayload):
    resource_id: str = Field(min_length=1, max_length=64)


class ProctorBlockPayload(BaseModel):
    department: Department
    day: DaySlot


class TravelTimePayload(BaseModel):
    origin: BuildingCode
    destination: BuildingCode
    minutes: int = Field(ge=0, le=240)


class ExamSchedulingRequest(BaseModel):
    requests: list[ExamRequestPayload] = Field(max_length=2000)
    rooms: list[ExamRoomPayload] = Field(max_length=500)
    windows: list[ExamWindowPayload] = Field(max_length=500)
    room_blocks: list[ResourceBlockPayload] = Field(default_factory=list)
    instructor_blocks: list[ResourceBlockPayload] = Field(default_factory=list)
    blackouts: list[TimeRangePayload] = Field(default_factory=list)
    proctor_blocks: list[ProctorBlockPayload] = Field(default_factory=list)
    allowed_day_parts: dict[Department, list[DayPart]] = Field(default_factory=dict)
    travel_minutes: list[TravelTimePayload] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "ExamSchedulingRequest":
        section_ids = [item.section_id for item in self.requests]
        if len(section_ids) != len(set(section_ids)):
            raise ValueError("Duplicate section_id in requests")
        room_ids = [item.room_id for item in self.rooms]
        if len(room_ids) != len(set(room_ids)):
            raise ValueError("Duplicate room_id in rooms")
        return self


class ExamPlacementOut(BaseModel):
    section_id: str
    course_id: str
    department: Department
    room_id: str
    building: BuildingCode
    day: DaySlot
    day_part: DayPart
    start_time: str
    end_time: str

    @classmethod
    def from_domain(cls, placement: ExamPlacement) -> "ExamPlacementOut":
        return cls(
            section_id=placement.section_id,
            course_id=placement.course_id,
            department=placement.department,
            room_id=placement.room_id,
            building=placement.building,
            day=placement.day,
            day_part=placement.day_part,
            start_time=minutes_to_time(placement.start),
            end_time=minutes_to_time(placement.end),
        )


class ExamScheduleOut(BaseModel):
    items: list[ExamPlacementOut]
    unplaced: list[str]
    placed_count: int
    unplaced_count: int

    @classmethod
    def from_domain(cls, schedule: ExamSchedule) -> "ExamScheduleOut":
        return cls(
            items=[ExamPlacementOut.from_domain(item) for item in schedule.items],
            unplaced=list(schedule.unplaced),
            placed_count=schedule.placed_count,
            unplaced_count=schedule.unplaced_count,
        )
