from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Department(str, Enum):
    cs = "CS"
    ee = "EE"
    me = "ME"
    bio = "BIO"
    bus = "BUS"
    art = "ART"
    law = "LAW"


class DayPart(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"


PRIME_DAY_PARTS = frozenset({DayPart.morning, DayPart.afternoon})


class RoomType(str, Enum):
    standard = "standard"
    lab = "lab"
    studio = "studio"
    auditorium = "auditorium"
    online = "online"


class DaySlot(str, Enum):
    mon = "Mon"
    tue = "Tue"
    wed = "Wed"
    thu = "Thu"
    fri = "Fri"
    sat = "Sat"


class BuildingCode(str, Enum):
    eng = "ENG"
    sci = "SCI"
    lib = "LIB"
    bus = "BUS"
    art = "ART"
    law = "LAW"
    online = "ONLINE"


def is_prime_day_part(part: DayPart) -> bool:
    return part in PRIME_DAY_PARTS


def minutes_to_time(value: int) -> str:
    hours = value // 60
    minutes = value % 60
    return f"{hours:02d}:{minutes:02d}"


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    return start_a < end_b and start_b < end_a


@dataclass(frozen=True)
class ExamRequest:
    section_id: str
    course_id: str
    department: Department
    expected_headcount: int
    duration_minutes: int
    preferred_day_part: DayPart = DayPart.morning
    needs_accessibility: bool = False
    requires_computers: bool = False
    # section taught right before this one by the same instructor
    previous_instructor_section_id: str | None = None


@dataclass(frozen=True)
class ExamRoom:
    room_id: str
    building: BuildingCode
    room_type: RoomType
    capacity: int
    has_computers: bool = False
    is_accessible: bool = False


@dataclass(frozen=True)
class ExamWindow:
    day: DaySlot
    day_part: DayPart
    start: int
    end: int


@dataclass(frozen=True)
class ExamPlacement:
    section_id: str
    course_id: str
    department: Department
    room_id: str
    building: BuildingCode
    day: DaySlot
    day_part: DayPart
    start: int
    end: int


@dataclass
class ExamSchedule:
    items: list[ExamPlacement] = field(default_factory=list)
    unplaced: list[str] = field(default_factory=list)

    @property
    def placed_count(self) -> int:
        return len(self.items)

    @property
    def unplaced_count(self) -> int:
        return len(self.unplaced)

    def placements_on(self, day: DaySlot) -> list[ExamPlacement]:
        return [item for item in self.items if item.day == day]
