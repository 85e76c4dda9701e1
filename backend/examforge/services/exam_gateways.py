"""Collaborators the exam scheduler queries while placing exams.

The protocols describe the narrow read-only interface the optimizer needs. The
in-memory implementations back the HTTP endpoint and the tests; a deployment
can swap in adapters over real calendar or policy services.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from examforge.models.exam import BuildingCode, DayPart, DaySlot, Department

DEFAULT_TRAVEL_MINUTES = 10


class CalendarGateway(Protocol):
    def room_available(self, room_id: str, day: DaySlot, start: int, end: int) -> bool: ...

    def instructor_available(self, section_id: str, day: DaySlot, start: int, end: int) -> bool: ...


class CampusMapGateway(Protocol):
    def travel_minutes_between(self, origin: BuildingCode, destination: BuildingCode) -> int: ...


class ExamPolicyGateway(Protocol):
    def is_blackout(self, day: DaySlot, start: int, end: int) -> bool: ...

    def proctor_available(self, department: Department, day: DaySlot, start: int, end: int) -> bool: ...

    def allowed_day_parts(self, department: Department) -> Iterable[DayPart]: ...


class InMemoryCalendarGateway:
    """Everything is free unless an exact (id, day, start, end) slot was blocked."""

    def __init__(self) -> None:
        self._blocked_rooms: set[tuple[str, DaySlot, int, int]] = set()
        self._blocked_instructors: set[tuple[str, DaySlot, int, int]] = set()

    def block_room(self, room_id: str, day: DaySlot, start: int, end: int) -> None:
        self._blocked_rooms.add((room_id, day, start, end))

    def block_instructor(self, section_id: str, day: DaySlot, start: int, end: int) -> None:
        self._blocked_instructors.add((section_id, day, start, end))

    def room_available(self, room_id: str, day: DaySlot, start: int, end: int) -> bool:
        return (room_id, day, start, end) not in self._blocked_rooms

    def instructor_available(self, section_id: str, day: DaySlot, start: int, end: int) -> bool:
        return (section_id, day, start, end) not in self._blocked_instructors


class InMemoryCampusMapGateway:
    def __init__(self, *, default_minutes: int = DEFAULT_TRAVEL_MINUTES, seed_defaults: bool = True) -> None:
        self._default_minutes = default_minutes
        self._travel_minutes: dict[tuple[BuildingCode, BuildingCode], int] = {}
        if seed_defaults:
            self.seed_travel(BuildingCode.law, BuildingCode.online, 7)
            self.seed_travel(BuildingCode.eng, BuildingCode.sci, 4)
            self.seed_travel(BuildingCode.art, BuildingCode.lib, 6)

    def seed_travel(self, origin: BuildingCode, destination: BuildingCode, minutes: int) -> None:
        if minutes < 0:
            raise ValueError("Travel minutes cannot be negative")
        self._travel_minutes[(origin, destination)] = minutes

    def travel_minutes_between(self, origin: BuildingCode, destination: BuildingCode) -> int:
        if origin == destination:
            return 0
        value = self._travel_minutes.get((origin, destination))
        if value is None:
            value = self._travel_minutes.get((destination, origin))
        if value is None:
            return self._default_minutes
        return value


class InMemoryExamPolicyRepo:
    def __init__(self) -> None:
        self._blackouts: set[tuple[DaySlot, int, int]] = set()
        self._proctor_blocks: set[tuple[Department, DaySlot]] = set()
        self._allowed_parts: dict[Department, tuple[DayPart, ...]] = {
            Department.cs: (DayPart.morning, DayPart.afternoon),
            Department.bus: (DayPart.afternoon, DayPart.evening),
        }

    def add_blackout(self, day: DaySlot, start: int, end: int) -> None:
        self._blackouts.add((day, start, end))

    def block_proctor(self, department: Department, day: DaySlot) -> None:
        self._proctor_blocks.add((department, day))

    def set_allowed_day_parts(self, department: Department, parts: Iterable[DayPart] | None) -> None:
        self._allowed_parts[department] = tuple(parts or ())

    def is_blackout(self, day: DaySlot, start: int, end: int) -> bool:
        return (day, start, end) in self._blackouts

    def proctor_available(self, department: Department, day: DaySlot, start: int, end: int) -> bool:
        return (department, day) not in self._proctor_blocks

    def allowed_day_parts(self, department: Department) -> tuple[DayPart, ...]:
        parts = self._allowed_parts.get(department)
        if parts is None:
            return tuple(DayPart)
        return parts
