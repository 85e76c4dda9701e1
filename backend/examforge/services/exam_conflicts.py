from __future__ import annotations

from typing import Literal

from examforge.models.exam import (
    ExamRequest,
    ExamRoom,
    ExamSchedule,
    ExamWindow,
    intervals_overlap,
)
from examforge.services.exam_gateways import CalendarGateway, CampusMapGateway, ExamPolicyGateway
from examforge.services.exam_policy import ExamSchedulingPolicy

ConflictRule = Literal[
    "room_fit",
    "room_availability",
    "instructor_proctor_availability",
    "cross_course_conflict",
    "back_to_back_travel",
]


def room_fits(request: ExamRequest, room: ExamRoom) -> bool:
    if room.capacity < request.expected_headcount:
        return False
    if request.requires_computers and not room.has_computers:
        return False
    if request.needs_accessibility and not room.is_accessible:
        return False
    return True


def avoids_cross_course_conflicts(request: ExamRequest, window: ExamWindow, schedule: ExamSchedule) -> bool:
    # same department stands in for a shared student cohort
    exam_end = window.start + request.duration_minutes
    for placed in schedule.placements_on(window.day):
        if placed.department != request.department:
            continue
        if intervals_overlap(window.start, exam_end, placed.start, placed.end):
            return False
    return True


class ExamConflictChecker:
    """Runs the hard constraints for one (room, window) candidate in a fixed order."""

    def __init__(
        self,
        *,
        calendar: CalendarGateway,
        campus_map: CampusMapGateway,
        policies: ExamPolicyGateway,
        policy: ExamSchedulingPolicy,
    ) -> None:
        self.calendar = calendar
        self.campus_map = campus_map
        self.policies = policies
        self.policy = policy

    def first_violation(
        self,
        request: ExamRequest,
        room: ExamRoom,
        window: ExamWindow,
        schedule: ExamSchedule,
    ) -> ConflictRule | None:
        if not room_fits(request, room):
            return "room_fit"
        if not self.room_available(request, room, window, schedule):
            return "room_availability"
        if not self.instructor_and_proctor_ok(request, window):
            return "instructor_proctor_availability"
        if not avoids_cross_course_conflicts(request, window, schedule):
            return "cross_course_conflict"
        if not self.travel_ok_for_back_to_back(request, room, window, schedule):
            return "back_to_back_travel"
        return None

    def room_available(
        self,
        request: ExamRequest,
        room: ExamRoom,
        window: ExamWindow,
        schedule: ExamSchedule,
    ) -> bool:
        # The calendar only knows bookings made outside this run.
        exam_end = window.start + request.duration_minutes
        for placed in schedule.placements_on(window.day):
            if placed.room_id == room.room_id and intervals_overlap(window.start, exam_end, placed.start, placed.end):
                return False
        return self.calendar.room_available(room.room_id, window.day, window.start, window.end)

    def instructor_and_proctor_ok(self, request: ExamRequest, window: ExamWindow) -> bool:
        if not self.calendar.instructor_available(request.section_id, window.day, window.start, window.end):
            return False
        if not self.policies.proctor_available(request.department, window.day, window.start, window.end):
            return False
        return True

    def travel_ok_for_back_to_back(
        self,
        request: ExamRequest,
        room: ExamRoom,
        window: ExamWindow,
        schedule: ExamSchedule,
    ) -> bool:
        previous_section = request.previous_instructor_section_id
        if not previous_section:
            return True
        for placed in schedule.placements_on(window.day):
            if placed.section_id != previous_section:
                continue
            free_from = placed.end + self.policy.buffer_after_minutes
            must_leave_by = window.start - self.policy.buffer_before_minutes
            travel = self.campus_map.travel_minutes_between(placed.building, room.building)
            if must_leave_by - free_from < max(travel, self.policy.min_travel_minutes):
                return False
        return True
