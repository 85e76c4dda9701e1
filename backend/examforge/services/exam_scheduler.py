"""Greedy exam placement over ranked (window, room) candidates.

Requests are placed largest cohort first. For each request the ranked windows
and rooms are walked window-major under a shared try budget, and the first pair
that clears every hard constraint is committed. There is no backtracking: a
request that finds nothing within its budget is reported as unplaced and the
run moves on.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from examforge.core.exceptions import InvalidArgumentError
from examforge.models.exam import (
    Department,
    ExamPlacement,
    ExamRequest,
    ExamRoom,
    ExamSchedule,
    ExamWindow,
)
from examforge.services.exam_conflicts import ExamConflictChecker
from examforge.services.exam_gateways import CalendarGateway, CampusMapGateway, ExamPolicyGateway
from examforge.services.exam_policy import DEFAULT_EXAM_POLICY, ExamSchedulingPolicy
from examforge.services.exam_ranking import FairnessLedger, rank_rooms, rank_windows

logger = logging.getLogger(__name__)

# Departments compare in declaration order, not alphabetically.
DEPARTMENT_RANK = {department: index for index, department in enumerate(Department)}


def request_priority_order(requests: Sequence[ExamRequest]) -> list[ExamRequest]:
    # Stable sort: equal headcount and department keep the caller's order.
    return sorted(
        requests,
        key=lambda req: (-req.expected_headcount, DEPARTMENT_RANK[req.department]),
    )


class ExamSchedulingOptimizer:
    def __init__(
        self,
        *,
        calendar: CalendarGateway,
        campus_map: CampusMapGateway,
        policies: ExamPolicyGateway,
        policy: ExamSchedulingPolicy | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        if calendar is None:
            raise InvalidArgumentError("calendar")
        if campus_map is None:
            raise InvalidArgumentError("campus_map")
        if policies is None:
            raise InvalidArgumentError("policies")
        self.policies = policies
        self.policy = policy or DEFAULT_EXAM_POLICY
        self.logger = log or logger
        self.checker = ExamConflictChecker(
            calendar=calendar,
            campus_map=campus_map,
            policies=policies,
            policy=self.policy,
        )

    def plan(
        self,
        requests: Sequence[ExamRequest],
        rooms: Sequence[ExamRoom],
        windows: Sequence[ExamWindow],
    ) -> ExamSchedule:
        if requests is None:
            raise InvalidArgumentError("requests")
        if rooms is None:
            raise InvalidArgumentError("rooms")
        if windows is None:
            raise InvalidArgumentError("windows")

        schedule = ExamSchedule()
        ledger = FairnessLedger()

        for request in request_priority_order(requests):
            placement = self._place_request(request, rooms, windows, schedule, ledger)
            if placement is None:
                schedule.unplaced.append(request.section_id)
                self.logger.warning("Exam not placed: section=%s", request.section_id)
                continue
            schedule.items.append(placement)
            ledger.record(request.department, placement.day_part)

        self.logger.info(
            "Exam scheduling finished: placed=%d unplaced=%d",
            schedule.placed_count,
            schedule.unplaced_count,
        )
        self.logger.debug(
            "Exam fairness ledger: %s",
            {department.value: used for department, used in ledger.snapshot().items()},
        )
        return schedule

    def _place_request(
        self,
        request: ExamRequest,
        rooms: Sequence[ExamRoom],
        windows: Sequence[ExamWindow],
        schedule: ExamSchedule,
        ledger: FairnessLedger,
    ) -> ExamPlacement | None:
        candidate_windows = rank_windows(request, windows, ledger, self.policies, self.policy)
        candidate_rooms = rank_rooms(request, rooms, self.policy)

        tries = 0
        for window in candidate_windows:
            for room in candidate_rooms:
                if tries >= self.policy.max_tries_per_request:
                    self.logger.debug(
                        "Try budget of %d exhausted for section=%s",
                        self.policy.max_tries_per_request,
                        request.section_id,
                    )
                    return None
                tries += 1

                violation = self.checker.first_violation(request, room, window, schedule)
                if violation is not None:
                    self.logger.debug(
                        "Rejected section=%s room=%s day=%s start=%d: %s",
                        request.section_id,
                        room.room_id,
                        window.day.value,
                        window.start,
                        violation,
                    )
                    continue

                return ExamPlacement(
                    section_id=request.section_id,
                    course_id=request.course_id,
                    department=request.department,
                    room_id=room.room_id,
                    building=room.building,
                    day=window.day,
                    day_part=window.day_part,
                    start=window.start,
                    end=window.start + request.duration_minutes,
                )
        return None
