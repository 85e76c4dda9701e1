from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from examforge.api.deps import get_exam_policy
from examforge.schemas.exam import ExamScheduleOut, ExamSchedulingRequest
from examforge.schemas.settings import ExamSchedulingPolicyOut
from examforge.services.exam_gateways import (
    InMemoryCalendarGateway,
    InMemoryCampusMapGateway,
    InMemoryExamPolicyRepo,
)
from examforge.services.exam_policy import ExamSchedulingPolicy
from examforge.services.exam_scheduler import ExamSchedulingOptimizer

router = APIRouter()

logger = logging.getLogger(__name__)


def build_optimizer(payload: ExamSchedulingRequest, policy: ExamSchedulingPolicy) -> ExamSchedulingOptimizer:
    calendar = InMemoryCalendarGateway()
    for block in payload.room_blocks:
        calendar.block_room(block.resource_id, block.day, block.start_minutes, block.end_minutes)
    for block in payload.instructor_blocks:
        calendar.block_instructor(block.resource_id, block.day, block.start_minutes, block.end_minutes)

    campus_map = InMemoryCampusMapGateway(default_minutes=policy.default_travel_minutes)
    for entry in payload.travel_minutes:
        campus_map.seed_travel(entry.origin, entry.destination, entry.minutes)

    policies = InMemoryExamPolicyRepo()
    for blackout in payload.blackouts:
        policies.add_blackout(blackout.day, blackout.start_minutes, blackout.end_minutes)
    for block in payload.proctor_blocks:
        policies.block_proctor(block.department, block.day)
    for department, parts in payload.allowed_day_parts.items():
        policies.set_allowed_day_parts(department, parts)

    return ExamSchedulingOptimizer(
        calendar=calendar,
        campus_map=campus_map,
        policies=policies,
        policy=policy,
    )


@router.get("/exams/policy", response_model=ExamSchedulingPolicyOut)
def read_exam_policy(policy: ExamSchedulingPolicy = Depends(get_exam_policy)) -> ExamSchedulingPolicyOut:
    return ExamSchedulingPolicyOut.from_policy(policy)


@router.post("/exams/schedule", response_model=ExamScheduleOut)
def schedule_exams(
    payload: ExamSchedulingRequest,
    policy: ExamSchedulingPolicy = Depends(get_exam_policy),
) -> ExamScheduleOut:
    logger.info(
        "Exam scheduling requested: requests=%d rooms=%d windows=%d",
        len(payload.requests),
        len(payload.rooms),
        len(payload.windows),
    )
    optimizer = build_optimizer(payload, policy)
    schedule = optimizer.plan(
        [item.to_domain() for item in payload.requests],
        [item.to_domain() for item in payload.rooms],
        [item.to_domain() for item in payload.windows],
    )
    return ExamScheduleOut.from_domain(schedule)
