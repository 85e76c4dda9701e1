from __future__ import annotations

from collections.abc import Sequence

from examforge.models.exam import DayPart, Department, ExamRequest, ExamRoom, ExamWindow, is_prime_day_part
from examforge.services.exam_gateways import ExamPolicyGateway
from examforge.services.exam_policy import ExamSchedulingPolicy

PREFERRED_DAY_PART_BONUS = 20
BLACKOUT_PENALTY = 40
ROTATION_PENALTY = 10
PRIME_SLOT_BONUS = 5
ACCESSIBLE_MORNING_BONUS = 8

MAX_HEADROOM_BONUS = 30
HEADROOM_STEP = 5
ACCESSIBLE_ROOM_BONUS = 15
COMPUTER_ROOM_BONUS = 10


class FairnessLedger:
    """Per-run count of prime day-part placements for each department."""

    def __init__(self) -> None:
        self._counts: dict[Department, int] = {}

    def count(self, department: Department) -> int:
        return self._counts.get(department, 0)

    def record(self, department: Department, day_part: DayPart) -> None:
        used = self.count(department)
        self._counts[department] = used + (1 if is_prime_day_part(day_part) else 0)

    def snapshot(self) -> dict[Department, int]:
        return dict(self._counts)


def window_fits_policy(
    request: ExamRequest,
    window: ExamWindow,
    policy_gateway: ExamPolicyGateway,
) -> bool:
    exam_end = window.start + request.duration_minutes
    if exam_end > window.end:
        return False
    if policy_gateway.is_blackout(window.day, window.start, exam_end):
        return False
    if window.day_part not in set(policy_gateway.allowed_day_parts(request.department)):
        return False
    return True


def score_window(
    request: ExamRequest,
    window: ExamWindow,
    ledger: FairnessLedger,
    policy_gateway: ExamPolicyGateway,
    policy: ExamSchedulingPolicy,
) -> int:
    score = 0
    if window.day_part == request.preferred_day_part:
        score += PREFERRED_DAY_PART_BONUS

    # Blackout windows never reach scoring because window_fits_policy drops them.
    if policy_gateway.is_blackout(window.day, window.start, window.start + request.duration_minutes):
        score -= BLACKOUT_PENALTY

    prime = is_prime_day_part(window.day_part)
    if prime and ledger.count(request.department) % policy.fairness_rotation_span == 0:
        score -= ROTATION_PENALTY
    elif prime:
        score += PRIME_SLOT_BONUS

    if request.needs_accessibility and window.day_part == DayPart.morning:
        score += ACCESSIBLE_MORNING_BONUS
    return score


def rank_windows(
    request: ExamRequest,
    windows: Sequence[ExamWindow],
    ledger: FairnessLedger,
    policy_gateway: ExamPolicyGateway,
    policy: ExamSchedulingPolicy,
) -> list[ExamWindow]:
    eligible = [window for window in windows if window_fits_policy(request, window, policy_gateway)]
    # sorted() is stable, so equal scores keep input order
    return sorted(
        eligible,
        key=lambda window: score_window(request, window, ledger, policy_gateway, policy),
        reverse=True,
    )


def score_room(request: ExamRequest, room: ExamRoom) -> int:
    score = 0
    if room.capacity >= request.expected_headcount:
        score += min(MAX_HEADROOM_BONUS, (room.capacity - request.expected_headcount) // HEADROOM_STEP)
    if request.needs_accessibility and room.is_accessible:
        score += ACCESSIBLE_ROOM_BONUS
    if request.requires_computers and room.has_computers:
        score += COMPUTER_ROOM_BONUS
    return score


def rank_rooms(
    request: ExamRequest,
    rooms: Sequence[ExamRoom],
    policy: ExamSchedulingPolicy,
) -> list[ExamRoom]:
    eligible = [room for room in rooms if room.room_type in policy.allowed_room_types]
    return sorted(eligible, key=lambda room: score_room(request, room), reverse=True)
