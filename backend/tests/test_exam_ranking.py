from unittest.mock import MagicMock

import pytest

from examforge.models.exam import BuildingCode, DayPart, DaySlot, Department, ExamRequest, ExamRoom, ExamWindow, RoomType
from examforge.services.exam_gateways import InMemoryExamPolicyRepo
from examforge.services.exam_policy import DEFAULT_EXAM_POLICY, ExamSchedulingPolicy
from examforge.services.exam_ranking import (
    FairnessLedger,
    rank_rooms,
    rank_windows,
    score_room,
    score_window,
    window_fits_policy,
)


def _request(**overrides):
    values = dict(
        section_id="S1",
        course_id="C1",
        department=Department.ee,
        expected_headcount=50,
        duration_minutes=60,
        preferred_day_part=DayPart.morning,
    )
    values.update(overrides)
    return ExamRequest(**values)


def _room(room_id, capacity=60, room_type=RoomType.standard, **kwargs):
    return ExamRoom(room_id=room_id, building=BuildingCode.eng, room_type=room_type, capacity=capacity, **kwargs)


def _window(part=DayPart.morning, start=540, end=720, day=DaySlot.mon):
    return ExamWindow(day=day, day_part=part, start=start, end=end)


def _open_policies():
    policies = MagicMock()
    policies.is_blackout.return_value = False
    policies.allowed_day_parts.return_value = list(DayPart)
    return policies


def test_ledger_defaults_to_zero_and_counts_prime_only():
    ledger = FairnessLedger()
    assert ledger.count(Department.cs) == 0

    ledger.record(Department.cs, DayPart.morning)
    ledger.record(Department.cs, DayPart.evening)
    ledger.record(Department.cs, DayPart.afternoon)
    ledger.record(Department.bus, DayPart.evening)

    assert ledger.count(Department.cs) == 2
    assert ledger.snapshot() == {Department.cs: 2, Department.bus: 0}


def test_window_filter_rejects_short_windows():
    policies = _open_policies()
    assert window_fits_policy(_request(duration_minutes=180), _window(start=540, end=720), policies)
    assert not window_fits_policy(_request(duration_minutes=181), _window(start=540, end=720), policies)


def test_window_filter_checks_blackout_over_exam_span():
    policies = InMemoryExamPolicyRepo()
    policies.add_blackout(DaySlot.mon, 540, 600)

    assert not window_fits_policy(_request(duration_minutes=60), _window(), policies)
    # blackouts are keyed on the exact exam span
    assert window_fits_policy(_request(duration_minutes=90), _window(), policies)


def test_window_filter_applies_department_day_parts():
    policies = InMemoryExamPolicyRepo()
    assert not window_fits_policy(_request(department=Department.cs), _window(part=DayPart.evening, start=1080, end=1260), policies)
    assert not window_fits_policy(_request(department=Department.bus), _window(part=DayPart.morning), policies)
    assert window_fits_policy(_request(department=Department.bus), _window(part=DayPart.evening, start=1080, end=1260), policies)


@pytest.mark.parametrize(
    ("used", "part", "preferred", "needs_access", "expected"),
    [
        (0, DayPart.morning, DayPart.morning, False, 20 - 10),
        (1, DayPart.morning, DayPart.morning, False, 20 + 5),
        (3, DayPart.afternoon, DayPart.morning, False, -10),
        (2, DayPart.afternoon, DayPart.afternoon, False, 20 + 5),
        (0, DayPart.evening, DayPart.morning, False, 0),
        (0, DayPart.evening, DayPart.evening, True, 20),
        (1, DayPart.morning, DayPart.evening, True, 5 + 8),
    ],
)
def test_window_score_components(used, part, preferred, needs_access, expected):
    ledger = FairnessLedger()
    for _ in range(used):
        ledger.record(Department.ee, DayPart.morning)
    request = _request(preferred_day_part=preferred, needs_accessibility=needs_access)

    assert score_window(request, _window(part=part), ledger, _open_policies(), DEFAULT_EXAM_POLICY) == expected


def test_blackout_penalty_only_applies_when_scoring_directly():
    policies = _open_policies()
    policies.is_blackout.return_value = True
    request = _request()
    window = _window(part=DayPart.evening, start=1080, end=1260)

    assert score_window(request, window, FairnessLedger(), policies, DEFAULT_EXAM_POLICY) == -40
    assert rank_windows(request, [window], FairnessLedger(), policies, DEFAULT_EXAM_POLICY) == []


def test_rotation_span_comes_from_policy():
    ledger = FairnessLedger()
    ledger.record(Department.ee, DayPart.morning)
    policy = ExamSchedulingPolicy(fairness_rotation_span=1)

    # every count is a multiple of one, so prime windows are always penalised
    assert score_window(_request(), _window(), ledger, _open_policies(), policy) == 10


def test_rank_windows_orders_by_score_and_keeps_ties_stable():
    evening = _window(part=DayPart.evening, start=1080, end=1260)
    morning_mon = _window(day=DaySlot.mon)
    morning_tue = _window(day=DaySlot.tue)
    afternoon = _window(part=DayPart.afternoon, start=780, end=960)
    ledger = FairnessLedger()
    ledger.record(Department.ee, DayPart.morning)

    ranked = rank_windows(_request(), [evening, morning_mon, afternoon, morning_tue], ledger, _open_policies(), DEFAULT_EXAM_POLICY)

    assert ranked == [morning_mon, morning_tue, afternoon, evening]


def test_prime_windows_are_penalised_one_time_in_three():
    ledger = FairnessLedger()
    request = _request(department=Department.cs, preferred_day_part=DayPart.evening)
    window = _window(part=DayPart.afternoon, start=780, end=960)

    penalised = 0
    placements = 30
    for _ in range(placements):
        if score_window(request, window, ledger, _open_policies(), DEFAULT_EXAM_POLICY) < 0:
            penalised += 1
        ledger.record(Department.cs, window.day_part)

    assert abs(penalised / placements - 1 / 3) < 0.05


def test_room_score_headroom_is_capped():
    request = _request(expected_headcount=50)
    assert score_room(request, _room("R1", capacity=50)) == 0
    assert score_room(request, _room("R2", capacity=74)) == 4
    assert score_room(request, _room("R3", capacity=500)) == 30
    assert score_room(request, _room("R4", capacity=10)) == 0


def test_room_score_equipment_bonuses():
    request = _request(needs_accessibility=True, requires_computers=True)
    plain = _room("R1")
    equipped = _room("R2", is_accessible=True, has_computers=True)

    assert score_room(request, plain) == 2
    assert score_room(request, equipped) == 2 + 15 + 10
    assert score_room(_request(), equipped) == 2


def test_rank_rooms_filters_types_and_sorts():
    lab = _room("LAB", capacity=500, room_type=RoomType.lab)
    studio = _room("STUDIO", capacity=500, room_type=RoomType.studio)
    small = _room("SMALL", capacity=55)
    big_a = _room("BIG-A", capacity=200, room_type=RoomType.auditorium)
    online = _room("ONLINE", capacity=60, room_type=RoomType.online)
    big_b = _room("BIG-B", capacity=300)

    ranked = rank_rooms(_request(), [lab, studio, small, big_a, online, big_b], DEFAULT_EXAM_POLICY)

    assert [room.room_id for room in ranked] == ["BIG-A", "BIG-B", "ONLINE", "SMALL"]


def test_rank_rooms_uses_configured_room_types():
    policy = ExamSchedulingPolicy(allowed_room_types={RoomType.lab})
    rooms = [_room("STD"), _room("LAB", room_type=RoomType.lab)]

    assert [room.room_id for room in rank_rooms(_request(), rooms, policy)] == ["LAB"]
