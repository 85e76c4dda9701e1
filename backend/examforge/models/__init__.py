from examforge.models.exam import (  # noqa: F401
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
)
