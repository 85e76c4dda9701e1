from examforge.core.config import get_settings
from examforge.services.exam_policy import ExamSchedulingPolicy


def get_exam_policy() -> ExamSchedulingPolicy:
    return ExamSchedulingPolicy.from_settings(get_settings())
