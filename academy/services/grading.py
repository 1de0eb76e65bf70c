# academy/services/grading.py
"""Score aggregation and class ranking.

Pure functions shared by score entry, result compilation and the broadsheet.
Nothing here touches the database.
"""
import math
from typing import Any, Hashable, Iterable, List, Optional, Sequence, Tuple
from pydantic import BaseModel

# (lower bound, grade, remark), checked top-down
GRADE_BANDS: Tuple[Tuple[float, str, str], ...] = (
    (80, "A", "Excellent"),
    (70, "B", "Very Good"),
    (60, "C", "Good"),
    (50, "D", "Fair"),
    (45, "E", "Pass"),
)
FAIL_GRADE = "F"
FAIL_REMARK = "Fail"

REMARKS = {grade: remark for _, grade, remark in GRADE_BANDS}
REMARKS[FAIL_GRADE] = FAIL_REMARK

PRINCIPAL_COMMENTS: Tuple[Tuple[float, str], ...] = (
    (80, "Exceptional performance! Keep up the excellent work. You are a role model for others."),
    (70, "Very good performance! Continue to work hard and aim for excellence."),
    (60, "Good performance! There is room for improvement. Stay focused and dedicated."),
    (50, "Fair performance. More effort and dedication needed for better results."),
)
PRINCIPAL_FALLBACK = "Poor performance. Requires immediate attention and significant improvement."


class ScoreOutOfRange(ValueError):
    """A CA or exam mark is negative or above its maximum."""
    def __init__(self, field: str, value: float, maximum: float):
        self.field = field
        self.value = value
        self.maximum = maximum
        super().__init__(f"{field} must be between 0 and {maximum:g}, got {value:g}")


class ScoreLimits(BaseModel):
    ca1: float = 20
    ca2: float = 20
    exam: float = 60

    @property
    def total(self) -> float:
        return self.ca1 + self.ca2 + self.exam


class ScoreBreakdown(BaseModel):
    ca1: float
    ca2: float
    exam: float
    total: float
    grade: str
    remark: str


class RankedEntry(BaseModel):
    key: Any
    value: float
    position: int


class ClassStatistics(BaseModel):
    average: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0
    count: int = 0


def grade_for_total(total: float) -> str:
    for lower, grade, _ in GRADE_BANDS:
        if total >= lower:
            return grade
    return FAIL_GRADE


def remark_for_grade(grade: str) -> str:
    return REMARKS.get(grade, "N/A")


def aggregate_score(
    ca1: float,
    ca2: float,
    exam: float,
    limits: Optional[ScoreLimits] = None
) -> ScoreBreakdown:
    """Total a subject's CA1, CA2 and exam marks and grade the total.

    Raises ScoreOutOfRange when any mark is negative, above its limit or
    not a finite number.
    """
    limits = limits or ScoreLimits()
    for field, value, maximum in (
        ("ca1", ca1, limits.ca1),
        ("ca2", ca2, limits.ca2),
        ("exam", exam, limits.exam),
    ):
        if not math.isfinite(value) or value < 0 or value > maximum:
            raise ScoreOutOfRange(field, value, maximum)

    total = round(ca1 + ca2 + exam, 2)
    grade = grade_for_total(total)
    return ScoreBreakdown(
        ca1=ca1,
        ca2=ca2,
        exam=exam,
        total=total,
        grade=grade,
        remark=remark_for_grade(grade),
    )


def rank(entries: Iterable[Tuple[Hashable, float]]) -> List[RankedEntry]:
    """Order entries by value, highest first, and assign positions.

    The sort is stable, so tied entries keep their input order and take
    consecutive positions: 85, 70, 70, 40 -> 1, 2, 3, 4.
    """
    ordered = sorted(entries, key=lambda item: item[1], reverse=True)
    return [
        RankedEntry(key=key, value=value, position=index)
        for index, (key, value) in enumerate(ordered, start=1)
    ]


def class_average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


def class_statistics(values: Sequence[float]) -> ClassStatistics:
    if not values:
        return ClassStatistics()
    return ClassStatistics(
        average=class_average(values),
        minimum=min(values),
        maximum=max(values),
        count=len(values),
    )


def ordinal(position: int) -> str:
    if 10 <= position % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(position % 10, "th")
    return f"{position}{suffix}"


def principal_comment(average: float) -> str:
    for lower, comment in PRINCIPAL_COMMENTS:
        if average >= lower:
            return comment
    return PRINCIPAL_FALLBACK
