import pytest

from academy.services.grading import (
    ScoreLimits, ScoreOutOfRange, aggregate_score, class_average,
    class_statistics, grade_for_total, ordinal, principal_comment, rank,
    remark_for_grade
)


def test_aggregate_totals_and_grades():
    result = aggregate_score(18, 17, 50)
    assert result.total == 85
    assert result.grade == "A"
    assert result.remark == "Excellent"


@pytest.mark.parametrize("total,grade", [
    (100, "A"), (80, "A"), (79.99, "B"), (70, "B"), (69.5, "C"), (60, "C"),
    (50, "D"), (49, "E"), (45, "E"), (44.99, "F"), (0, "F"),
])
def test_grade_bands(total, grade):
    assert grade_for_total(total) == grade


@pytest.mark.parametrize("grade,remark", [
    ("A", "Excellent"), ("B", "Very Good"), ("C", "Good"),
    ("D", "Fair"), ("E", "Pass"), ("F", "Fail"),
])
def test_remarks(grade, remark):
    assert remark_for_grade(grade) == remark


def test_unknown_grade_has_no_remark():
    assert remark_for_grade("Z") == "N/A"


@pytest.mark.parametrize("ca1,ca2,exam,field", [
    (25, 10, 40, "ca1"),
    (10, 21, 40, "ca2"),
    (10, 10, 61, "exam"),
    (-1, 10, 40, "ca1"),
    (float("nan"), 10, 40, "ca1"),
    (10, float("inf"), 40, "ca2"),
    (10, 10, float("-inf"), "exam"),
])
def test_out_of_range_marks_are_rejected(ca1, ca2, exam, field):
    with pytest.raises(ScoreOutOfRange) as exc_info:
        aggregate_score(ca1, ca2, exam)
    assert exc_info.value.field == field
    assert isinstance(exc_info.value, ValueError)


def test_custom_limits():
    limits = ScoreLimits(ca1=10, ca2=10, exam=80)
    assert limits.total == 100
    assert aggregate_score(10, 10, 80, limits).total == 100
    with pytest.raises(ScoreOutOfRange):
        aggregate_score(15, 10, 40, limits)


def test_rank_breaks_ties_by_input_order():
    ranked = rank([("ada", 85), ("bayo", 70), ("chidi", 70), ("dayo", 40)])
    assert [entry.position for entry in ranked] == [1, 2, 3, 4]
    assert [entry.key for entry in ranked] == ["ada", "bayo", "chidi", "dayo"]


def test_rank_sorts_descending():
    ranked = rank([("low", 40), ("high", 90), ("mid", 65)])
    assert [(entry.key, entry.position) for entry in ranked] == [("high", 1), ("mid", 2), ("low", 3)]


def test_rank_empty():
    assert rank([]) == []


def test_class_average():
    assert class_average([85, 70, 70, 40]) == 66.25
    assert class_average([]) == 0.0


def test_class_statistics():
    stats = class_statistics([85, 70, 70, 40])
    assert (stats.average, stats.minimum, stats.maximum, stats.count) == (66.25, 40, 85, 4)
    empty = class_statistics([])
    assert (empty.average, empty.count) == (0.0, 0)


@pytest.mark.parametrize("position,label", [
    (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"),
    (12, "12th"), (13, "13th"), (21, "21st"), (22, "22nd"), (111, "111th"),
])
def test_ordinal(position, label):
    assert ordinal(position) == label


def test_principal_comment_bands():
    assert principal_comment(85).startswith("Exceptional")
    assert principal_comment(72).startswith("Very good")
    assert principal_comment(30).startswith("Poor")


def test_rank_tie_order_follows_input():
    ranked = rank([("chidi", 70), ("ada", 85), ("bayo", 70)])
    assert [(entry.key, entry.position) for entry in ranked] == [("ada", 1), ("chidi", 2), ("bayo", 3)]
