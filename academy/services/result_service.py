# academy/services/result_service.py
"""Score entry, result compilation and approval.

Every total, grade and position is computed with the shared functions in
``grading`` so the score sheet, the compiled result and the broadsheet agree.
"""
from typing import List, Optional, Dict, Any
from collections import defaultdict
from datetime import date
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from .base_service import BaseService
from .grading import (
    ScoreLimits, aggregate_score, class_average, class_statistics,
    grade_for_total, ordinal, principal_comment, rank
)
from ..core.cache import cache_manager
from ..core.config import settings
from ..core.exceptions import BadRequestError, NotFoundError
from ..models.attendance import Attendance, AttendanceStatus
from ..models.class_model import ClassModel
from ..models.results import CompiledResult, ResultStatus, Score, ScoreStatus
from ..models.student import Student
from ..models.subject import Subject, SubjectAssignment
from ..schemas.result_schemas import ApprovalRequest, CompileRequest, ScoreUpsertRequest

logger = logging.getLogger(__name__)


def score_limits() -> ScoreLimits:
    return ScoreLimits(ca1=settings.ca1_max, ca2=settings.ca2_max, exam=settings.exam_max)


class ResultService(BaseService[CompiledResult]):
    resource_name = "Result"

    def __init__(self, db: AsyncSession):
        super().__init__(CompiledResult, db)

    async def _get_assignment(self, assignment_id: int) -> SubjectAssignment:
        stmt = select(SubjectAssignment).where(
            SubjectAssignment.id == assignment_id,
            SubjectAssignment.is_deleted == False
        )
        assignment = (await self.db.execute(stmt)).scalar_one_or_none()
        if not assignment:
            raise NotFoundError("Subject assignment", assignment_id)
        return assignment

    async def _get_class(self, class_id: int) -> ClassModel:
        stmt = select(ClassModel).where(ClassModel.id == class_id, ClassModel.is_deleted == False)
        class_obj = (await self.db.execute(stmt)).scalar_one_or_none()
        if not class_obj:
            raise NotFoundError("Class", class_id)
        return class_obj

    async def _active_students(self, class_id: int) -> List[Student]:
        stmt = select(Student).where(
            Student.class_id == class_id,
            Student.is_deleted == False,
            Student.status == "Active"
        ).order_by(Student.last_name, Student.first_name)
        return (await self.db.execute(stmt)).scalars().all()

    async def _assignment_scores(self, assignment_id: int) -> List[Score]:
        stmt = select(Score).where(
            Score.subject_assignment_id == assignment_id,
            Score.is_deleted == False
        )
        return (await self.db.execute(stmt)).scalars().all()

    async def _invalidate_broadsheet(self, class_id: int):
        await cache_manager.delete_pattern("broadsheet", class_id)

    # Score entry

    async def upsert_scores(self, request: ScoreUpsertRequest) -> Dict[str, Any]:
        """Save Draft scores for one subject assignment and refresh its class statistics.

        All entries are graded before anything is written, so one bad mark
        rejects the whole sheet.
        """
        assignment = await self._get_assignment(request.subject_assignment_id)
        limits = score_limits()
        breakdowns = {
            entry.student_id: aggregate_score(entry.ca1, entry.ca2, entry.exam, limits)
            for entry in request.scores
        }

        stmt = select(Student.id).where(
            Student.id.in_(list(breakdowns)),
            Student.class_id == assignment.class_id,
            Student.is_deleted == False
        )
        enrolled = set((await self.db.execute(stmt)).scalars().all())
        missing = sorted(set(breakdowns) - enrolled)
        if missing:
            raise BadRequestError(f"Students {missing} are not enrolled in the assignment's class")

        existing = {score.student_id: score for score in await self._assignment_scores(assignment.id)}
        for student_id, breakdown in breakdowns.items():
            score = existing.get(student_id)
            if score and score.status == ScoreStatus.SUBMITTED.value:
                raise BadRequestError(f"Scores for student {student_id} are already submitted")
            if not score:
                score = Score(student_id=student_id, subject_assignment_id=assignment.id)
                self.db.add(score)
                existing[student_id] = score
            score.ca1 = breakdown.ca1
            score.ca2 = breakdown.ca2
            score.exam = breakdown.exam
            score.total = breakdown.total
            score.grade = breakdown.grade
            score.remark = breakdown.remark
            score.entered_by = request.entered_by
            score.status = ScoreStatus.DRAFT.value
            score.rejection_reason = None

        stats = class_statistics([score.total for score in existing.values()])
        for score in existing.values():
            score.class_average = stats.average
            score.class_min = stats.minimum
            score.class_max = stats.maximum

        await self._commit()
        await self._invalidate_broadsheet(assignment.class_id)
        logger.info(f"Saved {len(breakdowns)} score(s) for assignment {assignment.id}")
        return {"saved": len(breakdowns), "statistics": stats.model_dump()}

    async def get_scores(self, assignment_id: int) -> Dict[str, Any]:
        """Score sheet of one subject assignment with subject positions"""
        assignment = await self._get_assignment(assignment_id)
        stmt = (
            select(Score, Student)
            .join(Student, Student.id == Score.student_id)
            .where(Score.subject_assignment_id == assignment_id, Score.is_deleted == False)
            .order_by(Student.last_name, Student.first_name)
        )
        rows = (await self.db.execute(stmt)).all()
        positions = {entry.key: entry.position for entry in rank((score.id, score.total) for score, _ in rows)}
        stats = class_statistics([score.total for score, _ in rows])

        scores = [
            {
                "id": score.id,
                "student_id": student.id,
                "student_name": student.full_name,
                "admission_number": student.admission_number,
                "ca1": score.ca1,
                "ca2": score.ca2,
                "exam": score.exam,
                "total": score.total,
                "grade": score.grade,
                "remark": score.remark,
                "position": positions[score.id],
                "status": score.status,
                "rejection_reason": score.rejection_reason,
            }
            for score, student in rows
        ]
        scores.sort(key=lambda item: item["position"])
        return {
            "assignment_id": assignment.id,
            "class_id": assignment.class_id,
            "subject_id": assignment.subject_id,
            "term": assignment.term,
            "academic_year": assignment.academic_year,
            "statistics": stats.model_dump(),
            "scores": scores,
        }

    async def submit_scores(self, assignment_id: int) -> int:
        """Mark an assignment's scores Submitted once every active student has one"""
        assignment = await self._get_assignment(assignment_id)
        students = await self._active_students(assignment.class_id)
        if not students:
            raise BadRequestError("Class has no active students")

        scores = {score.student_id: score for score in await self._assignment_scores(assignment_id)}
        missing = [student.full_name for student in students if student.id not in scores]
        if missing:
            raise BadRequestError(f"{len(missing)} student(s) have no score: {', '.join(missing)}")

        for score in scores.values():
            score.status = ScoreStatus.SUBMITTED.value
            score.rejection_reason = None
        await self.db.commit()
        await self._invalidate_broadsheet(assignment.class_id)
        logger.info(f"Scores for assignment {assignment_id} submitted ({len(scores)})")
        return len(scores)

    async def reject_scores(self, assignment_id: int, reason: str) -> int:
        """Send submitted scores back to the subject teacher"""
        assignment = await self._get_assignment(assignment_id)
        submitted = [
            score for score in await self._assignment_scores(assignment_id)
            if score.status == ScoreStatus.SUBMITTED.value
        ]
        if not submitted:
            raise BadRequestError("No submitted scores to reject")
        for score in submitted:
            score.status = ScoreStatus.REJECTED.value
            score.rejection_reason = reason
        await self.db.commit()
        await self._invalidate_broadsheet(assignment.class_id)
        logger.info(f"Scores for assignment {assignment_id} rejected: {reason}")
        return len(submitted)

    # Compilation and approval

    async def _attendance_counts(self, student_ids: List[int]) -> Dict[int, Dict[str, int]]:
        stmt = (
            select(Attendance.student_id, Attendance.status, func.count(Attendance.id))
            .where(Attendance.student_id.in_(student_ids), Attendance.is_deleted == False)
            .group_by(Attendance.student_id, Attendance.status)
        )
        counts: Dict[int, Dict[str, int]] = defaultdict(lambda: {"present": 0, "absent": 0})
        for student_id, status, count in (await self.db.execute(stmt)).all():
            key = "absent" if status == AttendanceStatus.ABSENT.value else "present"
            counts[student_id][key] += count
        return counts

    async def compile_results(self, request: CompileRequest) -> Dict[str, Any]:
        """Compile term results for a class from its Submitted scores.

        Each student's average is total / subjects offered; students are ranked
        by average. Recompiling replaces earlier rows and resets them to
        Submitted; rows of students no longer in the ranking are removed.
        """
        class_obj = await self._get_class(request.class_id)
        term = request.term or settings.default_term
        academic_year = request.academic_year or settings.default_academic_year

        students = {student.id: student for student in await self._active_students(class_obj.id)}
        if not students:
            raise BadRequestError("Class has no active students")

        stmt = (
            select(Score.student_id, Score.total)
            .join(SubjectAssignment, SubjectAssignment.id == Score.subject_assignment_id)
            .where(
                SubjectAssignment.class_id == class_obj.id,
                SubjectAssignment.term == term,
                SubjectAssignment.academic_year == academic_year,
                SubjectAssignment.is_deleted == False,
                Score.is_deleted == False,
                Score.status == ScoreStatus.SUBMITTED.value,
                Score.student_id.in_(list(students))
            )
        )
        totals: Dict[int, List[float]] = defaultdict(list)
        for student_id, total in (await self.db.execute(stmt)).all():
            totals[student_id].append(total)
        if not totals:
            raise BadRequestError(f"No submitted scores for {class_obj.name}, {term} {academic_year}")

        # Class list order (surname, first name) settles ties
        averages = {
            student_id: round(sum(totals[student_id]) / len(totals[student_id]), 2)
            for student_id in students if student_id in totals
        }
        ranking = rank(averages.items())
        overall_average = class_average(list(averages.values()))
        attendance = await self._attendance_counts(list(totals.keys()))

        stmt = select(CompiledResult).where(
            CompiledResult.class_id == class_obj.id,
            CompiledResult.term == term,
            CompiledResult.academic_year == academic_year
        )
        existing = {result.student_id: result for result in (await self.db.execute(stmt)).scalars().all()}

        compiled = []
        for entry in ranking:
            student_id = entry.key
            result = existing.get(student_id)
            if not result:
                result = CompiledResult(
                    student_id=student_id,
                    class_id=class_obj.id,
                    term=term,
                    academic_year=academic_year
                )
                self.db.add(result)
            result.is_deleted = False
            result.total_score = round(sum(totals[student_id]), 2)
            result.average_score = entry.value
            result.subjects_offered = len(totals[student_id])
            result.grade = grade_for_total(entry.value)
            result.class_average = overall_average
            result.position = entry.position
            result.total_students = len(ranking)
            result.times_present = attendance[student_id]["present"]
            result.times_absent = attendance[student_id]["absent"]
            if request.class_teacher_comment is not None:
                result.class_teacher_comment = request.class_teacher_comment
            result.principal_comment = principal_comment(entry.value)
            result.compiled_by = request.compiled_by
            result.status = ResultStatus.SUBMITTED.value
            result.approved_by = None
            result.approved_date = None
            result.rejection_reason = None
            compiled.append({
                "student_id": student_id,
                "student_name": students[student_id].full_name,
                "total_score": result.total_score,
                "average_score": result.average_score,
                "subjects_offered": result.subjects_offered,
                "grade": result.grade,
                "position": entry.position,
                "position_label": ordinal(entry.position),
            })

        ranked_ids = {entry.key for entry in ranking}
        for student_id, result in existing.items():
            if student_id not in ranked_ids:
                result.is_deleted = True

        await self._commit()
        await self._invalidate_broadsheet(class_obj.id)
        logger.info(
            f"Compiled {len(compiled)} result(s) for class {class_obj.id}, {term} {academic_year} "
            f"(class average {overall_average})"
        )
        return {
            "class_id": class_obj.id,
            "term": term,
            "academic_year": academic_year,
            "class_average": overall_average,
            "total_students": len(compiled),
            "results": compiled,
        }

    async def get_student_results(
        self,
        student_id: int,
        term: Optional[str] = None,
        academic_year: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Compiled results of a student with the subject breakdown behind each"""
        stmt = select(Student).where(Student.id == student_id, Student.is_deleted == False)
        if not (await self.db.execute(stmt)).scalar_one_or_none():
            raise NotFoundError("Student", student_id)

        stmt = select(CompiledResult).where(
            CompiledResult.student_id == student_id,
            CompiledResult.is_deleted == False
        ).order_by(CompiledResult.academic_year, CompiledResult.term)
        if term:
            stmt = stmt.where(CompiledResult.term == term)
        if academic_year:
            stmt = stmt.where(CompiledResult.academic_year == academic_year)
        results = (await self.db.execute(stmt)).scalars().all()

        output = []
        for result in results:
            subject_stmt = (
                select(Score, Subject)
                .join(SubjectAssignment, SubjectAssignment.id == Score.subject_assignment_id)
                .join(Subject, Subject.id == SubjectAssignment.subject_id)
                .where(
                    Score.student_id == student_id,
                    Score.is_deleted == False,
                    Score.status == ScoreStatus.SUBMITTED.value,
                    SubjectAssignment.class_id == result.class_id,
                    SubjectAssignment.term == result.term,
                    SubjectAssignment.academic_year == result.academic_year
                )
                .order_by(Subject.name)
            )
            subjects = [
                {
                    "subject": subject.name,
                    "ca1": score.ca1,
                    "ca2": score.ca2,
                    "exam": score.exam,
                    "total": score.total,
                    "grade": score.grade,
                    "remark": score.remark,
                    "class_average": score.class_average,
                }
                for score, subject in (await self.db.execute(subject_stmt)).all()
            ]
            output.append({
                **format_compiled_result(result),
                "principal_name": settings.principal_name,
                "subjects": subjects
            })
        return output

    async def get_pending_approvals(self, class_id: Optional[int] = None) -> List[Dict[str, Any]]:
        stmt = (
            select(CompiledResult, Student, ClassModel)
            .join(Student, Student.id == CompiledResult.student_id)
            .join(ClassModel, ClassModel.id == CompiledResult.class_id)
            .where(
                CompiledResult.status == ResultStatus.SUBMITTED.value,
                CompiledResult.is_deleted == False
            )
            .order_by(ClassModel.name, CompiledResult.position)
        )
        if class_id is not None:
            stmt = stmt.where(CompiledResult.class_id == class_id)
        return [
            {
                **format_compiled_result(result),
                "student_name": student.full_name,
                "admission_number": student.admission_number,
                "class_name": class_obj.name,
            }
            for result, student, class_obj in (await self.db.execute(stmt)).all()
        ]

    async def approve_result(self, result_id: int, request: ApprovalRequest) -> CompiledResult:
        """Approve or reject a Submitted result; anything else is not found"""
        stmt = select(CompiledResult).where(
            CompiledResult.id == result_id,
            CompiledResult.status == ResultStatus.SUBMITTED.value,
            CompiledResult.is_deleted == False
        )
        result = (await self.db.execute(stmt)).scalar_one_or_none()
        if not result:
            raise NotFoundError("Result", message="Result not found or already processed")

        if request.action == "approve":
            result.status = ResultStatus.APPROVED.value
            result.approved_by = request.approved_by
            result.approved_date = date.today()
            result.rejection_reason = None
        else:
            result.status = ResultStatus.REJECTED.value
            result.rejection_reason = request.rejection_reason

        await self.db.commit()
        await self.db.refresh(result)
        logger.info(f"Result {result_id} {result.status.lower()} by {request.approved_by}")
        return result

    # Broadsheet

    async def get_broadsheet(
        self,
        class_id: int,
        term: Optional[str] = None,
        academic_year: Optional[str] = None
    ) -> Dict[str, Any]:
        """Students x subject totals of Submitted scores for a class and term.

        Cached until scores change.
        """
        class_obj = await self._get_class(class_id)
        term = term or settings.default_term
        academic_year = academic_year or settings.default_academic_year

        cache_key = cache_manager.make_key("broadsheet", class_id, term, academic_year)
        cached = await cache_manager.get(cache_key)
        if cached is not None:
            return cached

        stmt = (
            select(SubjectAssignment, Subject)
            .join(Subject, Subject.id == SubjectAssignment.subject_id)
            .where(
                SubjectAssignment.class_id == class_id,
                SubjectAssignment.term == term,
                SubjectAssignment.academic_year == academic_year,
                SubjectAssignment.is_deleted == False
            )
            .order_by(Subject.name)
        )
        assignments = (await self.db.execute(stmt)).all()
        subject_by_assignment = {assignment.id: subject for assignment, subject in assignments}

        students = await self._active_students(class_id)
        cells: Dict[int, Dict[str, float]] = defaultdict(dict)
        if subject_by_assignment:
            stmt = select(Score).where(
                Score.subject_assignment_id.in_(list(subject_by_assignment)),
                Score.is_deleted == False,
                Score.status == ScoreStatus.SUBMITTED.value
            )
            for score in (await self.db.execute(stmt)).scalars().all():
                cells[score.student_id][subject_by_assignment[score.subject_assignment_id].code] = score.total

        averages = {}
        for student in students:
            values = list(cells[student.id].values())
            averages[student.id] = round(sum(values) / len(values), 2) if values else 0.0
        positions = {entry.key: entry.position for entry in rank(averages.items())}

        rows = []
        for student in students:
            values = cells[student.id]
            rows.append({
                "student_id": student.id,
                "student_name": student.full_name,
                "admission_number": student.admission_number,
                "scores": values,
                "total": round(sum(values.values()), 2),
                "average": averages[student.id],
                "position": positions[student.id],
            })
        rows.sort(key=lambda row: row["position"])

        subjects = []
        for subject in subject_by_assignment.values():
            values = [cells[s.id][subject.code] for s in students if subject.code in cells[s.id]]
            subjects.append({
                "code": subject.code,
                "name": subject.name,
                **class_statistics(values).model_dump(),
            })

        broadsheet = {
            "class_id": class_obj.id,
            "class_name": class_obj.name,
            "term": term,
            "academic_year": academic_year,
            "subjects": subjects,
            "students": rows,
            "class_average": class_average([averages[s.id] for s in students]),
        }
        await cache_manager.set(cache_key, broadsheet)
        return broadsheet


def format_compiled_result(result: CompiledResult) -> Dict[str, Any]:
    return {
        "id": result.id,
        "student_id": result.student_id,
        "class_id": result.class_id,
        "term": result.term,
        "academic_year": result.academic_year,
        "total_score": result.total_score,
        "average_score": result.average_score,
        "subjects_offered": result.subjects_offered,
        "grade": result.grade,
        "class_average": result.class_average,
        "position": result.position,
        "position_label": ordinal(result.position) if result.position else None,
        "total_students": result.total_students,
        "times_present": result.times_present,
        "times_absent": result.times_absent,
        "class_teacher_comment": result.class_teacher_comment,
        "principal_comment": result.principal_comment,
        "status": result.status,
        "approved_by": result.approved_by,
        "approved_date": result.approved_date.isoformat() if result.approved_date else None,
        "rejection_reason": result.rejection_reason,
    }
